"""
Expensive answer generation for subject questions.
"""
import logging
from typing import Optional

from models.triage_models import Category, GeneratedAnswer
from core.llm_client import llm, LLMClient
from core.prompt_manager import prompt_manager
from core.config import ANSWER_MODEL, ANSWER_TEMPERATURE, ANSWER_MAX_TOKENS
from services.triage.language import normalize_language, prompt_fields
from services.triage.parsing import parse_structured_response

logger = logging.getLogger(__name__)


class AnswerGenerator:
    """Writes the teacher-style answer for a genuine question."""

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        model_name: str = ANSWER_MODEL,
        temperature: float = ANSWER_TEMPERATURE,
        max_tokens: int = ANSWER_MAX_TOKENS,
    ):
        self.client = client or llm
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens

    def generate(
        self,
        question: str,
        transcript_window: str,
        language: str,
        student_name: Optional[str] = None,
        supplementary_context: Optional[str] = None,
    ) -> GeneratedAnswer:
        """Generate an answer. The answer text may be empty if the output was unusable."""
        language = normalize_language(language)
        prompt = prompt_manager.get_language_prompt("answer", language).format(
            **prompt_fields(question, transcript_window, language, student_name, supplementary_context)
        )
        system = prompt_manager.get_language_prompt("system_answer", language)

        content = self.client.chat(
            system,
            prompt,
            model=self.model_name,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=True,
        )

        parsed = parse_structured_response(content)
        if not parsed.ok:
            logger.warning(f"Answer output unparseable: {parsed.error}")
            return GeneratedAnswer(answer="", reason="Failed to parse response")

        payload = parsed.payload
        answer = payload.get("answer")
        return GeneratedAnswer(
            answer=answer.strip() if isinstance(answer, str) else "",
            is_genuine=bool(payload.get("is_genuine", True)),
            category=Category.from_label(payload["category"]) if "category" in payload else None,
            reason=str(payload.get("reason") or ""),
        )
