"""
Cheap question classifier.
"""
import logging
from typing import Optional

from models.triage_models import Classification
from core.llm_client import llm, LLMClient
from core.prompt_manager import prompt_manager
from core.config import CLASSIFIER_MODEL, CLASSIFIER_TEMPERATURE, CLASSIFIER_MAX_TOKENS
from services.triage.language import normalize_language, prompt_fields
from services.triage.parsing import parse_structured_response

logger = logging.getLogger(__name__)


class QuestionClassifier:
    """Classifies a student message as noise, guidance or a subject question."""

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        model_name: str = CLASSIFIER_MODEL,
        temperature: float = CLASSIFIER_TEMPERATURE,
        max_tokens: int = CLASSIFIER_MAX_TOKENS,
    ):
        self.client = client or llm
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens

    def classify(
        self,
        question: str,
        transcript_window: str,
        supplementary_context: Optional[str] = None,
        language: Optional[str] = None,
    ) -> Classification:
        """
        Classify one question against the recent transcript.

        Always returns a Classification: output that cannot be parsed yields
        Classification.fallback(). LLMServiceError from the client propagates.
        """
        language = normalize_language(language)
        prompt = prompt_manager.get_language_prompt("classifier", language).format(
            **prompt_fields(question, transcript_window, language, None, supplementary_context)
        )
        system = prompt_manager.get_language_prompt("system_classifier", language)

        logger.info(f"Classifier prompt ({len(prompt)} chars)")
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
            logger.warning(f"Classifier output unparseable: {parsed.error}")
            return Classification.fallback()

        classification = Classification.from_payload(parsed.payload)
        logger.info(
            f"Classified question as {classification.category.value} "
            f"(confidence {classification.confidence:.2f}): {classification.reason}"
        )
        return classification
