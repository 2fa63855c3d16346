"""
Triage policies: decide whether a question is worth an expensive answer.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from models.triage_models import (
    Category,
    Classification,
    Decision,
    Question,
    TriageResponse,
)
from core.llm_client import llm, LLMClient
from core.prompt_manager import prompt_manager
from core.config import ANSWER_MODEL, ANSWER_TEMPERATURE, ANSWER_MAX_TOKENS
from services.triage.answerer import AnswerGenerator
from services.triage.classifier import QuestionClassifier
from services.triage.language import (
    clarification_fallback,
    guidance_acknowledgment,
    prompt_fields,
)
from services.triage.parsing import parse_structured_response

logger = logging.getLogger(__name__)


class TriagePolicy(ABC):
    """Turns a Question into a TriageResponse."""

    name: str = ""

    @abstractmethod
    def triage(self, question: Question) -> TriageResponse:
        raise NotImplementedError


def route(classification: Classification) -> Decision:
    """
    Map a classification to what happens next.

    subject_based -> generate an answer
    guidance      -> fixed acknowledgment, no model call
    noise / error -> no reply
    """
    if classification.category == Category.SUBJECT_BASED:
        return Decision.GENERATE
    if classification.category == Category.GUIDANCE:
        return Decision.ACKNOWLEDGE
    return Decision.SILENT


class TwoStagePolicy(TriagePolicy):
    """Cheap classifier first; the answer model only runs for subject questions."""

    name = "two_stage"

    def __init__(
        self,
        classifier: Optional[QuestionClassifier] = None,
        answerer: Optional[AnswerGenerator] = None,
    ):
        self.classifier = classifier or QuestionClassifier()
        self.answerer = answerer or AnswerGenerator()

    def triage(self, question: Question) -> TriageResponse:
        classification = self.classifier.classify(
            question.text,
            question.transcript_window,
            question.supplementary_context,
            language=question.language,
        )
        decision = route(classification)

        if decision == Decision.GENERATE:
            generated = self.answerer.generate(
                question.text,
                question.transcript_window,
                question.language,
                student_name=question.student_name,
                supplementary_context=question.supplementary_context,
            )
            reply = generated.answer or clarification_fallback(question.language)
        elif decision == Decision.ACKNOWLEDGE:
            reply = guidance_acknowledgment(question.language)
        else:
            reply = None

        return TriageResponse(
            reply=reply,
            classification=classification,
            decision=decision,
            policy=self.name,
            transcript_window=question.transcript_window,
        )


class SingleStagePolicy(TriagePolicy):
    """
    One prompt that classifies and answers in the same call.

    Costs an answer-model call for every message, noise included. Kept for
    comparison with the two-stage policy.
    """

    name = "single_stage"

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

    def triage(self, question: Question) -> TriageResponse:
        prompt = prompt_manager.get_language_prompt("combined", question.language).format(
            **prompt_fields(
                question.text,
                question.transcript_window,
                question.language,
                question.student_name,
                question.supplementary_context,
            )
        )
        system = prompt_manager.get_language_prompt("system_combined", question.language)

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
            logger.warning(f"Combined output unparseable: {parsed.error}")
            classification = Classification.fallback()
            answer = ""
        else:
            classification = Classification.from_payload(parsed.payload)
            answer = parsed.payload.get("answer")
            answer = answer.strip() if isinstance(answer, str) else ""

        if classification.is_genuine:
            reply = answer or clarification_fallback(question.language)
            decision = Decision.GENERATE
        else:
            reply = None
            decision = Decision.SILENT

        return TriageResponse(
            reply=reply,
            classification=classification,
            decision=decision,
            policy=self.name,
            transcript_window=question.transcript_window,
        )


def get_policy(name: str) -> TriagePolicy:
    """Build the policy configured by name."""
    if name == SingleStagePolicy.name:
        return SingleStagePolicy()
    if name != TwoStagePolicy.name:
        logger.warning(f"Unknown triage policy '{name}', using {TwoStagePolicy.name}")
    return TwoStagePolicy()
