"""
Question triage pipeline.

Builds the transcript context for a question, runs the configured triage
policy and hands the result to the exchange log.
"""
import logging
from typing import Optional

from models.transcript_models import transcript_text
from models.triage_models import Question, TriageResponse
from core.config import CONTEXT_WINDOW_SEC, TRIAGE_POLICY, ENABLE_CHAT_LOG
from services.exchange_log.chat_logger import ChatLogEntry, ExchangeLogger, exchange_logger
from services.transcription.aggregator import TranscriptAggregator
from services.triage.language import normalize_language
from services.triage.policy import TriagePolicy, get_policy

logger = logging.getLogger(__name__)


class QuestionTriagePipeline:
    """Stateless between questions; safe to share across requests."""

    def __init__(
        self,
        policy: Optional[TriagePolicy] = None,
        chat_logger: Optional[ExchangeLogger] = None,
        context_window: float = CONTEXT_WINDOW_SEC,
    ):
        self.policy = policy or get_policy(TRIAGE_POLICY)
        self.chat_logger = chat_logger
        self.context_window = context_window

    def transcript_window(
        self,
        aggregator: TranscriptAggregator,
        reference_time: Optional[float] = None,
        horizon_seconds: Optional[float] = None,
    ) -> str:
        """
        Text of the recent window of a session transcript.

        Without a reference time the window ends at the latest token, so a
        caller that omits the playback position still gets a bounded window.
        """
        horizon = self.context_window if horizon_seconds is None else horizon_seconds
        if reference_time is None:
            tokens = aggregator.snapshot()
            if not tokens:
                return ""
            reference_time = max(t.end_time for t in tokens)
        return transcript_text(aggregator.recent_window(reference_time, horizon))

    def handle(
        self,
        question: str,
        transcript_window: Optional[str] = None,
        aggregator: Optional[TranscriptAggregator] = None,
        reference_time: Optional[float] = None,
        language: Optional[str] = None,
        student_name: Optional[str] = None,
        supplementary_context: Optional[str] = None,
    ) -> TriageResponse:
        """
        Triage one question and return the uniform response.

        The transcript window is taken as given, or cut from `aggregator` at
        `reference_time` (the latest token when None). LLMServiceError
        propagates to the caller.
        """
        language = normalize_language(language)
        if transcript_window is None:
            transcript_window = (
                self.transcript_window(aggregator, reference_time) if aggregator is not None else ""
            )

        logger.info(
            f"Triage ({self.policy.name}): question={question!r} language={language} "
            f"transcript_chars={len(transcript_window)}"
        )
        result = self.policy.triage(
            Question(
                text=question,
                transcript_window=transcript_window,
                language=language,
                student_name=student_name,
                supplementary_context=supplementary_context,
            )
        )
        logger.info(
            f"Triage result: category={result.classification.category.value} "
            f"decision={result.decision.value} has_reply={result.reply is not None}"
        )

        if self.chat_logger is not None:
            self.chat_logger.log(
                ChatLogEntry.from_response(question, result, language, student_name)
            )
        return result


def build_pipeline() -> QuestionTriagePipeline:
    """Pipeline wired from configuration."""
    return QuestionTriagePipeline(chat_logger=exchange_logger if ENABLE_CHAT_LOG else None)
