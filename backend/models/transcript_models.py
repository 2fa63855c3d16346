"""
Data models for live transcript tokens and sentences.
"""
import logging
import unicodedata
from dataclasses import dataclass
from typing import Optional, Iterable, Mapping, Any

logger = logging.getLogger(__name__)

# Sentence boundary reasons
BOUNDARY_PUNCTUATION = "punctuation"
BOUNDARY_PAUSE = "pause"
BOUNDARY_END_OF_STREAM = "end_of_stream"
BOUNDARY_OPEN = "open"


@dataclass(frozen=True)
class TranscriptToken:
    """One recognized unit of speech"""
    id: str
    text: str
    start_time: float  # seconds from stream start
    end_time: float
    is_final: bool = False
    confidence: float = 0.0


@dataclass
class Sentence:
    """Contiguous run of tokens shown as one line of transcript"""
    text: str
    start_time: float
    end_time: float
    is_final: bool = False
    boundary: str = BOUNDARY_OPEN

    @property
    def is_closed(self) -> bool:
        return self.boundary != BOUNDARY_OPEN


def make_token_id(start_ms: int, end_ms: int, is_final: bool) -> str:
    """Deterministic id so re-emitted tokens can be recognized."""
    return f"segment-{start_ms}-{end_ms}-{'f' if is_final else 'p'}"


def token_from_event(event: Mapping[str, Any]) -> Optional[TranscriptToken]:
    """
    Convert one raw recognizer event to a TranscriptToken.

    Expected keys: text, start_ms, end_ms, is_final, confidence.
    Returns None for events that cannot be used (missing text, bad times).
    """
    if not isinstance(event, Mapping):
        return None

    # Normalize to composed form for proper Devanagari rendering
    text = unicodedata.normalize("NFC", str(event.get("text") or "").strip())
    if not text:
        return None

    try:
        start_ms = int(float(event.get("start_ms") or 0))
        end_ms = int(float(event.get("end_ms") or 0))
        confidence = float(event.get("confidence") or 0.0)
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Dropping malformed recognition event: {event!r}")
        return None

    end_ms = max(end_ms, start_ms)
    # Only a real boolean true marks a final; "false" and 1 stay provisional
    is_final = event.get("is_final") is True

    return TranscriptToken(
        id=make_token_id(start_ms, end_ms, is_final),
        text=text,
        start_time=start_ms / 1000,
        end_time=end_ms / 1000,
        is_final=is_final,
        confidence=min(1.0, max(0.0, confidence)),
    )


def transcript_text(tokens: Iterable[TranscriptToken]) -> str:
    """Plain text of a token run, as sent to the model."""
    return " ".join(token.text for token in tokens)
