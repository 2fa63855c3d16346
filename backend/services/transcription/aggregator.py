"""
Live transcript aggregation.

Merges batches of provisional/final recognition tokens into one ordered,
de-duplicated transcript and derives the sentence and recent-window views.
"""
import logging
import re
import threading
from typing import List, Tuple, Iterator, Iterable, Optional, Mapping, Any

from models.transcript_models import (
    TranscriptToken,
    Sentence,
    BOUNDARY_PUNCTUATION,
    BOUNDARY_PAUSE,
    BOUNDARY_END_OF_STREAM,
    BOUNDARY_OPEN,
    token_from_event,
)
from core.config import DEDUP_TOLERANCE_SEC, SENTENCE_GAP_SEC, RECENT_TOKEN_COUNT

logger = logging.getLogger(__name__)

# Latin terminators plus Devanagari danda / double danda
SENTENCE_END_RE = re.compile(r"[.!?।॥]$")


class TranscriptAggregator:
    """
    Single authoritative transcript for one playback session.

    Writers (apply_result, clear) are serialized by a lock and replace the
    token tuple wholesale, so readers always see a complete snapshot.
    """

    def __init__(
        self,
        dedup_tolerance: float = DEDUP_TOLERANCE_SEC,
        sentence_gap: float = SENTENCE_GAP_SEC,
    ):
        self.dedup_tolerance = dedup_tolerance
        self.sentence_gap = sentence_gap
        self._tokens: Tuple[TranscriptToken, ...] = ()
        self._write_lock = threading.Lock()

    def apply_result(self, tokens: Optional[Iterable[TranscriptToken]]) -> int:
        """
        Merge one recognition result into the transcript.

        Provisional tokens from earlier results are always dropped; finals
        are kept and new finals are added unless they duplicate an existing
        one (same text, start within the dedup tolerance). An empty batch
        leaves the transcript untouched.

        Returns:
            Token count after the merge
        """
        incoming = [t for t in (tokens or []) if isinstance(t, TranscriptToken)]
        if not incoming:
            return len(self._tokens)

        with self._write_lock:
            finals = [t for t in self._tokens if t.is_final]
            provisional = []
            added = 0

            for token in incoming:
                if not token.text.strip():
                    continue
                if not token.is_final:
                    provisional.append(token)
                elif not self._is_duplicate(token, finals):
                    finals.append(token)
                    added += 1

            # sorted() is stable: ties keep arrival order
            self._tokens = tuple(sorted(finals + provisional, key=lambda t: t.start_time))
            logger.debug(
                f"Applied result: +{added} finals, {len(provisional)} provisional, "
                f"{len(self._tokens)} total"
            )
            return len(self._tokens)

    def apply_events(self, events: Optional[Iterable[Mapping[str, Any]]]) -> int:
        """Apply a batch of raw recognizer events (text, start_ms, end_ms, ...)."""
        if not events:
            return len(self._tokens)
        tokens = [token_from_event(event) for event in events]
        valid = [t for t in tokens if t is not None]
        if len(valid) < len(tokens):
            logger.debug(f"Dropped {len(tokens) - len(valid)} unusable recognition events")
        if not valid:
            return len(self._tokens)
        return self.apply_result(valid)

    def _is_duplicate(self, token: TranscriptToken, finals: List[TranscriptToken]) -> bool:
        return any(
            existing.text == token.text
            and abs(existing.start_time - token.start_time) < self.dedup_tolerance
            for existing in finals
        )

    def clear(self) -> None:
        """Reset to an empty transcript (new video or session)."""
        with self._write_lock:
            self._tokens = ()

    def snapshot(self) -> Tuple[TranscriptToken, ...]:
        """Immutable view of the current transcript."""
        return self._tokens

    @property
    def token_count(self) -> int:
        return len(self._tokens)

    @property
    def final_count(self) -> int:
        return sum(1 for t in self._tokens if t.is_final)

    def recent_window(self, reference_time: float, horizon_seconds: float) -> List[TranscriptToken]:
        """Tokens that started at most horizon_seconds before reference_time, in order."""
        return [t for t in self._tokens if reference_time - t.start_time <= horizon_seconds]

    def recent_tokens(self, count: int = RECENT_TOKEN_COUNT) -> List[TranscriptToken]:
        """Last `count` tokens, for the live display."""
        if count <= 0:
            return []
        return list(self._tokens[-count:])

    def to_sentences(self) -> Iterator[Sentence]:
        """
        Group the current snapshot into sentences.

        A sentence closes when a token ends with terminal punctuation, when
        the pause before the next token exceeds the sentence gap, or at the
        last token if it is final. Leftover text is yielded as an open,
        non-final sentence. Recomputed on every call.
        """
        return _segment_sentences(self._tokens, self.sentence_gap)


def _segment_sentences(tokens: Tuple[TranscriptToken, ...], gap: float) -> Iterator[Sentence]:
    parts: List[str] = []
    start_time = 0.0
    end_time = 0.0
    last_index = len(tokens) - 1

    for index, token in enumerate(tokens):
        text = token.text.strip()
        if not text:
            continue

        if not parts:
            start_time = token.start_time
        parts.append(text)
        end_time = token.end_time

        boundary = None
        if SENTENCE_END_RE.search(text):
            boundary = BOUNDARY_PUNCTUATION
        elif index < last_index and tokens[index + 1].start_time - token.end_time > gap:
            boundary = BOUNDARY_PAUSE
        elif index == last_index and token.is_final:
            boundary = BOUNDARY_END_OF_STREAM

        if boundary:
            yield Sentence(
                text=" ".join(parts),
                start_time=start_time,
                end_time=end_time,
                is_final=token.is_final,
                boundary=boundary,
            )
            parts = []

    if parts:
        yield Sentence(
            text=" ".join(parts),
            start_time=start_time,
            end_time=end_time,
            is_final=False,
            boundary=BOUNDARY_OPEN,
        )
