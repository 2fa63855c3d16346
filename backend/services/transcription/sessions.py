"""
Session-scoped transcript state.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from core.config import SESSION_IDLE_TIMEOUT_SEC, MAX_SESSIONS
from services.transcription.aggregator import TranscriptAggregator
from services.transcription.feed import TranscriptFeed

logger = logging.getLogger(__name__)


@dataclass
class TranscriptSession:
    """Transcript owned by one playback session"""
    session_id: str
    aggregator: TranscriptAggregator
    feed: TranscriptFeed
    last_used: float = 0.0


class SessionStore:
    """
    Registry of active sessions, one transcript each.

    Sessions idle for longer than `idle_timeout` seconds are closed on the
    next lookup (0 disables expiry). When `max_sessions` is reached, creating
    a session evicts the least recently used one.
    """

    def __init__(
        self,
        idle_timeout: float = SESSION_IDLE_TIMEOUT_SEC,
        max_sessions: int = MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: Dict[str, TranscriptSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, session_id: str) -> Optional[TranscriptSession]:
        self.prune_idle()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_used = self._clock()
            return session

    def get_or_create(self, session_id: str) -> TranscriptSession:
        self.prune_idle()
        evicted: List[TranscriptSession] = []
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                while len(self._sessions) >= self.max_sessions:
                    oldest = min(self._sessions.values(), key=lambda s: s.last_used)
                    evicted.append(self._sessions.pop(oldest.session_id))
                aggregator = TranscriptAggregator()
                session = TranscriptSession(
                    session_id=session_id,
                    aggregator=aggregator,
                    feed=TranscriptFeed(aggregator, name=f"feed-{session_id}"),
                )
                self._sessions[session_id] = session
                logger.info(f"Created transcript session {session_id}")
            session.last_used = self._clock()

        for old in evicted:
            logger.warning(f"Session limit reached, evicting {old.session_id}")
            old.feed.close()
        return session

    def prune_idle(self) -> int:
        """Close sessions idle past the timeout. Returns how many were closed."""
        if self.idle_timeout <= 0:
            return 0
        cutoff = self._clock() - self.idle_timeout
        with self._lock:
            expired = [s for s in self._sessions.values() if s.last_used < cutoff]
            for session in expired:
                del self._sessions[session.session_id]

        for session in expired:
            logger.info(f"Expired idle transcript session {session.session_id}")
            session.feed.close()
        return len(expired)

    def reset(self, session_id: str) -> bool:
        """Clear a session's transcript (video change). Returns False if unknown."""
        session = self.get(session_id)
        if session is None:
            return False
        # Let queued batches land first so they cannot repopulate the cleared transcript
        session.feed.flush()
        session.aggregator.clear()
        return True

    def drop(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.feed.close()
        logger.info(f"Dropped transcript session {session_id}")
        return True

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.feed.close()


# Global session store instance
session_store = SessionStore()
