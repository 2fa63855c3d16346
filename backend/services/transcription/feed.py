"""
Single-writer ingestion of recognition results.

Recognition results arrive from a push source (websocket relay, HTTP posts)
on arbitrary threads. The feed queues them and applies them one at a time on
its own worker, then notifies subscribers with the new snapshot.
"""
import logging
import queue
import threading
from concurrent.futures import Future
from typing import Callable, List, Tuple, Any, Mapping, Sequence

from models.transcript_models import TranscriptToken
from services.transcription.aggregator import TranscriptAggregator

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[TranscriptToken, ...]], None]

_STOP = object()


class FeedClosedError(RuntimeError):
    """Raised when submitting to a feed that has been closed."""
    pass


class TranscriptFeed:
    """Queue + worker thread that owns all writes to one aggregator."""

    def __init__(self, aggregator: TranscriptAggregator, name: str = "transcript-feed"):
        self.aggregator = aggregator
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._listeners: List[Listener] = []
        self._listeners_lock = threading.Lock()
        self._closed = False
        self._worker = threading.Thread(target=self._run, name=name, daemon=True)
        self._worker.start()

    def submit(self, batch: Sequence[Any]) -> "Future[int]":
        """
        Queue a batch of tokens for application.

        The batch may hold TranscriptToken objects or raw recognizer event
        mappings. The returned future resolves with the token count once the
        batch has been applied.
        """
        if self._closed:
            raise FeedClosedError("Transcript feed is closed")
        future: "Future[int]" = Future()
        self._queue.put((list(batch or []), future))
        return future

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def flush(self) -> None:
        """Block until every queued batch has been applied."""
        self._queue.join()

    def close(self, timeout: float = 5.0) -> None:
        """Apply what is queued, then stop the worker."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        self._worker.join(timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                batch, future = item
                if not future.set_running_or_notify_cancel():
                    continue
                try:
                    count = self._apply(batch)
                except Exception as e:
                    logger.exception("Failed to apply recognition batch")
                    future.set_exception(e)
                    continue
                future.set_result(count)
                self._notify()
            finally:
                self._queue.task_done()

    def _apply(self, batch: List[Any]) -> int:
        if batch and all(isinstance(item, Mapping) for item in batch):
            return self.aggregator.apply_events(batch)
        return self.aggregator.apply_result(batch)

    def _notify(self) -> None:
        snapshot = self.aggregator.snapshot()
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                # One bad subscriber must not stall ingestion
                logger.exception("Transcript listener failed")
