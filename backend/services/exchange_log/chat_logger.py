"""
CSV log of question/answer exchanges.
"""
import csv
import logging
import threading
from dataclasses import dataclass, astuple
from datetime import datetime
from pathlib import Path
from typing import Optional

from core.config import CHAT_LOG_PATH
from models.triage_models import TriageResponse

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Timestamp",
    "Student Name",
    "User Query",
    "Transcript Context",
    "Is Genuine",
    "Category",
    "Confidence",
    "Reason",
    "Response",
    "Language",
]


@dataclass
class ChatLogEntry:
    """One row of the exchange log"""
    timestamp: str
    student_name: str
    user_query: str
    transcript_context: str
    is_genuine: bool
    category: str
    confidence: float
    reason: str
    response: Optional[str]
    language: str

    @classmethod
    def from_response(
        cls,
        question: str,
        result: TriageResponse,
        language: str,
        student_name: Optional[str] = None,
    ) -> "ChatLogEntry":
        classification = result.classification
        return cls(
            timestamp=datetime.now().isoformat(),
            student_name=student_name or "",
            user_query=question,
            transcript_context=result.transcript_window,
            is_genuine=classification.is_genuine,
            category=classification.category.value,
            confidence=classification.confidence,
            reason=classification.reason,
            response=result.reply,
            language=language,
        )


class ExchangeLogger:
    """Appends exchanges to a CSV file, creating it with a header row."""

    def __init__(self, path: Path = CHAT_LOG_PATH):
        self.path = Path(path)
        self._lock = threading.Lock()

    def log(self, entry: ChatLogEntry) -> bool:
        """Append one entry. Returns False on failure; never raises."""
        try:
            with self._lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                is_new = not self.path.exists()
                with open(self.path, "a", newline="", encoding="utf-8") as f:
                    writer = csv.writer(f, quoting=csv.QUOTE_ALL)
                    if is_new:
                        writer.writerow(CSV_HEADERS)
                        logger.info(f"Created new CSV log file: {self.path}")
                    writer.writerow(["" if value is None else value for value in astuple(entry)])
            return True
        except OSError as e:
            # Logging must not break the chat flow
            logger.error(f"Error logging to CSV: {e}")
            return False


# Global exchange logger instance
exchange_logger = ExchangeLogger()
