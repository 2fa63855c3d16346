"""
Data models for question triage.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any, Union


class Category(str, Enum):
    """Canonical question categories"""
    NOISE = "noise"
    GUIDANCE = "guidance"
    SUBJECT_BASED = "subject_based"
    ERROR = "error"

    @classmethod
    def from_label(cls, label: Any) -> "Category":
        """Map a label produced by a model to a canonical category."""
        if not isinstance(label, str):
            return cls.ERROR
        key = label.strip().lower().replace("-", "_").replace(" ", "_")
        key = CATEGORY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.ERROR

    @property
    def is_genuine(self) -> bool:
        return self in (Category.GUIDANCE, Category.SUBJECT_BASED)


# Older prompt versions used different names for the same categories
CATEGORY_ALIASES = {
    "subject_doubt": "subject_based",
    "follow_up": "subject_based",
    "followup": "subject_based",
    "subject": "subject_based",
}


class Decision(str, Enum):
    """What the pipeline does with a classified question"""
    GENERATE = "generate"  # call the answer model
    ACKNOWLEDGE = "acknowledge"  # fixed reply, no model call
    SILENT = "silent"  # no reply


@dataclass
class Question:
    """One student question with the context it is judged against"""
    text: str
    transcript_window: str = ""
    language: str = "hindi"
    student_name: Optional[str] = None
    supplementary_context: Optional[str] = None  # e.g. board scan description


@dataclass
class Classification:
    """Result of triaging one question"""
    is_genuine: bool
    category: Category
    confidence: float = 0.0
    reason: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Classification":
        """Build from a parsed model response, coercing loose values."""
        category = Category.from_label(payload.get("category"))
        reason = payload.get("reason")
        return cls(
            is_genuine=category.is_genuine,
            category=category,
            confidence=_clamp_confidence(payload.get("confidence")),
            reason=str(reason).strip() if reason is not None else "",
        )

    @classmethod
    def fallback(cls, reason: str = "Failed to parse response") -> "Classification":
        return cls(is_genuine=False, category=Category.ERROR, confidence=0.0, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data


@dataclass
class GeneratedAnswer:
    """Structured output of the answer model"""
    answer: str = ""
    is_genuine: bool = True
    category: Optional[Category] = None
    reason: str = ""


@dataclass
class ParseOk:
    payload: Dict[str, Any]
    recovered: bool = False  # True when found by the fallback scan

    @property
    def ok(self) -> bool:
        return True


@dataclass
class ParseFailure:
    error: str
    raw: str = ""

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[ParseOk, ParseFailure]


@dataclass
class TriageResponse:
    """Uniform envelope returned for every question, plus fields for the exchange log"""
    reply: Optional[str]
    classification: Classification
    decision: Decision = Decision.SILENT
    policy: str = ""
    transcript_window: str = ""

    def envelope(self) -> Dict[str, Any]:
        return {"reply": self.reply, "classification": self.classification.to_dict()}


def _clamp_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if confidence != confidence:  # NaN
        return 0.0
    return min(1.0, max(0.0, confidence))
