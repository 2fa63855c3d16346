"""
Working-language strings and prompt field assembly for triage.
"""
from typing import Optional, Dict

from core.config import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES

# Replaces an empty answer for a genuine question
CLARIFICATION_FALLBACK = {
    "hindi": "कृपया अपना प्रश्न स्पष्ट करें।",
    "english": "Please clarify your question.",
}

# Fixed reply for guidance questions, sent without calling the answer model
GUIDANCE_ACKNOWLEDGMENT = {
    "hindi": "आपका प्रश्न शिक्षक तक पहुँच गया है। यह step अभी दोबारा समझाया जाएगा, ध्यान से सुनिए।",
    "english": "Got it! The teacher will go over this step again shortly, keep listening.",
}

LANGUAGE_CODES = {
    "hi": "hindi",
    "en": "english",
    "hinglish": "english",
}


def normalize_language(language: Optional[str]) -> str:
    """Map a language name or code to 'hindi' or 'english'."""
    if not language:
        return DEFAULT_LANGUAGE
    key = language.strip().lower()
    key = LANGUAGE_CODES.get(key, key)
    return key if key in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def clarification_fallback(language: str) -> str:
    return CLARIFICATION_FALLBACK[normalize_language(language)]


def guidance_acknowledgment(language: str) -> str:
    return GUIDANCE_ACKNOWLEDGMENT[normalize_language(language)]


def prompt_fields(
    question: str,
    transcript_window: str,
    language: str,
    student_name: Optional[str] = None,
    supplementary_context: Optional[str] = None,
) -> Dict[str, str]:
    """Values for the {placeholders} shared by all triage prompt templates."""
    language = normalize_language(language)
    name = (student_name or "").strip()

    if supplementary_context and supplementary_context.strip():
        heading = "बोर्ड पर लिखी सामग्री" if language == "hindi" else "BOARD / SLIDE CONTENT"
        context_section = f"{heading}:\n{supplementary_context.strip()}\n\n"
    else:
        context_section = ""

    if language == "hindi":
        greeting = f"{name} बेटा!" if name else "बेटा!"
    else:
        greeting = f"Hello {name} beta!" if name else "Beta!"

    no_transcript = "(कोई ट्रांसक्रिप्ट उपलब्ध नहीं)" if language == "hindi" else "(no transcript available)"

    return {
        "question": question.strip(),
        "transcript": transcript_window.strip() or no_transcript,
        "context_section": context_section,
        "student_line": f"\nStudent: {name}" if name else "",
        "greeting": greeting,
    }
