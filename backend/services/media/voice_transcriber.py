"""
Speech-to-text for questions the student records instead of typing.
"""
from typing import Optional, Tuple

from core.llm_client import llm, LLMClient
from core.config import TRANSCRIBE_MODEL

# Whisper handles Hinglish better with 'en'
TRANSCRIBE_LANGUAGE = {
    "hi": ("hi", "This is a student asking a question in a live class in Hindi."),
    "hinglish": (
        "en",
        "This is a student asking a question in a live class. "
        "They may speak in a mix of Hindi and English (Hinglish).",
    ),
    "en": ("en", "This is a student asking a question in a live class in English."),
}


def transcription_settings(language: Optional[str]) -> Tuple[str, str]:
    """(language code, hint prompt) for the speech-to-text request."""
    return TRANSCRIBE_LANGUAGE.get((language or "en").strip().lower(), TRANSCRIBE_LANGUAGE["en"])


class VoiceTranscriber:
    """Transcribes a recorded question clip."""

    def __init__(self, client: Optional[LLMClient] = None, model_name: str = TRANSCRIBE_MODEL):
        self.client = client or llm
        self.model_name = model_name

    def transcribe(self, audio: bytes, filename: str = "question.webm", language: Optional[str] = None) -> str:
        if not audio:
            raise ValueError("No audio file provided")
        code, prompt = transcription_settings(language)
        text = self.client.transcribe_audio(audio, filename, code, prompt, model=self.model_name)
        return text.strip()


# Global voice transcriber instance
voice_transcriber = VoiceTranscriber()
