"""
Shared test fixtures.
"""
import os
import tempfile

# Must be set before core.config is imported
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="kaksha-test-"))
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("ENABLE_CHAT_LOG", "false")
os.environ.setdefault("LLM_RETRY_BASE_DELAY", "0")

import pytest

from core.llm_client import LLMServiceError


class FakeLLM:
    """Stands in for LLMClient; replies are queued per model name."""

    def __init__(self, replies=None):
        self.replies = {model: list(items) for model, items in (replies or {}).items()}
        self.calls = []

    def chat(self, system, user, model, temperature=None, max_tokens=None, json_mode=False):
        self.calls.append({"system": system, "user": user, "model": model, "json_mode": json_mode})
        queue = self.replies.get(model)
        if not queue:
            raise AssertionError(f"Unexpected call to model {model}")
        reply = queue.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def analyze_image(self, prompt, image_url, model="vision", max_tokens=500):
        self.calls.append({"prompt": prompt, "image_url": image_url, "model": model})
        return self.replies.get(model, ["Topic: Motion"])[0]

    def transcribe_audio(self, audio, filename, language, prompt, model="stt"):
        self.calls.append({"filename": filename, "language": language, "prompt": prompt, "model": model})
        return self.replies.get(model, [" Newton ka law kya hai? "])[0]

    def calls_to(self, model):
        return [call for call in self.calls if call["model"] == model]


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def service_error():
    return LLMServiceError("Model service error: HTTP 503")
