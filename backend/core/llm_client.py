"""
OpenAI-compatible API client wrapper.
"""
import logging
from typing import Optional, List, Dict, Any

import httpx

from core.config import (
    OPENAI_API_KEY,
    LLM_BASE_URL,
    LLM_TIMEOUT_SEC,
    LLM_MAX_RETRIES,
    LLM_RETRY_BASE_DELAY,
    VISION_MODEL,
    VISION_MAX_TOKENS,
    TRANSCRIBE_MODEL,
)
from core.retry import retry_on_transient_error

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Raised when an upstream model service is unreachable or fails."""
    pass


class LLMClient:
    """Client for chat, vision and speech-to-text model endpoints."""

    def __init__(
        self,
        base_url: str = LLM_BASE_URL,
        api_key: Optional[str] = OPENAI_API_KEY,
        timeout: float = LLM_TIMEOUT_SEC,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.client = httpx.Client(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @retry_on_transient_error(max_retries=LLM_MAX_RETRIES, base_delay=LLM_RETRY_BASE_DELAY)
    def _post(self, path: str, **kwargs) -> Dict[str, Any]:
        response = self.client.post(f"{self.base_url}{path}", headers=self._headers(), **kwargs)
        response.raise_for_status()
        return response.json()

    def _request(self, path: str, **kwargs) -> Dict[str, Any]:
        """POST to the service, wrapping every transport failure in LLMServiceError."""
        try:
            return self._post(path, **kwargs)
        except httpx.HTTPStatusError as e:
            logger.error(f"Model service returned {e.response.status_code} for {path}")
            raise LLMServiceError(f"Model service error: HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Model service request to {path} failed: {e}")
            raise LLMServiceError(f"Model service error: {str(e)}") from e

    def chat(
        self,
        system: str,
        user: str,
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Run a single system+user chat completion and return the message text."""
        payload: Dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        result = self._request("/chat/completions", json=payload)
        return _first_message_content(result)

    def analyze_image(
        self,
        prompt: str,
        image_url: str,
        model: str = VISION_MODEL,
        max_tokens: int = VISION_MAX_TOKENS,
    ) -> str:
        """Describe an image (URL or base64 data URL) with a vision model."""
        payload = {
            "model": model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                    ],
                }
            ],
            "max_tokens": max_tokens,
        }
        result = self._request("/chat/completions", json=payload)
        return _first_message_content(result)

    def transcribe_audio(
        self,
        audio: bytes,
        filename: str,
        language: str,
        prompt: str,
        model: str = TRANSCRIBE_MODEL,
    ) -> str:
        """Speech-to-text for a short recorded clip."""
        result = self._request(
            "/audio/transcriptions",
            data={"model": model, "language": language, "prompt": prompt},
            files={"file": (filename, audio)},
        )
        return result.get("text", "")


def _first_message_content(result: Dict[str, Any]) -> str:
    choices: List[Dict[str, Any]] = result.get("choices") or []
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    return (message.get("content") or "").strip()


# Global LLM client instance
llm = LLMClient()
