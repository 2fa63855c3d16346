"""
Unit tests for the model service client.
"""
import json

import httpx
import pytest

from core.llm_client import LLMClient, LLMServiceError


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler):
    client = LLMClient(base_url="http://llm.test/v1", api_key="secret", timeout=5)
    client.client = httpx.Client(transport=httpx.MockTransport(handler))
    return client


class TestChat:
    """Test chat completions."""

    def test_returns_message_content(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=completion('  {"category": "noise"}  '))

        client = make_client(handler)

        content = client.chat("system", "user", model="cheap", temperature=0.0, max_tokens=50, json_mode=True)

        assert content == '{"category": "noise"}'
        request = seen[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret"
        body = json.loads(request.content)
        assert body["model"] == "cheap"
        assert body["response_format"] == {"type": "json_object"}
        assert body["temperature"] == 0.0
        assert body["max_tokens"] == 50
        assert [m["role"] for m in body["messages"]] == ["system", "user"]

    def test_optional_fields_omitted(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=completion("hi"))

        make_client(handler).chat("s", "u", model="m")

        assert "response_format" not in bodies[0]
        assert "temperature" not in bodies[0]

    def test_no_choices_returns_empty(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": []}))

        assert client.chat("s", "u", model="m") == ""

    def test_transient_status_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                return httpx.Response(503, json={"error": "busy"})
            return httpx.Response(200, json=completion("ok"))

        assert make_client(handler).chat("s", "u", model="m") == "ok"
        assert len(attempts) == 3

    def test_client_error_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(400, json={"error": "bad request"})

        with pytest.raises(LLMServiceError, match="HTTP 400"):
            make_client(handler).chat("s", "u", model="m")
        assert len(attempts) == 1

    def test_persistent_outage_raises_service_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(LLMServiceError):
            make_client(handler).chat("s", "u", model="m")

    def test_invalid_json_body_raises_service_error(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(LLMServiceError):
            client.chat("s", "u", model="m")


class TestMedia:
    """Test vision and speech-to-text requests."""

    def test_analyze_image_sends_image_part(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=completion("Topic: Quadratic Equations"))

        description = make_client(handler).analyze_image("describe", "data:image/jpeg;base64,AAA", model="vision")

        assert description == "Topic: Quadratic Equations"
        parts = bodies[0]["messages"][0]["content"]
        assert parts[1]["image_url"]["url"] == "data:image/jpeg;base64,AAA"

    def test_transcribe_audio(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"text": "Newton ka law"})

        text = make_client(handler).transcribe_audio(b"RIFF", "q.webm", "hi", "hint", model="stt")

        assert text == "Newton ka law"
        assert seen[0].url.path == "/v1/audio/transcriptions"
        assert b"q.webm" in seen[0].content
