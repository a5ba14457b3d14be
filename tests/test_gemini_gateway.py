"""Tests for the Gemini gateway using a mocked HTTP transport."""

import json

import httpx
import pytest

from interview_feedback.config import settings
from interview_feedback.gateway.base import AIGateway, TransportError
from interview_feedback.gateway.gemini import GeminiGateway


def gemini_body(*texts):
    return {"candidates": [{"content": {"parts": [{"text": text} for text in texts]}}]}


def make_gateway(handler, api_key="test-key"):
    return GeminiGateway(
        api_key=api_key,
        model="gemini-test",
        base_url="https://gemini.example/v1beta/",
        timeout=5,
        transport=httpx.MockTransport(handler)
    )


class TestGeminiGateway:
    """Request shape and error mapping of the Gemini gateway."""

    @pytest.mark.asyncio
    async def test_generate_text(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=gemini_body("Hello, ", "candidate"))

        async with make_gateway(handler) as gateway:
            text = await gateway.generate_text("Say hello")

        assert text == "Hello, candidate"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v1beta/models/gemini-test:generateContent"
        assert request.url.params["key"] == "test-key"
        assert json.loads(request.content) == {"contents": [{"parts": [{"text": "Say hello"}]}]}

    def test_satisfies_gateway_protocol(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json=gemini_body("x")))
        assert isinstance(gateway, AIGateway)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    async def test_error_status(self, status):
        async with make_gateway(lambda request: httpx.Response(status, json={"error": "nope"})) as gateway:
            with pytest.raises(TransportError, match=str(status)):
                await gateway.generate_text("prompt")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_gateway(handler) as gateway:
            with pytest.raises(TransportError) as exc_info:
                await gateway.generate_text("prompt")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"candidates": []},
        {},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": ["not an object"]},
        ["not", "an", "envelope"],
    ])
    async def test_missing_candidate_text(self, body):
        async with make_gateway(lambda request: httpx.Response(200, json=body)) as gateway:
            with pytest.raises(TransportError, match="no candidate text"):
                await gateway.generate_text("prompt")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with make_gateway(lambda request: httpx.Response(200, text="<html>oops</html>")) as gateway:
            with pytest.raises(TransportError, match="not JSON"):
                await gateway.generate_text("prompt")

    @pytest.mark.asyncio
    async def test_missing_api_key_never_sends(self, monkeypatch):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=gemini_body("x"))

        monkeypatch.setattr(settings, "gemini_api_key", None)

        async with make_gateway(handler, api_key=None) as gateway:
            with pytest.raises(TransportError, match="API key"):
                await gateway.generate_text("prompt")

        assert seen == []
