"""Gemini integration for free-text generation."""

from typing import Any, Dict, Optional

import httpx

from interview_feedback.config import settings
from interview_feedback.gateway.base import TransportError
from interview_feedback.utils.logging import get_logger

logger = get_logger(__name__)


class GeminiGateway:
    """AI Gateway backed by the Gemini generateContent REST endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")

        self.client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=timeout if timeout is not None else settings.gateway_timeout,
            transport=transport
        )

        self.logger = logger.bind(component="gemini_gateway", model=self.model)

    async def generate_text(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Input prompt

        Returns:
            Concatenated text of the first candidate

        Raises:
            TransportError: On network errors, error statuses or an empty envelope
        """
        if not self.api_key:
            raise TransportError("Gemini API key not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            response = await self.client.post(url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as e:
            self.logger.error("Gemini request failed", error=str(e))
            raise TransportError(f"Gemini request failed: {e}") from e

        if response.status_code >= 400:
            self.logger.error("Gemini error status", status_code=response.status_code)
            raise TransportError(f"Gemini returned status {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise TransportError("Gemini payload was not JSON") from e

        text = self._candidate_text(result)
        if text is None:
            self.logger.error("Gemini response had no candidate text")
            raise TransportError("Gemini response had no candidate text")

        self.logger.info(
            "Gemini response generated",
            prompt_length=len(prompt),
            response_length=len(text)
        )
        return text

    @staticmethod
    def _candidate_text(result: Any) -> Optional[str]:
        """Extract the first candidate's text parts from a response body."""
        if not isinstance(result, dict):
            return None
        candidates = result.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return None
        content: Dict[str, Any] = candidates[0].get("content") or {}
        parts = [
            part.get("text", "")
            for part in content.get("parts") or []
            if isinstance(part, dict)
        ]
        if not parts:
            return None
        return "".join(parts)

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()
        self.logger.info("Gemini gateway closed")

    async def __aenter__(self) -> "GeminiGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
