"""AI Gateway implementations."""

from .base import AIGateway, TransportError
from .gemini import GeminiGateway

__all__ = [
    "AIGateway",
    "TransportError",
    "GeminiGateway",
]
