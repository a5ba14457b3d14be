"""AI Gateway interface consumed by the feedback pipeline."""

from typing import Protocol, runtime_checkable


class TransportError(RuntimeError):
    """The AI Gateway was unreachable or the upstream service failed."""


@runtime_checkable
class AIGateway(Protocol):
    """Anything that turns a prompt into free text."""
    
    async def generate_text(self, prompt: str) -> str:
        """Return generated text or raise TransportError."""
        ...
