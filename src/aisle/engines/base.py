"""Engine protocol and shared types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass
class EngineResponse:
    """Raw completion returned by a language model engine."""

    text: str
    model: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    metadata: dict = field(default_factory=dict)


@runtime_checkable
class Engine(Protocol):
    """Protocol that all engine backends must implement.

    ``send`` raises ModelError on any transport or provider failure.
    """

    @property
    def name(self) -> str: ...

    async def send(
        self,
        message: str,
        *,
        system_prompt: str | None = None,
    ) -> EngineResponse:
        """Send a message to the engine and return the response."""
        ...

    async def health_check(self) -> bool:
        """Check if the engine is available. Returns True if healthy."""
        ...
