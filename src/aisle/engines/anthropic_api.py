"""Anthropic API engine: plain completions, no tool use."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from aisle.engines.base import EngineResponse
from aisle.errors import ConfigurationError, ModelError

logger = logging.getLogger(__name__)


@dataclass
class AnthropicAPIEngine:
    """Direct Anthropic API via the `anthropic` SDK. Pure completion, no tools."""

    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 2048
    timeout: int = 120

    def __post_init__(self) -> None:
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic package required. Install with: uv pip install 'aisle[anthropic]'"
            )
        self._anthropic = anthropic
        self._client = anthropic.Anthropic(timeout=self.timeout, max_retries=0)
        if not self._client.api_key and not self._client.auth_token:
            raise ConfigurationError(
                "anthropic provider needs ANTHROPIC_API_KEY or ANTHROPIC_AUTH_TOKEN"
            )

    @property
    def name(self) -> str:
        return "anthropic"

    async def send(
        self,
        message: str,
        *,
        system_prompt: str | None = None,
    ) -> EngineResponse:
        kwargs: dict = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": message}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        try:
            response = await asyncio.to_thread(self._client.messages.create, **kwargs)
        except self._anthropic.AnthropicError as e:
            logger.error("Anthropic API error: %s", e)
            raise ModelError(f"anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text:
            raise ModelError("anthropic returned an empty response")

        return EngineResponse(
            text=text,
            model=response.model,
            input_tokens=response.usage.input_tokens if response.usage else None,
            output_tokens=response.usage.output_tokens if response.usage else None,
        )

    async def health_check(self) -> bool:
        try:
            response = await asyncio.to_thread(
                self._client.messages.create,
                model=self.model,
                max_tokens=10,
                messages=[{"role": "user", "content": "ping"}],
            )
            return bool(response.content)
        except self._anthropic.AnthropicError:
            return False
