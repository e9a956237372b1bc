"""OpenAI-compatible chat completions engine (OpenAI, Groq, Ollama)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import openai

from aisle.engines.base import EngineResponse
from aisle.errors import ModelError

logger = logging.getLogger(__name__)


@dataclass
class OpenAICompatibleEngine:
    """Chat completions via the `openai` SDK, pointed at any compatible endpoint.

    Requests JSON-object output; schema checking is left to the caller.
    """

    model: str
    provider: str = "openai"
    base_url: str | None = None
    api_key: str | None = None
    max_tokens: int = 2048
    timeout: int = 120

    def __post_init__(self) -> None:
        kwargs: dict = {"timeout": self.timeout, "max_retries": 0}
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.api_key:
            kwargs["api_key"] = self.api_key
        try:
            self._client = openai.OpenAI(**kwargs)
        except openai.OpenAIError as e:
            # Raised when no API key is configured for the endpoint
            raise ModelError(f"Cannot create {self.provider} client: {e}") from e

    @property
    def name(self) -> str:
        return self.provider

    async def send(
        self,
        message: str,
        *,
        system_prompt: str | None = None,
    ) -> EngineResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": message})

        logger.debug("Calling %s/%s (%d chars)", self.provider, self.model, len(message))
        try:
            response = await asyncio.to_thread(
                self._client.chat.completions.create,
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error("%s API error: %s", self.provider, e)
            raise ModelError(f"{self.provider} request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ModelError(f"{self.provider} returned an empty response")

        usage = response.usage
        return EngineResponse(
            text=response.choices[0].message.content,
            model=response.model,
            input_tokens=usage.prompt_tokens if usage else None,
            output_tokens=usage.completion_tokens if usage else None,
        )

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self._client.models.list)
            return True
        except openai.OpenAIError:
            return False
