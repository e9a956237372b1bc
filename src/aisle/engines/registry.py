"""Resolve a ``"<provider>/<model-name>"`` string to an engine instance."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aisle.errors import ConfigurationError

if TYPE_CHECKING:
    from aisle.config import ModelConfig
    from aisle.engines.base import Engine

logger = logging.getLogger(__name__)

PROVIDERS = ("ollama", "openai", "groq", "anthropic")


def parse_model_string(model_string: str) -> tuple[str, str]:
    """Split ``"ollama/llama3.1"`` into ``("ollama", "llama3.1")``."""
    provider, sep, model = model_string.partition("/")
    if not sep or not provider or not model:
        raise ConfigurationError(
            f"Model must look like '<provider>/<model-name>', got {model_string!r}"
        )
    if provider not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown model provider: {provider!r}. Available: {list(PROVIDERS)}"
        )
    return provider, model


def build_engine(model_string: str, config: ModelConfig) -> Engine:
    provider, model = parse_model_string(model_string)
    logger.info("Building engine %s/%s", provider, model)

    if provider == "anthropic":
        from aisle.engines.anthropic_api import AnthropicAPIEngine

        try:
            return AnthropicAPIEngine(
                model=model, max_tokens=config.max_tokens, timeout=config.timeout
            )
        except ImportError as e:
            raise ConfigurationError(str(e)) from e

    from aisle.engines.openai_compat import OpenAICompatibleEngine

    if provider == "ollama":
        # Ollama ignores the key but the SDK refuses to start without one
        return OpenAICompatibleEngine(
            model=model,
            provider=provider,
            base_url=config.ollama_base_url,
            api_key="ollama",
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )
    if provider == "groq":
        return OpenAICompatibleEngine(
            model=model,
            provider=provider,
            base_url=config.groq_base_url,
            api_key=config.groq_api_key or None,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )
    return OpenAICompatibleEngine(
        model=model,
        provider=provider,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
    )
