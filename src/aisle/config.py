"""Configuration loading from environment variables, .env and aisle.toml."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "ollama/llama3.1"
_CONFIG_FILENAME = "aisle.toml"


@dataclass
class ModelConfig:
    """Language model selection and provider endpoints."""

    name: str = _DEFAULT_MODEL
    timeout: int = 120
    max_tokens: int = 2048
    ollama_base_url: str = "http://localhost:11434/v1"
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_api_key: str = ""


@dataclass
class TelegramConfig:
    """Telegram connector configuration."""

    token: str = ""
    poll_timeout: int = 30


@dataclass
class AisleConfig:
    """Top-level Aisle configuration."""

    model: ModelConfig = field(default_factory=ModelConfig)
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    sessions_dir: Path = Path("sessions")
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> AisleConfig:
    """Load configuration from environment variables and optional aisle.toml.

    Priority: environment variables > aisle.toml > defaults. A ``.env`` file in
    the working directory is read first but never overrides the real environment.
    """
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)

    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        if config_path:
            logger.warning("Config file %s not found, searching default locations", config_path)
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".aisle" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    model_data = file_data.get("model", {})
    telegram_data = file_data.get("telegram", {})

    config = AisleConfig(
        model=ModelConfig(
            name=os.getenv("AISLE_MODEL", model_data.get("name", _DEFAULT_MODEL)),
            timeout=int(os.getenv("AISLE_TIMEOUT", model_data.get("timeout", 120))),
            max_tokens=int(os.getenv("AISLE_MAX_TOKENS", model_data.get("max_tokens", 2048))),
            ollama_base_url=os.getenv(
                "OLLAMA_BASE_URL", model_data.get("ollama_base_url", "http://localhost:11434/v1")
            ),
            groq_base_url=os.getenv(
                "GROQ_BASE_URL", model_data.get("groq_base_url", "https://api.groq.com/openai/v1")
            ),
            groq_api_key=os.getenv("GROQ_API_KEY", model_data.get("groq_api_key", "")),
        ),
        telegram=TelegramConfig(
            token=os.getenv("TELEGRAM_BOT_TOKEN", telegram_data.get("token", "")),
            poll_timeout=int(
                os.getenv("TELEGRAM_POLL_TIMEOUT", telegram_data.get("poll_timeout", 30))
            ),
        ),
        sessions_dir=Path(os.getenv("AISLE_SESSIONS_DIR", file_data.get("sessions_dir", "sessions"))),
        log_level=os.getenv("AISLE_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
