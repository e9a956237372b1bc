"""Tests for configuration loading."""

import pytest
from pathlib import Path

from aisle.config import load_config

_ENV_KEYS = [
    "AISLE_MODEL",
    "AISLE_TIMEOUT",
    "AISLE_MAX_TOKENS",
    "AISLE_SESSIONS_DIR",
    "AISLE_LOG_LEVEL",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_POLL_TIMEOUT",
    "GROQ_API_KEY",
    "OLLAMA_BASE_URL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in _ENV_KEYS:
        # setenv first so monkeypatch restores values load_dotenv writes
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


class TestConfig:
    def test_defaults(self):
        config = load_config()
        assert config.model.name == "ollama/llama3.1"
        assert config.model.timeout == 120
        assert config.sessions_dir == Path("sessions")
        assert config.telegram.token == ""
        assert config.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("AISLE_MODEL", "groq/llama-3.1-8b-instant")
        monkeypatch.setenv("AISLE_TIMEOUT", "60")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")

        config = load_config()
        assert config.model.name == "groq/llama-3.1-8b-instant"
        assert config.model.timeout == 60
        assert config.telegram.token == "123:abc"

    def test_toml_file(self, tmp_path: Path):
        toml_path = tmp_path / "aisle.toml"
        toml_path.write_text("""
sessions_dir = "/var/lib/aisle"

[model]
name = "openai/gpt-4o-mini"
timeout = 30

[telegram]
poll_timeout = 50
""")
        config = load_config(toml_path)
        assert config.model.name == "openai/gpt-4o-mini"
        assert config.model.timeout == 30
        assert config.telegram.poll_timeout == 50
        assert config.sessions_dir == Path("/var/lib/aisle")

    def test_toml_discovered_in_cwd(self, tmp_path: Path):
        (tmp_path / "aisle.toml").write_text('[model]\nname = "anthropic/claude-haiku"\n')
        config = load_config()
        assert config.model.name == "anthropic/claude-haiku"

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("AISLE_MODEL", "openai/gpt-4o")

        toml_path = tmp_path / "aisle.toml"
        toml_path.write_text('[model]\nname = "ollama/mistral"\n')
        config = load_config(toml_path)
        assert config.model.name == "openai/gpt-4o"  # env wins

    def test_dotenv_file(self, tmp_path: Path):
        (tmp_path / ".env").write_text("TELEGRAM_BOT_TOKEN=from-dotenv\n")
        config = load_config()
        assert config.telegram.token == "from-dotenv"

    def test_dotenv_does_not_override_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "from-env")
        (tmp_path / ".env").write_text("TELEGRAM_BOT_TOKEN=from-dotenv\n")
        config = load_config()
        assert config.telegram.token == "from-env"

    def test_missing_config_path_warns(self, tmp_path: Path, caplog):
        (tmp_path / "aisle.toml").write_text('[model]\nname = "openai/gpt-4o"\n')
        with caplog.at_level("WARNING", logger="aisle.config"):
            config = load_config(tmp_path / "aisle.tmol")
        assert "aisle.tmol not found" in caplog.text
        assert config.model.name == "openai/gpt-4o"
