"""Tests for daemon wiring."""

import asyncio

import pytest
from pathlib import Path

from aisle.categorizer import Categorizer
from aisle.config import AisleConfig, ModelConfig, TelegramConfig
from aisle.connectors.telegram import TelegramConnector
from aisle.daemon import AisleDaemon, build_aisle
from aisle.sessions.store import SessionStore


@pytest.fixture
def config(tmp_path: Path) -> AisleConfig:
    return AisleConfig(
        model=ModelConfig(name="mystery/model"),
        telegram=TelegramConfig(token="123:abc"),
        sessions_dir=tmp_path / "sessions",
    )


class TestBuildAisle:
    def test_components_injected(self, config: AisleConfig):
        aisle = build_aisle(config)
        assert isinstance(aisle.store, SessionStore)
        assert aisle.store.root == config.sessions_dir
        assert isinstance(aisle.categorizer, Categorizer)

    def test_unknown_provider_does_not_fail_at_startup(self, config: AisleConfig):
        build_aisle(config)


class TestAisleDaemon:
    def test_registers_telegram_connector(self, config: AisleConfig):
        daemon = AisleDaemon(config)
        aisle = build_aisle(config)
        daemon._build_connectors(aisle)
        assert len(aisle._connectors) == 1
        assert isinstance(aisle._connectors[0], TelegramConnector)

    def test_missing_token(self, config: AisleConfig):
        config.telegram.token = ""
        daemon = AisleDaemon(config)
        with pytest.raises(RuntimeError, match="TELEGRAM_BOT_TOKEN"):
            daemon._build_connectors(build_aisle(config))

    @pytest.mark.asyncio
    async def test_signal_sets_shutdown(self, config: AisleConfig):
        import signal

        daemon = AisleDaemon(config)
        daemon._handle_signal(signal.SIGTERM)
        await asyncio.wait_for(daemon._shutdown_event.wait(), timeout=1)
