"""Daemon process for the always-on Telegram bot.

Usage: python -m aisle serve

Builds the session store, categorizer and router once at startup and runs
the Telegram connector until SIGTERM/SIGINT.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from aisle.categorizer import Categorizer
from aisle.config import AisleConfig, load_config
from aisle.core import COMMANDS, Aisle
from aisle.sessions.store import SessionStore

logger = logging.getLogger(__name__)


def build_aisle(config: AisleConfig) -> Aisle:
    """Construct the router with its collaborators injected."""
    store = SessionStore(config.sessions_dir)
    categorizer = Categorizer(config.model)
    return Aisle(store, categorizer)


class AisleDaemon:
    """Always-on daemon process."""

    def __init__(self, config: AisleConfig | None = None) -> None:
        self.config = config or load_config()
        self._shutdown_event = asyncio.Event()

    # ── Signal handling ──────────────────────────────────────

    def _setup_signals(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._handle_signal, sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down...", sig.name)
        self._shutdown_event.set()

    # ── Build components ─────────────────────────────────────

    def _build_connectors(self, aisle: Aisle) -> None:
        if not self.config.telegram.token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")

        from aisle.connectors.telegram import TelegramConnector

        aisle.add_connector(TelegramConnector(self.config.telegram, commands=COMMANDS))

    # ── Main run loop ────────────────────────────────────────

    async def run(self) -> None:
        self._setup_signals()

        aisle = build_aisle(self.config)
        self._build_connectors(aisle)

        logger.info(
            "Aisle daemon starting (model=%s, sessions=%s)",
            self.config.model.name,
            self.config.sessions_dir,
        )

        bot = asyncio.create_task(aisle.start())
        shutdown = asyncio.create_task(self._shutdown_event.wait())
        try:
            await asyncio.wait({bot, shutdown}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            await aisle.stop()
            for task in (bot, shutdown):
                task.cancel()
            await asyncio.gather(bot, shutdown, return_exceptions=True)
            logger.info("Aisle daemon stopped.")
        if not bot.cancelled() and bot.exception() is not None:
            raise bot.exception()
