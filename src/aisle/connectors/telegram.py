"""Telegram Bot API connector (long polling).

Talks to the HTTP Bot API directly with aiohttp; updates are handled one at a
time in arrival order.
Requires: uv pip install 'aisle[telegram]'
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from aisle.connectors.base import IncomingMessage
from aisle.errors import AisleError

if TYPE_CHECKING:
    from aisle.config import TelegramConfig
    from aisle.connectors.base import MessageHandler, Reply

logger = logging.getLogger(__name__)

API_BASE = "https://api.telegram.org"
EMPTY_LIST_TEXT = "Your shopping list is empty."
MAX_MESSAGE_LENGTH = 4096
_RETRY_DELAY = 5


class TelegramAPIError(AisleError):
    """The Bot API answered with ``ok: false``."""


class TelegramConnector:
    """Telegram connector using getUpdates long polling."""

    def __init__(
        self,
        config: TelegramConfig,
        commands: list[tuple[str, str]] | None = None,
    ) -> None:
        self._config = config
        self._commands = commands or []
        self._handler: MessageHandler | None = None
        self._session = None
        self._offset = 0
        self._running = False

        try:
            import aiohttp

            self._aiohttp = aiohttp
        except ImportError:
            raise ImportError(
                "aiohttp package required. Install with: uv pip install 'aisle[telegram]'"
            )

    @property
    def name(self) -> str:
        return "telegram"

    async def start(self, handler: MessageHandler) -> None:
        self._handler = handler
        self._running = True
        timeout = self._aiohttp.ClientTimeout(total=self._config.poll_timeout + 10)

        async with self._aiohttp.ClientSession(timeout=timeout) as session:
            self._session = session
            me = await self._call("getMe")
            logger.info("Telegram bot @%s (id=%s) starting", me.get("username"), me.get("id"))
            if self._commands:
                await self._call(
                    "setMyCommands",
                    {"commands": [{"command": c, "description": d} for c, d in self._commands]},
                )
            try:
                await self._poll()
            finally:
                self._session = None

    async def _poll(self) -> None:
        while self._running:
            try:
                updates = await self._call(
                    "getUpdates",
                    {
                        "offset": self._offset,
                        "timeout": self._config.poll_timeout,
                        "allowed_updates": ["message"],
                    },
                )
            except (self._aiohttp.ClientError, asyncio.TimeoutError, TelegramAPIError) as e:
                logger.warning("getUpdates failed, retrying in %ds: %s", _RETRY_DELAY, e)
                await asyncio.sleep(_RETRY_DELAY)
                continue

            for update in updates:
                self._offset = update["update_id"] + 1
                await self._process_update(update)

    async def _process_update(self, update: dict) -> None:
        msg = self.to_incoming(update)
        if msg is None:
            return
        try:
            await self._call("sendChatAction", {"chat_id": msg.chat_id, "action": "typing"})
            reply = await self._handler(msg)
            await self.reply(msg.chat_id, reply)
        except Exception as e:
            logger.exception("Error processing telegram update %s: %s", update.get("update_id"), e)

    @staticmethod
    def to_incoming(update: dict) -> IncomingMessage | None:
        """Convert a Bot API update to an IncomingMessage; None if it has no text."""
        message = update.get("message") or {}
        text = message.get("text", "")
        sender = message.get("from") or {}
        if not text or "id" not in sender:
            return None

        name = " ".join(p for p in (sender.get("first_name"), sender.get("last_name")) if p)
        return IncomingMessage(
            text=text,
            user_id=str(sender["id"]),
            chat_id=str(message.get("chat", {}).get("id", sender["id"])),
            sender=name,
            connector_name="telegram",
            metadata={"update_id": update.get("update_id")},
        )

    async def _call(self, method: str, payload: dict | None = None):
        if self._session is None:
            raise RuntimeError("Telegram connector not started")
        url = f"{API_BASE}/bot{self._config.token}/{method}"
        async with self._session.post(url, json=payload or {}) as resp:
            data = await resp.json()
        if not data.get("ok"):
            raise TelegramAPIError(f"{method}: {data.get('description', 'unknown error')}")
        return data.get("result")

    async def stop(self) -> None:
        self._running = False

    async def reply(self, chat_id: str, reply: Reply) -> None:
        """Send reply text, split into Telegram-sized chunks."""
        text = reply.text.strip() or EMPTY_LIST_TEXT
        for start in range(0, len(text), MAX_MESSAGE_LENGTH):
            await self._call(
                "sendMessage",
                {"chat_id": chat_id, "text": text[start : start + MAX_MESSAGE_LENGTH]},
            )
