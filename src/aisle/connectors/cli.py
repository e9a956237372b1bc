"""Local CLI REPL connector for development and testing."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from aisle.connectors.base import IncomingMessage

if TYPE_CHECKING:
    from aisle.connectors.base import MessageHandler, Reply

logger = logging.getLogger(__name__)

_CLI_USER_ID = "cli"
_CLI_SENDER = "user"


class CLIConnector:
    """Interactive REPL connector reading stdin and writing stdout."""

    def __init__(self) -> None:
        self._running = False

    @property
    def name(self) -> str:
        return "cli"

    async def start(self, handler: MessageHandler) -> None:
        self._running = True
        loop = asyncio.get_running_loop()

        print("Aisle shopping list (try '/food milk eggs apples', '/items', '/clear'; 'exit' quits)")
        print("-" * 48)

        while self._running:
            try:
                line = await loop.run_in_executor(None, self._read_input)
            except (EOFError, KeyboardInterrupt):
                print("\nBye!")
                break

            if line is None or line.strip().lower() in ("exit", "quit"):
                print("Bye!")
                break

            text = line.strip()
            if not text:
                continue

            msg = IncomingMessage(
                text=text,
                user_id=_CLI_USER_ID,
                chat_id=_CLI_USER_ID,
                sender=_CLI_SENDER,
                connector_name=self.name,
            )

            reply = await handler(msg)
            await self.reply(_CLI_USER_ID, reply)

    def _read_input(self) -> str | None:
        try:
            sys.stdout.write("\nYou: ")
            sys.stdout.flush()
            raw = sys.stdin.buffer.readline()
            if not raw:
                return None
            return raw.decode("utf-8", errors="replace").rstrip("\n")
        except EOFError:
            return None

    async def stop(self) -> None:
        self._running = False

    async def reply(self, chat_id: str, reply: Reply) -> None:
        print(f"\nAisle:\n{reply.text or '(empty list)'}")
