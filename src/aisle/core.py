"""Aisle command router: the single command-handling boundary.

Per command: load session → mutate → categorize (food only) → save → reply.
Every error is caught here so a bad message never takes the bot down.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from aisle.connectors.base import IncomingMessage, Reply
from aisle.errors import ModelError, StorageError
from aisle.sessions import shopping_list

if TYPE_CHECKING:
    from aisle.categorizer import Categorizer
    from aisle.connectors.base import Connector
    from aisle.sessions.store import SessionStore

logger = logging.getLogger(__name__)

COMMANDS = [
    ("start", "Start the bot"),
    ("info", "Get information about the bot"),
    ("food", "Add items to the shopping list"),
    ("items", "Get the shopping list"),
    ("clear", "Clear the shopping list"),
]

WELCOME_TEXT = (
    "Welcome! Send /food followed by what you need and I'll sort your "
    "shopping list by store section."
)
INFO_TEXT = (
    "/food <items> adds items and re-sorts the list\n"
    "/items shows the current list\n"
    "/clear empties it"
)
FOOD_USAGE_TEXT = "Usage: /food <items>, e.g. /food milk, eggs and two lemons"
CLEARED_TEXT = "Shopping list cleared"
MODEL_ERROR_TEXT = "An error occurred while processing your food list. Please try again."
GENERIC_ERROR_TEXT = "An error occurred. Please try again later."


def parse_command(text: str) -> tuple[str | None, str]:
    """Split ``"/food@my_bot milk eggs"`` into ``("food", "milk eggs")``.

    Returns ``(None, text)`` when the text is not one of COMMANDS.
    """
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return None, text
    command = parts[0].lstrip("/").split("@", 1)[0].lower()
    if command in {name for name, _ in COMMANDS}:
        return command, parts[1].strip() if len(parts) > 1 else ""
    return None, text


class Aisle:
    """Routes chat commands to the session store and categorizer."""

    def __init__(self, store: SessionStore, categorizer: Categorizer) -> None:
        self.store = store
        self.categorizer = categorizer
        self._connectors: list[Connector] = []

    # ── Connector management ─────────────────────────────────

    def add_connector(self, connector: Connector) -> None:
        self._connectors.append(connector)
        logger.info("Registered connector: %s", connector.name)

    # ── Message handling ─────────────────────────────────────

    async def handle_message(self, msg: IncomingMessage) -> Reply:
        """Process an incoming message; the main entry point for all connectors."""
        command, payload = parse_command(msg.text)
        logger.info(
            "[%s] %s (%s): %s", msg.connector_name, msg.sender, msg.user_id, command or "echo"
        )
        try:
            if command == "food":
                return await self._food(msg.user_id, payload)
            if command == "items":
                return self._items(msg.user_id)
            if command == "clear":
                return self._clear(msg.user_id)
            if command == "start":
                return Reply(text=WELCOME_TEXT)
            if command == "info":
                return Reply(text=INFO_TEXT)
            return Reply(text=msg.text)
        except ModelError as e:
            logger.error("Categorization failed for user %s: %s", msg.user_id, e)
            return Reply(text=MODEL_ERROR_TEXT)
        except StorageError as e:
            logger.error("Session storage failed for user %s: %s", msg.user_id, e)
            return Reply(text=GENERIC_ERROR_TEXT)
        except Exception:
            logger.exception("Unexpected error handling %r for user %s", command, msg.user_id)
            return Reply(text=GENERIC_ERROR_TEXT)

    async def _food(self, user_id: str, text: str) -> Reply:
        if not text:
            return Reply(text=FOOD_USAGE_TEXT)

        session = self.store.load(user_id)
        updated = shopping_list.append_entry(session, text)
        sections = await self.categorizer.categorize(shopping_list.flatten(updated))
        updated = shopping_list.replace_sections(updated, sections)
        self.store.save(user_id, updated)
        return Reply(text=shopping_list.render(updated.sections))

    def _items(self, user_id: str) -> Reply:
        session = self.store.load(user_id)
        return Reply(text=shopping_list.render(session.sections))

    def _clear(self, user_id: str) -> Reply:
        session = shopping_list.clear(self.store.load(user_id))
        self.store.save(user_id, session)
        return Reply(text=CLEARED_TEXT)

    # ── Lifecycle ─────────────────────────────────────────────

    async def start(self) -> None:
        """Start all connectors (each listens for messages)."""
        if not self._connectors:
            raise RuntimeError("No connectors registered. Call add_connector() first.")

        await asyncio.gather(*(connector.start(self.handle_message) for connector in self._connectors))

    async def stop(self) -> None:
        """Gracefully stop all connectors."""
        for connector in self._connectors:
            await connector.stop()
