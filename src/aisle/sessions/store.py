"""JSON file store, one pretty-printed session file per user."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from aisle.errors import StorageError

logger = logging.getLogger(__name__)

_SAFE_USER_ID = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class Section:
    """A named store area and the items found there."""

    name: str
    items: list[str] = field(default_factory=list)


@dataclass
class Session:
    """Persisted state for one user: raw entries plus their categorization."""

    food_list: list[str] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "foodList": list(self.food_list),
            "sections": [{"name": s.name, "items": list(s.items)} for s in self.sections],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Session:
        """Build a Session from its on-disk shape. Raises ValueError on mismatch."""
        if not isinstance(data, dict):
            raise ValueError("session must be a JSON object")
        food_list = data.get("foodList", [])
        sections = data.get("sections", [])
        if not isinstance(food_list, list) or not all(isinstance(f, str) for f in food_list):
            raise ValueError("foodList must be a list of strings")
        if not isinstance(sections, list):
            raise ValueError("sections must be a list")

        parsed: list[Section] = []
        for raw in sections:
            if not isinstance(raw, dict):
                raise ValueError("each section must be an object")
            name = raw.get("name")
            items = raw.get("items", [])
            if not isinstance(name, str):
                raise ValueError("section name must be a string")
            if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
                raise ValueError(f"items of section {name!r} must be a list of strings")
            parsed.append(Section(name=name, items=list(items)))
        return cls(food_list=list(food_list), sections=parsed)


class SessionStore:
    """Read/write access to ``<root>/<user_id>.json`` session files."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path_for(self, user_id: str | int) -> Path:
        key = str(user_id)
        if not _SAFE_USER_ID.match(key):
            raise StorageError(f"Invalid user identifier for session file: {key!r}")
        return self.root / f"{key}.json"

    def load(self, user_id: str | int) -> Session:
        """Return the stored session, or a fresh empty one if none exists.

        A file that exists but cannot be read or parsed raises StorageError
        rather than being replaced by an empty session.
        """
        path = self._path_for(user_id)
        try:
            if not path.exists():
                return Session()
            data = json.loads(path.read_text(encoding="utf-8"))
            return Session.from_dict(data)
        except OSError as e:
            raise StorageError(f"Cannot read session {path}: {e}") from e
        except ValueError as e:
            # json.JSONDecodeError is a ValueError subclass
            raise StorageError(f"Corrupt session file {path}: {e}") from e

    def save(self, user_id: str | int, session: Session) -> None:
        """Overwrite the user's session file, creating the directory if needed."""
        path = self._path_for(user_id)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(session.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write session {path}: {e}") from e
        logger.debug("Saved session %s (%d entries)", path, len(session.food_list))
