"""Categorization client: one model call per flattened shopping list.

The model is asked for JSON and its reply is validated against a strict
schema before anything reaches the session. Every failure surfaces as
ModelError; nothing is retried.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, ValidationError

from aisle.engines.registry import build_engine
from aisle.errors import ModelError
from aisle.sessions.store import Section

if TYPE_CHECKING:
    from aisle.config import ModelConfig
    from aisle.engines.base import Engine

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
Group these food items by the store area they're found in, no commentary.

Make a list of all the items that are mentioned, grouped by the area of the
grocery store where they are found. Reply with JSON only, in exactly this shape:
{"store_section": [{"name": "<store area>", "items": ["<item>", ...]}, ...]}
"""

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


class StoreSection(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: str
    items: list[str]


class CategorizedList(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    store_section: list[StoreSection]


def parse_sections(raw: str) -> list[Section]:
    """Validate a model reply and convert it to Sections.

    Raises ModelError if the reply is not JSON of the expected shape.
    """
    match = _CODE_FENCE.match(raw)
    if match:
        raw = match.group(1)
    try:
        result = CategorizedList.model_validate_json(raw)
    except ValidationError as e:
        raise ModelError(f"Malformed categorization response: {e.error_count()} error(s)") from e
    return [Section(name=s.name, items=list(s.items)) for s in result.store_section]


class Categorizer:
    """Sends a flattened list to the configured model and returns Sections.

    The engine is built on first use, so an unknown provider is reported as a
    ConfigurationError when a list is categorized rather than at startup.
    """

    def __init__(self, config: ModelConfig, engine: Engine | None = None) -> None:
        self.config = config
        self._engine = engine

    def _get_engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.config.name, self.config)
        return self._engine

    async def categorize(self, flattened_list: str) -> list[Section]:
        engine = self._get_engine()
        logger.info("Running %s on %d chars", engine.name, len(flattened_list))
        response = await engine.send(flattened_list, system_prompt=SYSTEM_PROMPT)
        logger.debug("Model %s replied: %s", response.model, response.text)

        sections = parse_sections(response.text)
        logger.info("Categorized into %d sections", len(sections))
        return sections
