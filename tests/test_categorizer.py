"""Tests for the categorization client (mocked engine)."""

import json

import pytest

from aisle.categorizer import SYSTEM_PROMPT, Categorizer, parse_sections
from aisle.config import ModelConfig
from aisle.engines.base import EngineResponse
from aisle.errors import ConfigurationError, ModelError
from aisle.sessions.store import Section

GOOD_REPLY = json.dumps({
    "store_section": [
        {"name": "Produce", "items": ["Apples", "Bananas"]},
        {"name": "Dairy", "items": ["Milk"]},
    ]
})


class MockEngine:
    def __init__(self, text: str = GOOD_REPLY, error: Exception | None = None):
        self._text = text
        self._error = error
        self.calls: list[tuple[str, str | None]] = []

    @property
    def name(self) -> str:
        return "mock"

    async def send(self, message, *, system_prompt=None) -> EngineResponse:
        self.calls.append((message, system_prompt))
        if self._error:
            raise self._error
        return EngineResponse(text=self._text, model="mock-1")

    async def health_check(self) -> bool:
        return True


class TestParseSections:
    def test_valid(self):
        assert parse_sections(GOOD_REPLY) == [
            Section(name="Produce", items=["Apples", "Bananas"]),
            Section(name="Dairy", items=["Milk"]),
        ]

    def test_code_fence_stripped(self):
        sections = parse_sections(f"```json\n{GOOD_REPLY}\n```")
        assert sections[0].name == "Produce"

    def test_empty_section_list(self):
        assert parse_sections('{"store_section": []}') == []

    @pytest.mark.parametrize(
        "raw",
        [
            "Sure! Here is your list: Produce - apples",
            "{}",
            '{"store_section": {"name": "Produce", "items": []}}',
            '{"store_section": [{"name": "Produce"}]}',
            '{"store_section": [{"name": "Produce", "items": "Apples"}]}',
            '{"store_section": [{"name": 3, "items": ["Apples"]}]}',
            '{"store_section": [{"name": "Produce", "items": [1, 2]}]}',
            '{"store_section": [], "commentary": "enjoy"}',
        ],
    )
    def test_malformed_raises(self, raw: str):
        with pytest.raises(ModelError, match="Malformed"):
            parse_sections(raw)


class TestCategorizer:
    @pytest.mark.asyncio
    async def test_categorize(self):
        engine = MockEngine()
        categorizer = Categorizer(ModelConfig(), engine=engine)

        sections = await categorizer.categorize("apples bananas milk")

        assert [s.name for s in sections] == ["Produce", "Dairy"]
        assert engine.calls == [("apples bananas milk", SYSTEM_PROMPT)]

    def test_prompt_asks_for_grouping_without_commentary(self):
        assert "store area" in SYSTEM_PROMPT
        assert "no commentary" in SYSTEM_PROMPT
        assert "store_section" in SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_engine_error_propagates(self):
        categorizer = Categorizer(ModelConfig(), engine=MockEngine(error=ModelError("down")))
        with pytest.raises(ModelError, match="down"):
            await categorizer.categorize("milk")

    @pytest.mark.asyncio
    async def test_malformed_reply_raises(self):
        categorizer = Categorizer(ModelConfig(), engine=MockEngine(text="not json"))
        with pytest.raises(ModelError):
            await categorizer.categorize("milk")

    @pytest.mark.asyncio
    async def test_unknown_provider_fails_at_call_time(self):
        # Construction succeeds; the bad provider is only reported on use
        categorizer = Categorizer(ModelConfig(name="mystery/model-x"))
        with pytest.raises(ConfigurationError, match="Unknown model provider"):
            await categorizer.categorize("milk")

    @pytest.mark.asyncio
    async def test_configuration_error_is_model_error(self):
        categorizer = Categorizer(ModelConfig(name="no-slash"))
        with pytest.raises(ModelError):
            await categorizer.categorize("milk")
