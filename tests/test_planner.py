"""Tests for bbq_planner.planner module."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import MagicMock

import pytest

from bbq_planner.generation_client import ServiceError
from bbq_planner.models import Preferences, ShoppingItem
from bbq_planner.normalizer import ParseError
from bbq_planner.planner import (
    GENERATION_FAILED_MESSAGE,
    NO_GUESTS_MESSAGE,
    ValidationError,
    can_generate,
    request_shopping_list,
    request_shopping_list_async,
    user_message,
    validate_preferences,
)


class FakeGenerator:
    """Generator returning canned text and recording its calls."""

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def generate(self, prompt_text: str, output_schema: dict[str, Any]) -> str:
        self.calls.append((prompt_text, output_schema))
        if self.error is not None:
            raise self.error
        return self.text


class TestValidation:
    """Tests for can_generate and validate_preferences."""

    def test_zero_guests_cannot_generate(self) -> None:
        """Test the action is disabled with no guests."""
        prefs = Preferences(adults=0, children=0)
        assert can_generate(prefs) is False
        with pytest.raises(ValidationError, match=NO_GUESTS_MESSAGE):
            validate_preferences(prefs)

    @pytest.mark.parametrize(("adults", "children"), [(1, 0), (0, 1), (3, 2)])
    def test_any_guest_can_generate(self, adults: int, children: int) -> None:
        """Test one adult or one child is enough."""
        prefs = Preferences(adults=adults, children=children)
        assert can_generate(prefs) is True
        validate_preferences(prefs)


class TestRequestShoppingList:
    """Tests for request_shopping_list."""

    def test_happy_path(self) -> None:
        """Test prompt -> one generate call -> normalized list."""
        gen = FakeGenerator('{"お肉": [["牛肉", "500g", 800]]}')
        result = request_shopping_list(Preferences(adults=4, children=1), gen)

        assert len(gen.calls) == 1
        prompt, schema = gen.calls[0]
        assert "大人の人数: 4人" in prompt
        assert schema["type"] == "array"
        assert result[0].category == "お肉"
        assert result[0].items[0] == ShoppingItem(
            name="牛肉", quantity="500g", price=800
        )

    def test_zero_guests_never_calls_generator(self) -> None:
        """Test validation fails before any generation call."""
        gen = MagicMock()
        with pytest.raises(ValidationError):
            request_shopping_list(Preferences(adults=0, children=0), gen)
        gen.generate.assert_not_called()

    def test_empty_response_is_service_error(self) -> None:
        """Test an empty service body surfaces as ServiceError."""
        gen = FakeGenerator(error=ServiceError("Claude returned an empty response"))
        with pytest.raises(ServiceError):
            request_shopping_list(Preferences(), gen)

    def test_unparseable_response_is_parse_error(self) -> None:
        """Test non-JSON text surfaces as ParseError."""
        with pytest.raises(ParseError):
            request_shopping_list(Preferences(), FakeGenerator("not json"))

    def test_fresh_list_each_call(self) -> None:
        """Test each call builds its own list from its own response."""
        prefs = Preferences()
        first = request_shopping_list(prefs, FakeGenerator('{"A": ["x"]}'))
        second = request_shopping_list(prefs, FakeGenerator('{"B": ["y"]}'))
        assert first[0].category == "A"
        assert second[0].category == "B"

    def test_async_variant(self) -> None:
        """Test the async wrapper returns the same list."""
        gen = FakeGenerator('[{"category": "飲み物", "items": ["水"]}]')
        result = asyncio.run(request_shopping_list_async(Preferences(), gen))
        assert result[0].items[0].name == "水"
        assert len(gen.calls) == 1


class TestUserMessage:
    """Tests for user_message."""

    @pytest.mark.parametrize(
        "exc", [ServiceError("boom"), ParseError("bad"), RuntimeError("other")]
    )
    def test_failures_share_one_message(self, exc: Exception) -> None:
        """Test service and parse failures map to the generic message."""
        assert user_message(exc) == GENERATION_FAILED_MESSAGE

    def test_validation_message(self) -> None:
        """Test validation failures keep their own message."""
        assert user_message(ValidationError(NO_GUESTS_MESSAGE)) == NO_GUESTS_MESSAGE
