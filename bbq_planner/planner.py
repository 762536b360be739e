"""Entry point that turns party preferences into a shopping list.

Composes prompt building, a single generation call and normalization.
The generator is passed in, so any object with a
``generate(prompt_text, output_schema) -> str`` method works.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Protocol

from bbq_planner.normalizer import normalize
from bbq_planner.prompt_builder import build_prompt

if TYPE_CHECKING:
    from bbq_planner.models import Preferences, ShoppingList

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = (
    "買い出しリストの生成中にエラーが発生しました。条件を変更して再度お試しください。"
)
NO_GUESTS_MESSAGE = "大人と子供の人数を合わせて1人以上にしてください。"


class ValidationError(Exception):
    """Raised when preferences cannot be used to generate a list."""


class Generator(Protocol):
    """Anything that can turn a prompt and schema into response text."""

    def generate(self, prompt_text: str, output_schema: dict[str, Any]) -> str:
        """Return raw response text for the prompt."""
        ...


def can_generate(prefs: Preferences) -> bool:
    """Whether the generate action should be enabled.

    Args:
        prefs: Party preferences.

    Returns:
        True when at least one guest is expected.
    """
    return prefs.guest_count > 0


def validate_preferences(prefs: Preferences) -> None:
    """Check preferences before any generation is attempted.

    Args:
        prefs: Party preferences.

    Raises:
        ValidationError: If there are no guests.
    """
    if not can_generate(prefs):
        raise ValidationError(NO_GUESTS_MESSAGE)


def request_shopping_list(prefs: Preferences, generator: Generator) -> ShoppingList:
    """Generate a normalized shopping list for the preferences.

    Steps:
    1. Validate the guest count.
    2. Build the prompt and output schema.
    3. Make exactly one generation call.
    4. Normalize the response text.

    Args:
        prefs: Party preferences.
        generator: Generation client.

    Returns:
        Freshly built ShoppingList.

    Raises:
        ValidationError: If there are no guests; the generator is not
            called.
        ServiceError: If the generation call fails.
        ParseError: If the response is not structured data.
    """
    validate_preferences(prefs)
    prompt_text, output_schema = build_prompt(prefs)
    logger.info(
        "Requesting shopping list for %d adults, %d children",
        prefs.adults,
        prefs.children,
    )
    raw_text = generator.generate(prompt_text, output_schema)
    shopping_list = normalize(raw_text)
    logger.info("Generated %d categories", len(shopping_list))
    return shopping_list


async def request_shopping_list_async(
    prefs: Preferences,
    generator: Generator,
) -> ShoppingList:
    """Run :func:`request_shopping_list` without blocking the event loop.

    Args:
        prefs: Party preferences.
        generator: Generation client.

    Returns:
        Freshly built ShoppingList.
    """
    return await asyncio.to_thread(request_shopping_list, prefs, generator)


def user_message(exc: Exception) -> str:
    """Map a core failure to the message shown to the user.

    Args:
        exc: Exception raised by :func:`request_shopping_list`.

    Returns:
        Localized, user-facing error string.
    """
    if isinstance(exc, ValidationError):
        return str(exc)
    return GENERATION_FAILED_MESSAGE
