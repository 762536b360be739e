"""Prompt and output schema construction for shopping list generation.

Turns a :class:`Preferences` into the instruction text sent to Claude
together with the JSON schema the answer has to follow.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bbq_planner.aggregator import format_amount

if TYPE_CHECKING:
    from bbq_planner.models import Preferences

TEMPLATE_PATH = Path(__file__).parent / "prompts" / "shopping_list.txt"

NO_PREFERENCE = "特になし。プランナーのおすすめで"
NONE_TEXT = "なし"

_KIDS_INSTRUCTION = (
    "子供が{children}人参加します。子供が喜ぶようなメニュー"
    "（例：焼きそば、フランクフルト、焼きマシュマロ、コーンバターなど）を必ず含めてください。"
)
_NO_KIDS_INSTRUCTION = "子供の参加者はいないため、大人向けのメニューを中心にしてください。"


SHOPPING_LIST_SCHEMA: dict[str, Any] = {
    "type": "array",
    "description": "A categorized shopping list for a BBQ party.",
    "items": {
        "type": "object",
        "properties": {
            "category": {
                "type": "string",
                "minLength": 1,
                "description": (
                    "Category of the items (e.g., Meat, Seafood, Vegetables, "
                    "Drinks, Condiments, Supplies)."
                ),
            },
            "items": {
                "type": "array",
                "description": "List of items in this category.",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {
                            "type": "string",
                            "description": "Name of the item to buy.",
                        },
                        "quantity": {
                            "type": "string",
                            "description": (
                                "Specific quantity of the item "
                                "(e.g., 500g, 2 bottles, 1 pack)."
                            ),
                        },
                        "price": {
                            "type": "number",
                            "description": (
                                "Estimated price of the item in Japanese Yen, "
                                "e.g. 1500."
                            ),
                        },
                        "notes": {
                            "type": "string",
                            "description": (
                                "Optional notes for the item "
                                "(e.g., brand preference, preparation note)."
                            ),
                        },
                    },
                    "required": ["name", "quantity", "price"],
                },
            },
        },
        "required": ["category", "items"],
    },
}


def render_template(**values: str) -> str:
    """Read the shopping list template and fill in its placeholders.

    User-supplied text is substituted as a value, so braces inside it are
    left as they are.

    Args:
        **values: Replacement text for each ``{placeholder}``.

    Returns:
        The rendered prompt.

    Raises:
        FileNotFoundError: If the template is missing from the package.
        KeyError: If a placeholder has no value.
    """
    if not TEMPLATE_PATH.is_file():
        raise FileNotFoundError(f"Prompt template not found: {TEMPLATE_PATH}")
    return TEMPLATE_PATH.read_text(encoding="utf-8").format(**values)


def _format_choices(choices: list[str]) -> str:
    """Join preference choices for the prompt, or say there is none.

    Args:
        choices: Selected choices.

    Returns:
        Choices joined with ``、`` or the no-preference phrase.
    """
    if not choices:
        return NO_PREFERENCE
    return "、".join(choices)


def _kids_instruction(children: int) -> str:
    if children > 0:
        return _KIDS_INSTRUCTION.format(children=children)
    return _NO_KIDS_INSTRUCTION


def build_prompt(prefs: Preferences) -> tuple[str, dict[str, Any]]:
    """Build the generation prompt and output schema for the preferences.

    Args:
        prefs: Party preferences.

    Returns:
        Tuple of (prompt text, JSON schema dict). The schema is a fresh
        copy each call.
    """
    prompt = render_template(
        adults=str(prefs.adults),
        children=str(prefs.children),
        budget=format_amount(prefs.budget),
        budget_value=format_amount(prefs.budget).replace(",", ""),
        meat_choices=_format_choices(prefs.meat_choices),
        seafood_choices=_format_choices(prefs.seafood_choices),
        allergies=prefs.allergy_text or NONE_TEXT,
        other_requests=prefs.other_text or NONE_TEXT,
        kids_instruction=_kids_instruction(prefs.children),
    )
    return prompt, copy_schema()


def copy_schema() -> dict[str, Any]:
    """Return a deep copy of the shopping list output schema.

    Returns:
        JSON schema dict safe for the caller to mutate.
    """
    return copy.deepcopy(SHOPPING_LIST_SCHEMA)
