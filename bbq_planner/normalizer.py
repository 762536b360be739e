"""Defensive normalization of Claude's shopping list JSON.

Claude does not always follow the requested schema exactly, so the
parsed value is matched against ``Sequence | Mapping | Scalar`` at each
of three levels (the whole list, a category's items, a single item) and
every arm produces the canonical models. Only text that is not JSON at
all, or JSON whose top level is neither an array nor an object, is an
error.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from bbq_planner.claude_utils import extract_json_text
from bbq_planner.models import (
    DEFAULT_QUANTITY,
    ShoppingCategory,
    ShoppingItem,
    ShoppingList,
)

logger = logging.getLogger(__name__)

_PRICE_NOISE = (",", "，", "¥", "￥", "円", "yen", "JPY")


class ParseError(Exception):
    """Raised when the response text cannot be read as structured data."""


# ---------------------------------------------------------------------------
# Total coercions
# ---------------------------------------------------------------------------


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _coerce_text(value: object) -> str | None:
    """Stringify a value, mapping None and blank strings to None.

    Args:
        value: Any JSON value.

    Returns:
        Stripped string or None.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_price(value: object) -> float | None:
    """Coerce a price to a non-negative float, or None if unusable.

    Accepts numbers and numeric strings with yen symbols or thousands
    separators. Never raises.

    Args:
        value: Raw price value.

    Returns:
        Price in yen, or None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            price = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = value.strip()
        for noise in _PRICE_NOISE:
            cleaned = cleaned.replace(noise, "")
        try:
            price = float(cleaned.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(price) or price < 0:
        return None
    return price


def _placeholder_name(index: int) -> str:
    return f"アイテム{index}"


def _placeholder_category(index: int) -> str:
    return f"カテゴリ{index}"


# ---------------------------------------------------------------------------
# Item level
# ---------------------------------------------------------------------------


def _item_from_sequence(
    values: list[Any] | tuple[Any, ...],
    index: int,
) -> ShoppingItem:
    """Build an item from ``[name, quantity, price?, notes?]``."""
    padded = list(values[:4]) + [None] * (4 - min(len(values), 4))
    name, quantity, price, notes = padded
    return ShoppingItem(
        name=_coerce_text(name) or _placeholder_name(index),
        quantity=_coerce_text(quantity) or DEFAULT_QUANTITY,
        price=coerce_price(price),
        notes=_coerce_text(notes),
    )


def _item_from_mapping(data: dict[str, Any], index: int) -> ShoppingItem:
    """Build an item from an object, honouring ``item``/``amount`` aliases."""
    name = _coerce_text(data.get("name")) or _coerce_text(data.get("item"))
    quantity = _coerce_text(data.get("quantity")) or _coerce_text(data.get("amount"))
    return ShoppingItem(
        name=name or _placeholder_name(index),
        quantity=quantity or DEFAULT_QUANTITY,
        price=coerce_price(data.get("price")),
        notes=_coerce_text(data.get("notes")),
    )


def normalize_item(raw: object, index: int) -> ShoppingItem:
    """Normalize one item of any supported shape.

    Args:
        raw: Positional array, object, or bare scalar.
        index: 1-based position within its category, used for a
            placeholder name.

    Returns:
        Canonical ShoppingItem with non-empty name and quantity.
    """
    if _is_sequence(raw):
        return _item_from_sequence(raw, index)  # type: ignore[arg-type]
    if isinstance(raw, dict):
        return _item_from_mapping(raw, index)
    return ShoppingItem(
        name=_coerce_text(raw) or _placeholder_name(index),
        quantity=DEFAULT_QUANTITY,
    )


# ---------------------------------------------------------------------------
# Items level
# ---------------------------------------------------------------------------


def _item_values(raw: object) -> list[Any]:
    """Flatten a category's items value into an ordered list.

    Args:
        raw: Array, object (values used, keys dropped), None, or scalar.

    Returns:
        Raw item values in order.
    """
    if _is_sequence(raw):
        return list(raw)  # type: ignore[arg-type]
    if isinstance(raw, dict):
        return list(raw.values())
    if raw is None:
        return []
    logger.debug("Treating scalar items value as a single item: %r", raw)
    return [raw]


def normalize_items(raw: object) -> tuple[ShoppingItem, ...]:
    """Normalize a category's items value.

    Args:
        raw: Items value of any supported shape.

    Returns:
        Tuple of canonical items.
    """
    return tuple(
        normalize_item(value, index)
        for index, value in enumerate(_item_values(raw), start=1)
    )


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


def _categories_from_sequence(values: list[Any]) -> list[ShoppingCategory]:
    categories: list[ShoppingCategory] = []
    for index, entry in enumerate(values, start=1):
        if not isinstance(entry, dict):
            logger.debug("Skipping non-object category entry: %r", entry)
            continue
        label = _coerce_text(entry.get("category")) or _coerce_text(entry.get("name"))
        categories.append(
            ShoppingCategory(
                category=label or _placeholder_category(index),
                items=normalize_items(entry.get("items")),
            )
        )
    return categories


def _categories_from_mapping(data: dict[str, Any]) -> list[ShoppingCategory]:
    return [
        ShoppingCategory(
            category=_coerce_text(label) or _placeholder_category(index),
            items=normalize_items(items),
        )
        for index, (label, items) in enumerate(data.items(), start=1)
    ]


def normalize_data(data: object) -> ShoppingList:
    """Normalize already-parsed JSON into a ShoppingList.

    Args:
        data: Parsed JSON value.

    Returns:
        Canonical ShoppingList.

    Raises:
        ParseError: If the top level is neither an array nor an object.
    """
    if _is_sequence(data):
        categories = _categories_from_sequence(list(data))  # type: ignore[call-overload]
        return ShoppingList(tuple(categories))
    if isinstance(data, dict):
        return ShoppingList(tuple(_categories_from_mapping(data)))
    raise ParseError(
        f"Expected a JSON array or object at the top level, got {type(data).__name__}"
    )


def normalize(raw_text: str) -> ShoppingList:
    """Parse Claude's response text into a canonical ShoppingList.

    Markdown code fences around the JSON are tolerated.

    Args:
        raw_text: Raw response text.

    Returns:
        Canonical ShoppingList.

    Raises:
        ParseError: If the text is not valid JSON or has an unusable
            top-level shape.
    """
    try:
        data = json.loads(extract_json_text(raw_text))
    except (ValueError, RecursionError) as err:
        logger.warning("Failed to parse shopping list response")
        raise ParseError("Response is not valid JSON") from err
    return normalize_data(data)
