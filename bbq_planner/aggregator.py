"""Totals and text/JSON renderings of a normalized shopping list.

Everything here is recomputed from the list on each call; nothing is
cached on the list itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bbq_planner.models import ShoppingItem, ShoppingList

LIST_TITLE = "【BBQ買い出しリスト】"


def format_amount(value: float) -> str:
    """Format a yen amount with thousands separators.

    Whole amounts print without a decimal part; fractional amounts keep
    up to three decimals.

    Args:
        value: Amount in yen.

    Returns:
        Formatted amount, e.g. ``"12,300"`` or ``"1,234.5"``.
    """
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def total(shopping_list: ShoppingList) -> float:
    """Sum every item's price, counting a missing price as zero.

    Args:
        shopping_list: Normalized shopping list.

    Returns:
        Estimated total in yen.
    """
    return sum(
        (item.price or 0.0 for _, item in shopping_list.iter_items()),
        0.0,
    )


def _format_item_line(item: ShoppingItem) -> str:
    line = f"- {item.name} ({item.quantity})"
    if item.price is not None:
        line += f" [約{format_amount(item.price)}円]"
    if item.notes:
        line += f" ({item.notes})"
    return line


def to_plain_text(shopping_list: ShoppingList, total_price: float) -> str:
    """Render the list as the plain text used for copy and paste.

    A two-line header with the total, then one ``▼ category`` block per
    category with one ``- name (quantity)`` line per item, blocks
    separated by a blank line.

    Args:
        shopping_list: Normalized shopping list.
        total_price: Total to show in the header, usually ``total(list)``.

    Returns:
        Plain-text shopping list.
    """
    header = f"{LIST_TITLE}\n予想合計金額: 約{format_amount(total_price)}円\n\n"
    blocks = [
        "\n".join(
            [f"▼ {category.category}"]
            + [_format_item_line(item) for item in category.items]
        )
        for category in shopping_list
    ]
    return header + "\n\n".join(blocks)


def to_dict(shopping_list: ShoppingList) -> dict[str, Any]:
    """Build the JSON-ready payload for a shopping list.

    Args:
        shopping_list: Normalized shopping list.

    Returns:
        Dict with ``shopping_list``, ``total`` and ``text`` keys.
    """
    list_total = total(shopping_list)
    return {
        "shopping_list": shopping_list.model_dump(mode="json", exclude_none=True),
        "total": list_total,
        "text": to_plain_text(shopping_list, list_total),
    }
