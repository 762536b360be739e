"""Pydantic models for BBQ Planner.

This is the shared type system: the party preferences collected from the
user and the categorized shopping list produced from Claude's answer.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, RootModel, field_validator

# ---------------------------------------------------------------------------
# Choice catalogues offered by the planner form
# ---------------------------------------------------------------------------

MEAT_OPTIONS: tuple[str, ...] = ("牛肉", "豚肉", "鶏肉", "ホルモン", "ラム肉")
SEAFOOD_OPTIONS: tuple[str, ...] = ("エビ", "イカ", "ホタテ", "魚介類盛り合わせ")

DEFAULT_QUANTITY = "適量"


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


class Preferences(BaseModel):
    """Party size, budget and food constraints for one BBQ."""

    model_config = ConfigDict(extra="forbid")

    adults: int = 2
    children: int = 0
    budget: float = 10000
    meat_choices: list[str] = []
    seafood_choices: list[str] = []
    allergy_text: str = ""
    other_text: str = ""

    @field_validator("adults", "children", "budget")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        """Reject negative counts and budgets.

        Args:
            v: Parsed numeric value.

        Returns:
            The value unchanged.

        Raises:
            ValueError: If the value is negative.
        """
        if v < 0:
            raise ValueError("must be non-negative")
        return v

    @field_validator("meat_choices", "seafood_choices", mode="before")
    @classmethod
    def _dedupe_choices(cls, v: object) -> list[str]:
        """Treat choices as a set while keeping first-seen order.

        Args:
            v: Raw value (list, tuple, set, comma string, or None).

        Returns:
            Unique, stripped, non-blank choice strings.
        """
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (set, frozenset)):
            v = sorted(v)
        if not isinstance(v, (list, tuple)):
            raise ValueError("must be a list of strings")
        seen: list[str] = []
        for raw in v:
            choice = str(raw).strip()
            if choice and choice not in seen:
                seen.append(choice)
        return seen

    @field_validator("allergy_text", "other_text", mode="before")
    @classmethod
    def _strip_text(cls, v: object) -> str:
        """Normalize free text, mapping None to an empty string.

        Args:
            v: Raw value.

        Returns:
            Stripped string.
        """
        if v is None:
            return ""
        return str(v).strip()

    @property
    def guest_count(self) -> int:
        """Total number of guests."""
        return self.adults + self.children


# ---------------------------------------------------------------------------
# Shopping list
# ---------------------------------------------------------------------------


class ShoppingItem(BaseModel):
    """A single thing to buy."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: str = DEFAULT_QUANTITY
    price: float | None = None
    notes: str | None = None

    @field_validator("name", "quantity")
    @classmethod
    def _require_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("price")
    @classmethod
    def _price_non_negative(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("price must be non-negative")
        return v


class ShoppingCategory(BaseModel):
    """A labelled group of items, e.g. お肉 or 飲み物."""

    model_config = ConfigDict(frozen=True)

    category: str
    items: tuple[ShoppingItem, ...] = ()

    @field_validator("category")
    @classmethod
    def _require_label(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("category label must not be blank")
        return v


class ShoppingList(RootModel[tuple[ShoppingCategory, ...]]):
    """Ordered categories making up one generated shopping list."""

    model_config = ConfigDict(frozen=True)

    root: tuple[ShoppingCategory, ...] = ()

    def __iter__(self) -> Iterator[ShoppingCategory]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> ShoppingCategory:
        return self.root[index]

    def iter_items(self) -> Iterator[tuple[ShoppingCategory, ShoppingItem]]:
        """Yield every (category, item) pair in display order.

        Returns:
            Iterator over category/item pairs.
        """
        for category in self.root:
            for item in category.items:
                yield category, item
