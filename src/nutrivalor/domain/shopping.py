"""Domain models for the shopping list."""

from dataclasses import dataclass, field
from uuid import UUID

DEFAULT_BRAND = "any"
DEFAULT_CATEGORY = "general"
DEFAULT_UNIT = "each"


def _normalize(value: str | None, default: str) -> str:
    cleaned = (value or "").strip().lower()
    return cleaned or default


def identity_key(
    name: str,
    brand: str | None = None,
    category: str | None = None,
    unit: str | None = None,
) -> str:
    """Return the key under which list rows count as the same item."""
    return "_".join(
        (
            name.strip().lower(),
            _normalize(brand, DEFAULT_BRAND),
            _normalize(category, DEFAULT_CATEGORY),
            _normalize(unit, DEFAULT_UNIT),
        )
    )


@dataclass(frozen=True)
class ShoppingListEntry:
    """A shopping-list line.

    Macro fields are per one quantity unit of the entry.
    """

    id: UUID | None
    name: str
    quantity: int = 1
    brand: str | None = None
    category: str | None = None
    unit: str | None = None
    food_id: UUID | None = None
    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Shopping list entry requires a name")
        if not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("Shopping list quantity must be an integer >= 1")

    @property
    def identity_key(self) -> str:
        return identity_key(self.name, self.brand, self.category, self.unit)

    def as_row(self) -> dict[str, object]:
        """Return the store representation of the entry."""
        row: dict[str, object] = {
            "name": self.name,
            "quantity": self.quantity,
            "brand": self.brand or "",
            "category": self.category or "General",
            "unit": self.unit,
            "food_id": str(self.food_id) if self.food_id else None,
            "calories": self.calories,
            "protein": self.protein,
            "fat": self.fat,
            "carbs": self.carbs,
        }
        if self.id is not None:
            row["id"] = str(self.id)
        return row


@dataclass(frozen=True)
class ShoppingListTotals:
    """Quantity-weighted totals over a consolidated list."""

    total_items: int
    total_calories: float
    total_carbs: float
    total_fat: float
    total_protein: float


@dataclass(frozen=True)
class MacroPercentages:
    """Whole-percent share of each macro in the combined macro grams."""

    carbs: int
    fat: int
    protein: int


@dataclass(frozen=True)
class ShoppingListExpansion:
    """Entries produced from a meal, plus ingredients that could not be resolved."""

    entries: list[ShoppingListEntry] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ShoppingListView:
    """Consolidated list ready for display."""

    items: list[ShoppingListEntry]
    totals: ShoppingListTotals
    groups: list[tuple[str, list[ShoppingListEntry]]]
    percentages: MacroPercentages
    insights: list[str]
