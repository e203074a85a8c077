"""Shopping list consolidation and totals."""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nutrivalor.domain.errors import FoodNotFoundError, InvalidQuantityError
from nutrivalor.domain.foods import Food, is_gram_unit_name
from nutrivalor.domain.meals import MealIngredient
from nutrivalor.domain.nutrition import QuantityInput, ServingUnit
from nutrivalor.domain.shopping import (
    MacroPercentages,
    ShoppingListEntry,
    ShoppingListExpansion,
    ShoppingListTotals,
    ShoppingListView,
)
from nutrivalor.services.meals import FoodRepository, MealRepository
from nutrivalor.services.nutrition import compute_nutrients

HUNDRED_GRAMS_UNIT = "100g"
SUNDRIES_CATEGORY = "SUNDRIES"
_DEFAULT_GROUP = "General"
HIGH_CARBS_PERCENT, LOW_CARBS_PERCENT = 60, 30
HIGH_PROTEIN_PERCENT, LOW_PROTEIN_PERCENT = 30, 15
HIGH_FAT_PERCENT, LOW_FAT_PERCENT = 40, 15
_LEADING_INT = re.compile(r"\s*[+-]?\d+")

_logger = logging.getLogger(__name__)

ShoppingListRow = ShoppingListEntry | Mapping[str, object]


class ShoppingListRepository(Protocol):
    """Persistence interface for shopping list rows."""

    def list_items(self, user_id: UUID) -> list[dict[str, object]]:
        """Return raw list rows in creation order."""

    def find_item(
        self, user_id: UUID, food_id: UUID, unit: str | None
    ) -> ShoppingListEntry | None:
        """Return the row holding a food in a unit, if present."""

    def create_item(self, user_id: UUID, entry: ShoppingListEntry) -> ShoppingListEntry:
        """Insert a row and return it with its id."""

    def update_quantity(
        self, user_id: UUID, entry_id: UUID, quantity: int
    ) -> ShoppingListEntry | None:
        """Set a row's quantity and return it, if present."""

    def delete_item(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a row."""

    def clear(self, user_id: UUID) -> None:
        """Delete every row of a user's list."""


def parse_quantity(value: object) -> int:
    """Parse a stored list quantity as an integer, defaulting to 1."""
    parsed = 0
    if isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        parsed = int(match.group()) if match else 0
    return parsed if parsed >= 1 else 1


def consolidate(entries: Iterable[ShoppingListRow]) -> list[ShoppingListEntry]:
    """Merge rows describing the same item, summing their quantities.

    The first row seen for an identity key supplies every field except the
    quantity. Rows without a name are skipped. Output keeps first-seen order.
    """
    consolidated: dict[str, ShoppingListEntry] = {}
    for row in entries:
        entry = row if isinstance(row, ShoppingListEntry) else entry_from_row(row)
        if entry is None:
            _logger.debug("Skipping shopping list row without a name: %s", row)
            continue
        key = entry.identity_key
        existing = consolidated.get(key)
        if existing is None:
            consolidated[key] = entry
            continue
        total = existing.quantity + entry.quantity
        _logger.debug(
            "Consolidated %s: %s + %s = %s",
            existing.name,
            existing.quantity,
            entry.quantity,
            total,
        )
        consolidated[key] = replace(existing, quantity=total)
    return list(consolidated.values())


def calculate_totals(items: Iterable[ShoppingListEntry]) -> ShoppingListTotals:
    """Return quantity-weighted totals for consolidated items."""
    total_items = 0
    calories = carbs = fat = protein = 0.0
    for item in items:
        total_items += item.quantity
        calories += item.calories * item.quantity
        carbs += item.carbs * item.quantity
        fat += item.fat * item.quantity
        protein += item.protein * item.quantity
    return ShoppingListTotals(
        total_items=total_items,
        total_calories=calories,
        total_carbs=carbs,
        total_fat=fat,
        total_protein=protein,
    )


def macro_percentages(totals: ShoppingListTotals) -> MacroPercentages:
    """Return each macro's rounded share of carbs + fat + protein grams."""
    combined = totals.total_carbs + totals.total_fat + totals.total_protein
    if combined <= 0:
        return MacroPercentages(carbs=0, fat=0, protein=0)
    return MacroPercentages(
        carbs=_percent(totals.total_carbs, combined),
        fat=_percent(totals.total_fat, combined),
        protein=_percent(totals.total_protein, combined),
    )


def nutrition_insights(percentages: MacroPercentages) -> list[str]:
    """Describe a macro split against fixed high/low thresholds."""
    insights: list[str] = []
    if percentages.carbs > HIGH_CARBS_PERCENT:
        insights.append(
            "High carbohydrate intake - consider balancing with more protein "
            "and healthy fats."
        )
    elif percentages.carbs < LOW_CARBS_PERCENT:
        insights.append(
            "Low carbohydrate intake - you might be following a low-carb diet."
        )
    if percentages.protein > HIGH_PROTEIN_PERCENT:
        insights.append(
            "High protein intake - great for muscle building and satiety."
        )
    elif percentages.protein < LOW_PROTEIN_PERCENT:
        insights.append("Low protein intake - consider adding more protein sources.")
    if percentages.fat > HIGH_FAT_PERCENT:
        insights.append("High fat intake - make sure these are healthy fats.")
    elif percentages.fat < LOW_FAT_PERCENT:
        insights.append(
            "Low fat intake - healthy fats are important for nutrient absorption."
        )
    if not insights:
        insights.append("Your macro distribution looks balanced!")
    return insights


def group_by_category(
    items: Iterable[ShoppingListEntry],
) -> list[tuple[str, list[ShoppingListEntry]]]:
    """Group items for display, categories alphabetical with SUNDRIES last."""
    groups: dict[str, list[ShoppingListEntry]] = {}
    for item in items:
        label = item.category or item.brand or _DEFAULT_GROUP
        groups.setdefault(label, []).append(item)
    order = sorted(
        groups,
        key=lambda label: (label == SUNDRIES_CATEGORY, label.casefold(), label),
    )
    return [(label, groups[label]) for label in order]


def entry_from_food(
    food: Food, unit_name: str | None = None, quantity: int = 1
) -> ShoppingListEntry:
    """Create a list entry whose macros are per one unit of the entry.

    Without ``unit_name`` the food's default serving unit is used. Foods
    bought by weight (no serving unit, or an explicit gram unit) are listed
    in 100 g units carrying the per-100g profile.
    """
    if quantity < 1:
        raise InvalidQuantityError("Shopping list quantity must be at least 1")
    unit: ServingUnit | None
    if unit_name is None:
        unit = food.default_unit
    elif _is_bulk_unit_name(unit_name):
        unit = None
    else:
        unit = food.find_unit(unit_name)

    if unit is None:
        label = HUNDRED_GRAMS_UNIT
        per_unit = compute_nutrients(
            QuantityInput(macros=food.macros, input_mode="grams", quantity=100)
        )
    else:
        label = unit.name
        per_unit = compute_nutrients(
            QuantityInput(macros=food.macros, input_mode="unit", quantity=1, unit=unit)
        )
    return ShoppingListEntry(
        id=None,
        name=food.name,
        quantity=quantity,
        brand=food.brand,
        category=food.category,
        unit=label,
        food_id=food.id,
        calories=per_unit.calories,
        protein=per_unit.protein,
        fat=per_unit.fat,
        carbs=per_unit.carbs,
    )


def entries_from_meal(
    ingredients: Iterable[MealIngredient], foods: Mapping[UUID, Food]
) -> ShoppingListExpansion:
    """Expand meal ingredients into whole-unit shopping list entries."""
    entries: list[ShoppingListEntry] = []
    missing: list[str] = []
    for ingredient in ingredients:
        food = foods.get(ingredient.food_id) if ingredient.food_id else None
        if food is None:
            missing.append(ingredient.name)
            continue
        if ingredient.quantity < 0:
            raise InvalidQuantityError("Quantity cannot be negative")
        if is_gram_unit_name(ingredient.unit_name):
            count = math.ceil(ingredient.quantity / 100)
            entry = entry_from_food(food, HUNDRED_GRAMS_UNIT, max(count, 1))
        else:
            count = math.ceil(ingredient.quantity)
            entry = entry_from_food(food, ingredient.unit_name, max(count, 1))
        entries.append(entry)
    return ShoppingListExpansion(entries=entries, missing=missing)


@dataclass
class ShoppingListService:
    """Application service for a user's shopping list."""

    repository: ShoppingListRepository
    food_repository: FoodRepository
    meal_repository: MealRepository
    debug: bool = False

    def get_list(self, user_id: UUID) -> ShoppingListView:
        """Return the consolidated list with totals and display groups."""
        rows = self.repository.list_items(user_id)
        items = consolidate(rows)
        if self.debug:
            _logger.info(
                "Shopping list consolidated: rows=%s items=%s", len(rows), len(items)
            )
        totals = calculate_totals(items)
        percentages = macro_percentages(totals)
        return ShoppingListView(
            items=items,
            totals=totals,
            groups=group_by_category(items),
            percentages=percentages,
            insights=nutrition_insights(percentages),
        )

    def add_food(
        self,
        user_id: UUID,
        food_id: UUID,
        quantity: int = 1,
        unit_name: str | None = None,
    ) -> ShoppingListEntry:
        """Add a catalog food, increasing an existing row for it if present."""
        if quantity < 1:
            raise InvalidQuantityError("Shopping list quantity must be at least 1")
        food = self.food_repository.get_food(food_id)
        if food is None:
            raise FoodNotFoundError(food_id)
        return self._add_entry(user_id, entry_from_food(food, unit_name, quantity))

    def add_meal(self, user_id: UUID, meal_id: UUID) -> ShoppingListExpansion | None:
        """Add every resolvable ingredient of a meal to the list."""
        meal = self.meal_repository.get_meal(meal_id)
        if meal is None:
            return None
        food_ids = {item.food_id for item in meal.ingredients if item.food_id}
        foods = self.food_repository.get_foods(food_ids) if food_ids else {}
        expansion = entries_from_meal(meal.ingredients, foods)
        if expansion.missing:
            _logger.warning(
                "Meal %s has ingredients with missing foods: %s",
                meal_id,
                ", ".join(expansion.missing),
            )
        stored = [self._add_entry(user_id, entry) for entry in expansion.entries]
        return ShoppingListExpansion(entries=stored, missing=expansion.missing)

    def update_quantity(
        self, user_id: UUID, entry_id: UUID, quantity: int
    ) -> ShoppingListEntry | None:
        """Set a consolidated item's quantity; anything below 1 removes it.

        Other stored rows with the same identity key are folded into
        ``entry_id`` so the list reads back with exactly ``quantity``.
        """
        if quantity < 1:
            self.remove_item(user_id, entry_id)
            return None
        duplicates = self._duplicate_ids(user_id, entry_id)
        updated = self.repository.update_quantity(user_id, entry_id, quantity)
        if updated is not None:
            for duplicate_id in duplicates:
                self.repository.delete_item(user_id, duplicate_id)
        return updated

    def remove_item(self, user_id: UUID, entry_id: UUID) -> None:
        """Remove a consolidated item, including rows merged into it."""
        for duplicate_id in self._duplicate_ids(user_id, entry_id):
            self.repository.delete_item(user_id, duplicate_id)
        self.repository.delete_item(user_id, entry_id)

    def clear(self, user_id: UUID) -> None:
        """Remove every row from the list."""
        self.repository.clear(user_id)

    def _duplicate_ids(self, user_id: UUID, entry_id: UUID) -> list[UUID]:
        entries = [
            entry
            for entry in map(entry_from_row, self.repository.list_items(user_id))
            if entry is not None and entry.id is not None
        ]
        target = next((entry for entry in entries if entry.id == entry_id), None)
        if target is None:
            return []
        return [
            entry.id
            for entry in entries
            if entry.id != entry_id and entry.identity_key == target.identity_key
        ]

    def _add_entry(self, user_id: UUID, entry: ShoppingListEntry) -> ShoppingListEntry:
        existing = (
            self.repository.find_item(user_id, entry.food_id, entry.unit)
            if entry.food_id
            else None
        )
        if existing is not None and existing.id is not None:
            total = existing.quantity + entry.quantity
            updated = self.repository.update_quantity(user_id, existing.id, total)
            if updated is not None:
                if self.debug:
                    _logger.info(
                        "Shopping list %s quantity %s -> %s",
                        entry.name,
                        existing.quantity,
                        total,
                    )
                return updated
        return self.repository.create_item(user_id, entry)


def entry_from_row(row: Mapping[str, object]) -> ShoppingListEntry | None:
    """Parse a loosely typed store row; rows without a name yield None."""
    name = row.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return ShoppingListEntry(
        id=_parse_uuid(row.get("id")),
        name=name,
        quantity=parse_quantity(row.get("quantity")),
        brand=_optional_str(row.get("brand")),
        category=_optional_str(row.get("category")),
        unit=_optional_str(row.get("unit")),
        food_id=_parse_uuid(row.get("food_id")),
        calories=_to_float(row.get("calories")),
        protein=_to_float(row.get("protein")),
        fat=_to_float(row.get("fat")),
        carbs=_to_float(row.get("carbs")),
    )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _parse_uuid(value: object) -> UUID | None:
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value)
        except ValueError:
            return None
    return None


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _percent(part: float, whole: float) -> int:
    return math.floor(part / whole * 100 + 0.5)


def _is_bulk_unit_name(unit_name: str) -> bool:
    return (
        is_gram_unit_name(unit_name)
        or unit_name.strip().lower() == HUNDRED_GRAMS_UNIT
    )
