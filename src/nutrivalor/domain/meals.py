"""Domain models for meals and their ingredients."""

from dataclasses import dataclass, field
from uuid import UUID

from nutrivalor.domain.nutrition import NutrientResult


@dataclass(frozen=True)
class MealIngredient:
    """An ingredient line of a meal.

    Macro fields are derived from the referenced food and must be recomputed
    when the food or the quantity changes.
    """

    food_id: UUID | None
    name: str
    quantity: float
    unit_name: str | None = None
    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0


@dataclass(frozen=True)
class Meal:
    """A named meal composed of ingredients."""

    id: UUID
    name: str
    ingredients: tuple[MealIngredient, ...] = ()
    meal_type: str | None = None


@dataclass(frozen=True)
class IngredientBreakdown:
    """Computed contribution of one ingredient."""

    name: str
    food_id: UUID | None
    nutrients: NutrientResult
    missing: bool = False


@dataclass(frozen=True)
class MealNutrients:
    """Meal totals with a per-ingredient breakdown in input order."""

    totals: NutrientResult
    breakdown: list[IngredientBreakdown] = field(default_factory=list)

    @property
    def missing(self) -> list[str]:
        """Names of ingredients whose food could not be resolved."""
        return [entry.name for entry in self.breakdown if entry.missing]
