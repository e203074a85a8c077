"""Pydantic models for API request payloads."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from nutrivalor.domain.foods import Food
from nutrivalor.domain.meals import MealIngredient
from nutrivalor.domain.nutrition import MacroProfile, parse_unit
from nutrivalor.domain.targets import BodyProfile


class MacroPayload(BaseModel):
    """Macro profile payload."""

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    fat: float = Field(ge=0)
    carbs: float = Field(ge=0)

    def to_domain(self) -> MacroProfile:
        return MacroProfile(
            calories=self.calories,
            protein=self.protein,
            fat=self.fat,
            carbs=self.carbs,
        )


class NutrientRequest(BaseModel):
    """Single nutrient calculation request."""

    macros: MacroPayload
    input_mode: Literal["grams", "unit"] = "grams"
    quantity: float
    unit_name: str | None = None
    grams_per_unit: float | None = None


class UnitPayload(BaseModel):
    """Serving unit payload."""

    name: str
    grams_per_unit: float | None = None


class FoodPayload(BaseModel):
    """Food catalog entry supplied inline."""

    id: UUID
    name: str
    macros: MacroPayload
    brand: str | None = None
    category: str | None = None
    units: list[UnitPayload] = Field(default_factory=list)

    def to_domain(self) -> Food:
        return Food(
            id=self.id,
            name=self.name,
            macros=self.macros.to_domain(),
            brand=self.brand,
            category=self.category,
            units=tuple(
                parse_unit(unit.name, unit.grams_per_unit) for unit in self.units
            ),
        )


class IngredientPayload(BaseModel):
    """Meal ingredient payload."""

    food_id: UUID | None = None
    name: str
    quantity: float
    unit_name: str | None = None

    def to_domain(self) -> MealIngredient:
        return MealIngredient(
            food_id=self.food_id,
            name=self.name,
            quantity=self.quantity,
            unit_name=self.unit_name,
        )


class AggregateRequest(BaseModel):
    """Ingredients to aggregate together with the foods they reference."""

    foods: list[FoodPayload] = Field(default_factory=list)
    ingredients: list[IngredientPayload]


class IngredientUpdate(BaseModel):
    """Change to a stored meal ingredient."""

    quantity: float | None = None
    food_id: UUID | None = None


class AddFoodRequest(BaseModel):
    """Add a catalog food to the shopping list."""

    food_id: UUID
    quantity: int = 1
    unit_name: str | None = None


class QuantityUpdate(BaseModel):
    """New quantity for a shopping list row."""

    quantity: int


class BodyProfilePayload(BaseModel):
    """Body profile for macro target estimation."""

    age: float
    sex: Literal["male", "female"] = "male"
    weight_kg: float
    height_cm: float
    activity: float = 1.55
    calorie_adjustment: float = 0.0
    protein_per_kg: float = 2.2
    fat_per_kg: float = 0.8

    def to_domain(self) -> BodyProfile:
        return BodyProfile(**self.model_dump())
