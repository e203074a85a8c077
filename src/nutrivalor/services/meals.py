"""Meal aggregation service."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nutrivalor.domain.errors import (
    FoodNotFoundError,
    InvalidQuantityError,
    InvalidUnitConversionError,
)
from nutrivalor.domain.foods import Food, is_gram_unit_name
from nutrivalor.domain.meals import (
    IngredientBreakdown,
    Meal,
    MealIngredient,
    MealNutrients,
)
from nutrivalor.domain.nutrition import NutrientResult, QuantityInput
from nutrivalor.services.nutrition import compute_nutrients

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Read access to the food catalog."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""

    def get_foods(self, food_ids: Iterable[UUID]) -> dict[UUID, Food]:
        """Return the foods found for the given ids, keyed by id."""


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal with its ingredients, if present."""

    def update_meal(self, meal: Meal, totals: NutrientResult) -> Meal:
        """Persist a meal's ingredients and totals and return it."""


def ingredient_request(
    food: Food, quantity: float, unit_name: str | None
) -> QuantityInput:
    """Build the calculator request for a quantity of a food."""
    if is_gram_unit_name(unit_name):
        return QuantityInput(macros=food.macros, input_mode="grams", quantity=quantity)
    return QuantityInput(
        macros=food.macros,
        input_mode="unit",
        quantity=quantity,
        unit=food.find_unit(unit_name),
    )


def aggregate(
    ingredients: Iterable[MealIngredient], foods: Mapping[UUID, Food]
) -> MealNutrients:
    """Sum ingredient nutrients into meal totals.

    Ingredients whose food is not in ``foods`` stay in the breakdown, marked
    missing, and contribute nothing to the totals.
    """
    breakdown: list[IngredientBreakdown] = []
    totals = NutrientResult.zero()
    for ingredient in ingredients:
        food = foods.get(ingredient.food_id) if ingredient.food_id else None
        if food is None:
            _logger.warning(
                "Meal ingredient %r references a missing food: %s",
                ingredient.name,
                ingredient.food_id,
            )
            breakdown.append(
                IngredientBreakdown(
                    name=ingredient.name,
                    food_id=ingredient.food_id,
                    nutrients=NutrientResult.zero(),
                    missing=True,
                )
            )
            continue
        result = compute_nutrients(
            ingredient_request(food, ingredient.quantity, ingredient.unit_name)
        )
        breakdown.append(
            IngredientBreakdown(
                name=ingredient.name,
                food_id=ingredient.food_id,
                nutrients=result,
            )
        )
        totals = _add(totals, result)
    return MealNutrients(totals=totals, breakdown=breakdown)


def recompute_ingredient(
    ingredient: MealIngredient, food: Food, quantity: float | None = None
) -> MealIngredient:
    """Return the ingredient with macros derived from ``food``."""
    resolved_quantity = ingredient.quantity if quantity is None else quantity
    result = compute_nutrients(
        ingredient_request(food, resolved_quantity, ingredient.unit_name)
    )
    return replace(
        ingredient,
        food_id=food.id,
        name=food.name,
        quantity=resolved_quantity,
        calories=result.calories,
        protein=result.protein,
        fat=result.fat,
        carbs=result.carbs,
    )


@dataclass
class MealService:
    """Service that keeps meal macros in step with the food catalog."""

    meal_repository: MealRepository
    food_repository: FoodRepository

    def compute_meal_nutrients(self, meal_id: UUID) -> MealNutrients | None:
        """Return totals and breakdown for a stored meal."""
        meal = self.meal_repository.get_meal(meal_id)
        if meal is None:
            return None
        return aggregate(meal.ingredients, self._foods_for(meal.ingredients))

    def update_ingredient_quantity(
        self, meal_id: UUID, index: int, quantity: float
    ) -> Meal | None:
        """Change an ingredient's quantity and refresh derived macros."""
        if quantity < 0:
            raise InvalidQuantityError("Quantity cannot be negative")
        meal = self.meal_repository.get_meal(meal_id)
        if meal is None or not 0 <= index < len(meal.ingredients):
            return None
        ingredient = meal.ingredients[index]
        food = (
            self.food_repository.get_food(ingredient.food_id)
            if ingredient.food_id
            else None
        )
        if food is None:
            updated = replace(ingredient, quantity=quantity)
        else:
            updated = recompute_ingredient(ingredient, food, quantity)
        return self._save(meal, index, updated)

    def replace_ingredient_food(
        self, meal_id: UUID, index: int, food_id: UUID
    ) -> Meal | None:
        """Point an ingredient at another food and refresh derived macros."""
        meal = self.meal_repository.get_meal(meal_id)
        if meal is None or not 0 <= index < len(meal.ingredients):
            return None
        food = self.food_repository.get_food(food_id)
        if food is None:
            raise FoodNotFoundError(food_id)
        ingredient = meal.ingredients[index]
        unit_name = _compatible_unit_name(food, ingredient.unit_name)
        updated = recompute_ingredient(replace(ingredient, unit_name=unit_name), food)
        return self._save(meal, index, updated)

    def _save(self, meal: Meal, index: int, ingredient: MealIngredient) -> Meal:
        ingredients = list(meal.ingredients)
        ingredients[index] = ingredient
        updated = replace(meal, ingredients=tuple(ingredients))
        nutrients = aggregate(updated.ingredients, self._foods_for(ingredients))
        return self.meal_repository.update_meal(updated, nutrients.totals)

    def _foods_for(self, ingredients: Iterable[MealIngredient]) -> dict[UUID, Food]:
        food_ids = {item.food_id for item in ingredients if item.food_id}
        if not food_ids:
            return {}
        return self.food_repository.get_foods(food_ids)


def _compatible_unit_name(food: Food, unit_name: str | None) -> str | None:
    """Keep the unit when the food supports it, else use the food's default."""
    if is_gram_unit_name(unit_name):
        return unit_name
    try:
        food.find_unit(unit_name)
    except InvalidUnitConversionError:
        default = food.default_unit
        return default.name if default else None
    return unit_name


def _add(total: NutrientResult, result: NutrientResult) -> NutrientResult:
    return NutrientResult(
        total_grams=(total.total_grams or 0.0) + (result.total_grams or 0.0),
        calories=total.calories + result.calories,
        protein=total.protein + result.protein,
        fat=total.fat + result.fat,
        carbs=total.carbs + result.carbs,
    )
