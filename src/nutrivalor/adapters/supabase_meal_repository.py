"""Supabase repository for meals."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrivalor.domain.meals import Meal, MealIngredient
from nutrivalor.domain.nutrition import NutrientResult
from nutrivalor.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals with embedded ingredients."""

    client: Client

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select("id, name, meal_type, ingredients")
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def update_meal(self, meal: Meal, totals: NutrientResult) -> Meal:
        """Persist ingredients and totals for a meal."""
        response = (
            self.client.table("meals")
            .update(
                {
                    "ingredients": [
                        _serialize_ingredient(item) for item in meal.ingredients
                    ],
                    "total_calories": totals.calories,
                    "total_protein": totals.protein,
                    "total_fat": totals.fat,
                    "total_carbs": totals.carbs,
                }
            )
            .eq("id", str(meal.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update meal")
        return _parse_meal(response.data[0])


def _serialize_ingredient(item: MealIngredient) -> dict[str, object]:
    return {
        "food_id": str(item.food_id) if item.food_id else None,
        "food_name": item.name,
        "quantity": item.quantity,
        "unit": item.unit_name,
        "calories": item.calories,
        "protein": item.protein,
        "fat": item.fat,
        "carbs": item.carbs,
    }


def _parse_meal(row: dict[str, object]) -> Meal:
    raw_ingredients = row.get("ingredients") or []
    ingredients = tuple(
        _parse_ingredient(item)
        for item in raw_ingredients
        if isinstance(item, dict)
    )
    return Meal(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        meal_type=row.get("meal_type") or None,
        ingredients=ingredients,
    )


def _parse_ingredient(item: dict[str, object]) -> MealIngredient:
    food_id = item.get("food_id")
    return MealIngredient(
        food_id=UUID(str(food_id)) if food_id else None,
        name=str(item.get("food_name") or item.get("name") or ""),
        quantity=float(item.get("quantity") or 0.0),
        unit_name=item.get("unit") or None,
        calories=float(item.get("calories") or 0.0),
        protein=float(item.get("protein") or 0.0),
        fat=float(item.get("fat") or 0.0),
        carbs=float(item.get("carbs") or 0.0),
    )
