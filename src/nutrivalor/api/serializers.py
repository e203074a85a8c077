"""JSON serialization of domain results."""

from dataclasses import asdict

from nutrivalor.domain.meals import Meal, MealNutrients
from nutrivalor.domain.nutrition import NutrientResult
from nutrivalor.domain.shopping import (
    ShoppingListEntry,
    ShoppingListExpansion,
    ShoppingListView,
)


def serialize_result(result: NutrientResult) -> dict[str, object]:
    return asdict(result)


def serialize_meal_nutrients(nutrients: MealNutrients) -> dict[str, object]:
    return {
        "totals": serialize_result(nutrients.totals),
        "breakdown": [
            {
                "name": entry.name,
                "food_id": str(entry.food_id) if entry.food_id else None,
                "missing": entry.missing,
                "nutrients": serialize_result(entry.nutrients),
            }
            for entry in nutrients.breakdown
        ],
        "missing": nutrients.missing,
    }


def serialize_meal(meal: Meal) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "meal_type": meal.meal_type,
        "ingredients": [
            {
                "food_id": str(item.food_id) if item.food_id else None,
                "name": item.name,
                "quantity": item.quantity,
                "unit_name": item.unit_name,
                "calories": item.calories,
                "protein": item.protein,
                "fat": item.fat,
                "carbs": item.carbs,
            }
            for item in meal.ingredients
        ],
    }


def serialize_entry(entry: ShoppingListEntry) -> dict[str, object]:
    return {
        "id": str(entry.id) if entry.id else None,
        "name": entry.name,
        "quantity": entry.quantity,
        "brand": entry.brand,
        "category": entry.category,
        "unit": entry.unit,
        "food_id": str(entry.food_id) if entry.food_id else None,
        "calories": entry.calories,
        "protein": entry.protein,
        "fat": entry.fat,
        "carbs": entry.carbs,
    }


def serialize_view(view: ShoppingListView) -> dict[str, object]:
    return {
        "items": [serialize_entry(item) for item in view.items],
        "totals": asdict(view.totals),
        "groups": [
            {"category": label, "items": [serialize_entry(item) for item in items]}
            for label, items in view.groups
        ],
        "percentages": asdict(view.percentages),
        "insights": view.insights,
    }


def serialize_expansion(expansion: ShoppingListExpansion) -> dict[str, object]:
    return {
        "items": [serialize_entry(item) for item in expansion.entries],
        "missing": expansion.missing,
    }
