"""Meal nutrition endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from nutrivalor.api.models import AggregateRequest, IngredientUpdate
from nutrivalor.api.serializers import serialize_meal, serialize_meal_nutrients
from nutrivalor.services.meals import aggregate

if TYPE_CHECKING:
    from nutrivalor.containers import AppContainer

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("/aggregate")
async def aggregate_ingredients(payload: AggregateRequest) -> dict[str, object]:
    """Aggregate ingredients against foods supplied in the request."""
    foods = {food.id: food.to_domain() for food in payload.foods}
    ingredients = [item.to_domain() for item in payload.ingredients]
    return serialize_meal_nutrients(aggregate(ingredients, foods))


@router.get("/{meal_id}/nutrients")
async def meal_nutrients(meal_id: UUID, request: Request) -> dict[str, object]:
    """Return totals and per-ingredient breakdown for a stored meal."""
    container: AppContainer = request.app.state.container
    nutrients = container.meal_service.compute_meal_nutrients(meal_id)
    if nutrients is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_meal_nutrients(nutrients)


@router.patch("/{meal_id}/ingredients/{index}")
async def update_ingredient(
    meal_id: UUID, index: int, payload: IngredientUpdate, request: Request
) -> dict[str, object]:
    """Change an ingredient's food and/or quantity."""
    container: AppContainer = request.app.state.container
    service = container.meal_service
    meal = None
    if payload.food_id is not None:
        meal = service.replace_ingredient_food(meal_id, index, payload.food_id)
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    if payload.quantity is not None:
        meal = service.update_ingredient_quantity(meal_id, index, payload.quantity)
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"meal": serialize_meal(meal)}
