"""Shopping list endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from nutrivalor.api.models import AddFoodRequest, QuantityUpdate
from nutrivalor.api.serializers import (
    serialize_entry,
    serialize_expansion,
    serialize_view,
)

if TYPE_CHECKING:
    from nutrivalor.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}/shopping-list", tags=["shopping-list"])


@router.get("")
async def get_shopping_list(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the consolidated shopping list with totals."""
    container: AppContainer = request.app.state.container
    view = container.shopping_list_service.get_list(user_id)
    return serialize_view(view)


@router.post("/foods")
async def add_food(
    user_id: UUID, payload: AddFoodRequest, request: Request
) -> dict[str, object]:
    """Add a catalog food to the shopping list."""
    container: AppContainer = request.app.state.container
    entry = container.shopping_list_service.add_food(
        user_id,
        payload.food_id,
        quantity=payload.quantity,
        unit_name=payload.unit_name,
    )
    return {"item": serialize_entry(entry)}


@router.post("/meals/{meal_id}")
async def add_meal(user_id: UUID, meal_id: UUID, request: Request) -> dict[str, object]:
    """Add a meal's ingredients to the shopping list."""
    container: AppContainer = request.app.state.container
    expansion = container.shopping_list_service.add_meal(user_id, meal_id)
    if expansion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_expansion(expansion)


@router.patch("/{entry_id}")
async def update_quantity(
    user_id: UUID, entry_id: UUID, payload: QuantityUpdate, request: Request
) -> dict[str, object]:
    """Set a row's quantity; quantities below 1 remove the row."""
    container: AppContainer = request.app.state.container
    entry = container.shopping_list_service.update_quantity(
        user_id, entry_id, payload.quantity
    )
    if entry is None and payload.quantity >= 1:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"item": serialize_entry(entry) if entry else None}


@router.delete("/{entry_id}")
async def remove_item(user_id: UUID, entry_id: UUID, request: Request) -> dict[str, str]:
    """Remove a row from the shopping list."""
    container: AppContainer = request.app.state.container
    container.shopping_list_service.remove_item(user_id, entry_id)
    return {"status": "ok"}


@router.delete("")
async def clear_list(user_id: UUID, request: Request) -> dict[str, str]:
    """Remove every row from the shopping list."""
    container: AppContainer = request.app.state.container
    container.shopping_list_service.clear(user_id)
    return {"status": "ok"}
