"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutrivalor.adapters.supabase_food_repository import SupabaseFoodRepository
from nutrivalor.adapters.supabase_meal_repository import SupabaseMealRepository
from nutrivalor.adapters.supabase_shopping_list_repository import (
    SupabaseShoppingListRepository,
)
from nutrivalor.config import Settings
from nutrivalor.services.meals import MealService
from nutrivalor.services.shopping import ShoppingListService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_service: MealService
    shopping_list_service: ShoppingListService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    shopping_list_repository = SupabaseShoppingListRepository(supabase_client)
    meal_service = MealService(
        meal_repository=meal_repository,
        food_repository=food_repository,
    )
    shopping_list_service = ShoppingListService(
        repository=shopping_list_repository,
        food_repository=food_repository,
        meal_repository=meal_repository,
        debug=resolved_settings.debug,
    )
    return AppContainer(
        settings=resolved_settings,
        meal_service=meal_service,
        shopping_list_service=shopping_list_service,
    )
