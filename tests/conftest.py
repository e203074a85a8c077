"""Shared test fixtures."""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

import pytest

from nutrivalor.config import Settings
from nutrivalor.containers import AppContainer
from nutrivalor.domain.foods import Food
from nutrivalor.domain.meals import Meal
from nutrivalor.domain.nutrition import (
    DiscreteUnit,
    MacroProfile,
    NutrientResult,
    WeightUnit,
)
from nutrivalor.domain.shopping import ShoppingListEntry
from nutrivalor.services.meals import FoodRepository, MealRepository, MealService
from nutrivalor.services.shopping import (
    ShoppingListRepository,
    ShoppingListService,
    entry_from_row,
)


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food catalog for tests."""

    foods: dict[UUID, Food] = field(default_factory=dict)

    def add(self, food: Food) -> Food:
        self.foods[food.id] = food
        return food

    def get_food(self, food_id: UUID) -> Food | None:
        return self.foods.get(food_id)

    def get_foods(self, food_ids: Iterable[UUID]) -> dict[UUID, Food]:
        return {
            food_id: self.foods[food_id] for food_id in food_ids if food_id in self.foods
        }


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, Meal] = field(default_factory=dict)
    totals: dict[UUID, NutrientResult] = field(default_factory=dict)

    def add(self, meal: Meal) -> Meal:
        self.meals[meal.id] = meal
        return meal

    def get_meal(self, meal_id: UUID) -> Meal | None:
        return self.meals.get(meal_id)

    def update_meal(self, meal: Meal, totals: NutrientResult) -> Meal:
        self.meals[meal.id] = meal
        self.totals[meal.id] = totals
        return meal


@dataclass
class InMemoryShoppingListRepository(ShoppingListRepository):
    """In-memory shopping list keyed by user."""

    rows: dict[UUID, list[dict[str, object]]] = field(default_factory=dict)

    def seed(self, user_id: UUID, row: dict[str, object]) -> None:
        self.rows.setdefault(user_id, []).append(dict(row))

    def list_items(self, user_id: UUID) -> list[dict[str, object]]:
        return [dict(row) for row in self.rows.get(user_id, [])]

    def find_item(
        self, user_id: UUID, food_id: UUID, unit: str | None
    ) -> ShoppingListEntry | None:
        for row in self.rows.get(user_id, []):
            if row.get("food_id") != str(food_id):
                continue
            if unit is not None and row.get("unit") != unit:
                continue
            return entry_from_row(row)
        return None

    def create_item(self, user_id: UUID, entry: ShoppingListEntry) -> ShoppingListEntry:
        created = replace(entry, id=uuid4())
        self.rows.setdefault(user_id, []).append(created.as_row())
        return created

    def update_quantity(
        self, user_id: UUID, entry_id: UUID, quantity: int
    ) -> ShoppingListEntry | None:
        for row in self.rows.get(user_id, []):
            if row.get("id") == str(entry_id):
                row["quantity"] = quantity
                return entry_from_row(row)
        return None

    def delete_item(self, user_id: UUID, entry_id: UUID) -> None:
        self.rows[user_id] = [
            row for row in self.rows.get(user_id, []) if row.get("id") != str(entry_id)
        ]

    def clear(self, user_id: UUID) -> None:
        self.rows.pop(user_id, None)


def make_bread() -> Food:
    return Food(
        id=uuid4(),
        name="Bread",
        brand="Baker",
        category="Bakery",
        macros=MacroProfile(calories=250, protein=9, fat=3, carbs=49),
        units=(WeightUnit(name="slice", grams_per_unit=40),),
    )


def make_egg() -> Food:
    return Food(
        id=uuid4(),
        name="Egg",
        category="Dairy",
        macros=MacroProfile(calories=70, protein=6, fat=5, carbs=0.5),
        units=(DiscreteUnit(),),
    )


def make_rice() -> Food:
    return Food(
        id=uuid4(),
        name="Rice",
        category="Grains",
        macros=MacroProfile(calories=130, protein=2.7, fat=0.3, carbs=28),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def shopping_list_repository() -> InMemoryShoppingListRepository:
    return InMemoryShoppingListRepository()


@pytest.fixture
def container(
    settings: Settings,
    food_repository: InMemoryFoodRepository,
    meal_repository: InMemoryMealRepository,
    shopping_list_repository: InMemoryShoppingListRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        meal_service=MealService(
            meal_repository=meal_repository,
            food_repository=food_repository,
        ),
        shopping_list_service=ShoppingListService(
            repository=shopping_list_repository,
            food_repository=food_repository,
            meal_repository=meal_repository,
        ),
    )
