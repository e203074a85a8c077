"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from nutrivalor.adapters.supabase_food_repository import SupabaseFoodRepository
from nutrivalor.adapters.supabase_meal_repository import SupabaseMealRepository
from nutrivalor.adapters.supabase_shopping_list_repository import (
    SupabaseShoppingListRepository,
)
from nutrivalor.domain.meals import MealIngredient
from nutrivalor.domain.nutrition import DiscreteUnit, NutrientResult, WeightUnit
from nutrivalor.domain.shopping import ShoppingListEntry


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    executed: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        self.executed.append(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _food_row(food_id: str, name: str) -> dict[str, object]:
    return {
        "id": food_id,
        "name": name,
        "brand": "",
        "category": "Pantry",
        "calories": 250,
        "protein": 9,
        "fat": 3,
        "carbs": "49",
    }


def test_supabase_food_repository_parses_units() -> None:
    client = FakeSupabaseClient()
    food_id = str(uuid4())
    client.table("foods").queue("select", [_food_row(food_id, "Bread")])
    client.table("serving_units").queue(
        "select",
        [
            {"food_id": food_id, "unit_name": "slice", "grams_per_unit": 40},
            {"food_id": food_id, "unit_name": "EACH", "grams_per_unit": 500},
            {"food_id": food_id, "unit_name": "cup", "grams_per_unit": None},
        ],
    )

    repository = SupabaseFoodRepository(client)
    food = repository.get_food(uuid4())

    assert food is not None
    assert str(food.id) == food_id
    assert food.brand is None
    assert food.category == "Pantry"
    assert food.macros.carbs == 49
    assert food.units == (
        WeightUnit(name="slice", grams_per_unit=40),
        DiscreteUnit(name="EACH"),
    )


def test_supabase_food_repository_missing_food() -> None:
    client = FakeSupabaseClient()

    repository = SupabaseFoodRepository(client)

    assert repository.get_food(uuid4()) is None
    assert "serving_units" not in client.tables


def test_supabase_food_repository_get_foods_groups_units() -> None:
    client = FakeSupabaseClient()
    bread_id = str(uuid4())
    rice_id = str(uuid4())
    client.table("foods").queue(
        "select", [_food_row(bread_id, "Bread"), _food_row(rice_id, "Rice")]
    )
    client.table("serving_units").queue(
        "select",
        [{"food_id": bread_id, "unit_name": "slice", "grams_per_unit": 40}],
    )

    repository = SupabaseFoodRepository(client)
    foods = repository.get_foods([uuid4(), uuid4()])

    by_name = {food.name: food for food in foods.values()}
    assert by_name["Bread"].default_unit == WeightUnit(name="slice", grams_per_unit=40)
    assert by_name["Rice"].units == ()
    assert repository.get_foods([]) == {}


def test_supabase_food_repository_skips_unusable_food_rows() -> None:
    client = FakeSupabaseClient()
    good_id = str(uuid4())
    bad_id = str(uuid4())
    client.table("foods").queue(
        "select",
        [
            _food_row(good_id, "Bread"),
            {**_food_row(bad_id, "Broken"), "fat": -1},
            {**_food_row(str(uuid4()), "Garbled"), "protein": "lots"},
        ],
    )
    client.table("foods").queue("select", [{**_food_row(bad_id, "Broken"), "fat": -1}])

    repository = SupabaseFoodRepository(client)
    foods = repository.get_foods([uuid4(), uuid4(), uuid4()])

    assert [food.name for food in foods.values()] == ["Bread"]
    assert repository.get_food(uuid4()) is None


def test_supabase_meal_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meal_id = str(uuid4())
    food_id = str(uuid4())
    row = {
        "id": meal_id,
        "name": "Toast",
        "meal_type": "breakfast",
        "ingredients": [
            {
                "food_id": food_id,
                "food_name": "Bread",
                "quantity": 2,
                "unit": "slice",
                "calories": 200,
            },
            {"food_id": None, "food_name": "Butter", "quantity": 10},
            "not-an-ingredient",
        ],
    }
    meals_table.queue("select", [row])
    meals_table.queue("update", [row])

    repository = SupabaseMealRepository(client)
    meal = repository.get_meal(uuid4())

    assert meal is not None
    assert meal.meal_type == "breakfast"
    assert meal.ingredients[0] == MealIngredient(
        food_id=meal.ingredients[0].food_id,
        name="Bread",
        quantity=2.0,
        unit_name="slice",
        calories=200.0,
    )
    assert str(meal.ingredients[0].food_id) == food_id
    assert meal.ingredients[1].food_id is None
    assert len(meal.ingredients) == 2

    repository.update_meal(
        meal,
        NutrientResult(total_grams=80, calories=200, protein=7.2, fat=2.4, carbs=39.2),
    )

    payload = meals_table.last_payload
    assert isinstance(payload, dict)
    assert payload["total_calories"] == 200
    assert payload["total_carbs"] == 39.2
    assert payload["ingredients"][0]["food_name"] == "Bread"
    assert payload["ingredients"][1]["food_id"] is None


def test_supabase_meal_repository_update_failure() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue("select", [{"id": str(uuid4()), "name": "Empty"}])

    repository = SupabaseMealRepository(client)
    meal = repository.get_meal(uuid4())

    assert meal is not None
    with pytest.raises(RuntimeError):
        repository.update_meal(meal, NutrientResult.zero())


def test_supabase_shopping_list_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("shopping_list")
    user_id = uuid4()
    food_id = uuid4()
    entry_id = str(uuid4())
    stored = {
        "id": entry_id,
        "name": "Egg",
        "quantity": 2,
        "brand": "",
        "category": "Dairy",
        "unit": "EACH",
        "food_id": str(food_id),
        "calories": 70,
    }
    table.queue("insert", [stored])
    table.queue("select", [stored])
    table.queue("update", [{**stored, "quantity": 5}])
    table.queue("select", [stored, {"name": "Milk"}])

    repository = SupabaseShoppingListRepository(client)
    created = repository.create_item(
        user_id,
        ShoppingListEntry(
            id=None, name="Egg", quantity=2, category="Dairy", unit="EACH", food_id=food_id
        ),
    )
    found = repository.find_item(user_id, food_id, "EACH")
    updated = repository.update_quantity(user_id, created.id, 5)
    rows = repository.list_items(user_id)

    assert str(created.id) == entry_id
    assert created.brand == ""
    assert found is not None
    assert found.food_id == food_id
    assert ("unit", "EACH") in table.last_filters
    assert updated is not None
    assert updated.quantity == 5
    assert len(rows) == 2


def test_supabase_shopping_list_create_payload_and_failure() -> None:
    client = FakeSupabaseClient()
    table = client.table("shopping_list")
    user_id = uuid4()

    repository = SupabaseShoppingListRepository(client)
    with pytest.raises(RuntimeError):
        repository.create_item(user_id, ShoppingListEntry(id=uuid4(), name="Salt"))

    payload = table.last_payload
    assert isinstance(payload, dict)
    assert payload["user_id"] == str(user_id)
    assert payload["category"] == "General"
    assert "id" not in payload


def test_supabase_shopping_list_delete_and_clear() -> None:
    client = FakeSupabaseClient()
    table = client.table("shopping_list")
    user_id = uuid4()
    entry_id = uuid4()

    repository = SupabaseShoppingListRepository(client)
    repository.delete_item(user_id, entry_id)
    repository.clear(user_id)

    assert table.executed == ["delete", "delete"]
    assert ("id", str(entry_id)) in table.last_filters
    assert repository.update_quantity(user_id, entry_id, 3) is None
