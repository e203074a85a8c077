"""Supabase implementation for the food catalog."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrivalor.domain.errors import InvalidUnitConversionError
from nutrivalor.domain.foods import Food
from nutrivalor.domain.nutrition import MacroProfile, ServingUnit, parse_unit
from nutrivalor.services.meals import FoodRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed read access to foods and their serving units."""

    client: Client

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        units_response = (
            self.client.table("serving_units")
            .select("*")
            .eq("food_id", str(food_id))
            .order("is_default", desc=True)
            .execute()
        )
        return _parse_food_or_skip(response.data[0], units_response.data or [])

    def get_foods(self, food_ids: Iterable[UUID]) -> dict[UUID, Food]:
        """Return the foods found for the given ids, keyed by id."""
        ids = [str(food_id) for food_id in food_ids]
        if not ids:
            return {}
        foods_response = (
            self.client.table("foods").select("*").in_("id", ids).execute()
        )
        units_response = (
            self.client.table("serving_units")
            .select("*")
            .in_("food_id", ids)
            .order("is_default", desc=True)
            .execute()
        )
        units_by_food: dict[str, list[dict[str, object]]] = {}
        for row in units_response.data or []:
            units_by_food.setdefault(str(row.get("food_id")), []).append(row)
        foods: dict[UUID, Food] = {}
        for row in foods_response.data or []:
            food = _parse_food_or_skip(row, units_by_food.get(str(row["id"]), []))
            if food is not None:
                foods[food.id] = food
        return foods


def _parse_food_or_skip(
    row: dict[str, object], unit_rows: list[dict[str, object]]
) -> Food | None:
    try:
        return _parse_food(row, unit_rows)
    except ValueError as exc:
        _logger.warning("Skipping unusable food row %s: %s", row.get("id"), exc)
        return None


def _parse_food(row: dict[str, object], unit_rows: list[dict[str, object]]) -> Food:
    """Parse a food row and its serving units into a domain model."""
    return Food(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        brand=row.get("brand") or None,
        category=row.get("category") or None,
        macros=MacroProfile(
            calories=float(row.get("calories") or 0.0),
            protein=float(row.get("protein") or 0.0),
            fat=float(row.get("fat") or 0.0),
            carbs=float(row.get("carbs") or 0.0),
        ),
        units=tuple(_parse_units(unit_rows)),
    )


def _parse_units(rows: list[dict[str, object]]) -> list[ServingUnit]:
    units: list[ServingUnit] = []
    for row in rows:
        raw_grams = row.get("grams_per_unit")
        grams = float(raw_grams) if raw_grams is not None else None
        try:
            units.append(parse_unit(str(row.get("unit_name", "")), grams))
        except InvalidUnitConversionError:
            _logger.warning(
                "Skipping serving unit without a gram conversion: food=%s unit=%s",
                row.get("food_id"),
                row.get("unit_name"),
            )
    return units
