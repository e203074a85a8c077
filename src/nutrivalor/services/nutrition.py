"""Unit-aware nutrient calculation."""

import math

from nutrivalor.domain.errors import InvalidQuantityError, InvalidUnitConversionError
from nutrivalor.domain.nutrition import (
    DiscreteUnit,
    MacroProfile,
    NutrientResult,
    QuantityInput,
    WeightUnit,
)


def round1(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    scaled = math.floor(abs(value) * 10 + 0.5) / 10
    return math.copysign(scaled, value) if scaled else 0.0


def compute_nutrients(request: QuantityInput) -> NutrientResult:
    """Compute absolute macros for a quantity of food.

    Discrete (EACH) units multiply the per-item profile directly and do not
    track weight. Every other case resolves a gram weight and scales the
    per-100g profile.

    Raises:
        InvalidQuantityError: the quantity is negative or not finite.
        InvalidUnitConversionError: unit mode without a weight unit.
    """
    quantity = request.quantity
    if not math.isfinite(quantity):
        raise InvalidQuantityError("Quantity must be a finite number")
    if quantity < 0:
        raise InvalidQuantityError("Quantity cannot be negative")

    if isinstance(request.unit, DiscreteUnit):
        return _scaled(request.macros, quantity, total_grams=None)

    if request.input_mode == "grams":
        total_grams = float(quantity)
    elif isinstance(request.unit, WeightUnit):
        total_grams = quantity * request.unit.grams_per_unit
    else:
        raise InvalidUnitConversionError(
            "Valid grams per unit is required when using unit input type"
        )
    if not math.isfinite(total_grams):
        raise InvalidQuantityError("Quantity is too large")
    return _scaled(request.macros, total_grams / 100, total_grams=total_grams)


def _scaled(
    macros: MacroProfile, factor: float, total_grams: float | None
) -> NutrientResult:
    return NutrientResult(
        total_grams=total_grams,
        calories=round1(macros.calories * factor),
        protein=round1(macros.protein * factor),
        fat=round1(macros.fat * factor),
        carbs=round1(macros.carbs * factor),
    )
