"""Nutrition domain models."""

import math
from dataclasses import dataclass
from typing import Literal

from nutrivalor.domain.errors import InvalidUnitConversionError

DISCRETE_UNIT_NAME = "EACH"

InputMode = Literal["grams", "unit"]
_INPUT_MODES = ("grams", "unit")


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient density of a food.

    Per 100 g for foods measured by weight, per item for discrete foods.
    """

    calories: float
    protein: float
    fat: float
    carbs: float

    def __post_init__(self) -> None:
        for field_name in ("calories", "protein", "fat", "carbs"):
            value = getattr(self, field_name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{field_name} must be a non-negative number")

    @classmethod
    def zero(cls) -> "MacroProfile":
        """Return a profile with every macro set to zero."""
        return cls(calories=0.0, protein=0.0, fat=0.0, carbs=0.0)


@dataclass(frozen=True)
class DiscreteUnit:
    """Serving unit counted in items; the profile is already per item."""

    name: str = DISCRETE_UNIT_NAME


@dataclass(frozen=True)
class WeightUnit:
    """Named serving unit with a fixed gram weight, e.g. one slice."""

    name: str
    grams_per_unit: float

    def __post_init__(self) -> None:
        if is_discrete_unit_name(self.name):
            raise InvalidUnitConversionError(
                f"{self.name} is a discrete unit and cannot carry a gram weight"
            )
        grams = self.grams_per_unit
        if (
            not isinstance(grams, int | float)
            or not math.isfinite(grams)
            or grams <= 0
        ):
            raise InvalidUnitConversionError(
                f"Valid grams per unit is required for unit {self.name!r}"
            )


ServingUnit = DiscreteUnit | WeightUnit


def is_discrete_unit_name(name: str | None) -> bool:
    """Return True when a unit name denotes the discrete EACH unit."""
    if not name:
        return False
    return name.strip().upper() == DISCRETE_UNIT_NAME


def parse_unit(name: str, grams_per_unit: float | None = None) -> ServingUnit:
    """Build a serving unit, deciding its variant from the name.

    An ``EACH`` unit never keeps a gram conversion, so any supplied
    ``grams_per_unit`` is dropped.
    """
    if is_discrete_unit_name(name):
        return DiscreteUnit(name=name.strip())
    if grams_per_unit is None:
        raise InvalidUnitConversionError(
            f"Valid grams per unit is required for unit {name!r}"
        )
    return WeightUnit(name=name.strip(), grams_per_unit=grams_per_unit)


@dataclass(frozen=True)
class QuantityInput:
    """A single nutrient calculation request."""

    macros: MacroProfile
    input_mode: InputMode
    quantity: float
    unit: ServingUnit | None = None

    def __post_init__(self) -> None:
        if self.input_mode not in _INPUT_MODES:
            raise ValueError(f"Unknown input mode: {self.input_mode!r}")


@dataclass(frozen=True)
class NutrientResult:
    """Absolute macros for a resolved quantity.

    ``total_grams`` is None for discrete units, whose weight is not tracked.
    """

    total_grams: float | None
    calories: float
    protein: float
    fat: float
    carbs: float

    @classmethod
    def zero(cls) -> "NutrientResult":
        """Return an all-zero weighted result."""
        return cls(total_grams=0.0, calories=0.0, protein=0.0, fat=0.0, carbs=0.0)
