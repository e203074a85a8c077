"""Domain models for daily macro targets."""

from dataclasses import dataclass
from typing import Literal

Sex = Literal["male", "female"]


@dataclass(frozen=True)
class BodyProfile:
    """Inputs for estimating daily energy and macro targets."""

    age: float
    sex: Sex
    weight_kg: float
    height_cm: float
    activity: float = 1.55
    calorie_adjustment: float = 0.0
    protein_per_kg: float = 2.2
    fat_per_kg: float = 0.8


@dataclass(frozen=True)
class MacroTargets:
    """Daily targets in grams plus the energy estimates behind them."""

    protein: int
    carbs: int
    fat: int
    calories: int
    bmr: int
    tdee: int
