"""Daily macro targets from a body profile (Mifflin-St Jeor)."""

import math

from nutrivalor.domain.errors import InvalidProfileError
from nutrivalor.domain.targets import BodyProfile, MacroTargets

MIN_AGE, MAX_AGE = 10, 120
MIN_WEIGHT_KG, MAX_WEIGHT_KG = 20, 300
MIN_HEIGHT_CM, MAX_HEIGHT_CM = 100, 250
MIN_CARBS_G = 10

_KCAL_PER_G_PROTEIN = 4
_KCAL_PER_G_CARBS = 4
_KCAL_PER_G_FAT = 9


def calculate_targets(profile: BodyProfile) -> MacroTargets:
    """Estimate BMR, TDEE and daily macro grams for a profile."""
    _validate(profile)
    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    bmr += 5 if profile.sex == "male" else -161
    tdee = bmr * profile.activity
    calories = tdee + profile.calorie_adjustment

    protein = profile.weight_kg * profile.protein_per_kg
    fat = profile.weight_kg * profile.fat_per_kg
    carbs = (
        calories - protein * _KCAL_PER_G_PROTEIN - fat * _KCAL_PER_G_FAT
    ) / _KCAL_PER_G_CARBS

    return MacroTargets(
        protein=max(0, _round_half_up(protein)),
        carbs=max(MIN_CARBS_G, _round_half_up(carbs)),
        fat=max(0, _round_half_up(fat)),
        calories=_round_half_up(calories),
        bmr=_round_half_up(bmr),
        tdee=_round_half_up(tdee),
    )


def _validate(profile: BodyProfile) -> None:
    if not profile.age or not profile.weight_kg or not profile.height_cm:
        raise InvalidProfileError("Age, weight and height are required")
    if not MIN_AGE <= profile.age <= MAX_AGE:
        raise InvalidProfileError(
            f"Age must be between {MIN_AGE} and {MAX_AGE}"
        )
    if not MIN_WEIGHT_KG <= profile.weight_kg <= MAX_WEIGHT_KG:
        raise InvalidProfileError(
            f"Weight must be between {MIN_WEIGHT_KG} and {MAX_WEIGHT_KG} kg"
        )
    if not MIN_HEIGHT_CM <= profile.height_cm <= MAX_HEIGHT_CM:
        raise InvalidProfileError(
            f"Height must be between {MIN_HEIGHT_CM} and {MAX_HEIGHT_CM} cm"
        )
    if profile.sex not in ("male", "female"):
        raise InvalidProfileError(f"Unsupported sex: {profile.sex!r}")
    if profile.activity <= 0:
        raise InvalidProfileError("Activity factor must be positive")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
