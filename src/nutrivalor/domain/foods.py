"""Domain models for the food catalog."""

from dataclasses import dataclass
from uuid import UUID

from nutrivalor.domain.errors import InvalidUnitConversionError
from nutrivalor.domain.nutrition import (
    DiscreteUnit,
    MacroProfile,
    ServingUnit,
    is_discrete_unit_name,
)

GRAM_UNIT_NAMES = frozenset({"g", "gram", "grams"})


def is_gram_unit_name(name: str | None) -> bool:
    """Return True when a unit name means plain grams (or is missing)."""
    if name is None:
        return True
    cleaned = name.strip().lower()
    return not cleaned or cleaned in GRAM_UNIT_NAMES


@dataclass(frozen=True)
class Food:
    """A catalog food with its macro profile and serving units."""

    id: UUID
    name: str
    macros: MacroProfile
    brand: str | None = None
    category: str | None = None
    units: tuple[ServingUnit, ...] = ()

    @property
    def default_unit(self) -> ServingUnit | None:
        """Return the preferred serving unit, if the food has any."""
        return self.units[0] if self.units else None

    def find_unit(self, name: str) -> ServingUnit:
        """Resolve a unit name against this food's serving units."""
        wanted = name.strip().lower()
        for unit in self.units:
            if unit.name.strip().lower() == wanted:
                return unit
        if is_discrete_unit_name(name):
            return DiscreteUnit(name=name.strip())
        raise InvalidUnitConversionError(
            f"Food {self.name!r} has no gram conversion for unit {name!r}"
        )
