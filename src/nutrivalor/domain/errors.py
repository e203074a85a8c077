"""Domain errors raised to callers."""


class InvalidQuantityError(ValueError):
    """Raised when a quantity is negative or otherwise unusable."""


class InvalidUnitConversionError(ValueError):
    """Raised when a weight unit lacks a positive gram conversion."""


class InvalidProfileError(ValueError):
    """Raised when a body profile is outside the supported ranges."""


class FoodNotFoundError(LookupError):
    """Raised when a referenced food is not in the catalog."""

    def __init__(self, food_id: object) -> None:
        super().__init__(f"Food not found with ID: {food_id}")
        self.food_id = food_id
