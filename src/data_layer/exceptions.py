"""Custom exceptions for the calorie tracking core."""


class InvalidArgumentError(ValueError):
    """Raised when a numeric or enum argument is outside its valid domain.

    Covers negative, zero (where disallowed) and non-finite amounts as well as
    unknown enum values. Raised before any arithmetic so that NaN/Infinity
    never reaches stored nutrition data.
    """

    def __init__(self, argument: str, value, message: str = ""):
        """Initialize exception with the offending argument.

        Args:
            argument: Name of the argument that failed validation
            value: The rejected value
            message: Optional human-readable detail
        """
        self.argument = argument
        self.value = value
        detail = message or "invalid value"
        super().__init__(f"Invalid {argument} {value!r}: {detail}")


class UnsupportedUnitError(ValueError):
    """Raised when a unit cannot be parsed or converted.

    Attributes:
        unit: The unsupported unit string
        message: Human-readable error message
    """

    def __init__(self, unit: str, message: str):
        self.unit = unit
        self.message = message
        super().__init__(f"Unsupported unit '{unit}': {message}")


class FoodNotFoundError(Exception):
    """Raised when a food item is not found in the food catalog."""

    def __init__(self, food_id: str):
        """Initialize exception with food identifier.

        Args:
            food_id: Identifier (or name) of the food that was not found
        """
        self.food_id = food_id
        super().__init__(f"Food '{food_id}' not found in food catalog")


class EntryNotFoundError(Exception):
    """Raised when a logged food entry is not found in the entry log."""

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Food entry '{entry_id}' not found in entry log")
