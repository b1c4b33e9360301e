"""Argument validation shared by the core computations.

Every pure function in the core validates its numeric inputs up front and
raises InvalidArgumentError instead of letting a bad value turn into a
silently wrong number.
"""
import math
from enum import Enum
from typing import Type, TypeVar

from src.data_layer.exceptions import InvalidArgumentError

E = TypeVar("E", bound=Enum)


def require_finite(argument: str, value) -> float:
    """Return value as float, rejecting None, non-numeric and non-finite input."""
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(argument, value, "must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(argument, value, "must be a number") from None
    if not math.isfinite(number):
        raise InvalidArgumentError(argument, value, "must be finite")
    return number


def require_non_negative(argument: str, value) -> float:
    """Return value as float, rejecting negative and non-finite input."""
    number = require_finite(argument, value)
    if number < 0:
        raise InvalidArgumentError(argument, value, "must not be negative")
    return number


def require_positive(argument: str, value) -> float:
    """Return value as float, rejecting zero, negative and non-finite input."""
    number = require_finite(argument, value)
    if number <= 0:
        raise InvalidArgumentError(argument, value, "must be greater than zero")
    return number


def parse_enum(enum_cls: Type[E], value, argument: str) -> E:
    """Coerce an enum member or its string value into enum_cls.

    Args:
        enum_cls: Target Enum class (string-valued)
        value: Enum member or raw string (case-insensitive, spaces allowed)
        argument: Argument name used in the error message

    Returns:
        Matching enum member

    Raises:
        InvalidArgumentError: If value does not name a member
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower().replace(" ", "_").replace("-", "_")
        for member in enum_cls:
            if member.value == key:
                return member
    allowed = ", ".join(member.value for member in enum_cls)
    raise InvalidArgumentError(argument, value, f"expected one of: {allowed}")
