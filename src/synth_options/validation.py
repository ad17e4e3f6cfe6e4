"""
Argument checks shared by the pricing and distribution engines.

Every public operation validates its inputs here before dividing or taking
logarithms, so bad values surface as ``InvalidInputError`` instead of NaN.
"""

import math

from synth_options.errors import InvalidInputError

OPTION_KINDS = ("call", "put")
POSITIONS = ("long", "short")


def require_finite(name: str, value: float) -> float:
    """Return ``value`` as a float, rejecting NaN, infinities and non-numbers."""
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return number


def require_positive(name: str, value: float) -> float:
    number = require_finite(name, value)
    if number <= 0:
        raise InvalidInputError(f"{name} must be positive, got {number}")
    return number


def require_non_negative(name: str, value: float) -> float:
    number = require_finite(name, value)
    if number < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {number}")
    return number


def require_option_kind(option_kind: str) -> str:
    if option_kind not in OPTION_KINDS:
        raise InvalidInputError(f"option_kind must be 'call' or 'put', got {option_kind!r}")
    return option_kind


def require_position(position: str) -> str:
    if position not in POSITIONS:
        raise InvalidInputError(f"position must be 'long' or 'short', got {position!r}")
    return position


def require_int(name: str, value: int, minimum: int) -> int:
    """Return ``value`` when it is an integer of at least ``minimum``; bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidInputError(f"{name} must be at least {minimum}, got {value}")
    return value
