"""
Numeric coercion helpers.

Record fields arrive from forms and JSON payloads, so mileage, volume and
money values may be numbers, numeric strings or missing. Everything is coerced
to ``float`` here and invalid values become ``nan`` so callers can exclude them
with a single finiteness check.
"""

import math
from typing import Any, Optional

NAN = float("nan")


def to_number(value: Any) -> float:
    """
    Coerce a record field to a float.

    Args:
        value: Raw field value (int, float, numeric string, None, ...)

    Returns:
        The float value, or nan if the value is missing or not numeric

    Examples:
        >>> to_number("42.5")
        42.5
        >>> to_number(None)
        nan
        >>> to_number("abc")
        nan
    """
    if value is None or isinstance(value, bool):
        return NAN

    if isinstance(value, (int, float)):
        return float(value)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return NAN
        try:
            return float(value)
        except ValueError:
            return NAN

    try:
        return float(value)
    except (TypeError, ValueError):
        return NAN


def is_finite(value: float) -> bool:
    """Return True if value is a real, finite number."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def round2(value: Optional[float]) -> Optional[float]:
    """
    Round a public figure to 2 decimals, passing None through.

    Examples:
        >>> round2(8.4444)
        8.44
        >>> round2(None) is None
        True
    """
    if value is None:
        return None
    return round(value, 2)


def sum_finite(values) -> float:
    """Sum the finite values of an iterable, ignoring nan and infinities."""
    return sum(v for v in values if is_finite(v))
