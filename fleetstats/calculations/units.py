"""
Unit Conversions

Handles distance, volume and consumption-rate units:
- km / mi distance conversion
- liters / gallons volume conversion
- Consumption rate in any of the five selectable units
- Best/worst direction per unit
"""

import math
from typing import Iterable, Optional, Union

from ..exceptions import InvalidIntervalError, UnknownUnitError
from .constants import (
    DISTANCE_UNIT_MI,
    KM_PER_MILE,
    LITERS_PER_GALLON,
    LOWER_IS_BETTER_UNITS,
    VOLUME_UNIT_GALLONS,
    ConsumptionUnit,
)

UnitLike = Union[ConsumptionUnit, str]


def parse_consumption_unit(unit: UnitLike) -> ConsumptionUnit:
    """
    Resolve a consumption unit from its enum member or string value.

    Raises:
        UnknownUnitError: If the unit is not one of the five supported units

    Examples:
        >>> parse_consumption_unit("km/L")
        <ConsumptionUnit.KM_PER_L: 'km/L'>
    """
    if isinstance(unit, ConsumptionUnit):
        return unit
    try:
        return ConsumptionUnit(unit)
    except ValueError:
        raise UnknownUnitError(f"Unsupported consumption unit: {unit!r}", unit=str(unit))


def to_km(value: float, unit: str) -> float:
    """
    Convert a distance to kilometers.

    Examples:
        >>> to_km(100, "km")
        100
        >>> round(to_km(100, "mi"), 3)
        160.934
    """
    if unit == DISTANCE_UNIT_MI:
        return value * KM_PER_MILE
    return value


def to_liters(value: float, unit: str) -> float:
    """
    Convert a volume to liters.

    Examples:
        >>> to_liters(40, "liters")
        40
        >>> round(to_liters(10, "gallons"), 4)
        37.8541
    """
    if unit == VOLUME_UNIT_GALLONS:
        return value * LITERS_PER_GALLON
    return value


def consumption_rate(volume_liters: float, distance_km: float, unit: UnitLike) -> float:
    """
    Calculate fuel consumption in the requested unit.

    Args:
        volume_liters: Fuel used, in liters (must be > 0)
        distance_km: Distance covered, in km (must be > 0)
        unit: Target consumption unit

    Returns:
        Unrounded consumption rate

    Raises:
        InvalidIntervalError: If distance or volume is not a positive finite number
        UnknownUnitError: If the unit is not supported

    Examples:
        >>> round(consumption_rate(38, 450, "L/100km"), 2)
        8.44
        >>> round(consumption_rate(38, 450, "km/L"), 2)
        11.84
    """
    unit = parse_consumption_unit(unit)

    if not _is_positive(distance_km) or not _is_positive(volume_liters):
        raise InvalidIntervalError(
            "Consumption rate requires positive distance and volume",
            distance_km=distance_km,
            volume_liters=volume_liters,
        )

    if unit is ConsumptionUnit.L_PER_100KM:
        return (volume_liters / distance_km) * 100
    if unit is ConsumptionUnit.KM_PER_L:
        return distance_km / volume_liters
    if unit is ConsumptionUnit.G_PER_100MI:
        return (volume_liters / LITERS_PER_GALLON) / (distance_km / KM_PER_MILE) * 100
    if unit is ConsumptionUnit.KM_PER_G:
        return distance_km / (volume_liters / LITERS_PER_GALLON)
    return (distance_km / KM_PER_MILE) / volume_liters


def convert_consumption(value: float, from_unit: UnitLike, to_unit: UnitLike) -> Optional[float]:
    """
    Convert a consumption rate between units algebraically.

    The rate is expressed as liters per km first, then re-expressed in the
    target unit.

    Returns:
        Converted rate, or None for non-positive input

    Examples:
        >>> round(convert_consumption(8.0, "L/100km", "km/L"), 2)
        12.5
    """
    from_unit = parse_consumption_unit(from_unit)
    to_unit = parse_consumption_unit(to_unit)

    if not _is_positive(value):
        return None

    if from_unit is to_unit:
        return value

    liters_per_km = {
        ConsumptionUnit.L_PER_100KM: value / 100,
        ConsumptionUnit.KM_PER_L: 1 / value,
        ConsumptionUnit.G_PER_100MI: value * LITERS_PER_GALLON / (100 * KM_PER_MILE),
        ConsumptionUnit.KM_PER_G: LITERS_PER_GALLON / value,
        ConsumptionUnit.MI_PER_L: 1 / (value * KM_PER_MILE),
    }[from_unit]

    # One liter over (1 / liters_per_km) km
    return consumption_rate(1.0, 1.0 / liters_per_km, to_unit)


def is_lower_better(unit: UnitLike) -> bool:
    """
    Whether a smaller value means better economy for this unit.

    Examples:
        >>> is_lower_better("L/100km")
        True
        >>> is_lower_better("mi/L")
        False
    """
    return parse_consumption_unit(unit) in LOWER_IS_BETTER_UNITS


def best_consumption(rates: Iterable[float], unit: UnitLike) -> Optional[float]:
    """Best rate of a collection, honoring the unit's direction (None if empty)."""
    rates = list(rates)
    if not rates:
        return None
    return min(rates) if is_lower_better(unit) else max(rates)


def worst_consumption(rates: Iterable[float], unit: UnitLike) -> Optional[float]:
    """Worst rate of a collection, honoring the unit's direction (None if empty)."""
    rates = list(rates)
    if not rates:
        return None
    return max(rates) if is_lower_better(unit) else min(rates)


def _is_positive(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0
