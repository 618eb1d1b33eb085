"""
fleetstats Calculation Module

Consolidated calculation utilities for unit conversion, interval building and
fuel economy figures.

This module provides a single source of truth for the mathematical operations
behind the per-car, fleet and chart statistics.

Usage:
    from fleetstats.calculations import build_intervals, consumption_rate
    from fleetstats.calculations.constants import KM_PER_MILE
"""

# Unit conversions
from .units import (
    best_consumption,
    consumption_rate,
    convert_consumption,
    is_lower_better,
    parse_consumption_unit,
    to_km,
    to_liters,
    worst_consumption,
)

# Interval building
from .intervals import (
    IntervalBuildResult,
    IntervalPolicy,
    build_fleet_intervals,
    build_intervals,
    group_by_car,
    has_non_partial,
    sort_fuel_entries,
    summarize_skips,
)

# Economy figures
from .economy import (
    IntervalTotals,
    fuel_entry_liters,
    interval_consumption,
    interval_cost_per_distance,
    price_per_liter,
)

# Constants (re-export for convenience)
from .constants import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    KM_PER_MILE,
    LITERS_PER_GALLON,
    MAX_INTERVAL_DAYS,
    MAX_INTERVAL_DISTANCE_KM,
    ConsumptionUnit,
)

__all__ = [
    # Units
    "to_km",
    "to_liters",
    "consumption_rate",
    "convert_consumption",
    "is_lower_better",
    "best_consumption",
    "worst_consumption",
    "parse_consumption_unit",
    # Intervals
    "IntervalPolicy",
    "IntervalBuildResult",
    "build_intervals",
    "build_fleet_intervals",
    "group_by_car",
    "has_non_partial",
    "sort_fuel_entries",
    "summarize_skips",
    # Economy
    "IntervalTotals",
    "interval_consumption",
    "interval_cost_per_distance",
    "fuel_entry_liters",
    "price_per_liter",
    # Constants
    "ConsumptionUnit",
    "KM_PER_MILE",
    "LITERS_PER_GALLON",
    "MAX_INTERVAL_DISTANCE_KM",
    "MAX_INTERVAL_DAYS",
    "DAYS_PER_MONTH",
    "DAYS_PER_YEAR",
]
