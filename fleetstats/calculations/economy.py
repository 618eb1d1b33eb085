"""
Fuel Economy Calculations

Handles per-interval and accumulated economy figures:
- Consumption of a single interval
- Running totals for distance, consumption volume and cost
- Average consumption and cost per distance
- Price per liter of a fill-up
"""

from typing import Optional

from ..models import FuelEntry, Interval
from ..utils.numbers import is_finite, to_number
from .units import UnitLike, consumption_rate, to_liters


def interval_consumption(interval: Interval, unit: UnitLike) -> Optional[float]:
    """
    Consumption of a single interval, or None if it carries no consumption sample.

    An interval of 450 km closed by a full 38 L fill-up gives 8.44 L/100km.
    """
    if not interval.has_consumption_sample:
        return None
    return consumption_rate(interval.volume_liters, interval.distance_km, unit)


def interval_cost_per_distance(interval: Interval) -> Optional[float]:
    """Cost per km of a single interval, or None if the fill-up was free."""
    if interval.cost > 0 and interval.distance_km > 0:
        return interval.cost / interval.distance_km
    return None


def fuel_entry_liters(entry: FuelEntry) -> float:
    """Volume of a fill-up in liters (nan if not numeric)."""
    return to_liters(to_number(entry.volume), entry.volume_unit)


def price_per_liter(entry: FuelEntry) -> Optional[float]:
    """
    Price paid per liter on a fill-up.

    Returns:
        Price per liter, or None when volume or cost is missing, zero or negative

    Examples:
        >>> price_per_liter(FuelEntry("a", "car1", "2024-01-01", 100, 40, 60))
        1.5
    """
    volume = fuel_entry_liters(entry)
    cost = to_number(entry.cost)
    if not is_finite(volume) or not is_finite(cost) or volume <= 0:
        return None
    price = cost / volume
    if price <= 0:
        return None
    return price


class IntervalTotals:
    """
    Running totals over a set of intervals.

    Distance and cost accumulate for every interval. Volume and the distance
    used for consumption only accumulate for intervals with a consumption
    sample, so partial fill-ups never understate consumption.
    """

    def __init__(self):
        self.interval_count = 0
        self.distance_km = 0.0
        self.cost = 0.0
        self.consumption_samples = 0
        self.consumption_distance_km = 0.0
        self.consumption_volume_liters = 0.0
        self.paid_cost = 0.0
        self.paid_distance_km = 0.0

    def add(self, interval: Interval) -> "IntervalTotals":
        self.interval_count += 1
        self.distance_km += interval.distance_km
        self.cost += interval.cost

        if interval.cost > 0:
            self.paid_cost += interval.cost
            self.paid_distance_km += interval.distance_km

        if interval.has_consumption_sample:
            self.consumption_samples += 1
            self.consumption_distance_km += interval.distance_km
            self.consumption_volume_liters += interval.volume_liters
        return self

    def avg_consumption(self, unit: UnitLike) -> Optional[float]:
        """Distance-weighted consumption over the sampled intervals (unrounded)."""
        if self.consumption_samples == 0:
            return None
        if self.consumption_distance_km <= 0 or self.consumption_volume_liters <= 0:
            return None
        return consumption_rate(self.consumption_volume_liters, self.consumption_distance_km, unit)

    def avg_cost_per_distance(self) -> Optional[float]:
        """Total interval cost per km (unrounded), None without cost or distance."""
        if self.distance_km > 0 and self.cost > 0:
            return self.cost / self.distance_km
        return None

    def avg_paid_cost_per_distance(self) -> Optional[float]:
        """Cost per km over the intervals that had a positive cost (unrounded)."""
        if self.paid_distance_km > 0:
            return self.paid_cost / self.paid_distance_km
        return None

    @classmethod
    def of(cls, intervals) -> "IntervalTotals":
        totals = cls()
        for interval in intervals:
            totals.add(interval)
        return totals
