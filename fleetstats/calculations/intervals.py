"""
Interval Building

Turns one car's fill-ups into validated intervals:
- Chronological ordering
- Canonical units (km, liters)
- Outlier rejection (odometer rollback, implausible distance, stale gap)
- Partial fill-up policy for consumption samples
"""

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..config import Config
from ..exceptions import ConfigurationError
from ..models import FuelEntry, Interval
from ..utils.id_utils import RecordId
from ..utils.numbers import is_finite, to_number
from ..utils.time_utils import days_between
from .constants import MAX_INTERVAL_DAYS, MAX_INTERVAL_DISTANCE_KM
from .units import to_km, to_liters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntervalPolicy:
    """Thresholds an interval must satisfy to be kept."""

    max_distance_km: float = MAX_INTERVAL_DISTANCE_KM
    max_gap_days: float = MAX_INTERVAL_DAYS

    def __post_init__(self):
        if not is_finite(self.max_distance_km) or self.max_distance_km <= 0:
            raise ConfigurationError(
                f"max_distance_km must be positive, got {self.max_distance_km}",
                config_key="FLEETSTATS_MAX_INTERVAL_DISTANCE_KM",
            )
        if not is_finite(self.max_gap_days) or self.max_gap_days <= 0:
            raise ConfigurationError(
                f"max_gap_days must be positive, got {self.max_gap_days}",
                config_key="FLEETSTATS_MAX_INTERVAL_DAYS",
            )

    @classmethod
    def from_config(cls) -> "IntervalPolicy":
        """Build a policy from the current Config values."""
        return cls(
            max_distance_km=Config.MAX_INTERVAL_DISTANCE_KM,
            max_gap_days=Config.MAX_INTERVAL_DAYS,
        )


@dataclass
class IntervalBuildResult:
    """Intervals for one car plus counters for the pairs that were excluded."""

    intervals: List[Interval] = field(default_factory=list)
    skipped_non_numeric: int = 0
    skipped_distance: int = 0
    skipped_stale: int = 0
    skipped_undated: int = 0

    @property
    def skipped(self) -> int:
        return self.skipped_non_numeric + self.skipped_distance + self.skipped_stale + self.skipped_undated

    def counters(self) -> Dict[str, int]:
        return {
            "skipped_non_numeric": self.skipped_non_numeric,
            "skipped_distance": self.skipped_distance,
            "skipped_stale": self.skipped_stale,
            "skipped_undated": self.skipped_undated,
        }


def sort_fuel_entries(entries: Iterable[FuelEntry]) -> List[FuelEntry]:
    """
    Sort fill-ups chronologically, dropping entries without a parseable date.

    Entries on the same date are ordered by mileage so the result does not
    depend on input order.
    """
    dated = []
    for entry in entries:
        when = entry.when
        if when is None:
            continue
        mileage = to_number(entry.mileage)
        dated.append((when, mileage if is_finite(mileage) else math.inf, entry))

    dated.sort(key=lambda item: (item[0], item[1]))
    return [entry for _, _, entry in dated]


def has_non_partial(entries: Iterable[FuelEntry]) -> bool:
    """True if at least one fill-up brought the tank to full."""
    return any(not entry.partial_fuel_up for entry in entries)


def build_intervals(
    entries: Iterable[FuelEntry],
    policy: Optional[IntervalPolicy] = None,
) -> IntervalBuildResult:
    """
    Build validated intervals from one car's fill-ups.

    Each adjacent pair (prev, curr) of the chronologically sorted entries
    yields an interval unless mileage, volume or cost is not numeric, the
    distance is not in (0, max_distance_km], or more than max_gap_days
    separate the two fill-ups. Excluded pairs are counted, never raised.

    When the car has at least one full fill-up on record, only full fill-ups
    are usable for consumption; otherwise every fill-up is.

    Args:
        entries: Fuel entries of a single car, in any order
        policy: Validation thresholds (defaults to Config values)

    Returns:
        IntervalBuildResult with intervals in chronological order

    Examples:
        >>> result = build_intervals([
        ...     FuelEntry("a", "car1", "2024-01-01", 50000, 40, 60),
        ...     FuelEntry("b", "car1", "2024-01-20", 50450, 38, 58),
        ... ])
        >>> result.intervals[0].distance_km
        450.0
    """
    if policy is None:
        policy = IntervalPolicy.from_config()

    entries = list(entries)
    sorted_entries = sort_fuel_entries(entries)
    result = IntervalBuildResult(skipped_undated=len(entries) - len(sorted_entries))

    full_fill_ups_on_record = has_non_partial(sorted_entries)

    for prev, curr in zip(sorted_entries, sorted_entries[1:]):
        mileage = to_number(curr.mileage)
        prev_mileage = to_number(prev.mileage)
        volume = to_liters(to_number(curr.volume), curr.volume_unit)
        cost = to_number(curr.cost)

        if not all(is_finite(v) for v in (mileage, prev_mileage, volume, cost)):
            result.skipped_non_numeric += 1
            logger.debug(f"Car {curr.car_id}: skipping non-numeric fill-up {curr.id}")
            continue

        distance = to_km(mileage - prev_mileage, curr.distance_unit)

        if distance <= 0 or distance > policy.max_distance_km:
            result.skipped_distance += 1
            logger.debug(f"Car {curr.car_id}: skipping interval to {curr.id}, distance {distance:.1f} km")
            continue

        days = days_between(prev.when, curr.when)
        if days > policy.max_gap_days:
            result.skipped_stale += 1
            logger.debug(f"Car {curr.car_id}: skipping interval to {curr.id}, {days:.0f} days since previous fill-up")
            continue

        result.intervals.append(
            Interval(
                car_id=curr.car_id,
                from_entry=prev,
                to_entry=curr,
                distance_km=distance,
                volume_liters=volume,
                cost=cost,
                usable_for_consumption=not full_fill_ups_on_record or not curr.partial_fuel_up,
                days=days,
            )
        )

    if len(sorted_entries) >= 2 and not result.intervals:
        logger.warning(
            f"Car {sorted_entries[0].car_id}: all {len(sorted_entries) - 1} intervals excluded "
            f"({result.counters()})"
        )

    return result


def group_by_car(entries: Iterable[FuelEntry]) -> "OrderedDict[str, List[FuelEntry]]":
    """
    Group fill-ups by car id string, in first-seen order.

    Entries without a car id cannot be attributed and are left out.
    """
    groups: "OrderedDict[str, List[FuelEntry]]" = OrderedDict()
    for entry in entries:
        car_id = RecordId(entry.car_id)
        if not car_id:
            logger.debug(f"Fill-up {entry.id} has no car id, excluded from intervals")
            continue
        groups.setdefault(str(car_id), []).append(entry)
    return groups


def build_fleet_intervals(
    entries: Iterable[FuelEntry],
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, IntervalBuildResult]:
    """
    Build intervals independently for every car; intervals never cross cars.

    Returns:
        Mapping of car id string to that car's IntervalBuildResult
    """
    if policy is None:
        policy = IntervalPolicy.from_config()

    return {
        car_id: build_intervals(car_entries, policy)
        for car_id, car_entries in group_by_car(entries).items()
    }


def summarize_skips(results: Iterable[IntervalBuildResult]) -> Dict[str, int]:
    """Total the skip counters of several build results."""
    totals = {
        "skipped_non_numeric": 0,
        "skipped_distance": 0,
        "skipped_stale": 0,
        "skipped_undated": 0,
    }
    for result in results:
        for key, value in result.counters().items():
            totals[key] += value
    return totals
