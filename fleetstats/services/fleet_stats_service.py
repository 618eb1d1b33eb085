"""
Fleet Statistics Service

Fleet-wide totals, extremes and time-normalized averages. Intervals are built
independently per car and only merged here, so no interval ever spans two
vehicles.
"""

import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..calculations import (
    IntervalPolicy,
    IntervalTotals,
    best_consumption,
    build_fleet_intervals,
    fuel_entry_liters,
    interval_consumption,
    interval_cost_per_distance,
    parse_consumption_unit,
    price_per_liter,
    sort_fuel_entries,
    summarize_skips,
    worst_consumption,
)
from ..calculations.constants import DAYS_PER_MONTH, DAYS_PER_YEAR
from ..calculations.units import UnitLike
from ..config import Config
from ..models import ExpenseEntry, FuelEntry, IncomeEntry, Interval, coerce_records
from ..utils.numbers import is_finite, round2, sum_finite, to_number
from ..utils.time_utils import days_between, month_key, year_key
from ..utils.wide_events import track_operation

logger = logging.getLogger(__name__)


def empty_aggregate_stats() -> Dict[str, Any]:
    """Result returned when there are no fuel entries at all."""
    return {
        "total_fill_ups": 0,
        "total_volume": 0,
        "min_volume": None,
        "max_volume": None,
        "avg_consumption": None,
        "best_consumption": None,
        "worst_consumption": None,
        "total_costs": 0,
        "total_fuel_costs": 0,
        "total_expense_costs": 0,
        "total_income_costs": 0,
        "lowest_bill": None,
        "highest_bill": None,
        "best_price": None,
        "worst_price": None,
        "avg_cost_per_distance": None,
        "best_cost_per_distance": None,
        "worst_cost_per_distance": None,
        "avg_cost_per_day": None,
        "avg_cost_per_month": None,
        "avg_cost_per_year": None,
        "total_distance": 0,
        "avg_distance_per_day": None,
        "avg_distance_per_month": None,
        "avg_distance_per_year": None,
        "last_odometer": None,
        "monthly_stats": {},
        "yearly_stats": {},
    }


def _empty_period() -> Dict[str, Any]:
    return {
        "fill_ups": 0,
        "volume": 0.0,
        "fuel_cost": 0.0,
        "expense_cost": 0.0,
        "income_cost": 0.0,
        "total_cost": 0.0,
        "distance": 0.0,
    }


def calculate_period_stats(
    key_fn: Callable,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
    intervals: Iterable[Interval],
) -> Dict[str, Dict[str, Any]]:
    """
    Fleet-wide period buckets keyed by key_fn (month_key or year_key).

    total_cost merges fuel and expense amounts only. Income is reported in
    income_cost but never changes total_cost. Interval distance goes to the
    bucket of the later fill-up.
    """
    periods: Dict[str, Dict[str, Any]] = {}

    for entry in fuel_entries:
        when = entry.when
        if when is None:
            continue
        period = periods.setdefault(key_fn(when), _empty_period())
        cost = sum_finite([to_number(entry.cost)])
        period["fill_ups"] += 1
        period["volume"] += sum_finite([fuel_entry_liters(entry)])
        period["fuel_cost"] += cost
        period["total_cost"] += cost

    for expense in expense_entries:
        when = expense.when
        if when is None:
            continue
        period = periods.setdefault(key_fn(when), _empty_period())
        amount = sum_finite([to_number(expense.amount)])
        period["expense_cost"] += amount
        period["total_cost"] += amount

    for income in income_entries:
        when = income.when
        if when is None:
            continue
        period = periods.setdefault(key_fn(when), _empty_period())
        period["income_cost"] += sum_finite([to_number(income.amount)])

    for interval in intervals:
        period = periods.setdefault(key_fn(interval.date), _empty_period())
        period["distance"] += interval.distance_km

    result: Dict[str, Dict[str, Any]] = OrderedDict()
    for key in sorted(periods):
        period = periods[key]
        result[key] = {
            field: value if field == "fill_ups" else round2(value)
            for field, value in period.items()
        }
    return result


def _finite_values(values: Iterable[float]) -> List[float]:
    return [value for value in values if is_finite(value)]


def calculate_aggregate_stats(
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry] = (),
    income_entries: Iterable[IncomeEntry] = (),
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Any]:
    """
    Fleet-wide statistics across every car.

    Args:
        fuel_entries: Fill-ups of all cars
        expense_entries: Expenses of all cars
        income_entries: Incomes of all cars
        unit: Consumption unit (default from Config)
        policy: Interval validation thresholds

    Returns:
        Dict of totals, extremes and averages plus monthly_stats and
        yearly_stats. Best/worst consumption follow the unit direction;
        best/worst cost per distance are always min/max.
    """
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    expense_entries = coerce_records(ExpenseEntry, expense_entries)
    income_entries = coerce_records(IncomeEntry, income_entries)

    if not fuel_entries:
        return empty_aggregate_stats()

    with track_operation("fleet_stats", consumption_unit=unit.value) as event:
        builds = build_fleet_intervals(fuel_entries, policy)
        intervals = [interval for build in builds.values() for interval in build.intervals]
        skips = summarize_skips(builds.values())

        event.add_business_metrics(
            {
                "cars": len(builds),
                "fuel_entries": len(fuel_entries),
                "expense_entries": len(expense_entries),
                "income_entries": len(income_entries),
                "intervals": len(intervals),
            }
        )
        event.add_business_metrics(skips)

        volumes = _finite_values(fuel_entry_liters(entry) for entry in fuel_entries)
        total_volume = sum(volumes)

        fuel_costs = _finite_values(to_number(entry.cost) for entry in fuel_entries)
        expense_costs = _finite_values(to_number(expense.amount) for expense in expense_entries)
        income_costs = _finite_values(to_number(income.amount) for income in income_entries)
        total_fuel_costs = sum(fuel_costs)
        total_expense_costs = sum(expense_costs)
        total_income_costs = sum(income_costs)
        total_costs = total_fuel_costs + total_expense_costs + total_income_costs

        bills = [amount for amount in fuel_costs + expense_costs + income_costs if amount > 0]

        prices = [price for price in (price_per_liter(entry) for entry in fuel_entries) if price is not None]

        totals = IntervalTotals.of(intervals)
        consumption_rates = [
            rate for rate in (interval_consumption(interval, unit) for interval in intervals) if rate is not None
        ]
        cost_rates = [
            rate for rate in (interval_cost_per_distance(interval) for interval in intervals) if rate is not None
        ]
        total_distance = totals.distance_km

        sorted_entries = sort_fuel_entries(fuel_entries)
        if sorted_entries:
            total_days = days_between(sorted_entries[0].when, sorted_entries[-1].when) + 1
            last_mileage = to_number(sorted_entries[-1].mileage)
            last_odometer = last_mileage if is_finite(last_mileage) else None
        else:
            total_days = 0
            last_odometer = None
        total_months = total_days / DAYS_PER_MONTH
        total_years = total_days / DAYS_PER_YEAR

        def per_span(amount: float, span: float) -> Optional[float]:
            return round2(amount / span) if span > 0 else None

        def distance_per_span(span: float) -> Optional[float]:
            return per_span(total_distance, span) if total_distance > 0 else None

        if total_distance == 0 and len(fuel_entries) >= 2:
            logger.warning(f"No valid intervals across {len(fuel_entries)} fill-ups ({skips})")

        stats = {
            "total_fill_ups": len(fuel_entries),
            "total_volume": round2(total_volume),
            "min_volume": round2(min(volumes)) if volumes else None,
            "max_volume": round2(max(volumes)) if volumes else None,
            "avg_consumption": round2(totals.avg_consumption(unit)),
            "best_consumption": round2(best_consumption(consumption_rates, unit)),
            "worst_consumption": round2(worst_consumption(consumption_rates, unit)),
            "total_costs": round2(total_costs),
            "total_fuel_costs": round2(total_fuel_costs),
            "total_expense_costs": round2(total_expense_costs),
            "total_income_costs": round2(total_income_costs),
            "lowest_bill": round2(min(bills)) if bills else None,
            "highest_bill": round2(max(bills)) if bills else None,
            "best_price": round2(min(prices)) if prices else None,
            "worst_price": round2(max(prices)) if prices else None,
            "avg_cost_per_distance": round2(totals.avg_cost_per_distance()),
            "best_cost_per_distance": round2(min(cost_rates)) if cost_rates else None,
            "worst_cost_per_distance": round2(max(cost_rates)) if cost_rates else None,
            "avg_cost_per_day": per_span(total_costs, total_days),
            "avg_cost_per_month": per_span(total_costs, total_months),
            "avg_cost_per_year": per_span(total_costs, total_years),
            "total_distance": round2(total_distance),
            "avg_distance_per_day": distance_per_span(total_days),
            "avg_distance_per_month": distance_per_span(total_months),
            "avg_distance_per_year": distance_per_span(total_years),
            "last_odometer": last_odometer,
            "monthly_stats": calculate_period_stats(
                month_key, fuel_entries, expense_entries, income_entries, intervals
            ),
            "yearly_stats": calculate_period_stats(
                year_key, fuel_entries, expense_entries, income_entries, intervals
            ),
        }

    return stats
