"""
Per-Car Statistics Service

Lifetime, monthly and yearly figures for a single vehicle, plus category and
currency breakdowns. Records of other cars are ignored through the shared
car id matcher.
"""

import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, Optional

from ..calculations import (
    IntervalPolicy,
    IntervalTotals,
    build_intervals,
    parse_consumption_unit,
)
from ..calculations.constants import DEFAULT_CATEGORY, FUEL_CATEGORY
from ..calculations.units import UnitLike
from ..config import Config
from ..models import Car, ExpenseEntry, FuelEntry, IncomeEntry, coerce_records
from ..utils.id_utils import filter_by_car, get_record_id
from ..utils.numbers import round2, sum_finite, to_number
from ..utils.time_utils import month_key, year_key
from ..utils.wide_events import track_operation
from .currency_service import calculate_currency_stats

logger = logging.getLogger(__name__)


def calculate_car_stats(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Optional[float]]:
    """
    Lifetime consumption and cost per distance for one car.

    Args:
        car_id: Car to report on
        fuel_entries: Fill-ups of any car; the car's own are selected
        unit: Consumption unit (default from Config)
        policy: Interval validation thresholds

    Returns:
        Dict with avg_consumption, avg_cost_per_distance, total_distance_km.
        With fewer than two fill-ups the averages are None and distance is 0.
    """
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    car_entries = filter_by_car(coerce_records(FuelEntry, fuel_entries), car_id)

    if len(car_entries) < 2:
        return {"avg_consumption": None, "avg_cost_per_distance": None, "total_distance_km": 0}

    totals = IntervalTotals.of(build_intervals(car_entries, policy).intervals)

    return {
        "avg_consumption": round2(totals.avg_consumption(unit)),
        "avg_cost_per_distance": round2(totals.avg_cost_per_distance()),
        "total_distance_km": round2(totals.distance_km),
    }


def calculate_total_cost(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
) -> float:
    """
    Sum of fuel cost, expense amounts and income amounts for one car.

    Income is added, not subtracted, matching the car summary screens.
    Net figures live in the currency breakdown and the monthly trends.
    """
    fuel = filter_by_car(coerce_records(FuelEntry, fuel_entries), car_id)
    expenses = filter_by_car(coerce_records(ExpenseEntry, expense_entries), car_id)
    incomes = filter_by_car(coerce_records(IncomeEntry, income_entries), car_id)

    total = (
        sum_finite(to_number(entry.cost) for entry in fuel)
        + sum_finite(to_number(expense.amount) for expense in expenses)
        + sum_finite(to_number(income.amount) for income in incomes)
    )
    return round2(total)


def _empty_bucket() -> Dict[str, Any]:
    return {
        "fuel": 0.0,
        "expenses": 0.0,
        "incomes": 0.0,
        "total": 0.0,
        "avg_consumption": None,
        "avg_cost_per_distance": None,
        "total_distance": 0.0,
        "total_volume": 0.0,
    }


def _bucket_costs(
    key_fn: Callable,
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
    unit: UnitLike,
    policy: Optional[IntervalPolicy],
) -> Dict[str, Dict[str, Any]]:
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    fuel = filter_by_car(coerce_records(FuelEntry, fuel_entries), car_id)
    expenses = filter_by_car(coerce_records(ExpenseEntry, expense_entries), car_id)
    incomes = filter_by_car(coerce_records(IncomeEntry, income_entries), car_id)

    buckets: Dict[str, Dict[str, Any]] = {}
    interval_totals: Dict[str, IntervalTotals] = {}

    for records, field, value_attr in (
        (fuel, "fuel", "cost"),
        (expenses, "expenses", "amount"),
        (incomes, "incomes", "amount"),
    ):
        for record in records:
            when = record.when
            value = to_number(getattr(record, value_attr))
            if when is None:
                continue
            bucket = buckets.setdefault(key_fn(when), _empty_bucket())
            bucket[field] += sum_finite([value])

    if len(fuel) >= 2:
        for interval in build_intervals(fuel, policy).intervals:
            key = key_fn(interval.date)
            buckets.setdefault(key, _empty_bucket())
            interval_totals.setdefault(key, IntervalTotals()).add(interval)

    result: Dict[str, Dict[str, Any]] = OrderedDict()
    for key in sorted(buckets):
        bucket = buckets[key]
        totals = interval_totals.get(key)
        if totals is not None:
            bucket["avg_consumption"] = round2(totals.avg_consumption(unit))
            bucket["avg_cost_per_distance"] = round2(totals.avg_paid_cost_per_distance())
            bucket["total_distance"] = totals.distance_km
            bucket["total_volume"] = totals.consumption_volume_liters

        bucket["total"] = bucket["fuel"] + bucket["expenses"] + bucket["incomes"]
        for field in ("fuel", "expenses", "incomes", "total", "total_distance", "total_volume"):
            bucket[field] = round2(bucket[field])
        result[key] = bucket

    return result


def calculate_monthly_costs(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Monthly (YYYY-MM) buckets for one car.

    Each bucket has fuel, expenses, incomes, total, avg_consumption,
    avg_cost_per_distance, total_distance and total_volume. Interval
    distance, volume and consumption go to the month of the later fill-up.
    Bucket cost per distance only counts intervals with a positive cost.
    """
    return _bucket_costs(month_key, car_id, fuel_entries, expense_entries, income_entries, unit, policy)


def calculate_yearly_costs(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Dict[str, Any]]:
    """Yearly (YYYY) buckets for one car, same fields as the monthly ones."""
    return _bucket_costs(year_key, car_id, fuel_entries, expense_entries, income_entries, unit, policy)


def calculate_category_costs(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
) -> Dict[str, float]:
    """
    Amount per category for one car.

    Fuel appears as a synthetic "Fuel" category when its total is positive.
    Records without a category count as "Other". Expenses and incomes sharing
    a category name are summed together, not netted.
    """
    fuel = filter_by_car(coerce_records(FuelEntry, fuel_entries), car_id)
    expenses = filter_by_car(coerce_records(ExpenseEntry, expense_entries), car_id)
    incomes = filter_by_car(coerce_records(IncomeEntry, income_entries), car_id)

    categories: Dict[str, float] = {}

    fuel_total = sum_finite(to_number(entry.cost) for entry in fuel)
    if fuel_total > 0:
        categories[FUEL_CATEGORY] = fuel_total

    for record in list(expenses) + list(incomes):
        category = record.category or DEFAULT_CATEGORY
        categories[category] = categories.get(category, 0.0) + sum_finite([to_number(record.amount)])

    return {category: round2(amount) for category, amount in categories.items()}


def calculate_car_currency_breakdown(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
    base_currency: Optional[str] = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Any]:
    """Currency breakdown restricted to one car's records."""
    return calculate_currency_stats(
        filter_by_car(coerce_records(FuelEntry, fuel_entries), car_id),
        filter_by_car(coerce_records(ExpenseEntry, expense_entries), car_id),
        filter_by_car(coerce_records(IncomeEntry, income_entries), car_id),
        base_currency=base_currency,
        policy=policy,
    )


def build_car_report(
    car: Car,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry] = (),
    income_entries: Iterable[IncomeEntry] = (),
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
    base_currency: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Every per-car figure in one structure.

    Returns:
        Dict with car, stats, total_cost, monthly_costs, yearly_costs,
        category_costs, currency_breakdown and data_quality counters
    """
    if not isinstance(car, Car):
        car = Car.from_dict(car)
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    car_id = get_record_id(car)

    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    expense_entries = coerce_records(ExpenseEntry, expense_entries)
    income_entries = coerce_records(IncomeEntry, income_entries)

    with track_operation("car_report", car_id=car_id, consumption_unit=unit.value) as event:
        car_fuel = filter_by_car(fuel_entries, car_id)
        build = build_intervals(car_fuel, policy)

        event.add_business_metric("fuel_entries", len(car_fuel))
        event.add_business_metric("intervals", len(build.intervals))
        event.add_business_metrics(build.counters())

        report = {
            "car": {
                "id": car_id,
                "name": car.name,
                "brand": car.brand,
                "model": car.model,
                "year": car.year,
            },
            "stats": calculate_car_stats(car_id, fuel_entries, unit, policy),
            "total_cost": calculate_total_cost(car_id, fuel_entries, expense_entries, income_entries),
            "monthly_costs": calculate_monthly_costs(
                car_id, fuel_entries, expense_entries, income_entries, unit, policy
            ),
            "yearly_costs": calculate_yearly_costs(
                car_id, fuel_entries, expense_entries, income_entries, unit, policy
            ),
            "category_costs": calculate_category_costs(car_id, fuel_entries, expense_entries, income_entries),
            "currency_breakdown": calculate_car_currency_breakdown(
                car_id, fuel_entries, expense_entries, income_entries, base_currency, policy
            ),
            "data_quality": build.counters(),
        }

    return report
