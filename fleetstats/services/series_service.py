"""
Chart Series Service

Chart-ready datasets derived from the same intervals and aggregates as the
statistics services. Rows are plain dicts sorted ascending by month or date.
Monthly trend rows net income out of total_cost, unlike the per-car bucket
total which adds it.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..calculations import (
    IntervalPolicy,
    IntervalTotals,
    build_fleet_intervals,
    build_intervals,
    consumption_rate,
    fuel_entry_liters,
    interval_consumption,
    parse_consumption_unit,
    price_per_liter,
)
from ..calculations.units import UnitLike
from ..config import Config
from ..models import Car, ExpenseEntry, FuelEntry, IncomeEntry, coerce_records
from ..utils.id_utils import filter_by_car, get_record_id
from ..utils.numbers import round2, sum_finite, to_number
from ..utils.time_utils import format_date_iso, month_key
from ..utils.wide_events import track_operation
from .car_stats_service import calculate_car_stats, calculate_total_cost
from .currency_service import currency_of
from .fleet_stats_service import calculate_aggregate_stats

logger = logging.getLogger(__name__)


def empty_chart_data() -> Dict[str, Any]:
    return {
        "monthly_trends": [],
        "monthly_trends_by_currency": {},
        "fuel_prices": [],
        "fuel_prices_by_currency": {},
        "consumption_trends": {},
        "car_comparison": [],
    }


def _empty_trend_row(month: str) -> Dict[str, Any]:
    return {
        "month": month,
        "total_cost": 0.0,
        "fuel_cost": 0.0,
        "expense_cost": 0.0,
        "income_cost": 0.0,
        "distance": 0.0,
        "volume": 0.0,
        "fill_ups": 0,
    }


def monthly_trends_by_currency(
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry] = (),
    income_entries: Iterable[IncomeEntry] = (),
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Monthly cost, distance and consumption rows per fuel currency.

    A currency gets a series only if at least one fill-up was paid in it.
    Expenses and incomes of that currency are merged in; income reduces
    total_cost. Distance comes from the currency's valid intervals, attributed
    to the month of the later fill-up.

    Returns:
        Mapping of currency to rows {month, total_cost, fuel_cost,
        expense_cost, income_cost, distance, volume, fill_ups, cost_per_km,
        consumption}
    """
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    expense_entries = coerce_records(ExpenseEntry, expense_entries)
    income_entries = coerce_records(IncomeEntry, income_entries)

    fuel_by_currency: Dict[str, List[FuelEntry]] = {}
    for entry in fuel_entries:
        fuel_by_currency.setdefault(currency_of(entry), []).append(entry)

    trends: Dict[str, List[Dict[str, Any]]] = {}

    for currency, currency_fuel in fuel_by_currency.items():
        months: Dict[str, Dict[str, Any]] = {}

        for entry in currency_fuel:
            when = entry.when
            if when is None:
                continue
            row = months.setdefault(month_key(when), _empty_trend_row(month_key(when)))
            cost = sum_finite([to_number(entry.cost)])
            row["fuel_cost"] += cost
            row["total_cost"] += cost
            row["fill_ups"] += 1
            row["volume"] += sum_finite([fuel_entry_liters(entry)])

        for expense in expense_entries:
            when = expense.when
            if when is None or currency_of(expense) != currency:
                continue
            row = months.setdefault(month_key(when), _empty_trend_row(month_key(when)))
            amount = sum_finite([to_number(expense.amount)])
            row["expense_cost"] += amount
            row["total_cost"] += amount

        for income in income_entries:
            when = income.when
            if when is None or currency_of(income) != currency:
                continue
            row = months.setdefault(month_key(when), _empty_trend_row(month_key(when)))
            amount = sum_finite([to_number(income.amount)])
            row["income_cost"] += amount
            row["total_cost"] -= amount

        month_totals: Dict[str, IntervalTotals] = {}
        for build in build_fleet_intervals(currency_fuel, policy).values():
            for interval in build.intervals:
                month_totals.setdefault(month_key(interval.date), IntervalTotals()).add(interval)

        rows = []
        for month in sorted(months):
            row = months[month]
            totals = month_totals.get(month)
            if totals is not None:
                row["distance"] = totals.distance_km
            distance = row["distance"]

            row["cost_per_km"] = round2(row["total_cost"] / distance) if distance > 0 else None
            row["consumption"] = round2(totals.avg_consumption(unit)) if totals is not None else None
            for field in ("total_cost", "fuel_cost", "expense_cost", "income_cost", "distance", "volume"):
                row[field] = round2(row[field])
            rows.append(row)

        trends[currency] = rows

    return trends


def _price_row(entry: FuelEntry, price: float) -> Dict[str, Any]:
    return {
        "date": format_date_iso(entry.when),
        "month": month_key(entry.when),
        "price_per_liter": round2(price),
        "cost": round2(to_number(entry.cost)),
        "volume": round2(fuel_entry_liters(entry)),
        "fuel_company": entry.fuel_company,
        "fuel_type": entry.fuel_type,
    }


def _priced_entries(fuel_entries: List[FuelEntry]) -> List[tuple]:
    priced = []
    for entry in fuel_entries:
        if entry.when is None:
            continue
        price = price_per_liter(entry)
        if price is not None:
            priced.append((entry, price))
    priced.sort(key=lambda item: item[0].when)
    return priced


def fuel_prices(fuel_entries: Iterable[FuelEntry]) -> List[Dict[str, Any]]:
    """Price-per-liter rows across all currencies, sorted by date."""
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    return [_price_row(entry, price) for entry, price in _priced_entries(fuel_entries)]


def fuel_prices_by_currency(fuel_entries: Iterable[FuelEntry]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Price-per-liter rows grouped by currency, each group sorted by date.

    Fill-ups without a positive volume or cost have no price and are left out.
    """
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    prices: Dict[str, List[Dict[str, Any]]] = {}
    for entry, price in _priced_entries(fuel_entries):
        currency = currency_of(entry)
        row = _price_row(entry, price)
        row["currency"] = currency
        prices.setdefault(currency, []).append(row)
    return prices


def _car_label(car: Car) -> str:
    return car.name or get_record_id(car)


def consumption_trends(
    cars: Iterable[Car],
    fuel_entries: Iterable[FuelEntry],
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    One row per valid interval, keyed by car name.

    consumption is None for intervals without a consumption sample (partial
    fill-ups when the car also has full ones). Cars without any valid interval
    are left out.
    """
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    cars = coerce_records(Car, cars)
    fuel_entries = coerce_records(FuelEntry, fuel_entries)

    trends: Dict[str, List[Dict[str, Any]]] = {}
    for car in cars:
        car_entries = filter_by_car(fuel_entries, get_record_id(car))
        if len(car_entries) < 2:
            continue

        rows = [
            {
                "date": format_date_iso(interval.date),
                "month": month_key(interval.date),
                "consumption": round2(interval_consumption(interval, unit)),
                "distance": round2(interval.distance_km),
                "volume": round2(interval.volume_liters),
                "cost": round2(interval.cost),
                "mileage": to_number(interval.to_entry.mileage),
            }
            for interval in build_intervals(car_entries, policy).intervals
        ]
        if rows:
            trends[_car_label(car)] = rows

    return trends


def aggregate_monthly_consumption(trends: Iterable[Dict[str, Any]], car_name: str) -> List[Dict[str, Any]]:
    """
    Mean interval consumption per month for one car's trend rows.

    Rows without a consumption value are ignored.

    Examples:
        >>> aggregate_monthly_consumption(
        ...     [{"month": "2024-01", "consumption": 8.0}, {"month": "2024-01", "consumption": 9.0}],
        ...     "Civic",
        ... )
        [{'month': '2024-01', 'consumption': 8.5, 'car_name': 'Civic'}]
    """
    months: Dict[str, List[float]] = {}
    for trend in trends:
        consumption = trend.get("consumption")
        if consumption is None:
            continue
        months.setdefault(trend["month"], []).append(consumption)

    return [
        {"month": month, "consumption": round2(sum(values) / len(values)), "car_name": car_name}
        for month, values in sorted(months.items())
    ]


def car_comparison(
    cars: Iterable[Car],
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry] = (),
    income_entries: Iterable[IncomeEntry] = (),
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> List[Dict[str, Any]]:
    """Side-by-side per-car figures for every car with at least one fill-up."""
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    cars = coerce_records(Car, cars)
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    expense_entries = coerce_records(ExpenseEntry, expense_entries)
    income_entries = coerce_records(IncomeEntry, income_entries)

    rows = []
    for car in cars:
        car_id = get_record_id(car)
        car_entries = filter_by_car(fuel_entries, car_id)
        if not car_entries:
            continue

        stats = calculate_car_stats(car_id, car_entries, unit, policy)
        rows.append(
            {
                "name": _car_label(car),
                "avg_consumption": stats["avg_consumption"],
                "avg_cost": stats["avg_cost_per_distance"],
                "total_distance": stats["total_distance_km"],
                "total_cost": calculate_total_cost(car_id, car_entries, expense_entries, income_entries),
                "total_fill_ups": len(car_entries),
                "total_volume": round2(sum_finite(fuel_entry_liters(entry) for entry in car_entries)),
                "brand": car.brand,
                "model": car.model,
                "year": car.year,
            }
        )
    return rows


def monthly_trends(monthly_stats: Dict[str, Dict[str, Any]], unit: UnitLike = None) -> List[Dict[str, Any]]:
    """
    Fleet-wide monthly rows derived from the aggregate monthly_stats.

    Consumption here divides all fuel bought in the month by the month's
    interval distance, so it is a rough figure for trend charts only.
    """
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    rows = []
    for month in sorted(monthly_stats):
        stats = monthly_stats[month]
        distance = stats["distance"]
        volume = stats["volume"]
        rows.append(
            {
                "month": month,
                "total_cost": stats["total_cost"],
                "fuel_cost": stats["fuel_cost"],
                "expense_cost": stats["expense_cost"],
                "income_cost": stats["income_cost"],
                "distance": distance,
                "volume": volume,
                "fill_ups": stats["fill_ups"],
                "cost_per_km": round2(stats["total_cost"] / distance) if distance > 0 else None,
                "consumption": round2(consumption_rate(volume, distance, unit))
                if distance > 0 and volume > 0
                else None,
            }
        )
    return rows


def generate_chart_data(
    cars: Iterable[Car],
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry] = (),
    income_entries: Iterable[IncomeEntry] = (),
    unit: UnitLike = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Any]:
    """
    Every chart series in one structure.

    Returns:
        Dict with monthly_trends, monthly_trends_by_currency, fuel_prices,
        fuel_prices_by_currency, consumption_trends and car_comparison; all
        empty when there are no fill-ups
    """
    unit = parse_consumption_unit(unit or Config.CONSUMPTION_UNIT)
    cars = coerce_records(Car, cars)
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    expense_entries = coerce_records(ExpenseEntry, expense_entries)
    income_entries = coerce_records(IncomeEntry, income_entries)

    if not fuel_entries:
        return empty_chart_data()

    with track_operation("chart_data", consumption_unit=unit.value) as event:
        event.add_business_metrics(
            {
                "cars": len(cars),
                "fuel_entries": len(fuel_entries),
                "expense_entries": len(expense_entries),
                "income_entries": len(income_entries),
            }
        )

        with event.timer("aggregate"):
            aggregate = calculate_aggregate_stats(fuel_entries, expense_entries, income_entries, unit, policy)

        with event.timer("series"):
            chart_data = {
                "monthly_trends": monthly_trends(aggregate["monthly_stats"], unit),
                "monthly_trends_by_currency": monthly_trends_by_currency(
                    fuel_entries, expense_entries, income_entries, unit, policy
                ),
                "fuel_prices": fuel_prices(fuel_entries),
                "fuel_prices_by_currency": fuel_prices_by_currency(fuel_entries),
                "consumption_trends": consumption_trends(cars, fuel_entries, unit, policy),
                "car_comparison": car_comparison(
                    cars, fuel_entries, expense_entries, income_entries, unit, policy
                ),
            }

        event.add_business_metric("currencies", len(chart_data["monthly_trends_by_currency"]))

    return chart_data
