"""
Currency Breakdown Service

Groups fuel, expense and income totals per currency without converting
between currencies. Only the informational base-currency total uses the
approximate exchange-rate table.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..calculations import IntervalPolicy, IntervalTotals, build_fleet_intervals
from ..calculations.constants import EXCHANGE_RATES, KM_PER_MILE, UNKNOWN_CURRENCY
from ..config import Config
from ..models import ExpenseEntry, FuelEntry, IncomeEntry, coerce_records
from ..utils.numbers import is_finite, round2, to_number

logger = logging.getLogger(__name__)


def currency_of(record: Any) -> str:
    """Currency code of a record, UNKNOWN when missing."""
    currency = record.currency
    if currency is None or str(currency).strip() == "":
        return UNKNOWN_CURRENCY
    return str(currency).strip()


def convert_currency(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Optional[Dict[str, float]] = None,
) -> float:
    """
    Convert an amount between currencies through USD.

    Unknown currencies are treated as parity with USD. The rates are
    approximate and only suitable for informational totals.

    Examples:
        >>> convert_currency(100, "EUR", "EUR")
        100
        >>> round(convert_currency(85, "EUR", "USD"), 2)
        100.0
    """
    if from_currency == to_currency:
        return amount

    if rates is None:
        rates = EXCHANGE_RATES

    from_rate = rates.get(from_currency, 1.0)
    to_rate = rates.get(to_currency, 1.0)

    usd_amount = amount / from_rate
    return usd_amount * to_rate


def calculate_cost_per_distance(
    fuel_entries: Iterable[FuelEntry],
    currency: str,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Optional[float]]:
    """
    Cost per km using only fill-ups paid in one currency.

    Intervals are built per car from that currency's fill-ups, with the same
    validation as every other interval.

    Returns:
        Dict with total_cost, total_distance and cost_per_distance (None
        without any valid interval)
    """
    relevant = [entry for entry in coerce_records(FuelEntry, fuel_entries) if currency_of(entry) == currency]

    totals = IntervalTotals()
    for result in build_fleet_intervals(relevant, policy).values():
        for interval in result.intervals:
            totals.add(interval)

    cost_per_distance = totals.cost / totals.distance_km if totals.distance_km > 0 else None

    return {
        "total_cost": totals.cost,
        "total_distance": totals.distance_km,
        "cost_per_distance": cost_per_distance,
    }


def _new_currency_row(currency: str) -> Dict[str, Any]:
    return {
        "currency": currency,
        "total_fuel_cost": 0.0,
        "total_expense_cost": 0.0,
        "total_income": 0.0,
        "net_cost": 0.0,
        "entry_count": 0,
    }


def calculate_currency_stats(
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry],
    income_entries: Iterable[IncomeEntry],
    base_currency: Optional[str] = None,
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Any]:
    """
    Per-currency breakdown of fuel, expense and income totals.

    Every currency seen on any record gets a row. Net cost is
    fuel + expenses - income within the currency. Rows are sorted by the
    magnitude of their net cost, largest first.

    Args:
        fuel_entries: Fill-ups in scope (one car or the whole fleet)
        expense_entries: Expenses in scope
        income_entries: Incomes in scope
        base_currency: Currency of the informational total (default from Config)
        policy: Interval validation thresholds for cost per distance

    Returns:
        Dict with by_currency rows, total_in_base_currency and base_currency
    """
    fuel_entries = coerce_records(FuelEntry, fuel_entries)
    expense_entries = coerce_records(ExpenseEntry, expense_entries)
    income_entries = coerce_records(IncomeEntry, income_entries)

    if base_currency is None:
        base_currency = Config.BASE_CURRENCY

    rows: Dict[str, Dict[str, Any]] = {}

    def add(record: Any, field: str, value: float) -> None:
        row = rows.setdefault(currency_of(record), _new_currency_row(currency_of(record)))
        if is_finite(value):
            row[field] += value
            row["entry_count"] += 1

    for entry in fuel_entries:
        add(entry, "total_fuel_cost", to_number(entry.cost))
    for expense in expense_entries:
        add(expense, "total_expense_cost", to_number(expense.amount))
    for income in income_entries:
        add(income, "total_income", to_number(income.amount))

    by_currency: List[Dict[str, Any]] = []
    total_in_base_currency = 0.0

    for currency, row in rows.items():
        row["net_cost"] = row["total_fuel_cost"] + row["total_expense_cost"] - row["total_income"]
        total_in_base_currency += convert_currency(row["net_cost"], currency, base_currency)

        distance_data = calculate_cost_per_distance(fuel_entries, currency, policy)
        cost_per_distance = distance_data["cost_per_distance"]

        by_currency.append(
            {
                "currency": currency,
                "total_fuel_cost": round2(row["total_fuel_cost"]),
                "total_expense_cost": round2(row["total_expense_cost"]),
                "total_income": round2(row["total_income"]),
                "net_cost": round2(row["net_cost"]),
                "entry_count": row["entry_count"],
                "cost_per_distance": round2(cost_per_distance),
                "total_distance": round2(distance_data["total_distance"]),
                "avg_cost_per_km": round2(cost_per_distance),
                "avg_cost_per_mile": round2(cost_per_distance * KM_PER_MILE) if cost_per_distance is not None else None,
            }
        )

    by_currency.sort(key=lambda r: abs(r["net_cost"]), reverse=True)

    if UNKNOWN_CURRENCY in rows:
        logger.debug("Records without a currency grouped under UNKNOWN")

    return {
        "by_currency": by_currency,
        "total_in_base_currency": round2(total_in_base_currency),
        "base_currency": base_currency,
    }
