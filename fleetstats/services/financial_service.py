"""
Financial Summary Service

Income against running costs for vehicles that earn money (ride-hailing,
deliveries, rentals).
"""

from typing import Any, Dict, Iterable, Optional

from ..calculations import IntervalPolicy, IntervalTotals, build_intervals
from ..calculations.constants import BREAK_EVEN_TOLERANCE
from ..models import ExpenseEntry, FuelEntry, IncomeEntry, coerce_records
from ..utils.id_utils import filter_by_car
from ..utils.numbers import is_finite, round2, sum_finite, to_number

STATUS_PROFITABLE = "profitable"
STATUS_BREAK_EVEN = "break_even"
STATUS_LOSS = "loss"


def financial_status(net_profit: float) -> str:
    """
    Classify a net profit.

    Examples:
        >>> financial_status(0.5)
        'profitable'
        >>> financial_status(-0.5)
        'break_even'
        >>> financial_status(-20)
        'loss'
    """
    if net_profit > 0:
        return STATUS_PROFITABLE
    if abs(net_profit) < BREAK_EVEN_TOLERANCE:
        return STATUS_BREAK_EVEN
    return STATUS_LOSS


def calculate_financial_summary(
    total_fuel_costs: float,
    total_expense_costs: float,
    total_income_costs: float,
) -> Dict[str, Any]:
    """
    Profitability figures from fleet or car totals.

    Args:
        total_fuel_costs: Sum of fuel costs
        total_expense_costs: Sum of expense amounts
        total_income_costs: Sum of income amounts

    Returns:
        Dict with total_income, total_costs, net_profit, profit_margin (% of
        income), roi (% of costs) and status. Margin and ROI are 0 when their
        denominator is not positive.

    Examples:
        >>> calculate_financial_summary(300, 200, 1000)["net_profit"]
        500.0
    """
    fuel = to_number(total_fuel_costs)
    expenses = to_number(total_expense_costs)
    income = to_number(total_income_costs)
    fuel = fuel if is_finite(fuel) else 0.0
    expenses = expenses if is_finite(expenses) else 0.0
    income = income if is_finite(income) else 0.0

    total_costs = fuel + expenses
    net_profit = income - total_costs
    profit_margin = (net_profit / income) * 100 if income > 0 else 0.0
    roi = (net_profit / total_costs) * 100 if total_costs > 0 else 0.0

    return {
        "total_income": round2(income),
        "total_costs": round2(total_costs),
        "net_profit": round2(net_profit),
        "profit_margin": round2(profit_margin),
        "roi": round2(roi),
        "status": financial_status(net_profit),
    }


def summarize_aggregate(aggregate: Dict[str, Any]) -> Dict[str, Any]:
    """Financial summary straight from calculate_aggregate_stats output."""
    return calculate_financial_summary(
        aggregate.get("total_fuel_costs", 0),
        aggregate.get("total_expense_costs", 0),
        aggregate.get("total_income_costs", 0),
    )


def calculate_car_financial_analysis(
    car_id: Any,
    fuel_entries: Iterable[FuelEntry],
    expense_entries: Iterable[ExpenseEntry] = (),
    income_entries: Iterable[IncomeEntry] = (),
    policy: Optional[IntervalPolicy] = None,
) -> Dict[str, Any]:
    """
    Break-even and per-distance profitability for one car.

    Distance is the sum of the car's valid fill-up intervals. When it is zero
    the per-km figures are 0.

    Returns:
        The calculate_financial_summary fields plus break_even_point (the
        income needed to cover costs), break_even_deficit, break_even_surplus,
        total_distance, cost_per_km, income_per_km and profit_per_km.

    Examples:
        >>> analysis = calculate_car_financial_analysis("car1", [], [], [])
        >>> analysis["status"], analysis["cost_per_km"]
        ('break_even', 0.0)
    """
    fuel = filter_by_car(coerce_records(FuelEntry, fuel_entries), car_id)
    expenses = filter_by_car(coerce_records(ExpenseEntry, expense_entries), car_id)
    incomes = filter_by_car(coerce_records(IncomeEntry, income_entries), car_id)

    total_fuel = sum_finite(to_number(entry.cost) for entry in fuel)
    total_expenses = sum_finite(to_number(expense.amount) for expense in expenses)
    total_income = sum_finite(to_number(income.amount) for income in incomes)
    total_costs = total_fuel + total_expenses

    analysis = calculate_financial_summary(total_fuel, total_expenses, total_income)
    analysis.update(
        {
            "break_even_point": round2(total_costs),
            "break_even_deficit": round2(max(0.0, total_costs - total_income)),
            "break_even_surplus": round2(max(0.0, total_income - total_costs)),
        }
    )

    distance_km = IntervalTotals.of(build_intervals(fuel, policy).intervals).distance_km
    if distance_km <= 0:
        analysis.update({"total_distance": 0, "cost_per_km": 0.0, "income_per_km": 0.0, "profit_per_km": 0.0})
        return analysis

    cost_per_km = total_costs / distance_km
    income_per_km = total_income / distance_km
    analysis.update(
        {
            "total_distance": round(distance_km),
            "cost_per_km": round(cost_per_km, 4),
            "income_per_km": round(income_per_km, 4),
            "profit_per_km": round(income_per_km - cost_per_km, 4),
        }
    )
    return analysis
