"""
Services module for fleetstats.

Per-car, fleet-wide, currency, chart and financial figures built on top of the
calculation layer.
"""

from .car_stats_service import (
    build_car_report,
    calculate_car_currency_breakdown,
    calculate_car_stats,
    calculate_category_costs,
    calculate_monthly_costs,
    calculate_total_cost,
    calculate_yearly_costs,
)
from .currency_service import (
    calculate_cost_per_distance,
    calculate_currency_stats,
    convert_currency,
    currency_of,
)
from .fleet_stats_service import (
    calculate_aggregate_stats,
    calculate_period_stats,
    empty_aggregate_stats,
)
from .series_service import (
    aggregate_monthly_consumption,
    car_comparison,
    consumption_trends,
    fuel_prices,
    fuel_prices_by_currency,
    generate_chart_data,
    monthly_trends,
    monthly_trends_by_currency,
)
from .financial_service import (
    calculate_car_financial_analysis,
    calculate_financial_summary,
    financial_status,
    summarize_aggregate,
)

__all__ = [
    # Per-car statistics
    'build_car_report',
    'calculate_car_stats',
    'calculate_total_cost',
    'calculate_monthly_costs',
    'calculate_yearly_costs',
    'calculate_category_costs',
    'calculate_car_currency_breakdown',
    # Currency breakdown
    'calculate_currency_stats',
    'calculate_cost_per_distance',
    'convert_currency',
    'currency_of',
    # Fleet statistics
    'calculate_aggregate_stats',
    'calculate_period_stats',
    'empty_aggregate_stats',
    # Chart series
    'generate_chart_data',
    'monthly_trends',
    'monthly_trends_by_currency',
    'fuel_prices',
    'fuel_prices_by_currency',
    'consumption_trends',
    'car_comparison',
    'aggregate_monthly_consumption',
    # Financial summary
    'calculate_car_financial_analysis',
    'calculate_financial_summary',
    'financial_status',
    'summarize_aggregate',
]
