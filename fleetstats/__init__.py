"""
fleetstats - fuel economy and cost analytics for vehicle expense trackers.

Turns raw fill-up, expense and income records into consumption rates, cost per
distance figures, multi-currency breakdowns and chart-ready series.

Usage:
    from fleetstats import build_car_report, calculate_aggregate_stats

    stats = calculate_aggregate_stats(fuel_entries, expenses, incomes, unit="km/L")
"""

from .config import Config
from .exceptions import (
    ConfigurationError,
    FleetStatsError,
    InvalidIntervalError,
    UnknownUnitError,
)
from .logging_config import configure_logging
from .models import Car, ExpenseEntry, FuelEntry, IncomeEntry, Interval
from .calculations import (
    ConsumptionUnit,
    IntervalPolicy,
    build_fleet_intervals,
    build_intervals,
    consumption_rate,
    convert_consumption,
)
from .utils.id_utils import RecordId, matches_car_id
from .services import (
    build_car_report,
    calculate_aggregate_stats,
    calculate_car_financial_analysis,
    calculate_car_stats,
    calculate_currency_stats,
    calculate_financial_summary,
    generate_chart_data,
)

__version__ = '1.0.0'

__all__ = [
    'Config',
    'configure_logging',
    # Errors
    'FleetStatsError',
    'InvalidIntervalError',
    'UnknownUnitError',
    'ConfigurationError',
    # Records
    'Car',
    'FuelEntry',
    'ExpenseEntry',
    'IncomeEntry',
    'Interval',
    'RecordId',
    'matches_car_id',
    # Calculations
    'ConsumptionUnit',
    'IntervalPolicy',
    'build_intervals',
    'build_fleet_intervals',
    'consumption_rate',
    'convert_consumption',
    # Services
    'build_car_report',
    'calculate_car_stats',
    'calculate_aggregate_stats',
    'calculate_currency_stats',
    'calculate_financial_summary',
    'calculate_car_financial_analysis',
    'generate_chart_data',
]
