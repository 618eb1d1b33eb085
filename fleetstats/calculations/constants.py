"""
Calculation Constants for fleetstats

Centralized location for conversion factors, units and thresholds used in
calculations. Tunable thresholds are read from Config.
"""

from enum import Enum

from ..config import Config


class ConsumptionUnit(str, Enum):
    """Selectable consumption units."""

    L_PER_100KM = "L/100km"
    KM_PER_L = "km/L"
    G_PER_100MI = "G/100mi"
    KM_PER_G = "km/G"
    MI_PER_L = "mi/L"


# Units where a smaller number means better economy
LOWER_IS_BETTER_UNITS = frozenset({ConsumptionUnit.L_PER_100KM, ConsumptionUnit.G_PER_100MI})

# Record units
DISTANCE_UNIT_KM = "km"
DISTANCE_UNIT_MI = "mi"
VOLUME_UNIT_LITERS = "liters"
VOLUME_UNIT_GALLONS = "gallons"

# Conversion factors
KM_PER_MILE = 1.60934
LITERS_PER_GALLON = 3.78541

# Interval validation (data-quality heuristics, tunable via Config)
MAX_INTERVAL_DISTANCE_KM = Config.MAX_INTERVAL_DISTANCE_KM  # Longer spans are implausible between fill-ups
MAX_INTERVAL_DAYS = Config.MAX_INTERVAL_DAYS  # Longer gaps skew averages

# Time normalization
DAYS_PER_MONTH = 30.44  # Average days per month
DAYS_PER_YEAR = 365.25  # Average days per year

# Categories
FUEL_CATEGORY = "Fuel"
DEFAULT_CATEGORY = "Other"
UNKNOWN_CURRENCY = "UNKNOWN"

# Financial status
BREAK_EVEN_TOLERANCE = 1.0  # |net profit| below this counts as break-even

# Approximate rates per 1 USD, used only for the informational base-currency total
EXCHANGE_RATES = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "JPY": 110.0,
    "HKD": 7.75,
    "CAD": 1.25,
    "AUD": 1.35,
    "CHF": 0.92,
    "CNY": 6.45,
    "SGD": 1.35,
    "NZD": 1.40,
    "INR": 74.0,
    "KRW": 1100.0,
    "MXN": 20.0,
    "BRL": 5.2,
    "ZAR": 14.5,
    "RUB": 75.0,
    "SEK": 8.5,
    "NOK": 8.8,
    "DKK": 6.3,
}
