import os

from .exceptions import ConfigurationError


def _env_float(key, default):
    """Read a numeric environment variable, naming the key on bad input."""
    raw = os.environ.get(key, default)
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {raw!r}", config_key=key) from None


class Config:
    """Library configuration from environment variables."""

    # Logging
    LOG_LEVEL = os.environ.get('FLEETSTATS_LOG_LEVEL', 'INFO')

    # Interval validation thresholds
    MAX_INTERVAL_DISTANCE_KM = _env_float('FLEETSTATS_MAX_INTERVAL_DISTANCE_KM', 2000)
    MAX_INTERVAL_DAYS = _env_float('FLEETSTATS_MAX_INTERVAL_DAYS', 60)

    # Display defaults
    BASE_CURRENCY = os.environ.get('FLEETSTATS_BASE_CURRENCY', 'USD')
    CONSUMPTION_UNIT = os.environ.get('FLEETSTATS_CONSUMPTION_UNIT', 'L/100km')

    # Wide event tail sampling for successful, clean computations
    EVENT_SAMPLE_RATE = _env_float('FLEETSTATS_EVENT_SAMPLE_RATE', 0.05)
