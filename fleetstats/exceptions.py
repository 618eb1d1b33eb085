"""
Custom exceptions for fleetstats.

Only programming errors cross the public boundary. Bad records (non-numeric
mileage, odometer rollbacks, stale intervals) are excluded from the results
instead of raising.
"""


class FleetStatsError(Exception):
    """Base exception for all fleetstats errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class InvalidIntervalError(FleetStatsError):
    """A consumption rate was requested for a non-positive distance or volume."""

    def __init__(self, message: str, distance_km: float = None, volume_liters: float = None):
        details = {}
        if distance_km is not None:
            details['distance_km'] = distance_km
        if volume_liters is not None:
            details['volume_liters'] = volume_liters
        super().__init__(message, details)
        self.distance_km = distance_km
        self.volume_liters = volume_liters


class UnknownUnitError(FleetStatsError):
    """An unsupported consumption, distance or volume unit was supplied."""

    def __init__(self, message: str, unit: str = None):
        details = {}
        if unit is not None:
            details['unit'] = unit
        super().__init__(message, details)
        self.unit = unit


class ConfigurationError(FleetStatsError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, config_key: str = None):
        details = {}
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, details)
        self.config_key = config_key
