"""
Record types consumed and derived by the statistics engine.

Input records are frozen dataclasses; the engine never mutates them. Each
input type can be built from an API payload with ``from_dict``, which accepts
the client's camelCase keys as well as snake_case ones.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

from .utils.id_utils import get_record_id
from .utils.time_utils import parse_date


def _pick(data: Mapping, *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})


def _flag(value: Any) -> bool:
    """Read a boolean form field; strings such as "false" or "0" are False."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class Car:
    id: Any
    name: str = ""
    brand: str = ""
    model: str = ""
    year: Optional[int] = None
    vehicle_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "Car":
        return cls(
            id=get_record_id(data),
            name=_pick(data, "name", default=""),
            brand=_pick(data, "brand", default=""),
            model=_pick(data, "model", default=""),
            year=_pick(data, "year"),
            vehicle_type=_pick(data, "vehicleType", "vehicle_type", default=""),
        )


@dataclass(frozen=True)
class FuelEntry:
    id: Any
    car_id: Any
    date: Any
    mileage: Any
    volume: Any
    cost: Any
    distance_unit: str = "km"
    volume_unit: str = "liters"
    currency: str = ""
    partial_fuel_up: bool = False
    fuel_company: Optional[str] = None
    fuel_type: Optional[str] = None

    @property
    def when(self) -> Optional[datetime]:
        """Parsed entry date, or None if unparseable."""
        return parse_date(self.date)

    @classmethod
    def from_dict(cls, data: Mapping) -> "FuelEntry":
        return cls(
            id=get_record_id(data),
            car_id=_pick(data, "carId", "car_id"),
            date=_pick(data, "date"),
            mileage=_pick(data, "mileage"),
            volume=_pick(data, "volume"),
            cost=_pick(data, "cost"),
            distance_unit=_pick(data, "distanceUnit", "distance_unit", default="km"),
            volume_unit=_pick(data, "volumeUnit", "volume_unit", default="liters"),
            currency=_pick(data, "currency", default=""),
            partial_fuel_up=_flag(_pick(data, "partialFuelUp", "partial_fuel_up", default=False)),
            fuel_company=_pick(data, "fuelCompany", "fuel_company"),
            fuel_type=_pick(data, "fuelType", "fuel_type"),
        )


@dataclass(frozen=True)
class ExpenseEntry:
    id: Any
    car_id: Any
    date: Any
    amount: Any
    category: Optional[str] = None
    currency: str = ""

    @property
    def when(self) -> Optional[datetime]:
        return parse_date(self.date)

    @classmethod
    def from_dict(cls, data: Mapping) -> "ExpenseEntry":
        return cls(
            id=get_record_id(data),
            car_id=_pick(data, "carId", "car_id"),
            date=_pick(data, "date"),
            amount=_pick(data, "amount"),
            category=_pick(data, "category"),
            currency=_pick(data, "currency", default=""),
        )


@dataclass(frozen=True)
class IncomeEntry:
    id: Any
    car_id: Any
    date: Any
    amount: Any
    category: Optional[str] = None
    currency: str = ""

    @property
    def when(self) -> Optional[datetime]:
        return parse_date(self.date)

    @classmethod
    def from_dict(cls, data: Mapping) -> "IncomeEntry":
        return cls(
            id=get_record_id(data),
            car_id=_pick(data, "carId", "car_id"),
            date=_pick(data, "date"),
            amount=_pick(data, "amount"),
            category=_pick(data, "category"),
            currency=_pick(data, "currency", default=""),
        )


@dataclass(frozen=True)
class Interval:
    """
    Span between two chronologically adjacent fill-ups of one car.

    Distance and volume are in canonical units (km, liters). ``cost`` is the
    cost of the later fill-up, the fuel that covered this span.
    """

    car_id: Any
    from_entry: FuelEntry
    to_entry: FuelEntry
    distance_km: float
    volume_liters: float
    cost: float
    usable_for_consumption: bool
    days: float

    @property
    def date(self) -> datetime:
        """Date the interval is attributed to (the later fill-up)."""
        return self.to_entry.when

    @property
    def has_consumption_sample(self) -> bool:
        """True if this interval contributes volume to consumption figures."""
        return self.usable_for_consumption and self.volume_liters > 0


def coerce_records(record_type, records: Optional[Iterable[Any]]) -> List[Any]:
    """
    Normalize an input collection into a list of ``record_type`` instances.

    Mappings are converted with ``record_type.from_dict``; None becomes [].
    """
    if records is None:
        return []
    return [
        record_type.from_dict(record) if isinstance(record, Mapping) else record
        for record in records
    ]
