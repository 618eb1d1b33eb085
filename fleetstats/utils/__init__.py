"""Utility modules for fleetstats."""

from .numbers import is_finite, round2, sum_finite, to_number
from .id_utils import RecordId, filter_by_car, get_record_id, matches_car_id
from .time_utils import (
    days_between,
    format_date_iso,
    month_key,
    normalize_datetime,
    parse_date,
    year_key,
)

__all__ = [
    # Numbers
    'to_number',
    'is_finite',
    'round2',
    'sum_finite',
    # Ids
    'RecordId',
    'matches_car_id',
    'get_record_id',
    'filter_by_car',
    # Time
    'parse_date',
    'normalize_datetime',
    'month_key',
    'year_key',
    'days_between',
    'format_date_iso',
]
