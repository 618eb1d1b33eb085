"""
Record id helpers.

Vehicle ids reach the engine in more than one shape: plain strings from the
client, document-store object ids, occasionally integers. Every attribution of
a record to a car goes through ``matches_car_id`` so the comparison rule lives
in one place: two ids are equal iff their string forms are equal.
"""

from collections.abc import Mapping
from typing import Any, Iterable, List


class RecordId:
    """
    Newtype around a raw id value.

    Equality and hashing use the string representation, so
    ``RecordId("64f0c2")`` equals ``RecordId(ObjectId("64f0c2"))``.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any):
        if isinstance(value, RecordId):
            value = value.value
        self.value = value

    def __str__(self):
        if self.value is None:
            return ""
        return str(self.value)

    def __repr__(self):
        return f"RecordId({str(self)!r})"

    def __bool__(self):
        return str(self) != ""

    def __eq__(self, other):
        if not isinstance(other, RecordId):
            other = RecordId(other)
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))


def matches_car_id(entry_car_id: Any, target_car_id: Any) -> bool:
    """
    Check whether a record's car id refers to the target car.

    Args:
        entry_car_id: Car id stored on the record
        target_car_id: Car id being matched

    Returns:
        True iff both ids are non-empty and their string forms are equal

    Examples:
        >>> matches_car_id("car1", "car1")
        True
        >>> matches_car_id(42, "42")
        True
        >>> matches_car_id("", "")
        False
    """
    entry_id = RecordId(entry_car_id)
    target_id = RecordId(target_car_id)
    if not entry_id or not target_id:
        return False
    return entry_id == target_id


def get_record_id(obj: Any) -> str:
    """
    Extract a record's id as a string.

    Prefers ``_id`` over ``id`` when both exist (document-store convention).
    Works on mappings and on objects with attributes.

    Returns:
        The id string, or '' if the record has no usable id

    Examples:
        >>> get_record_id({"_id": "abc", "id": "xyz"})
        'abc'
        >>> get_record_id({"id": 7})
        '7'
        >>> get_record_id(None)
        ''
    """
    if obj is None:
        return ""

    for key in ("_id", "id"):
        if isinstance(obj, Mapping):
            value = obj.get(key)
        else:
            value = getattr(obj, key, None)
        record_id = RecordId(value)
        if record_id:
            return str(record_id)

    return ""


def filter_by_car(records: Iterable[Any], car_id: Any) -> List[Any]:
    """Return the records whose ``car_id`` matches the given car."""
    return [record for record in records if matches_car_id(record.car_id, car_id)]
