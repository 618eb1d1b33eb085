"""
Presentation boundary for unit labels.

The statistics engine never imports this module. UI layers inject a
``Translator`` to turn consumption units into localized labels.
"""

from typing import Optional, Protocol

# Translation keys for the selectable consumption units
CONSUMPTION_UNIT_KEYS = {
    "L/100km": "units.consumption.per100km",
    "km/L": "units.consumption.kmPerLiter",
    "G/100mi": "units.consumption.per100miles",
    "km/G": "units.consumption.kmPerGallon",
    "mi/L": "units.consumption.miPerLiter",
}


class Translator(Protocol):
    """Anything that resolves a translation key, falling back when missing."""

    def resolve(self, key: str, fallback: str) -> str:
        ...


class DictTranslator:
    """Translator backed by a flat {key: text} mapping."""

    def __init__(self, messages: dict):
        self.messages = messages

    def resolve(self, key: str, fallback: str) -> str:
        value = self.messages.get(key)
        if isinstance(value, str) and value:
            return value
        return fallback


def consumption_unit_label(unit: str, translator: Optional[Translator] = None) -> str:
    """
    Human-readable label for a consumption unit.

    Args:
        unit: Consumption unit value (e.g. "L/100km")
        translator: Optional translator; the raw unit is used when absent

    Returns:
        Localized label, or the unit itself

    Examples:
        >>> consumption_unit_label("km/L")
        'km/L'
        >>> consumption_unit_label("km/L", DictTranslator({"units.consumption.kmPerLiter": "km por litro"}))
        'km por litro'
    """
    unit = str(getattr(unit, "value", unit))
    key = CONSUMPTION_UNIT_KEYS.get(unit)
    if translator is None or key is None:
        return unit
    return translator.resolve(key, unit)
