"""
Tests for unit conversions and consumption rates
"""

import math

import pytest

from fleetstats.calculations import (
    ConsumptionUnit,
    best_consumption,
    consumption_rate,
    convert_consumption,
    is_lower_better,
    parse_consumption_unit,
    to_km,
    to_liters,
    worst_consumption,
)
from fleetstats.exceptions import InvalidIntervalError, UnknownUnitError


class TestDistanceAndVolume:
    """Test canonical unit conversion"""

    def test_km_unchanged(self):
        assert to_km(450, "km") == 450

    def test_miles_to_km(self):
        assert to_km(100, "mi") == pytest.approx(160.934)

    def test_unknown_distance_unit_treated_as_km(self):
        assert to_km(100, "") == 100

    def test_liters_unchanged(self):
        assert to_liters(38, "liters") == 38

    def test_gallons_to_liters(self):
        assert to_liters(10, "gallons") == pytest.approx(37.8541)


class TestConsumptionRate:
    """Test the five consumption formulas"""

    def test_liters_per_100km(self):
        """38 L over 450 km = 8.44 L/100km"""
        assert round(consumption_rate(38, 450, "L/100km"), 2) == 8.44

    def test_km_per_liter(self):
        assert round(consumption_rate(38, 450, ConsumptionUnit.KM_PER_L), 2) == 11.84

    def test_gallons_per_100mi(self):
        expected = (38 / 3.78541) / (450 / 1.60934) * 100
        assert consumption_rate(38, 450, "G/100mi") == pytest.approx(expected)

    def test_km_per_gallon(self):
        assert consumption_rate(38, 450, "km/G") == pytest.approx(450 / (38 / 3.78541))

    def test_miles_per_liter(self):
        assert consumption_rate(38, 450, "mi/L") == pytest.approx((450 / 1.60934) / 38)

    @pytest.mark.parametrize("volume,distance", [(0, 450), (38, 0), (-1, 450), (38, -10), (math.nan, 450)])
    def test_non_positive_inputs_raise(self, volume, distance):
        with pytest.raises(InvalidIntervalError) as exc_info:
            consumption_rate(volume, distance, "L/100km")
        assert "distance_km" in exc_info.value.details

    def test_unknown_unit_raises(self):
        with pytest.raises(UnknownUnitError) as exc_info:
            consumption_rate(38, 450, "mpg")
        assert exc_info.value.unit == "mpg"


class TestParseUnit:
    def test_accepts_enum_member(self):
        assert parse_consumption_unit(ConsumptionUnit.MI_PER_L) is ConsumptionUnit.MI_PER_L

    def test_accepts_string_value(self):
        assert parse_consumption_unit("G/100mi") is ConsumptionUnit.G_PER_100MI

    def test_rejects_unknown(self):
        with pytest.raises(UnknownUnitError):
            parse_consumption_unit("l/100KM")


class TestDirection:
    """Test best/worst selection per unit"""

    @pytest.mark.parametrize("unit", ["L/100km", "G/100mi"])
    def test_lower_is_better(self, unit):
        assert is_lower_better(unit) is True
        assert best_consumption([8.4, 6.1, 9.9], unit) == 6.1
        assert worst_consumption([8.4, 6.1, 9.9], unit) == 9.9

    @pytest.mark.parametrize("unit", ["km/L", "km/G", "mi/L"])
    def test_higher_is_better(self, unit):
        assert is_lower_better(unit) is False
        assert best_consumption([12.0, 15.5, 10.2], unit) == 15.5
        assert worst_consumption([12.0, 15.5, 10.2], unit) == 10.2

    def test_empty_rates(self):
        assert best_consumption([], "L/100km") is None
        assert worst_consumption([], "km/L") is None


class TestConvertConsumption:
    """Test algebraic conversion between consumption units"""

    def test_same_unit_returns_value(self):
        assert convert_consumption(8.0, "L/100km", "L/100km") == 8.0

    def test_l_per_100km_to_km_per_l(self):
        assert convert_consumption(8.0, "L/100km", "km/L") == pytest.approx(12.5)

    def test_km_per_l_to_l_per_100km(self):
        assert convert_consumption(12.5, "km/L", "L/100km") == pytest.approx(8.0)

    @pytest.mark.parametrize("unit", [u.value for u in ConsumptionUnit])
    def test_matches_direct_rate(self, unit):
        """Converting from L/100km matches computing directly in the target unit"""
        direct = consumption_rate(38, 450, unit)
        converted = convert_consumption(consumption_rate(38, 450, "L/100km"), "L/100km", unit)
        assert converted == pytest.approx(direct, abs=1e-6)

    def test_non_positive_value_returns_none(self):
        assert convert_consumption(0, "L/100km", "km/L") is None
        assert convert_consumption(-3, "km/L", "L/100km") is None
