"""
Tests for interval economy figures
"""

import pytest

from fleetstats.calculations import (
    IntervalTotals,
    build_intervals,
    fuel_entry_liters,
    interval_consumption,
    interval_cost_per_distance,
    price_per_liter,
)

from factories import FuelEntryFactory


@pytest.fixture
def intervals(policy):
    entries = [
        FuelEntryFactory.create(date="2024-01-01", mileage=50000),
        FuelEntryFactory.create(date="2024-01-10", mileage=50200, volume=12, cost=0, partial_fuel_up=True),
        FuelEntryFactory.create(date="2024-01-20", mileage=50600, volume=30, cost=45),
    ]
    return build_intervals(entries, policy).intervals


class TestIntervalFigures:
    def test_consumption(self, worked_example_entries, policy):
        interval = build_intervals(worked_example_entries, policy).intervals[0]

        assert round(interval_consumption(interval, "L/100km"), 2) == 8.44
        assert round(interval_cost_per_distance(interval), 2) == 0.13

    def test_no_sample_no_consumption(self, intervals):
        assert interval_consumption(intervals[0], "L/100km") is None

    def test_free_fill_up_has_no_cost_per_distance(self, intervals):
        assert interval_cost_per_distance(intervals[0]) is None


class TestPricePerLiter:
    def test_liters(self):
        assert price_per_liter(FuelEntryFactory.create(volume=40, cost=60)) == 1.5

    def test_gallons(self):
        entry = FuelEntryFactory.create(volume=10, volume_unit="gallons", cost=37.8541)
        assert price_per_liter(entry) == pytest.approx(1.0)
        assert fuel_entry_liters(entry) == pytest.approx(37.8541)

    @pytest.mark.parametrize("volume,cost", [(0, 60), (40, 0), (40, -5), ("x", 60), (40, None)])
    def test_invalid(self, volume, cost):
        assert price_per_liter(FuelEntryFactory.create(volume=volume, cost=cost)) is None


class TestIntervalTotals:
    """Test accumulation over intervals"""

    def test_distance_and_cost_always_count(self, intervals):
        totals = IntervalTotals.of(intervals)

        assert totals.interval_count == 2
        assert totals.distance_km == 600
        assert totals.cost == 45
        assert totals.consumption_samples == 1
        assert totals.consumption_distance_km == 400
        assert totals.consumption_volume_liters == 30

    def test_averages(self, intervals):
        totals = IntervalTotals.of(intervals)

        assert totals.avg_consumption("L/100km") == pytest.approx(7.5)
        assert totals.avg_cost_per_distance() == pytest.approx(45 / 600)
        assert totals.avg_paid_cost_per_distance() == pytest.approx(45 / 400)

    def test_empty(self):
        totals = IntervalTotals()

        assert totals.avg_consumption("km/L") is None
        assert totals.avg_cost_per_distance() is None
        assert totals.avg_paid_cost_per_distance() is None
