"""
Tests for chart series generation
"""

import pytest

from fleetstats.services.fleet_stats_service import calculate_aggregate_stats
from fleetstats.services.series_service import (
    aggregate_monthly_consumption,
    car_comparison,
    consumption_trends,
    empty_chart_data,
    fuel_prices,
    fuel_prices_by_currency,
    generate_chart_data,
    monthly_trends,
    monthly_trends_by_currency,
)

from factories import CarFactory, FuelEntryFactory, IncomeEntryFactory


class TestMonthlyTrendsByCurrency:
    """Test per-currency monthly rows"""

    def test_rows_per_fuel_currency(self, fleet_records):
        trends = monthly_trends_by_currency(
            fleet_records["fuel"], fleet_records["expenses"], fleet_records["incomes"], "L/100km"
        )

        assert set(trends) == {"EUR", "USD"}
        assert trends["EUR"] == [
            {
                "month": "2024-01",
                "total_cost": 38,
                "fuel_cost": 118,
                "expense_cost": 120,
                "income_cost": 200,
                "distance": 450,
                "volume": 78,
                "fill_ups": 2,
                "cost_per_km": 0.08,
                "consumption": 8.44,
            }
        ]
        assert trends["USD"][0]["total_cost"] == 175
        assert trends["USD"][0]["consumption"] == 7.0

    def test_income_only_currency_has_no_series(self, fleet_records):
        incomes = [IncomeEntryFactory.create(currency="GBP")]
        trends = monthly_trends_by_currency(fleet_records["fuel"], [], incomes)
        assert "GBP" not in trends

    def test_months_ascending(self):
        fuel = [
            FuelEntryFactory.create(date="2024-03-02", mileage=51000),
            FuelEntryFactory.create(date="2024-01-05", mileage=50000),
        ]
        trends = monthly_trends_by_currency(fuel)
        assert [row["month"] for row in trends["EUR"]] == ["2024-01", "2024-03"]

    def test_month_without_distance(self):
        trends = monthly_trends_by_currency([FuelEntryFactory.create()])
        row = trends["EUR"][0]

        assert row["distance"] == 0
        assert row["cost_per_km"] is None
        assert row["consumption"] is None


class TestFuelPrices:
    def test_sorted_by_date(self, fleet_records):
        prices = fuel_prices(list(reversed(fleet_records["fuel"])))

        assert [row["date"] for row in prices] == ["2024-01-01", "2024-01-20", "2024-02-01", "2024-02-11"]
        assert prices[0]["price_per_liter"] == 1.5
        assert prices[0]["month"] == "2024-01"

    def test_invalid_volume_excluded(self):
        prices = fuel_prices([FuelEntryFactory.create(volume=0), FuelEntryFactory.create(volume="x")])
        assert prices == []

    def test_by_currency(self, fleet_records):
        prices = fuel_prices_by_currency(fleet_records["fuel"])

        assert set(prices) == {"EUR", "USD"}
        assert [row["price_per_liter"] for row in prices["USD"]] == [1.5, 1.43]
        assert all(row["currency"] == "USD" for row in prices["USD"])

    def test_company_and_type_carried(self):
        entry = FuelEntryFactory.create(fuel_company="Shell", fuel_type="Diesel")
        row = fuel_prices([entry])[0]

        assert row["fuel_company"] == "Shell"
        assert row["fuel_type"] == "Diesel"


class TestConsumptionTrends:
    def test_one_row_per_interval(self, fleet_records):
        trends = consumption_trends(fleet_records["cars"], fleet_records["fuel"], "L/100km")

        assert set(trends) == {"Civic", "Golf"}
        assert trends["Civic"] == [
            {
                "date": "2024-01-20",
                "month": "2024-01",
                "consumption": 8.44,
                "distance": 450,
                "volume": 38,
                "cost": 58,
                "mileage": 50450,
            }
        ]

    def test_partial_interval_has_no_consumption(self, car):
        fuel = [
            FuelEntryFactory.create(date="2024-01-01", mileage=50000),
            FuelEntryFactory.create(date="2024-01-10", mileage=50200, partial_fuel_up=True),
            FuelEntryFactory.create(date="2024-01-20", mileage=50600, volume=30),
        ]
        rows = consumption_trends([car], fuel, "L/100km")["Civic"]

        assert [row["consumption"] for row in rows] == [None, 7.5]

    def test_car_without_intervals_left_out(self, car):
        assert consumption_trends([car], [FuelEntryFactory.create()]) == {}

    def test_stale_interval_has_no_row(self, car, worked_example_entries):
        fuel = worked_example_entries + [FuelEntryFactory.create(date="2024-04-29", mileage=50900)]
        assert len(consumption_trends([car], fuel)["Civic"]) == 1


class TestAggregateMonthlyConsumption:
    def test_mean_per_month(self):
        trends = [
            {"month": "2024-02", "consumption": 7.0},
            {"month": "2024-01", "consumption": 8.0},
            {"month": "2024-01", "consumption": 9.0},
            {"month": "2024-01", "consumption": None},
        ]
        assert aggregate_monthly_consumption(trends, "Civic") == [
            {"month": "2024-01", "consumption": 8.5, "car_name": "Civic"},
            {"month": "2024-02", "consumption": 7.0, "car_name": "Civic"},
        ]

    def test_empty(self):
        assert aggregate_monthly_consumption([], "Civic") == []


class TestCarComparison:
    def test_rows(self, fleet_records):
        rows = car_comparison(
            fleet_records["cars"], fleet_records["fuel"], fleet_records["expenses"], fleet_records["incomes"], "L/100km"
        )

        assert [row["name"] for row in rows] == ["Civic", "Golf"]
        assert rows[0] == {
            "name": "Civic",
            "avg_consumption": 8.44,
            "avg_cost": 0.13,
            "total_distance": 450,
            "total_cost": 438,
            "total_fill_ups": 2,
            "total_volume": 78,
            "brand": "Honda",
            "model": "Civic",
            "year": 2019,
        }
        assert rows[1]["total_cost"] == 175

    def test_cars_without_fuel_left_out(self, fleet_records):
        idle = CarFactory.create(id="car3", name="Idle")
        rows = car_comparison(fleet_records["cars"] + [idle], fleet_records["fuel"])
        assert "Idle" not in [row["name"] for row in rows]


class TestMonthlyTrends:
    def test_from_monthly_stats(self, fleet_records):
        stats = calculate_aggregate_stats(
            fleet_records["fuel"], fleet_records["expenses"], fleet_records["incomes"], "L/100km"
        )
        rows = monthly_trends(stats["monthly_stats"], "L/100km")

        assert [row["month"] for row in rows] == ["2024-01", "2024-02"]
        assert rows[0]["total_cost"] == 238
        assert rows[0]["cost_per_km"] == 0.53
        assert rows[0]["consumption"] == 17.33

    def test_no_distance(self):
        rows = monthly_trends(
            {
                "2024-01": {
                    "fill_ups": 1,
                    "volume": 40,
                    "fuel_cost": 60,
                    "expense_cost": 0,
                    "income_cost": 0,
                    "total_cost": 60,
                    "distance": 0,
                }
            }
        )
        assert rows[0]["cost_per_km"] is None
        assert rows[0]["consumption"] is None


class TestGenerateChartData:
    def test_empty_without_fuel(self, fleet_records):
        result = generate_chart_data(fleet_records["cars"], [], fleet_records["expenses"])
        assert result == empty_chart_data()

    def test_bundles_all_series(self, fleet_records):
        result = generate_chart_data(
            fleet_records["cars"], fleet_records["fuel"], fleet_records["expenses"], fleet_records["incomes"], "L/100km"
        )

        assert set(result) == {
            "monthly_trends",
            "monthly_trends_by_currency",
            "fuel_prices",
            "fuel_prices_by_currency",
            "consumption_trends",
            "car_comparison",
        }
        assert len(result["monthly_trends"]) == 2
        assert len(result["fuel_prices"]) == 4
        assert len(result["car_comparison"]) == 2

    def test_unknown_unit_raises(self, fleet_records):
        from fleetstats.exceptions import UnknownUnitError

        with pytest.raises(UnknownUnitError):
            generate_chart_data(fleet_records["cars"], fleet_records["fuel"], unit="mpg")

    def test_accepts_mappings(self):
        cars = [{"_id": "car1", "name": "Civic"}]
        fuel = [
            {"_id": "a", "carId": "car1", "date": "2024-01-01", "mileage": 50000, "volume": 40, "cost": 60, "currency": "EUR"},
            {"_id": "b", "carId": "car1", "date": "2024-01-20", "mileage": 50450, "volume": 38, "cost": 58, "currency": "EUR"},
        ]
        result = generate_chart_data(cars, fuel, unit="L/100km")

        assert result["consumption_trends"]["Civic"][0]["consumption"] == 8.44
