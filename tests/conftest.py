"""
Pytest fixtures for fleetstats tests.
"""

import pytest
import structlog

from fleetstats.calculations import IntervalPolicy
from fleetstats.logging_config import configure_structlog
from fleetstats.utils import wide_events

from factories import CarFactory, ExpenseEntryFactory, FuelEntryFactory, IncomeEntryFactory


@pytest.fixture(autouse=True)
def no_event_sampling(monkeypatch):
    """Keep clean computations out of the log unless a test asks for them."""
    monkeypatch.setattr(wide_events.Config, "EVENT_SAMPLE_RATE", 0.0)


@pytest.fixture
def stdlib_events():
    """Route wide events through stdlib logging, as a host opting in would."""
    configure_structlog()
    yield
    structlog.reset_defaults()


@pytest.fixture
def policy():
    """Default interval thresholds (2000 km, 60 days)."""
    return IntervalPolicy()


@pytest.fixture
def car():
    return CarFactory.create(id="car1", name="Civic", brand="Honda", model="Civic", year=2019)


@pytest.fixture
def second_car():
    return CarFactory.create(id="car2", name="Golf", brand="Volkswagen", model="Golf", year=2021)


@pytest.fixture
def worked_example_entries():
    """car1: 50000 km on 2024-01-01 (40 L, 60) then 50450 km on 2024-01-20 (38 L, 58)."""
    return FuelEntryFactory.create_worked_example("car1")


@pytest.fixture
def fleet_records(car, second_car):
    """Two cars, two currencies, with expenses and incomes."""
    fuel = FuelEntryFactory.create_worked_example("car1") + [
        FuelEntryFactory.create(car_id="car2", date="2024-02-01", mileage=10000, volume=30, cost=45, currency="USD"),
        FuelEntryFactory.create(car_id="car2", date="2024-02-11", mileage=10500, volume=35, cost=50, currency="USD"),
    ]
    expenses = [
        ExpenseEntryFactory.create(car_id="car1", date="2024-01-10", amount=120, category="Maintenance"),
        ExpenseEntryFactory.create(car_id="car2", date="2024-02-05", amount=80, category="Insurance", currency="USD"),
    ]
    incomes = [
        IncomeEntryFactory.create(car_id="car1", date="2024-01-15", amount=200),
    ]
    return {
        "cars": [car, second_car],
        "fuel": fuel,
        "expenses": expenses,
        "incomes": incomes,
    }
