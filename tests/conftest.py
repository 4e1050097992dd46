"""Shared fixtures for reminder projection tests."""

from datetime import datetime

import pytest

from reminders import (
    ServiceProgram,
    ServiceSchedule,
    ServiceTask,
    TimeUnit,
    Vehicle,
    VehicleAssignment,
)


@pytest.fixture
def now():
    return datetime(2024, 3, 1)


@pytest.fixture
def tasks():
    return [
        ServiceTask(1, "Engine oil and filter", estimated_labour_hours=1.0, estimated_cost=85.0),
        ServiceTask(2, "Tire rotation", estimated_labour_hours=0.5, estimated_cost=40.0),
    ]


@pytest.fixture
def van():
    return Vehicle(1, "Van 01", mileage=23000)


@pytest.fixture
def make_schedule(tasks, van):
    """Factory for schedules in a one-vehicle program assigned on 2024-01-01."""

    def _make(vehicles=None, added_at=datetime(2024, 1, 1), **kwargs):
        vehicles = [van] if vehicles is None else vehicles
        program = ServiceProgram(
            10,
            "Light duty",
            [VehicleAssignment(v, added_at) for v in vehicles],
        )
        kwargs.setdefault("id", 100)
        kwargs.setdefault("name", "Oil change")
        kwargs.setdefault("service_tasks", tasks)
        return ServiceSchedule(service_program=program, **kwargs)

    return _make


@pytest.fixture
def three_week_schedule(make_schedule):
    """Time-based schedule: every 3 weeks from 2024-01-01."""
    return make_schedule(
        time_interval_value=3,
        time_interval_unit=TimeUnit.WEEKS,
        first_service_date=datetime(2024, 1, 1),
    )


@pytest.fixture
def mileage_schedule(make_schedule):
    """Mileage-based schedule: every 5000 from 10000."""
    return make_schedule(
        id=200,
        name="Tire rotation",
        mileage_interval=5000,
        first_service_mileage=10000,
    )
