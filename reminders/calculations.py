"""Helper functions for projecting and classifying service occurrences."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, Optional, Union

from dateutil.relativedelta import relativedelta

from .schedule import Cadence, MileageBasedCadence, TimeBasedCadence
from .status import Status, TimeUnit

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


@dataclass(frozen=True)
class Occurrence:
    """One projected due point of a schedule for a vehicle."""

    occurrence_number: int
    due_date: Optional[datetime] = None
    due_mileage: Optional[float] = None


def advance_date(start: datetime, value: int, unit: TimeUnit) -> datetime:
    """Add value units to start. Weeks always expand to 7-day blocks."""
    if unit == TimeUnit.HOURS:
        return start + timedelta(hours=value)
    if unit == TimeUnit.DAYS:
        return start + timedelta(days=value)
    if unit == TimeUnit.WEEKS:
        return start + timedelta(days=value * DAYS_PER_WEEK)
    raise ValueError(f"Unsupported time unit: {unit}")


def buffer_to_days(value: int, unit: TimeUnit) -> int:
    """Convert a time buffer to whole days; hours round up to the next day."""
    if unit == TimeUnit.HOURS:
        return math.ceil(value / HOURS_PER_DAY)
    if unit == TimeUnit.DAYS:
        return value
    if unit == TimeUnit.WEEKS:
        return value * DAYS_PER_WEEK
    raise ValueError(f"Unsupported time unit: {unit}")


def intervals_passed(
    first_service_mileage: Optional[float], current_mileage: float, interval: float
) -> int:
    """Whole mileage intervals elapsed since the first service (informational)."""
    if first_service_mileage is None or current_mileage <= first_service_mileage:
        return 0
    return math.floor((current_mileage - first_service_mileage) / interval)


def project_time_occurrences(
    cadence: TimeBasedCadence,
    assigned_at: datetime,
    now: datetime,
    max_occurrences: int = 100,
    horizon: Union[relativedelta, timedelta] = relativedelta(years=1),
) -> Iterator[Occurrence]:
    """
    Yield time-based occurrences in order.

    - Occurrence 1 is the first service date (or the assignment date)
    - Occurrence n is that start plus interval * (n - 1) units
    - Stops after max_occurrences or once a due date passes now + horizon
    """
    start = cadence.first_service_date or assigned_at
    limit = now + horizon
    for number in range(1, max_occurrences + 1):
        if number == 1:
            due_date = start
        else:
            due_date = advance_date(
                start, cadence.interval_value * (number - 1), cadence.interval_unit
            )
        if due_date > limit:
            return
        yield Occurrence(occurrence_number=number, due_date=due_date)


def project_mileage_occurrences(
    cadence: MileageBasedCadence,
    current_mileage: float,
    max_occurrences: int = 100,
    horizon: float = 10000,
) -> Iterator[Occurrence]:
    """Yield mileage-based occurrences: start + interval * (n - 1)."""
    if cadence.first_service_mileage is not None:
        start = cadence.first_service_mileage
    else:
        start = current_mileage
    limit = current_mileage + horizon
    for number in range(1, max_occurrences + 1):
        due_mileage = start + cadence.interval * (number - 1)
        if due_mileage > limit:
            return
        yield Occurrence(occurrence_number=number, due_mileage=due_mileage)


def project_occurrences(
    cadence: Cadence,
    current_mileage: float,
    assigned_at: datetime,
    now: datetime,
    max_occurrences: int = 100,
    time_horizon: Union[relativedelta, timedelta] = relativedelta(years=1),
    mileage_horizon: float = 10000,
) -> Iterator[Occurrence]:
    """Dispatch to the time or mileage projection for the cadence."""
    if isinstance(cadence, TimeBasedCadence):
        return project_time_occurrences(
            cadence, assigned_at, now, max_occurrences, time_horizon
        )
    return project_mileage_occurrences(
        cadence, current_mileage, max_occurrences, mileage_horizon
    )


def check_status(current, due, soon_threshold) -> Status:
    """Determine status by comparing current value to due threshold."""
    if current >= due:
        return Status.OVERDUE
    if current >= due - soon_threshold:
        return Status.DUE_SOON
    return Status.UPCOMING


def classify_occurrence(
    cadence: Cadence,
    occurrence: Occurrence,
    now: datetime,
    current_mileage: float,
) -> Status:
    """
    Classify one occurrence against the current date or odometer.

    OVERDUE once the due point is reached, DUE_SOON once inside the
    buffer before it, UPCOMING otherwise. Without a buffer there is no
    DUE_SOON window.
    """
    if isinstance(cadence, TimeBasedCadence):
        buffer_days = 0
        if cadence.buffer_value is not None and cadence.buffer_unit is not None:
            buffer_days = buffer_to_days(cadence.buffer_value, cadence.buffer_unit)
        return check_status(now, occurrence.due_date, timedelta(days=buffer_days))
    return check_status(current_mileage, occurrence.due_mileage, cadence.buffer or 0)
