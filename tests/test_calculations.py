#!/usr/bin/env python3
"""Tests for occurrence projection and status classification helpers."""

from datetime import datetime, timedelta

import pytest

from reminders import (
    MileageBasedCadence,
    Occurrence,
    Status,
    TimeBasedCadence,
    TimeUnit,
    advance_date,
    buffer_to_days,
    check_status,
    classify_occurrence,
    intervals_passed,
    project_occurrences,
)
from reminders.calculations import (
    project_mileage_occurrences,
    project_time_occurrences,
)

START = datetime(2024, 1, 1)
NOW = datetime(2024, 3, 1)


class TestAdvanceDate:
    """Tests for advance_date unit conversion."""

    def test_hours(self):
        assert advance_date(START, 12, TimeUnit.HOURS) == datetime(2024, 1, 1, 12)

    def test_days(self):
        assert advance_date(START, 45, TimeUnit.DAYS) == datetime(2024, 2, 15)

    def test_weeks_expand_to_days(self):
        """2 weeks x 4 intervals = 56 days, not 8 calendar weeks by another rule."""
        assert advance_date(START, 2 * 4, TimeUnit.WEEKS) == START + timedelta(days=56)

    def test_unsupported_unit(self):
        with pytest.raises(ValueError, match="Unsupported time unit"):
            advance_date(START, 1, None)


class TestBufferToDays:
    """Tests for buffer_to_days."""

    def test_hours_round_up(self):
        assert buffer_to_days(24, TimeUnit.HOURS) == 1
        assert buffer_to_days(25, TimeUnit.HOURS) == 2
        assert buffer_to_days(1, TimeUnit.HOURS) == 1

    def test_days_and_weeks(self):
        assert buffer_to_days(5, TimeUnit.DAYS) == 5
        assert buffer_to_days(3, TimeUnit.WEEKS) == 21

    def test_unsupported_unit(self):
        with pytest.raises(ValueError):
            buffer_to_days(1, "MONTHS")


class TestIntervalsPassed:
    """Tests for intervals_passed."""

    def test_counts_whole_intervals(self):
        assert intervals_passed(10000, 23000, 5000) == 2

    def test_no_first_service(self):
        assert intervals_passed(None, 23000, 5000) == 0

    def test_not_yet_reached(self):
        assert intervals_passed(30000, 23000, 5000) == 0


class TestProjectTimeOccurrences:
    """Tests for time-based occurrence generation."""

    @pytest.fixture
    def cadence(self):
        return TimeBasedCadence(3, TimeUnit.WEEKS, first_service_date=START)

    def test_scenario_three_weeks(self, cadence):
        """Every 3 weeks from 2024-01-01 viewed on 2024-03-01."""
        occurrences = list(project_time_occurrences(cadence, START, NOW))
        assert [o.due_date for o in occurrences[:4]] == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 22),
            datetime(2024, 2, 12),
            datetime(2024, 3, 4),
        ]
        assert [o.occurrence_number for o in occurrences[:4]] == [1, 2, 3, 4]

    def test_first_occurrence_is_start_date(self, cadence):
        first = next(project_time_occurrences(cadence, datetime(2023, 6, 1), NOW))
        assert first.due_date == START
        assert first.due_mileage is None

    def test_falls_back_to_assignment_date(self):
        cadence = TimeBasedCadence(10, TimeUnit.DAYS)
        assigned = datetime(2024, 2, 10, 8, 30)
        occurrences = list(project_time_occurrences(cadence, assigned, NOW))
        assert occurrences[0].due_date == assigned
        assert occurrences[1].due_date == datetime(2024, 2, 20, 8, 30)

    def test_stops_at_one_year_horizon(self, cadence):
        """2024-01-01 to 2025-03-01 is 425 days: offsets 0..420 fit, 21 occurrences."""
        occurrences = list(project_time_occurrences(cadence, START, NOW))
        assert len(occurrences) == 21
        assert occurrences[-1].due_date <= datetime(2025, 3, 1)

    def test_custom_horizon(self, cadence):
        occurrences = list(
            project_time_occurrences(cadence, START, NOW, horizon=timedelta(days=3))
        )
        assert [o.occurrence_number for o in occurrences] == [1, 2, 3, 4]

    def test_bounded_with_tiny_interval(self):
        cadence = TimeBasedCadence(1, TimeUnit.HOURS, first_service_date=NOW)
        occurrences = list(project_time_occurrences(cadence, NOW, NOW))
        assert len(occurrences) == 100

    def test_custom_max_occurrences(self):
        cadence = TimeBasedCadence(1, TimeUnit.HOURS, first_service_date=NOW)
        occurrences = list(project_time_occurrences(cadence, NOW, NOW, max_occurrences=7))
        assert len(occurrences) == 7

    def test_due_dates_non_decreasing(self):
        cadence = TimeBasedCadence(5, TimeUnit.HOURS, first_service_date=START)
        dates = [o.due_date for o in project_time_occurrences(cadence, START, NOW)]
        assert dates == sorted(dates)

    def test_missing_unit_fails_on_second_occurrence(self):
        cadence = TimeBasedCadence(3, None, first_service_date=START)
        with pytest.raises(ValueError, match="Unsupported time unit"):
            list(project_time_occurrences(cadence, START, NOW))


class TestProjectMileageOccurrences:
    """Tests for mileage-based occurrence generation."""

    def test_scenario_every_5000_from_10000(self):
        cadence = MileageBasedCadence(5000, first_service_mileage=10000)
        occurrences = list(project_mileage_occurrences(cadence, 23000))
        # Horizon is 23000 + 10000
        assert [o.due_mileage for o in occurrences] == [10000, 15000, 20000, 25000, 30000]
        assert occurrences[2].occurrence_number == 3
        assert occurrences[2].due_date is None

    def test_starts_at_current_mileage_without_first_service(self):
        cadence = MileageBasedCadence(5000)
        occurrences = list(project_mileage_occurrences(cadence, 23000))
        assert [o.due_mileage for o in occurrences] == [23000, 28000, 33000]

    def test_bounded_with_tiny_interval(self):
        cadence = MileageBasedCadence(0.001, first_service_mileage=0)
        assert len(list(project_mileage_occurrences(cadence, 0))) == 100

    def test_custom_horizon(self):
        cadence = MileageBasedCadence(1000, first_service_mileage=0)
        occurrences = list(project_mileage_occurrences(cadence, 0, horizon=2500))
        assert [o.due_mileage for o in occurrences] == [0, 1000, 2000]


class TestProjectOccurrences:
    """Tests for dispatch by cadence type."""

    def test_week_scenario_fifth_occurrence(self):
        """2 weeks, occurrence 5 = start + 56 days."""
        cadence = TimeBasedCadence(2, TimeUnit.WEEKS, first_service_date=START)
        occurrences = list(project_occurrences(cadence, 0, START, NOW))
        assert occurrences[4].due_date == START + timedelta(days=56)

    def test_mileage_dispatch(self):
        cadence = MileageBasedCadence(5000, first_service_mileage=10000)
        occurrences = list(project_occurrences(cadence, 23000, START, NOW))
        assert occurrences[3] == Occurrence(occurrence_number=4, due_mileage=25000)


class TestCheckStatus:
    """Tests for check_status helper function."""

    def test_overdue(self):
        """OVERDUE when current >= due."""
        assert check_status(100, 90, 10) == Status.OVERDUE
        assert check_status(100, 100, 10) == Status.OVERDUE

    def test_due_soon(self):
        """DUE_SOON when current >= due - threshold."""
        assert check_status(95, 100, 10) == Status.DUE_SOON
        assert check_status(90, 100, 10) == Status.DUE_SOON

    def test_upcoming(self):
        """UPCOMING when current < due - threshold."""
        assert check_status(80, 100, 10) == Status.UPCOMING
        assert check_status(0, 100, 10) == Status.UPCOMING

    def test_no_threshold_means_no_due_soon(self):
        assert check_status(99, 100, 0) == Status.UPCOMING

    def test_works_with_datetimes(self):
        due = datetime(2024, 3, 4)
        assert check_status(NOW, due, timedelta(days=3)) == Status.DUE_SOON
        assert check_status(NOW, due, timedelta(days=2)) == Status.UPCOMING


class TestClassifyOccurrence:
    """Tests for classify_occurrence buffer handling."""

    def test_time_without_buffer(self):
        cadence = TimeBasedCadence(3, TimeUnit.WEEKS, first_service_date=START)
        past = Occurrence(1, due_date=START)
        future = Occurrence(4, due_date=datetime(2024, 3, 4))
        assert classify_occurrence(cadence, past, NOW, 0) == Status.OVERDUE
        assert classify_occurrence(cadence, future, NOW, 0) == Status.UPCOMING

    def test_time_due_exactly_now_is_overdue(self):
        cadence = TimeBasedCadence(1, TimeUnit.DAYS)
        assert classify_occurrence(cadence, Occurrence(1, due_date=NOW), NOW, 0) == Status.OVERDUE

    def test_time_with_week_buffer(self):
        cadence = TimeBasedCadence(3, TimeUnit.WEEKS, 1, TimeUnit.WEEKS, START)
        assert (
            classify_occurrence(cadence, Occurrence(4, due_date=datetime(2024, 3, 4)), NOW, 0)
            == Status.DUE_SOON
        )
        # Buffer window opens 2024-03-18
        assert (
            classify_occurrence(cadence, Occurrence(5, due_date=datetime(2024, 3, 25)), NOW, 0)
            == Status.UPCOMING
        )

    def test_time_hour_buffer_rounds_up_to_day(self):
        cadence = TimeBasedCadence(1, TimeUnit.DAYS, 1, TimeUnit.HOURS)
        due_tomorrow = Occurrence(2, due_date=NOW + timedelta(days=1))
        assert classify_occurrence(cadence, due_tomorrow, NOW, 0) == Status.DUE_SOON

    def test_buffer_value_without_unit_is_ignored(self):
        cadence = TimeBasedCadence(1, TimeUnit.DAYS, buffer_value=5)
        due = Occurrence(2, due_date=NOW + timedelta(days=1))
        assert classify_occurrence(cadence, due, NOW, 0) == Status.UPCOMING

    def test_mileage_without_buffer(self):
        cadence = MileageBasedCadence(5000, first_service_mileage=10000)
        assert classify_occurrence(cadence, Occurrence(3, due_mileage=20000), NOW, 23000) == Status.OVERDUE
        assert classify_occurrence(cadence, Occurrence(4, due_mileage=25000), NOW, 23000) == Status.UPCOMING

    def test_mileage_with_buffer(self):
        cadence = MileageBasedCadence(5000, buffer=2000, first_service_mileage=10000)
        assert classify_occurrence(cadence, Occurrence(4, due_mileage=25000), NOW, 23000) == Status.DUE_SOON
        assert classify_occurrence(cadence, Occurrence(5, due_mileage=30000), NOW, 23000) == Status.UPCOMING

    def test_monotonic_along_sequence(self):
        """No occurrence is more urgent than the one before it."""
        cadence = TimeBasedCadence(4, TimeUnit.DAYS, 2, TimeUnit.WEEKS, START)
        statuses = [
            classify_occurrence(cadence, o, NOW, 0)
            for o in project_time_occurrences(cadence, START, NOW)
        ]
        values = [s.value for s in statuses]
        assert values == sorted(values)
        assert set(statuses) == {Status.OVERDUE, Status.DUE_SOON, Status.UPCOMING}
