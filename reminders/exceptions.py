"""Errors raised by the reminder projection engine."""

from typing import Optional


class ScheduleTypeError(ValueError):
    """A schedule is not exactly one of time-based or mileage-based."""

    def __init__(self, schedule_id: Optional[int]):
        self.schedule_id = schedule_id
        super().__init__(
            f"ServiceSchedule {schedule_id} violates XOR constraint - "
            "must be either time-based OR mileage-based"
        )


class ProjectionCancelled(RuntimeError):
    """The projection run was cancelled between (schedule, vehicle) pairs."""
