"""Enums for reminder status, priority, schedule type and time units."""

from enum import Enum


class Status(Enum):
    """Reminder status categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    UPCOMING = 3


class PriorityLevel(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ScheduleType(Enum):
    TIME = "TIME"
    MILEAGE = "MILEAGE"


class TimeUnit(Enum):
    """Units a time-based interval or buffer can be expressed in."""

    HOURS = "HOURS"
    DAYS = "DAYS"
    WEEKS = "WEEKS"

    @classmethod
    def parse(cls, value: str) -> "TimeUnit":
        """Parse a unit name case-insensitively ('Weeks', 'weeks', 'WEEKS')."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported time unit: {value}") from None
