"""
Service reminder projection for fleet maintenance schedules.

This package provides:
- Status, PriorityLevel, ScheduleType, TimeUnit: enums
- ServiceSchedule, ServiceProgram, ServiceTask, Vehicle: input models
- get_cadence: time-or-mileage check producing a cadence variant
- project_occurrences / classify_occurrence: due point generation and status
- ServiceReminder / assemble_reminder: the projected reminder records
- ReminderProjection / project_reminders: fleet-wide projection
- YamlFleetSource / YamlReminderSink: YAML input and output
"""

from .status import Status, PriorityLevel, ScheduleType, TimeUnit
from .exceptions import ScheduleTypeError, ProjectionCancelled
from .service_task import ServiceTask
from .vehicle import Vehicle, VehicleAssignment
from .schedule import (
    ServiceProgram,
    ServiceSchedule,
    TimeBasedCadence,
    MileageBasedCadence,
    is_time_based,
    is_mileage_based,
    has_exactly_one_schedule_type,
    get_schedule_type,
    get_cadence,
)
from .calculations import (
    Occurrence,
    advance_date,
    buffer_to_days,
    intervals_passed,
    project_occurrences,
    check_status,
    classify_occurrence,
)
from .service_reminder import ServiceReminder, assemble_reminder, priority_for
from .projection import (
    ProjectionSettings,
    ProjectionResult,
    ReminderProjection,
    project_reminders,
)
from .loader import (
    load_schedules,
    load_settings,
    save_reminders,
    YamlFleetSource,
    YamlReminderSink,
)

__all__ = [
    "Status",
    "PriorityLevel",
    "ScheduleType",
    "TimeUnit",
    "ScheduleTypeError",
    "ProjectionCancelled",
    "ServiceTask",
    "Vehicle",
    "VehicleAssignment",
    "ServiceProgram",
    "ServiceSchedule",
    "TimeBasedCadence",
    "MileageBasedCadence",
    "is_time_based",
    "is_mileage_based",
    "has_exactly_one_schedule_type",
    "get_schedule_type",
    "get_cadence",
    "Occurrence",
    "advance_date",
    "buffer_to_days",
    "intervals_passed",
    "project_occurrences",
    "check_status",
    "classify_occurrence",
    "ServiceReminder",
    "assemble_reminder",
    "priority_for",
    "ProjectionSettings",
    "ProjectionResult",
    "ReminderProjection",
    "project_reminders",
    "load_schedules",
    "load_settings",
    "save_reminders",
    "YamlFleetSource",
    "YamlReminderSink",
]
