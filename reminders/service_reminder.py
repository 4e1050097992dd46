"""ServiceReminder dataclass and assembly from a classified occurrence."""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .calculations import Occurrence
from .schedule import Cadence, MileageBasedCadence, ServiceSchedule, TimeBasedCadence
from .service_task import ServiceTask
from .status import PriorityLevel, ScheduleType, Status, TimeUnit
from .vehicle import Vehicle

PRIORITY_BY_STATUS = {
    Status.OVERDUE: PriorityLevel.HIGH,
    Status.DUE_SOON: PriorityLevel.MEDIUM,
    Status.UPCOMING: PriorityLevel.LOW,
}

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class ServiceReminder:
    """A projected reminder for one occurrence of a schedule on a vehicle."""

    vehicle_id: int
    vehicle_name: str
    service_schedule_id: int
    service_schedule_name: str
    occurrence_number: int
    schedule_type: ScheduleType
    status: Status
    priority_level: PriorityLevel
    current_mileage: float
    service_program_id: Optional[int] = None
    service_program_name: Optional[str] = None
    service_tasks: Tuple[ServiceTask, ...] = ()
    total_estimated_labour_hours: float = 0
    total_estimated_cost: float = 0
    task_count: int = 0
    due_date: Optional[datetime] = None
    due_mileage: Optional[float] = None
    time_interval_value: Optional[int] = None
    time_interval_unit: Optional[TimeUnit] = None
    time_buffer_value: Optional[int] = None
    time_buffer_unit: Optional[TimeUnit] = None
    mileage_interval: Optional[float] = None
    mileage_buffer: Optional[float] = None
    mileage_variance: Optional[float] = None
    days_until_due: Optional[int] = None

    @property
    def natural_key(self) -> Tuple[int, int, int, str]:
        """Identity used by sinks to match reminders across runs."""
        return (
            self.service_schedule_id,
            self.vehicle_id,
            self.occurrence_number,
            self.schedule_type.value,
        )

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)


def priority_for(status: Status) -> PriorityLevel:
    return PRIORITY_BY_STATUS[status]


def days_until(due_date: datetime, now: datetime) -> int:
    """Whole days from now until due_date, floored (negative when past)."""
    return math.floor((due_date - now).total_seconds() / SECONDS_PER_DAY)


def assemble_reminder(
    schedule: ServiceSchedule,
    cadence: Cadence,
    vehicle: Vehicle,
    occurrence: Occurrence,
    status: Status,
    now: datetime,
) -> ServiceReminder:
    """
    Build a ServiceReminder for a classified occurrence.

    Task totals cover every task on the schedule, so they are the same for
    all occurrences. Fields belonging to the other schedule type stay None.
    """
    tasks = tuple(schedule.service_tasks)
    program = schedule.service_program

    time_fields = {}
    mileage_fields = {}
    if isinstance(cadence, TimeBasedCadence):
        time_fields = {
            "due_date": occurrence.due_date,
            "time_interval_value": cadence.interval_value,
            "time_interval_unit": cadence.interval_unit,
            "time_buffer_value": cadence.buffer_value,
            "time_buffer_unit": cadence.buffer_unit,
            "days_until_due": days_until(occurrence.due_date, now),
        }
    elif isinstance(cadence, MileageBasedCadence):
        mileage_fields = {
            "due_mileage": occurrence.due_mileage,
            "mileage_interval": cadence.interval,
            "mileage_buffer": cadence.buffer,
            "mileage_variance": vehicle.mileage - occurrence.due_mileage,
        }

    return ServiceReminder(
        vehicle_id=vehicle.id,
        vehicle_name=vehicle.name,
        service_schedule_id=schedule.id,
        service_schedule_name=schedule.name,
        occurrence_number=occurrence.occurrence_number,
        schedule_type=cadence.schedule_type,
        status=status,
        priority_level=priority_for(status),
        current_mileage=vehicle.mileage,
        service_program_id=program.id if program else None,
        service_program_name=program.name if program else None,
        service_tasks=tasks,
        total_estimated_labour_hours=sum(t.estimated_labour_hours for t in tasks),
        total_estimated_cost=sum(t.estimated_cost for t in tasks),
        task_count=len(tasks),
        **time_fields,
        **mileage_fields,
    )
