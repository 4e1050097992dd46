"""
Service schedules and the time-or-mileage schedule type check.

A ServiceSchedule arrives from the input source with nullable interval
fields. get_cadence() turns it into a TimeBasedCadence or a
MileageBasedCadence so the projection code never has to look at the
other type's fields.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from .exceptions import ScheduleTypeError
from .service_task import ServiceTask
from .status import ScheduleType, TimeUnit
from .vehicle import VehicleAssignment


class ServiceProgram:
    """A group of schedules applied to a set of vehicles."""

    def __init__(
        self,
        id: int,
        name: str,
        vehicle_assignments: Optional[List[VehicleAssignment]] = None,
    ):
        self.id = id
        self.name = name
        self.vehicle_assignments = vehicle_assignments or []


class ServiceSchedule:
    """A recurring maintenance cadence belonging to a ServiceProgram."""

    def __init__(
            self,
            id: int,
            name: str,
            service_program: Optional[ServiceProgram] = None,
            service_tasks: Optional[List[ServiceTask]] = None,
            time_interval_value: Optional[int] = None,
            time_interval_unit: Optional[TimeUnit] = None,
            time_buffer_value: Optional[int] = None,
            time_buffer_unit: Optional[TimeUnit] = None,
            mileage_interval: Optional[float] = None,
            mileage_buffer: Optional[float] = None,
            first_service_date: Optional[datetime] = None,
            first_service_mileage: Optional[float] = None,
            is_active: bool = True,
            is_soft_deleted: bool = False,
    ):
        self.id = id
        self.name = name
        self.service_program = service_program
        self.service_tasks = service_tasks or []
        self.time_interval_value = time_interval_value
        self.time_interval_unit = time_interval_unit
        self.time_buffer_value = time_buffer_value
        self.time_buffer_unit = time_buffer_unit
        self.mileage_interval = mileage_interval
        self.mileage_buffer = mileage_buffer
        self.first_service_date = first_service_date
        self.first_service_mileage = first_service_mileage
        self.is_active = is_active
        self.is_soft_deleted = is_soft_deleted

    @property
    def vehicle_assignments(self) -> List[VehicleAssignment]:
        if self.service_program is None:
            return []
        return self.service_program.vehicle_assignments

    @property
    def is_live(self) -> bool:
        """Active and not soft-deleted."""
        return self.is_active and not self.is_soft_deleted


@dataclass(frozen=True)
class TimeBasedCadence:
    interval_value: int
    interval_unit: TimeUnit
    buffer_value: Optional[int] = None
    buffer_unit: Optional[TimeUnit] = None
    first_service_date: Optional[datetime] = None

    schedule_type = ScheduleType.TIME


@dataclass(frozen=True)
class MileageBasedCadence:
    interval: float
    buffer: Optional[float] = None
    first_service_mileage: Optional[float] = None

    schedule_type = ScheduleType.MILEAGE


Cadence = Union[TimeBasedCadence, MileageBasedCadence]


def is_time_based(schedule: ServiceSchedule) -> bool:
    return schedule.time_interval_value is not None


def is_mileage_based(schedule: ServiceSchedule) -> bool:
    return schedule.mileage_interval is not None


def has_exactly_one_schedule_type(schedule: ServiceSchedule) -> bool:
    return is_time_based(schedule) != is_mileage_based(schedule)


def get_schedule_type(schedule: ServiceSchedule) -> ScheduleType:
    """Return TIME or MILEAGE, raising ScheduleTypeError for both or neither."""
    if not has_exactly_one_schedule_type(schedule):
        raise ScheduleTypeError(schedule.id)
    return ScheduleType.TIME if is_time_based(schedule) else ScheduleType.MILEAGE


def get_cadence(schedule: ServiceSchedule) -> Cadence:
    """Build the cadence variant for a schedule after checking its type."""
    if get_schedule_type(schedule) == ScheduleType.TIME:
        if schedule.time_interval_unit is None:
            raise ValueError("Unsupported time unit: None")
        return TimeBasedCadence(
            interval_value=schedule.time_interval_value,
            interval_unit=schedule.time_interval_unit,
            buffer_value=schedule.time_buffer_value,
            buffer_unit=schedule.time_buffer_unit,
            first_service_date=schedule.first_service_date,
        )
    return MileageBasedCadence(
        interval=schedule.mileage_interval,
        buffer=schedule.mileage_buffer,
        first_service_mileage=schedule.first_service_mileage,
    )
