"""
Reminder projection across every active schedule and assigned vehicle.

Per (schedule, vehicle) pair the steps are:
1. Validate - the schedule must be exactly time-based or mileage-based
2. Project - generate bounded occurrences from the first service point
3. Classify - OVERDUE / DUE_SOON / UPCOMING against now and the odometer
4. Partition - keep every OVERDUE and DUE_SOON occurrence, plus only the
   first UPCOMING one
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Protocol, Union

from dateutil.relativedelta import relativedelta

from .calculations import classify_occurrence, project_occurrences
from .exceptions import ProjectionCancelled, ScheduleTypeError
from .schedule import ServiceSchedule, get_cadence
from .service_reminder import ServiceReminder, assemble_reminder
from .status import Status
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class ProjectionSettings:
    """Limits for a projection run."""

    max_occurrences: int = 100
    time_horizon: Union[relativedelta, timedelta] = field(
        default_factory=lambda: relativedelta(years=1)
    )
    mileage_horizon: float = 10000
    # False aborts the whole run on the first schedule with a bad type
    isolate_invalid_schedules: bool = True


@dataclass
class ProjectionResult:
    """Outcome of project_reminders()."""

    reminders: List[ServiceReminder] = field(default_factory=list)
    success: bool = True
    error_message: Optional[str] = None
    skipped_schedule_ids: List[int] = field(default_factory=list)


class ScheduleSource(Protocol):
    def get_active_schedules(self) -> List[ServiceSchedule]:
        ...


class ReminderSink(Protocol):
    def sync_reminders(self, reminders: List[ServiceReminder]) -> None:
        ...


class ReminderProjection:
    """Projects reminders for schedules at a fixed point in time."""

    def __init__(self, settings: Optional[ProjectionSettings] = None):
        self.settings = settings or ProjectionSettings()
        self.skipped_schedule_ids: List[int] = []

    def project_pair(
        self,
        schedule: ServiceSchedule,
        vehicle: Vehicle,
        assigned_at: datetime,
        now: datetime,
    ) -> List[ServiceReminder]:
        """Reminders for one schedule on one vehicle."""
        cadence = get_cadence(schedule)
        occurrences = project_occurrences(
            cadence,
            current_mileage=vehicle.mileage,
            assigned_at=assigned_at,
            now=now,
            max_occurrences=self.settings.max_occurrences,
            time_horizon=self.settings.time_horizon,
            mileage_horizon=self.settings.mileage_horizon,
        )

        reminders: List[ServiceReminder] = []
        upcoming: Optional[ServiceReminder] = None
        for occurrence in occurrences:
            status = classify_occurrence(cadence, occurrence, now, vehicle.mileage)
            if status == Status.UPCOMING:
                upcoming = assemble_reminder(
                    schedule, cadence, vehicle, occurrence, status, now
                )
                # Later occurrences can only be UPCOMING as well
                break
            reminders.append(
                assemble_reminder(schedule, cadence, vehicle, occurrence, status, now)
            )

        logger.debug(
            "Schedule %s / vehicle %s: %d due, %s upcoming",
            schedule.id,
            vehicle.id,
            len(reminders),
            "1" if upcoming else "no",
        )
        if upcoming is not None:
            reminders.append(upcoming)
        return reminders

    def project_schedule(
        self,
        schedule: ServiceSchedule,
        now: datetime,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ServiceReminder]:
        """Reminders for every vehicle assigned to a schedule's program."""
        if not schedule.service_tasks:
            logger.debug("Schedule %s has no service tasks, skipping", schedule.id)
            return []

        # Check the type up front so no vehicle gets partial reminders
        get_cadence(schedule)

        reminders: List[ServiceReminder] = []
        for assignment in schedule.vehicle_assignments:
            if cancel_event is not None and cancel_event.is_set():
                raise ProjectionCancelled("Reminder projection cancelled")
            if assignment.vehicle is None:
                logger.debug(
                    "Schedule %s has an assignment without a vehicle, skipping",
                    schedule.id,
                )
                continue
            reminders.extend(
                self.project_pair(schedule, assignment.vehicle, assignment.added_at, now)
            )
        return reminders

    def project_all(
        self,
        schedules: List[ServiceSchedule],
        now: datetime,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ServiceReminder]:
        """Reminders for all live schedules, as one flat list."""
        self.skipped_schedule_ids = []
        reminders: List[ServiceReminder] = []
        for schedule in schedules:
            if not schedule.is_live:
                continue
            try:
                reminders.extend(self.project_schedule(schedule, now, cancel_event))
            except ScheduleTypeError as e:
                if not self.settings.isolate_invalid_schedules:
                    raise
                logger.warning("Skipping schedule %s: %s", e.schedule_id, e)
                self.skipped_schedule_ids.append(schedule.id)
        return reminders


def project_reminders(
    source: ScheduleSource,
    sink: Optional[ReminderSink] = None,
    now: Optional[datetime] = None,
    settings: Optional[ProjectionSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ProjectionResult:
    """
    Load active schedules, project reminders and hand them to the sink.

    Failures come back as success=False with an error message. The one
    exception is a schedule type violation when isolate_invalid_schedules
    is off, which propagates to the caller.
    """
    settings = settings or ProjectionSettings()
    projection = ReminderProjection(settings)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)

    logger.info("Starting service reminder projection")
    try:
        schedules = source.get_active_schedules()
        reminders = projection.project_all(schedules, now, cancel_event)
        if sink is not None:
            sink.sync_reminders(reminders)
    except ScheduleTypeError:
        logger.error("Reminder projection aborted by an invalid schedule")
        raise
    except ProjectionCancelled as e:
        logger.warning("%s", e)
        return ProjectionResult(
            success=False,
            error_message=str(e),
            skipped_schedule_ids=projection.skipped_schedule_ids,
        )
    except Exception as e:
        logger.exception("Failed to project service reminders")
        return ProjectionResult(
            success=False,
            error_message=str(e),
            skipped_schedule_ids=projection.skipped_schedule_ids,
        )

    logger.info("Projected %d service reminders", len(reminders))
    return ProjectionResult(
        reminders=reminders,
        skipped_schedule_ids=projection.skipped_schedule_ids,
    )
