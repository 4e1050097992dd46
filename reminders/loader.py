"""YAML loading and saving utilities for fleet and reminder data."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dateutil.parser import isoparse

from .projection import ProjectionSettings
from .schedule import ServiceProgram, ServiceSchedule
from .service_reminder import ServiceReminder
from .service_task import ServiceTask
from .status import TimeUnit
from .vehicle import Vehicle, VehicleAssignment


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Accept YAML timestamps, dates or ISO strings; return naive UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        parsed = isoparse(str(value))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_unit(value: Optional[str]) -> Optional[TimeUnit]:
    if value is None:
        return None
    return TimeUnit.parse(value)


def _parse_vehicle(dct: Dict[str, Any]) -> Vehicle:
    return Vehicle(dct["id"], dct.get("name", f"Vehicle {dct['id']}"), dct.get("mileage"))


def _parse_task(dct: Dict[str, Any]) -> ServiceTask:
    return ServiceTask(
        dct["id"],
        dct["name"],
        dct.get("estimatedLabourHours"),
        dct.get("estimatedCost"),
        dct.get("category"),
        dct.get("description"),
    )


def _parse_program(dct: Dict[str, Any], vehicles: Dict[int, Vehicle]) -> ServiceProgram:
    # Unknown vehicle ids become assignments without a vehicle
    assignments = [
        VehicleAssignment(vehicles.get(a["vehicleId"]), _parse_datetime(a["addedAt"]))
        for a in dct.get("vehicles") or []
    ]
    return ServiceProgram(dct["id"], dct["name"], assignments)


def _parse_schedule(
    dct: Dict[str, Any],
    programs: Dict[int, ServiceProgram],
    tasks: Dict[int, ServiceTask],
) -> ServiceSchedule:
    task_ids = dct.get("serviceTaskIds") or []
    missing = [i for i in task_ids if i not in tasks]
    if missing:
        raise KeyError(f"Schedule {dct['id']} references unknown service tasks {missing}")
    return ServiceSchedule(
        id=dct["id"],
        name=dct["name"],
        service_program=programs.get(dct.get("serviceProgramId")),
        service_tasks=[tasks[i] for i in task_ids],
        time_interval_value=dct.get("timeIntervalValue"),
        time_interval_unit=_parse_unit(dct.get("timeIntervalUnit")),
        time_buffer_value=dct.get("timeBufferValue"),
        time_buffer_unit=_parse_unit(dct.get("timeBufferUnit")),
        mileage_interval=dct.get("mileageInterval"),
        mileage_buffer=dct.get("mileageBuffer"),
        first_service_date=_parse_datetime(dct.get("firstServiceDate")),
        first_service_mileage=dct.get("firstServiceMileage"),
        is_active=dct.get("isActive", True),
        is_soft_deleted=dct.get("isSoftDeleted", False),
    )


def _load_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "rb") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def parse_fleet(data: Dict[str, Any]) -> List[ServiceSchedule]:
    """Build schedules with their programs, vehicles and tasks linked in."""
    vehicles = {v["id"]: _parse_vehicle(v) for v in data.get("vehicles") or []}
    tasks = {t["id"]: _parse_task(t) for t in data.get("serviceTasks") or []}
    programs = {
        p["id"]: _parse_program(p, vehicles) for p in data.get("servicePrograms") or []
    }
    return [
        _parse_schedule(s, programs, tasks) for s in data.get("serviceSchedules") or []
    ]


def load_schedules(filename: Union[str, Path]) -> List[ServiceSchedule]:
    """Load every schedule from a fleet YAML file."""
    return parse_fleet(_load_raw(filename))


def parse_settings(data: Optional[Dict[str, Any]]) -> ProjectionSettings:
    """Build ProjectionSettings from a camelCase settings mapping."""
    settings = ProjectionSettings()
    if not data:
        return settings
    if data.get("maxOccurrences") is not None:
        settings.max_occurrences = int(data["maxOccurrences"])
    if data.get("timeHorizonDays") is not None:
        settings.time_horizon = timedelta(days=data["timeHorizonDays"])
    if data.get("mileageHorizon") is not None:
        settings.mileage_horizon = data["mileageHorizon"]
    if data.get("isolateInvalidSchedules") is not None:
        settings.isolate_invalid_schedules = bool(data["isolateInvalidSchedules"])
    return settings


def load_settings(filename: Union[str, Path]) -> ProjectionSettings:
    """Load the optional settings section of a fleet YAML file."""
    return parse_settings(_load_raw(filename).get("settings"))


class YamlFleetSource:
    """Schedule source backed by a fleet YAML file."""

    def __init__(self, filename: Union[str, Path]):
        self.filename = filename

    def get_active_schedules(self) -> List[ServiceSchedule]:
        return [s for s in load_schedules(self.filename) if s.is_live]


def reminder_key(reminder: ServiceReminder) -> str:
    """Natural key as a string, e.g. '3/12/4/TIME'."""
    return "/".join(str(part) for part in reminder.natural_key)


def _reminder_to_dict(reminder: ServiceReminder) -> Dict[str, Any]:
    """Serialize a ServiceReminder to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "key": reminder_key(reminder),
        "vehicleId": reminder.vehicle_id,
        "vehicleName": reminder.vehicle_name,
        "serviceScheduleId": reminder.service_schedule_id,
        "serviceScheduleName": reminder.service_schedule_name,
        "occurrenceNumber": reminder.occurrence_number,
        "scheduleType": reminder.schedule_type.value,
        "status": reminder.status.name,
        "priorityLevel": reminder.priority_level.value,
        "currentMileage": reminder.current_mileage,
        "taskCount": reminder.task_count,
        "totalEstimatedLabourHours": reminder.total_estimated_labour_hours,
        "totalEstimatedCost": reminder.total_estimated_cost,
        "serviceTaskIds": [t.id for t in reminder.service_tasks],
    }
    if reminder.service_program_id is not None:
        d["serviceProgramId"] = reminder.service_program_id
        d["serviceProgramName"] = reminder.service_program_name
    if reminder.due_date is not None:
        d["dueDate"] = reminder.due_date.isoformat()
    if reminder.due_mileage is not None:
        d["dueMileage"] = reminder.due_mileage
    if reminder.time_interval_value is not None:
        d["timeIntervalValue"] = reminder.time_interval_value
    if reminder.time_interval_unit is not None:
        d["timeIntervalUnit"] = reminder.time_interval_unit.value
    if reminder.time_buffer_value is not None:
        d["timeBufferValue"] = reminder.time_buffer_value
    if reminder.time_buffer_unit is not None:
        d["timeBufferUnit"] = reminder.time_buffer_unit.value
    if reminder.mileage_interval is not None:
        d["mileageInterval"] = reminder.mileage_interval
    if reminder.mileage_buffer is not None:
        d["mileageBuffer"] = reminder.mileage_buffer
    if reminder.mileage_variance is not None:
        d["mileageVariance"] = reminder.mileage_variance
    if reminder.days_until_due is not None:
        d["daysUntilDue"] = reminder.days_until_due
    return d


def save_reminders(filename: Union[str, Path], reminders: List[ServiceReminder]) -> None:
    """
    Write reminders to a YAML file, replacing its previous contents.

    Entries are ordered by natural key so the same input always produces
    the same file.
    """
    ordered = sorted(reminders, key=lambda r: r.natural_key)
    data = {"reminders": [_reminder_to_dict(r) for r in ordered]}

    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


class YamlReminderSink:
    """Reminder sink that writes the computed list to a YAML file."""

    def __init__(self, filename: Union[str, Path]):
        self.filename = filename

    def sync_reminders(self, reminders: List[ServiceReminder]) -> None:
        save_reminders(self.filename, reminders)
