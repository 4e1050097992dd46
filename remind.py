#!/usr/bin/env python3
"""
CLI for fleet service reminders.

Commands:
  status     - Show overdue, due-soon and next upcoming reminders
  schedules  - List service schedules and their cadence
  sync       - Project reminders and write them to a YAML file
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from dateutil.parser import isoparse
from tabulate import tabulate
from typing import List, Optional

from reminders import (
    ProjectionSettings,
    ScheduleTypeError,
    ServiceReminder,
    ServiceSchedule,
    Status,
    YamlFleetSource,
    YamlReminderSink,
    is_mileage_based,
    is_time_based,
    load_schedules,
    load_settings,
    project_reminders,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_days(days: Optional[int]) -> str:
    """Format days until due (e.g., '3mo 15d' or '-2mo 5d')."""
    if days is None:
        return "-"

    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def format_due(reminder: ServiceReminder) -> str:
    """Due point: a date for time-based reminders, mileage otherwise."""
    if reminder.due_date is not None:
        return reminder.due_date.date().isoformat()
    return format_miles(reminder.due_mileage)


def format_remaining(reminder: ServiceReminder) -> str:
    """Days or mileage left until due; negative when overdue."""
    if reminder.days_until_due is not None:
        return format_days(reminder.days_until_due)
    if reminder.mileage_variance is None:
        return "-"
    remaining = -reminder.mileage_variance
    if remaining < 0:
        return f"-{abs(remaining):,.0f}"
    return f"{remaining:,.0f}"


def format_cadence(schedule: ServiceSchedule) -> str:
    """Interval and buffer of a schedule, e.g. 'every 3 weeks (buffer 1 weeks)'."""
    if is_time_based(schedule) and not is_mileage_based(schedule):
        unit = schedule.time_interval_unit.value.lower() if schedule.time_interval_unit else "?"
        text = f"every {schedule.time_interval_value} {unit}"
        if schedule.time_buffer_value is not None and schedule.time_buffer_unit:
            text += f" (buffer {schedule.time_buffer_value} {schedule.time_buffer_unit.value.lower()})"
        return text
    if is_mileage_based(schedule) and not is_time_based(schedule):
        text = f"every {format_miles(schedule.mileage_interval)}"
        if schedule.mileage_buffer is not None:
            text += f" (buffer {format_miles(schedule.mileage_buffer)})"
        return text
    return "INVALID (time and mileage)" if is_time_based(schedule) else "INVALID (none)"


def parse_now(value: Optional[str]) -> Optional[datetime]:
    """Parse --now as ISO 8601; offsets are converted to naive UTC."""
    if value is None:
        return None
    parsed = isoparse(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


# =============================================================================
# Status command
# =============================================================================


def make_reminder_table(reminders: List[ServiceReminder]) -> List[List[str]]:
    """Convert reminders to table rows."""
    rows = []
    for r in reminders:
        rows.append(
            [
                r.vehicle_name,
                r.service_schedule_name,
                str(r.occurrence_number),
                format_due(r),
                format_remaining(r),
                r.priority_level.value,
                str(r.task_count),
                format_cost(r.total_estimated_cost),
            ]
        )
    return rows


def build_settings(args) -> ProjectionSettings:
    """Settings from the fleet file, overridden by command-line flags."""
    settings = load_settings(args.fleet_file)
    if args.max_occurrences is not None:
        settings.max_occurrences = args.max_occurrences
    if args.time_horizon_days is not None:
        settings.time_horizon = timedelta(days=args.time_horizon_days)
    if args.mileage_horizon is not None:
        settings.mileage_horizon = args.mileage_horizon
    if args.abort_on_invalid:
        settings.isolate_invalid_schedules = False
    return settings


def cmd_status(args):
    """Show overdue, due-soon and next upcoming reminders."""
    now = parse_now(args.now) or datetime.now(timezone.utc).replace(tzinfo=None)
    try:
        result = project_reminders(
            YamlFleetSource(args.fleet_file), now=now, settings=build_settings(args)
        )
    except ScheduleTypeError as e:
        print(f"Error: {e}")
        return 1
    if not result.success:
        print(f"Error: {result.error_message}")
        return 1

    reminders = result.reminders
    if args.vehicle is not None:
        reminders = [r for r in reminders if r.vehicle_id == args.vehicle]

    print(f"As of: {now.date().isoformat()}")
    print(f"Reminders: {len(reminders)}")
    if result.skipped_schedule_ids:
        skipped = ", ".join(str(i) for i in result.skipped_schedule_ids)
        print(f"Skipped invalid schedules: {skipped}")
    print()

    headers = [
        "Vehicle",
        "Schedule",
        "#",
        "Due",
        "Remaining",
        "Priority",
        "Tasks",
        "Est. Cost",
    ]
    sections = [
        ("OVERDUE:", Status.OVERDUE),
        ("DUE SOON:", Status.DUE_SOON),
        ("UPCOMING:", Status.UPCOMING),
    ]
    for title, status in sections:
        group = sorted(
            [r for r in reminders if r.status == status],
            key=lambda r: (r.vehicle_name, r.service_schedule_name, r.occurrence_number),
        )
        if group:
            print(title)
            print(tabulate(make_reminder_table(group), headers=headers, tablefmt="simple"))
            print()

    return 0


# =============================================================================
# Schedules command
# =============================================================================


def make_schedule_table(schedules: List[ServiceSchedule]) -> List[List[str]]:
    """Convert schedules to table rows."""
    rows = []
    for s in schedules:
        program = s.service_program.name if s.service_program else "-"
        rows.append(
            [
                str(s.id),
                s.name,
                program,
                format_cadence(s),
                str(len(s.service_tasks)),
                str(len(s.vehicle_assignments)),
                "yes" if s.is_live else "no",
            ]
        )
    return rows


def cmd_schedules(args):
    """List service schedules and their cadence."""
    schedules = load_schedules(args.fleet_file)

    print(f"Schedules: {len(schedules)}")
    print()

    headers = ["ID", "Schedule", "Program", "Cadence", "Tasks", "Vehicles", "Active"]
    print(tabulate(make_schedule_table(schedules), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Sync command
# =============================================================================


def cmd_sync(args):
    """Project reminders and write them to a YAML file."""
    try:
        result = project_reminders(
            YamlFleetSource(args.fleet_file),
            YamlReminderSink(args.output),
            now=parse_now(args.now),
            settings=build_settings(args),
        )
    except ScheduleTypeError as e:
        print(f"Error: {e}")
        return 1
    if not result.success:
        print(f"Error: {result.error_message}")
        return 1

    print(f"Wrote {len(result.reminders)} reminders to {args.output}")
    return 0


# =============================================================================
# Main
# =============================================================================


def main():
    parser = argparse.ArgumentParser(
        description="Fleet service reminder projection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleet.yaml status
  %(prog)s fleet.yaml status --now 2024-03-01 --vehicle 7
  %(prog)s fleet.yaml schedules
  %(prog)s fleet.yaml sync reminders.yaml
  %(prog)s --abort-on-invalid fleet.yaml sync reminders.yaml
""",
    )
    parser.add_argument(
        "fleet_file",
        type=Path,
        help="Path to fleet YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-schedule details",
    )
    parser.add_argument(
        "--max-occurrences",
        type=int,
        help="Maximum occurrences per schedule and vehicle (default: 100)",
    )
    parser.add_argument(
        "--time-horizon-days",
        type=int,
        help="Look-ahead for time-based schedules in days (default: 1 year)",
    )
    parser.add_argument(
        "--mileage-horizon",
        type=float,
        help="Look-ahead for mileage-based schedules (default: 10000)",
    )
    parser.add_argument(
        "--abort-on-invalid",
        action="store_true",
        help="Stop the whole run on a schedule that is both or neither type",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show overdue, due-soon and next upcoming reminders"
    )
    status_parser.add_argument(
        "--now",
        type=str,
        help="Reference date/time in ISO format (default: now, UTC)",
    )
    status_parser.add_argument(
        "--vehicle",
        type=int,
        help="Only show reminders for this vehicle ID",
    )

    # Schedules subcommand
    subparsers.add_parser("schedules", help="List service schedules")

    # Sync subcommand
    sync_parser = subparsers.add_parser(
        "sync", help="Project reminders and write them to a YAML file"
    )
    sync_parser.add_argument(
        "output",
        type=Path,
        help="Reminder YAML file to write",
    )
    sync_parser.add_argument(
        "--now",
        type=str,
        help="Reference date/time in ISO format (default: now, UTC)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate fleet file exists
    if not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    # Dispatch to command handler
    if args.command == "status":
        return cmd_status(args)
    elif args.command == "schedules":
        return cmd_schedules(args)
    elif args.command == "sync":
        return cmd_sync(args)

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
