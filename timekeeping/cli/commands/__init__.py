"""CLI commands."""

from timekeeping.cli.commands.directory import employee, project
from timekeeping.cli.commands.report import report_weekly
from timekeeping.cli.commands.timesheets import timesheet
from timekeeping.cli.commands.tracking import (
    list_entries,
    start_tracking,
    stop_tracking,
    time_stats,
    tracking_status,
)

__all__ = [
    "employee",
    "list_entries",
    "project",
    "report_weekly",
    "start_tracking",
    "stop_tracking",
    "time_stats",
    "timesheet",
    "tracking_status",
]
