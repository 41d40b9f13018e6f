"""Data models for the timekeeping system.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- TimeEntry: One tracked work interval
- WeeklyTimesheet: Per-employee weekly summary with submission status
- Employee, Project: Reference data
"""

from timekeeping.models.base import BaseDataModel
from timekeeping.models.employee import Employee, Project
from timekeeping.models.time_entry import TimeEntry
from timekeeping.models.timesheet import TimesheetStatus, WeeklyTimesheet

__all__ = [
    "BaseDataModel",
    "Employee",
    "Project",
    "TimeEntry",
    "TimesheetStatus",
    "WeeklyTimesheet",
]
