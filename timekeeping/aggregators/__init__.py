"""Aggregators module for summarising time entries by week.

This module provides weekly timesheets with a submission lifecycle and
weekly utilization reports across employees.
"""

from timekeeping.aggregators.timesheet_aggregator import TimesheetAggregator
from timekeeping.aggregators.weekly_hours_calculator import (
    WeeklyHoursCalculator,
    WeeklyHoursData,
)

__all__ = [
    "TimesheetAggregator",
    "WeeklyHoursCalculator",
    "WeeklyHoursData",
]
