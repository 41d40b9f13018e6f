"""Calculator modules for the timekeeping system."""

from timekeeping.calculators.time_utils import (
    WeekBounds,
    duration_hours,
    format_elapsed,
    format_hours,
    same_month,
    timedelta_to_hours,
    utc_now,
    week_bounds,
)

__all__ = [
    "WeekBounds",
    "duration_hours",
    "format_elapsed",
    "format_hours",
    "same_month",
    "timedelta_to_hours",
    "utc_now",
    "week_bounds",
]
