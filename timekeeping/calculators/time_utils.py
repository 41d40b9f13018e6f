"""Time calculation utilities for the timekeeping system.

This module provides low-level utilities for time calculations including:
- Converting timedeltas to fractional hours
- Sunday-aligned week and calendar month boundaries
- Formatting hours and elapsed seconds for display

All functions are pure and work with naive or aware datetimes alike, as
long as the values compared share the same kind.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Union

SECONDS_PER_HOUR = 3600
DAYS_PER_WEEK = 7

DateLike = Union[dt.date, dt.datetime]


@dataclass(frozen=True)
class WeekBounds:
    """Inclusive Sunday-to-Saturday span.

    Attributes:
        start: The Sunday the week starts on
        end: The Saturday the week ends on (start + 6 days)
    """

    start: dt.date
    end: dt.date

    def contains(self, moment: DateLike) -> bool:
        """Check whether a date or datetime falls inside the week.

        The end bound covers the whole Saturday up to end of day.
        """
        day = moment.date() if isinstance(moment, dt.datetime) else moment
        return self.start <= day <= self.end


def utc_now() -> dt.datetime:
    """Current instant as a timezone-aware UTC datetime.

    Local wall-clock time repeats an hour when daylight saving ends; UTC
    never steps back for that reason.
    """
    return dt.datetime.now(dt.timezone.utc)


def timedelta_to_hours(td: dt.timedelta) -> float:
    """Convert a timedelta to fractional hours without rounding.

    Example:
        >>> timedelta_to_hours(dt.timedelta(hours=1, minutes=30))
        1.5
        >>> timedelta_to_hours(dt.timedelta(0))
        0.0
    """
    return td.total_seconds() / SECONDS_PER_HOUR


def duration_hours(start: dt.datetime, end: Optional[dt.datetime]) -> float:
    """Wall-clock hours between start and end; 0 when end is unset.

    Example:
        >>> duration_hours(dt.datetime(2024, 1, 1, 9), dt.datetime(2024, 1, 1, 12))
        3.0
        >>> duration_hours(dt.datetime(2024, 1, 1, 9), None)
        0.0
    """
    if end is None:
        return 0.0
    return timedelta_to_hours(end - start)


def week_bounds(any_date: DateLike) -> WeekBounds:
    """Return the Sunday-aligned week containing a date.

    Example:
        >>> week_bounds(dt.date(2024, 3, 9))  # Saturday
        WeekBounds(start=datetime.date(2024, 3, 3), end=datetime.date(2024, 3, 9))
        >>> week_bounds(dt.date(2024, 3, 3)).start  # Sunday
        datetime.date(2024, 3, 3)
    """
    day = any_date.date() if isinstance(any_date, dt.datetime) else any_date
    # date.weekday(): Monday == 0 ... Sunday == 6
    days_since_sunday = (day.weekday() + 1) % DAYS_PER_WEEK
    start = day - dt.timedelta(days=days_since_sunday)
    return WeekBounds(start=start, end=start + dt.timedelta(days=DAYS_PER_WEEK - 1))


def same_month(a: DateLike, b: DateLike) -> bool:
    """Check whether two dates fall in the same calendar month."""
    return (a.year, a.month) == (b.year, b.month)


def format_hours(hours: float) -> str:
    """Format fractional hours as "Xh Ym".

    Minutes are rounded to the nearest minute.

    Example:
        >>> format_hours(7.5)
        '7h 30m'
        >>> format_hours(0)
        '0h 0m'
    """
    total_minutes = int(round(hours * 60))
    h, m = divmod(total_minutes, 60)
    return f"{h}h {m}m"


def format_elapsed(seconds: float) -> str:
    """Format a running duration in seconds as "HH:MM:SS".

    Negative input is clamped to zero.

    Example:
        >>> format_elapsed(3725)
        '01:02:05'
    """
    total = max(0, int(seconds))
    hours, remainder = divmod(total, SECONDS_PER_HOUR)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
