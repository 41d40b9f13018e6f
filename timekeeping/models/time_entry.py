"""Time entry data model.

A TimeEntry is one continuous work interval for one employee. An entry
without ``end_time`` is open: the employee is currently tracking time.
"""

import datetime as dt
from typing import Optional

from pydantic import Field, model_validator

from timekeeping.models.base import BaseDataModel


class TimeEntry(BaseDataModel):
    """Represents a single tracked work interval.

    Attributes:
        id: Store-assigned identifier
        employee_id: Owning employee
        start_time: When tracking started
        end_time: When tracking stopped; None while the entry is open
        project_id: Optional project the time was booked on
        description: Optional free text
        created_at: Store insertion timestamp, used to order ties

    Example:
        >>> entry = TimeEntry(
        ...     id="te-1",
        ...     employee_id="emp-1",
        ...     start_time=dt.datetime(2024, 3, 4, 9, 0),
        ... )
        >>> entry.is_open
        True
    """

    id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    project_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    @model_validator(mode="after")
    def validate_interval(self) -> "TimeEntry":
        """Reject entries that end before they start."""
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError(
                f"end_time ({self.end_time}) must not be before "
                f"start_time ({self.start_time})"
            )
        return self

    @property
    def is_open(self) -> bool:
        """True while the entry has no end time."""
        return self.end_time is None
