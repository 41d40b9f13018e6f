"""Weekly timesheet data model.

A WeeklyTimesheet summarises one Sunday-to-Saturday week of time entries
for one employee and carries its submission status.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from timekeeping.models.base import BaseDataModel


class TimesheetStatus(str, Enum):
    """Submission lifecycle of a weekly timesheet.

    draft -> submitted happens here; submitted -> approved|rejected is
    decided by an external review process.
    """

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class WeeklyTimesheet(BaseDataModel):
    """Represents one employee's timesheet for one calendar week.

    ``total_hours`` is a cached sum of the closed entries that started in
    the week and can always be recomputed from them.

    Attributes:
        id: Store-assigned identifier
        employee_id: Owning employee
        week_start: Sunday the week starts on
        week_end: Saturday the week ends on (week_start + 6 days)
        total_hours: Sum of closed entry durations in hours
        status: Submission status
        notes: Free text summary
        created_at: Store insertion timestamp
        submitted_at: When the timesheet was submitted
    """

    id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    week_start: dt.date
    week_end: dt.date
    total_hours: float = Field(0.0, ge=0)
    status: TimesheetStatus = TimesheetStatus.DRAFT
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    submitted_at: Optional[dt.datetime] = None

    @model_validator(mode="after")
    def validate_week(self) -> "WeeklyTimesheet":
        """Validate that the week is a Sunday-aligned seven day span."""
        # date.weekday(): Monday == 0 ... Sunday == 6
        if self.week_start.weekday() != 6:
            raise ValueError(f"week_start ({self.week_start}) must be a Sunday")
        if self.week_end != self.week_start + dt.timedelta(days=6):
            raise ValueError(
                f"week_end ({self.week_end}) must be six days after "
                f"week_start ({self.week_start})"
            )
        return self
