"""Weekly hours calculator for team utilization reports.

This module groups time entries by employee and Sunday-aligned week,
supports filtering by project and date range, and renders the result as an
employee-by-week matrix.
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from timekeeping.calculators.time_utils import week_bounds
from timekeeping.models.time_entry import TimeEntry
from timekeeping.tracking.time_entry_ledger import TimeEntryLedger

logger = logging.getLogger(__name__)


@dataclass
class WeeklyHoursData:
    """Tracked hours for one employee in one week.

    Attributes:
        employee_id: Employee the hours belong to
        week_start: Sunday the week starts on
        hours: Total hours of closed entries started in the week
        entries_count: Number of closed entries in the week

    Example:
        >>> data = WeeklyHoursData(
        ...     employee_id="emp-1",
        ...     week_start=dt.date(2024, 3, 3),
        ...     hours=37.5,
        ...     entries_count=5,
        ... )
        >>> data.week_label
        '2024-03-03'
    """

    employee_id: str
    week_start: dt.date
    hours: float
    entries_count: int

    @property
    def week_label(self) -> str:
        return self.week_start.isoformat()


class WeeklyHoursCalculator:
    """Calculates weekly hours and builds utilization matrices.

    Open entries are skipped: they have no duration until they are stopped.

    Example:
        >>> calculator = WeeklyHoursCalculator()
        >>> weekly = calculator.calculate_weekly_hours(entries)
        >>> matrix = calculator.generate_weekly_matrix(weekly)
        >>> matrix.loc["emp-1", "2024-03-03"]
        37.5
    """

    def calculate_weekly_hours(self, entries: Iterable[TimeEntry]) -> List[WeeklyHoursData]:
        """Group closed entries by (employee, week) and total their hours.

        Returns:
            One WeeklyHoursData per employee-week, ordered by employee then week
        """
        weekly_groups: Dict[Tuple[str, dt.date], List[float]] = defaultdict(list)

        for entry in entries:
            if entry.is_open:
                continue
            key = (entry.employee_id, week_bounds(entry.start_time).start)
            weekly_groups[key].append(TimeEntryLedger.duration(entry))

        result = [
            WeeklyHoursData(
                employee_id=employee_id,
                week_start=week_start,
                hours=float(sum(durations)),
                entries_count=len(durations),
            )
            for (employee_id, week_start), durations in sorted(weekly_groups.items())
        ]

        logger.info(f"Calculated {len(result)} weekly hour records")
        return result

    def generate_weekly_matrix(self, weekly_data: List[WeeklyHoursData]) -> pd.DataFrame:
        """Build a DataFrame with employees as rows and week starts as columns.

        Weeks without tracked time for an employee are filled with 0.0.
        """
        if not weekly_data:
            logger.info("No weekly data, returning empty DataFrame")
            return pd.DataFrame()

        matrix_data: Dict[str, Dict[str, float]] = defaultdict(dict)
        for record in weekly_data:
            matrix_data[record.employee_id][record.week_label] = record.hours

        df = pd.DataFrame.from_dict(matrix_data, orient="index")
        df = df.reindex(sorted(df.columns), axis=1).fillna(0.0).sort_index()

        logger.info(
            f"Generated matrix with {len(df)} employees and {len(df.columns)} weeks"
        )
        return df

    def filter_by_project(
        self, entries: Iterable[TimeEntry], project_id: str
    ) -> List[TimeEntry]:
        """Keep entries booked on ``project_id``."""
        return [entry for entry in entries if entry.project_id == project_id]

    def filter_by_date_range(
        self,
        entries: Iterable[TimeEntry],
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> List[TimeEntry]:
        """Keep entries that started between the dates (inclusive, either optional)."""
        return [
            entry
            for entry in entries
            if (start_date is None or entry.start_time.date() >= start_date)
            and (end_date is None or entry.start_time.date() <= end_date)
        ]
