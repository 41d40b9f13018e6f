"""Timesheet aggregator for weekly time entry summaries.

This module buckets an employee's time entries into Sunday-aligned calendar
weeks, sums the tracked hours per week, and manages the submission status of
the resulting weekly timesheets.
"""

import datetime as dt
import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from timekeeping.calculators.time_utils import (
    DateLike,
    WeekBounds,
    utc_now,
    week_bounds,
)
from timekeeping.errors import InvalidStateError, NotFoundError
from timekeeping.models.time_entry import TimeEntry
from timekeeping.models.timesheet import TimesheetStatus, WeeklyTimesheet
from timekeeping.services.record_store import WEEKLY_TIMESHEETS, RecordStore
from timekeeping.tracking.time_entry_ledger import TimeEntryLedger
from timekeeping.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)


class TimesheetAggregator:
    """Builds weekly timesheets from time entries and submits them.

    The aggregator:
    1. Computes Sunday-to-Saturday week bounds for any date
    2. Filters an employee's entries to the week they started in
    3. Sums the hours of closed entries per week
    4. Persists one timesheet per employee and week in ``draft``
    5. Moves timesheets from ``draft`` to ``submitted``

    Approval and rejection are decided by an external review process and
    are not performed here.

    Attributes:
        store: Record store holding the ``weekly_timesheets`` table
        ledger: Ledger the time entries are read through

    Example:
        >>> aggregator = TimesheetAggregator(store, ledger)
        >>> sheet = aggregator.create("emp-1", dt.date(2024, 3, 3))
        >>> sheet.status
        <TimesheetStatus.DRAFT: 'draft'>
        >>> aggregator.submit(sheet.id).status
        <TimesheetStatus.SUBMITTED: 'submitted'>
    """

    def __init__(
        self,
        store: RecordStore,
        ledger: TimeEntryLedger,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        """Initialize the timesheet aggregator.

        Args:
            store: Record store for weekly timesheets
            ledger: Ledger used to read time entries
            clock: Callable returning the current instant (default: utc_now)
        """
        self.store = store
        self.ledger = ledger
        self._clock = clock or utc_now

    @staticmethod
    def week_bounds(any_date_in_week: DateLike) -> WeekBounds:
        """Sunday on or before the date, and the Saturday six days later."""
        return week_bounds(any_date_in_week)

    def entries_for_week(self, employee_id: str, week_start: DateLike) -> List[TimeEntry]:
        """Return the employee's entries that started within the week.

        A ``week_start`` that is not a Sunday is aligned to the Sunday of its
        week. Both bounds are inclusive; the last day counts up to end of day.
        """
        bounds = week_bounds(week_start)
        entries = [
            entry
            for entry in self.ledger.list_entries(employee_id)
            if bounds.contains(entry.start_time)
        ]
        logger.debug(
            f"Found {len(entries)} entries for {employee_id} in week "
            f"{bounds.start} to {bounds.end}"
        )
        return entries

    @staticmethod
    def weekly_hours(entries: Iterable[TimeEntry]) -> float:
        """Sum hours of entries with both start and end; open entries add 0."""
        return float(
            sum(
                TimeEntryLedger.duration(entry)
                for entry in entries
                if entry.start_time is not None and entry.end_time is not None
            )
        )

    @staticmethod
    def bucket_by_week(entries: Iterable[TimeEntry]) -> Dict[dt.date, List[TimeEntry]]:
        """Group entries by the Sunday of the week they started in.

        Returns:
            Mapping of week start to entries, ordered by week start
        """
        buckets: Dict[dt.date, List[TimeEntry]] = defaultdict(list)
        for entry in entries:
            buckets[week_bounds(entry.start_time).start].append(entry)
        return dict(sorted(buckets.items()))

    def create(self, employee_id: str, week_start: DateLike) -> WeeklyTimesheet:
        """Create the draft timesheet for an employee's week.

        There is one timesheet per employee and week. When it already exists
        it is returned; a draft gets its total refreshed from the entries
        first, while a submitted or reviewed timesheet is left untouched.

        Args:
            employee_id: Employee the timesheet belongs to
            week_start: Any date in the week (aligned to Sunday)

        Returns:
            The week's timesheet

        Raises:
            NotFoundError: If the employee does not exist
            StoreError: If the store call fails
        """
        with LogContext(employee_id=employee_id):
            self.ledger.directory.get_employee(employee_id)
            bounds = week_bounds(week_start)
            total_hours = self.weekly_hours(self.entries_for_week(employee_id, bounds.start))

            existing = self.store.query(
                WEEKLY_TIMESHEETS,
                filters={"employee_id": employee_id, "week_start": bounds.start.isoformat()},
            )
            if existing:
                timesheet = WeeklyTimesheet.from_record(existing[0])
                if (
                    timesheet.status == TimesheetStatus.DRAFT
                    and timesheet.total_hours != total_hours
                ):
                    record = self.store.update(
                        WEEKLY_TIMESHEETS, timesheet.id, {"total_hours": total_hours}
                    )
                    timesheet = WeeklyTimesheet.from_record(record)
                    logger.info(f"Refreshed draft timesheet {timesheet.id}: {total_hours:.2f}h")
                return timesheet

            record = self.store.insert(
                WEEKLY_TIMESHEETS,
                {
                    "employee_id": employee_id,
                    "week_start": bounds.start.isoformat(),
                    "week_end": bounds.end.isoformat(),
                    "total_hours": total_hours,
                    "status": TimesheetStatus.DRAFT.value,
                    "notes": f"Weekly timesheet: {bounds.start} to {bounds.end}",
                    "created_at": self._clock().isoformat(),
                    "submitted_at": None,
                },
            )
            timesheet = WeeklyTimesheet.from_record(record)
            logger.info(
                f"Created draft timesheet {timesheet.id} for week {bounds.start} "
                f"with {total_hours:.2f} hours"
            )
            return timesheet

    def submit(self, timesheet_id: str) -> WeeklyTimesheet:
        """Submit a draft timesheet.

        The total is recomputed from the entries at submission time.
        Re-submitting is rejected rather than treated as a no-op.

        Raises:
            NotFoundError: If the timesheet does not exist
            InvalidStateError: If the timesheet is not a draft
            StoreError: If the store call fails; the status stays draft
        """
        timesheet = self.get(timesheet_id)

        with LogContext(employee_id=timesheet.employee_id, timesheet_id=timesheet_id):
            if timesheet.status != TimesheetStatus.DRAFT:
                raise InvalidStateError(
                    f"Timesheet {timesheet_id} is already {timesheet.status.value} "
                    f"and cannot be submitted",
                    current_status=timesheet.status.value,
                )

            total_hours = self.weekly_hours(
                self.entries_for_week(timesheet.employee_id, timesheet.week_start)
            )
            record = self.store.update(
                WEEKLY_TIMESHEETS,
                timesheet_id,
                {
                    "status": TimesheetStatus.SUBMITTED.value,
                    "total_hours": total_hours,
                    "submitted_at": self._clock().isoformat(),
                },
            )
            submitted = WeeklyTimesheet.from_record(record)
            logger.info(f"Submitted timesheet {timesheet_id} with {total_hours:.2f} hours")
            return submitted

    def get(self, timesheet_id: str) -> WeeklyTimesheet:
        """
        Fetch a timesheet by id.

        Raises:
            NotFoundError: If the timesheet does not exist
        """
        record = self.store.get(WEEKLY_TIMESHEETS, timesheet_id)
        if record is None:
            raise NotFoundError("timesheet", timesheet_id)
        return WeeklyTimesheet.from_record(record)

    def list_timesheets(
        self, employee_id: str, status: Optional[TimesheetStatus] = None
    ) -> List[WeeklyTimesheet]:
        """The employee's timesheets, most recent week first."""
        filters = {"employee_id": employee_id}
        if status is not None:
            filters["status"] = status.value

        records = self.store.query(
            WEEKLY_TIMESHEETS, filters=filters, order_by="week_start", descending=True
        )
        return [WeeklyTimesheet.from_record(r) for r in records]
