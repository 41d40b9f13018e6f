"""Time entry ledger: start/stop tracking and duration statistics.

The ledger keeps the invariant that an employee has at most one open time
entry. Starting a new entry closes the open one first, at the same instant
the new one starts. The active entry is never held as separate state: it is
derived from the entry list the store returns after every mutation.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from timekeeping.calculators.time_utils import (
    DAYS_PER_WEEK,
    duration_hours,
    same_month,
    utc_now,
    week_bounds,
)
from timekeeping.errors import StoreError
from timekeeping.models.time_entry import TimeEntry
from timekeeping.services.directory import EmployeeDirectory
from timekeeping.services.record_store import TIME_ENTRIES, RecordStore
from timekeeping.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)

Clock = Callable[[], dt.datetime]


@dataclass
class TimeStats:
    """Tracked hours around a reference instant.

    Only closed entries count; an entry still running contributes nothing
    until it is stopped.

    Attributes:
        today: Hours of entries started on the same calendar day
        week: Hours of entries started in the same Sunday-aligned week
        month: Hours of entries started in the same calendar month
        average: Week hours spread over seven days
    """

    today: float
    week: float
    month: float
    average: float


def compute_stats(entries: Iterable[TimeEntry], now: dt.datetime) -> TimeStats:
    """Compute day/week/month/average hours for entries relative to ``now``.

    Example:
        >>> stats = compute_stats(entries, dt.datetime(2024, 3, 6, 18, 0))
        >>> stats.week
        12.5
    """
    closed = [e for e in entries if not e.is_open]
    week = week_bounds(now)

    today_hours = sum(
        duration_hours(e.start_time, e.end_time)
        for e in closed
        if e.start_time.date() == now.date()
    )
    week_hours = sum(
        duration_hours(e.start_time, e.end_time)
        for e in closed
        if week.contains(e.start_time)
    )
    month_hours = sum(
        duration_hours(e.start_time, e.end_time)
        for e in closed
        if same_month(e.start_time, now)
    )

    return TimeStats(
        today=float(today_hours),
        week=float(week_hours),
        month=float(month_hours),
        average=week_hours / DAYS_PER_WEEK,
    )


class TimeEntryLedger:
    """Starts and stops time tracking for employees.

    The ledger reads and writes time entries through a RecordStore and keeps
    a transient mirror of the last entry list fetched per employee. Store
    failures propagate as StoreError and are never retried here.

    Attributes:
        store: Record store holding the ``time_entries`` table
        directory: Employee directory used to validate employee ids

    Example:
        >>> ledger = TimeEntryLedger(store, EmployeeDirectory(store))
        >>> entry = ledger.start("emp-1", project_id="proj-9")
        >>> ledger.active_entry("emp-1").id == entry.id
        True
        >>> ledger.stop("emp-1").is_open
        False
    """

    def __init__(
        self,
        store: RecordStore,
        directory: EmployeeDirectory,
        clock: Optional[Clock] = None,
    ):
        """Initialize the ledger.

        Args:
            store: Record store for time entries
            directory: Employee directory for existence checks
            clock: Callable returning the current instant (default: utc_now)
        """
        self.store = store
        self.directory = directory
        self._clock = clock or utc_now
        self._mirror: Dict[str, List[TimeEntry]] = {}

    def start(
        self,
        employee_id: str,
        project_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        """Start tracking time, closing any entry that is still open.

        The close and the insert share the same instant, so the new entry
        never starts before the previous one ended. If the insert fails the
        previously open entry is reopened before the error propagates.

        Args:
            employee_id: Employee to track time for
            project_id: Optional project the time is booked on
            description: Optional free text

        Returns:
            The newly opened entry

        Raises:
            NotFoundError: If the employee does not exist
            StoreError: If the store rejects the close or the insert
        """
        with LogContext(employee_id=employee_id):
            self.directory.get_employee(employee_id)

            now = self._clock()
            previous = self.active_entry(employee_id)
            if previous is not None:
                logger.info(f"Closing open entry {previous.id} before starting a new one")
                closed = self._close(previous, now)
                # A clock that stepped back must not start before the close
                now = max(now, closed.end_time)

            try:
                record = self.store.insert(
                    TIME_ENTRIES,
                    {
                        "employee_id": employee_id,
                        "project_id": project_id or None,
                        "description": description or None,
                        "start_time": now.isoformat(),
                        "end_time": None,
                        "created_at": now.isoformat(),
                    },
                )
            except StoreError:
                if previous is not None:
                    self._reopen(previous)
                raise

            entry = TimeEntry.from_record(record)
            logger.info(f"Started time entry {entry.id} at {now.isoformat()}")
            self._refresh_after_mutation(employee_id)
            return entry

    def stop(self, employee_id: str) -> Optional[TimeEntry]:
        """Stop the employee's open entry.

        Returns:
            The closed entry, or None when nothing was being tracked

        Raises:
            StoreError: If the store rejects the update
        """
        with LogContext(employee_id=employee_id):
            active = self.active_entry(employee_id)
            if active is None:
                logger.info("Stop requested but no entry is open")
                return None

            closed = self._close(active, self._clock())
            logger.info(
                f"Stopped time entry {closed.id} after "
                f"{self.duration(closed):.2f} hours"
            )
            self._refresh_after_mutation(employee_id)
            return closed

    def list_entries(self, employee_id: str) -> List[TimeEntry]:
        """Fetch the employee's entries, most recent start first.

        Entries sharing a start time are ordered by creation time.
        """
        records = self.store.query(TIME_ENTRIES, filters={"employee_id": employee_id})
        entries = [TimeEntry.from_record(r) for r in records]
        entries.sort(key=lambda e: (e.start_time, e.created_at or e.start_time), reverse=True)

        self._mirror[employee_id] = entries
        return list(entries)

    def cached_entries(self, employee_id: str) -> List[TimeEntry]:
        """Entries from the last fetch; the store is queried only when none is held.

        Every start, stop and list refreshes the cache, so directly after one
        of them this matches the store without another round trip.
        """
        if employee_id not in self._mirror:
            return self.list_entries(employee_id)
        return list(self._mirror[employee_id])

    def active_entry(self, employee_id: str) -> Optional[TimeEntry]:
        """Return the employee's open entry, or None.

        Concurrent sessions can leave more than one entry open; the most
        recently started one is returned and the anomaly is logged.
        """
        open_entries = [e for e in self.list_entries(employee_id) if e.is_open]
        if len(open_entries) > 1:
            logger.warning(
                f"Employee {employee_id} has {len(open_entries)} open entries, "
                f"using most recent {open_entries[0].id}"
            )
        return open_entries[0] if open_entries else None

    @staticmethod
    def duration(entry: TimeEntry) -> float:
        """Hours between start and end; 0 for an open entry."""
        return duration_hours(entry.start_time, entry.end_time)

    def elapsed(self, entry: TimeEntry, now: Optional[dt.datetime] = None) -> float:
        """Seconds tracked so far; running time for an open entry."""
        end = entry.end_time or now or self._clock()
        return max(0.0, (end - entry.start_time).total_seconds())

    def stats(
        self,
        employee_id: str,
        now: Optional[dt.datetime] = None,
        use_cache: bool = False,
    ) -> TimeStats:
        """Day, week, month and average hours around ``now``.

        With ``use_cache`` the entries from the last fetch are reused.
        """
        now = now or self._clock()
        if use_cache:
            entries = self.cached_entries(employee_id)
        else:
            entries = self.list_entries(employee_id)
        return compute_stats(entries, now)

    def _close(self, entry: TimeEntry, end_time: dt.datetime) -> TimeEntry:
        """Write the end time, never earlier than the entry's own start."""
        if end_time < entry.start_time:
            logger.warning(
                f"Clock is behind start of entry {entry.id} "
                f"({end_time.isoformat()} < {entry.start_time.isoformat()}), "
                f"closing it with zero length"
            )
            end_time = entry.start_time
        record = self.store.update(
            TIME_ENTRIES, entry.id, {"end_time": end_time.isoformat()}
        )
        return TimeEntry.from_record(record)

    def _reopen(self, entry: TimeEntry) -> None:
        """Undo a close made by ``start`` whose insert then failed."""
        try:
            self.store.update(TIME_ENTRIES, entry.id, {"end_time": None})
            logger.warning(f"Reopened entry {entry.id} after failed start")
        except StoreError as e:
            logger.error(f"Failed to reopen entry {entry.id} after failed start: {e}")
            raise

    def _refresh_after_mutation(self, employee_id: str) -> None:
        try:
            self.list_entries(employee_id)
        except StoreError as e:
            # The mutation itself succeeded; drop the stale mirror instead of failing
            logger.warning(f"Failed to refresh entries after update: {e}")
            self._mirror.pop(employee_id, None)
