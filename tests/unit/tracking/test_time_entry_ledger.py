"""Tests for the time entry ledger.

This module covers start/stop tracking, the single open entry invariant,
failure handling against the record store, and duration statistics.
"""

import datetime as dt
import random

import pytest

from timekeeping.errors import NotFoundError, StoreError
from timekeeping.models.time_entry import TimeEntry
from timekeeping.services.record_store import TIME_ENTRIES, InMemoryRecordStore
from timekeeping.services.directory import EmployeeDirectory
from timekeeping.tracking.time_entry_ledger import TimeEntryLedger, compute_stats


class FlakyRecordStore(InMemoryRecordStore):
    """In-memory store whose writes to one table can be made to fail."""

    def __init__(self):
        super().__init__()
        self.fail_inserts = False
        self.fail_updates = False
        self.fail_queries = False

    def insert(self, table, record):
        if self.fail_inserts and table == TIME_ENTRIES:
            raise StoreError("insert rejected")
        return super().insert(table, record)

    def update(self, table, record_id, patch):
        if self.fail_updates and table == TIME_ENTRIES:
            raise StoreError("update rejected")
        return super().update(table, record_id, patch)

    def query(self, table, filters=None, order_by=None, descending=False):
        if self.fail_queries and table == TIME_ENTRIES:
            raise StoreError("query rejected")
        return super().query(table, filters, order_by, descending)


@pytest.fixture
def flaky_store():
    return FlakyRecordStore()


@pytest.fixture
def flaky_ledger(flaky_store, clock):
    return TimeEntryLedger(flaky_store, EmployeeDirectory(flaky_store), clock=clock)


def make_entry(start, end=None, employee_id="emp-1", project_id=None):
    return TimeEntry(
        id=f"te-{start.isoformat()}",
        employee_id=employee_id,
        start_time=start,
        end_time=end,
        project_id=project_id,
    )


def open_entries(ledger, employee_id):
    return [e for e in ledger.list_entries(employee_id) if e.is_open]


class TestStartStop:
    """Test starting and stopping time tracking."""

    def test_start_creates_open_entry(self, ledger, employee, clock):
        """Test start opens an entry at the current instant."""
        entry = ledger.start(employee.id, project_id="proj-1", description="Payroll")

        assert entry.is_open
        assert entry.start_time == clock.now
        assert entry.employee_id == employee.id
        assert entry.project_id == "proj-1"
        assert entry.description == "Payroll"

    def test_start_normalizes_empty_optionals(self, ledger, employee):
        entry = ledger.start(employee.id, project_id="", description="")

        assert entry.project_id is None
        assert entry.description is None

    def test_end_to_end_start_then_stop(self, ledger, employee, clock):
        """Test start, active entry, stop, and the single closed entry."""
        assert ledger.list_entries(employee.id) == []

        started = ledger.start(employee.id)
        active = ledger.active_entry(employee.id)
        assert active is not None
        assert active.id == started.id
        assert active.end_time is None

        clock.advance(minutes=45)
        ledger.stop(employee.id)

        assert ledger.active_entry(employee.id) is None
        entries = ledger.list_entries(employee.id)
        assert len(entries) == 1
        assert entries[0].end_time is not None
        assert ledger.duration(entries[0]) > 0

    def test_start_closes_previous_entry_at_same_instant(self, ledger, employee, clock):
        """Test the prior entry ends exactly when the new one starts."""
        first = ledger.start(employee.id)
        now = clock.advance(hours=2)

        second = ledger.start(employee.id, project_id="proj-2")

        closed = next(e for e in ledger.list_entries(employee.id) if e.id == first.id)
        assert closed.end_time == now
        assert second.start_time >= closed.end_time
        assert ledger.duration(closed) == 2.0
        assert ledger.active_entry(employee.id).id == second.id

    def test_at_most_one_open_entry_after_any_sequence(self, ledger, employee, clock):
        """Test the single open entry invariant over a random call sequence."""
        rng = random.Random(42)
        for _ in range(40):
            clock.advance(minutes=rng.randint(0, 90))
            if rng.random() < 0.6:
                ledger.start(employee.id)
            else:
                ledger.stop(employee.id)
            assert len(open_entries(ledger, employee.id)) <= 1

    def test_stop_without_open_entry_returns_none(self, ledger, employee):
        assert ledger.stop(employee.id) is None

    def test_stop_unknown_employee_returns_none(self, ledger):
        assert ledger.stop("nobody") is None

    def test_start_unknown_employee_raises(self, ledger, store):
        with pytest.raises(NotFoundError):
            ledger.start("nobody")

        assert store.query(TIME_ENTRIES) == []

    def test_entries_listed_most_recent_first(self, ledger, employee, clock):
        ledger.start(employee.id, description="first")
        clock.advance(hours=1)
        ledger.start(employee.id, description="second")
        clock.advance(hours=1)
        ledger.stop(employee.id)

        descriptions = [e.description for e in ledger.list_entries(employee.id)]
        assert descriptions == ["second", "first"]

    def test_entries_are_scoped_to_employee(self, ledger, directory, employee):
        other = directory.register("Grace Hopper")
        ledger.start(employee.id)
        ledger.start(other.id)

        assert ledger.active_entry(employee.id) is not None
        assert ledger.active_entry(other.id) is not None
        assert len(ledger.list_entries(employee.id)) == 1


class TestMirror:
    """Test the transient mirror of fetched entries."""

    def test_mirror_refreshed_after_mutation(self, ledger, employee):
        entry = ledger.start(employee.id)

        assert [e.id for e in ledger.cached_entries(employee.id)] == [entry.id]

    def test_cache_miss_fetches_from_store(self, ledger, store, employee):
        store.insert(
            TIME_ENTRIES,
            {"id": "te-1", "employee_id": employee.id, "start_time": "2024-03-06T08:00:00"},
        )

        assert [e.id for e in ledger.cached_entries(employee.id)] == ["te-1"]

    def test_cache_hit_skips_store(self, flaky_ledger, flaky_store, clock):
        """Test entries cached by a mutation are served while the store is down."""
        employee = flaky_ledger.directory.register("Ada Lovelace")
        flaky_ledger.start(employee.id)
        clock.advance(hours=2)
        flaky_ledger.stop(employee.id)

        flaky_store.fail_queries = True
        stats = flaky_ledger.stats(employee.id, use_cache=True)

        assert stats.today == 2.0
        with pytest.raises(StoreError):
            flaky_ledger.stats(employee.id)

    def test_failed_refresh_drops_mirror(self, flaky_ledger, flaky_store, clock):
        """Test a refresh failure after a successful stop keeps the stop."""
        employee = flaky_ledger.directory.register("Ada Lovelace")
        flaky_ledger.start(employee.id)
        clock.advance(hours=1)

        original_update = flaky_store.update

        def update_then_fail_reads(table, record_id, patch):
            result = original_update(table, record_id, patch)
            flaky_store.fail_queries = True
            return result

        flaky_store.update = update_then_fail_reads
        closed = flaky_ledger.stop(employee.id)

        assert closed.end_time == clock.now
        # Nothing cached any more, so the read goes to the failing store
        with pytest.raises(StoreError):
            flaky_ledger.cached_entries(employee.id)

        flaky_store.fail_queries = False
        assert flaky_ledger.active_entry(employee.id) is None
        assert not flaky_ledger.cached_entries(employee.id)[0].is_open


class TestClockSteppingBack:
    """Test a clock that moves backwards between start and close."""

    def test_stop_closes_with_zero_length(self, ledger, employee, clock):
        started = ledger.start(employee.id)
        clock.now = clock.now - dt.timedelta(minutes=30)

        closed = ledger.stop(employee.id)

        assert closed.end_time == started.start_time
        assert ledger.duration(closed) == 0.0
        entries = ledger.list_entries(employee.id)
        assert [e.id for e in entries] == [started.id]
        assert ledger.active_entry(employee.id) is None

    def test_start_never_begins_before_previous_close(self, ledger, employee, clock):
        first = ledger.start(employee.id)
        clock.now = clock.now - dt.timedelta(minutes=30)

        second = ledger.start(employee.id)

        closed = next(e for e in ledger.list_entries(employee.id) if e.id == first.id)
        assert closed.end_time == first.start_time
        assert second.start_time >= closed.end_time
        assert ledger.active_entry(employee.id).id == second.id
        assert len(open_entries(ledger, employee.id)) == 1

    def test_stats_readable_after_step_back(self, ledger, employee, clock):
        ledger.start(employee.id)
        clock.now = clock.now - dt.timedelta(hours=1)
        ledger.stop(employee.id)

        assert ledger.stats(employee.id).today == 0.0


class TestDefaultClock:
    def test_default_clock_is_utc(self, store, directory):
        ledger = TimeEntryLedger(store, directory)
        employee = directory.register("Ada Lovelace")

        entry = ledger.start(employee.id)

        assert entry.start_time.utcoffset() == dt.timedelta(0)
        assert ledger.stop(employee.id).end_time >= entry.start_time


class TestStoreFailures:
    """Test store failures leave the previous state intact."""

    def test_failed_insert_reopens_previous_entry(self, flaky_ledger, flaky_store, clock):
        """Test a failed start leaves the prior entry open and adds nothing."""
        employee = flaky_ledger.directory.register("Ada Lovelace")
        first = flaky_ledger.start(employee.id)
        clock.advance(hours=1)

        flaky_store.fail_inserts = True
        with pytest.raises(StoreError, match="insert rejected"):
            flaky_ledger.start(employee.id)
        flaky_store.fail_inserts = False

        entries = flaky_ledger.list_entries(employee.id)
        assert [e.id for e in entries] == [first.id]
        assert entries[0].is_open

    def test_failed_close_creates_nothing(self, flaky_ledger, flaky_store, clock):
        employee = flaky_ledger.directory.register("Ada Lovelace")
        first = flaky_ledger.start(employee.id)
        clock.advance(hours=1)

        flaky_store.fail_updates = True
        with pytest.raises(StoreError, match="update rejected"):
            flaky_ledger.start(employee.id)
        flaky_store.fail_updates = False

        assert [e.id for e in flaky_ledger.list_entries(employee.id)] == [first.id]
        assert flaky_ledger.active_entry(employee.id).id == first.id

    def test_failed_stop_leaves_entry_open(self, flaky_ledger, flaky_store, clock):
        employee = flaky_ledger.directory.register("Ada Lovelace")
        flaky_ledger.start(employee.id)

        flaky_store.fail_updates = True
        with pytest.raises(StoreError):
            flaky_ledger.stop(employee.id)
        flaky_store.fail_updates = False

        assert flaky_ledger.active_entry(employee.id) is not None


class TestActiveEntry:
    """Test derivation of the active entry."""

    def test_multiple_open_entries_uses_most_recent(self, ledger, store, employee, caplog):
        """Test concurrent starts resolve to the latest open entry."""
        for hour in (8, 9):
            store.insert(
                TIME_ENTRIES,
                {
                    "id": f"te-{hour}",
                    "employee_id": employee.id,
                    "start_time": f"2024-03-06T0{hour}:00:00",
                    "end_time": None,
                },
            )

        assert ledger.active_entry(employee.id).id == "te-9"
        assert "has 2 open entries" in caplog.text


class TestDurations:
    """Test duration and elapsed time."""

    @pytest.mark.parametrize(
        "delta,hours",
        [
            (dt.timedelta(hours=1), 1.0),
            (dt.timedelta(hours=1, minutes=30), 1.5),
            (dt.timedelta(0), 0.0),
        ],
    )
    def test_duration(self, delta, hours):
        start = dt.datetime(2024, 3, 6, 9, 0)

        assert TimeEntryLedger.duration(make_entry(start, start + delta)) == hours

    def test_duration_of_open_entry_is_zero(self):
        assert TimeEntryLedger.duration(make_entry(dt.datetime(2024, 3, 6, 9, 0))) == 0

    def test_elapsed_of_open_entry_uses_clock(self, ledger, employee, clock):
        entry = ledger.start(employee.id)
        clock.advance(minutes=2, seconds=5)

        assert ledger.elapsed(entry) == 125.0

    def test_elapsed_of_closed_entry(self, ledger):
        start = dt.datetime(2024, 3, 6, 9, 0)
        entry = make_entry(start, start + dt.timedelta(hours=1))

        assert ledger.elapsed(entry, now=start + dt.timedelta(hours=5)) == 3600.0


class TestStats:
    """Test day, week, month and average aggregates."""

    @pytest.fixture
    def entries(self):
        return [
            # Wednesday 2024-03-06, today
            make_entry(dt.datetime(2024, 3, 6, 9, 0), dt.datetime(2024, 3, 6, 12, 0)),
            # Monday of the same week
            make_entry(dt.datetime(2024, 3, 4, 10, 0), dt.datetime(2024, 3, 4, 14, 0)),
            # Saturday of the previous week, same month
            make_entry(dt.datetime(2024, 3, 2, 8, 0), dt.datetime(2024, 3, 2, 10, 0)),
            # Previous month
            make_entry(dt.datetime(2024, 2, 29, 8, 0), dt.datetime(2024, 2, 29, 9, 0)),
            # Still running, contributes nothing
            make_entry(dt.datetime(2024, 3, 6, 13, 0)),
        ]

    def test_compute_stats(self, entries):
        stats = compute_stats(entries, dt.datetime(2024, 3, 6, 18, 0))

        assert stats.today == 3.0
        assert stats.week == 7.0
        assert stats.month == 9.0
        assert stats.average == 1.0

    def test_compute_stats_empty(self):
        stats = compute_stats([], dt.datetime(2024, 3, 6, 18, 0))

        assert (stats.today, stats.week, stats.month, stats.average) == (0, 0, 0, 0)

    def test_ledger_stats(self, ledger, employee, clock):
        ledger.start(employee.id)
        clock.advance(hours=3, minutes=30)
        ledger.stop(employee.id)

        stats = ledger.stats(employee.id)

        assert stats.today == 3.5
        assert stats.week == 3.5
        assert stats.average == 0.5
