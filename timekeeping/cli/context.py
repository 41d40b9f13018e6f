"""Wiring of stores and services for CLI commands."""

from dataclasses import dataclass
from typing import Optional

import click

from timekeeping.aggregators.timesheet_aggregator import TimesheetAggregator
from timekeeping.config.settings import TimekeepingConfig, get_config
from timekeeping.services.directory import EmployeeDirectory, ProjectCatalog
from timekeeping.services.json_file_store import JsonFileRecordStore
from timekeeping.services.record_store import InMemoryRecordStore, RecordStore
from timekeeping.tracking.time_entry_ledger import TimeEntryLedger


@dataclass
class AppContext:
    """Services a command works with, all sharing one record store."""

    settings: TimekeepingConfig
    store: RecordStore
    directory: EmployeeDirectory
    projects: ProjectCatalog
    ledger: TimeEntryLedger
    aggregator: TimesheetAggregator

    def resolve_employee_id(
        self, employee_id: Optional[str] = None, user_id: Optional[str] = None
    ) -> str:
        """Pick the employee a command acts for.

        An explicit employee id wins; otherwise the user id (or the configured
        TIMEKEEPING_USER_ID) is resolved through the employee directory.

        Raises:
            click.UsageError: If neither an employee nor a user is given
            NotFoundError: If the user is not linked to an employee
        """
        if employee_id:
            return employee_id

        user_id = user_id or self.settings.default_user_id
        if not user_id:
            raise click.UsageError(
                "No employee given: pass --employee-id or --user-id, "
                "or set TIMEKEEPING_USER_ID"
            )
        return self.directory.resolve_employee_id(user_id)


def build_store(settings: TimekeepingConfig) -> RecordStore:
    """Create the record store selected by STORE_BACKEND."""
    if settings.store_backend == "memory":
        return InMemoryRecordStore()
    return JsonFileRecordStore(settings.store_file_path)


def build_context(settings: Optional[TimekeepingConfig] = None) -> AppContext:
    """Build the services for one CLI invocation."""
    settings = settings or get_config()
    store = build_store(settings)
    directory = EmployeeDirectory(store)
    ledger = TimeEntryLedger(store, directory)

    return AppContext(
        settings=settings,
        store=store,
        directory=directory,
        projects=ProjectCatalog(store),
        ledger=ledger,
        aggregator=TimesheetAggregator(store, ledger),
    )


def is_debug() -> bool:
    """Whether --debug was passed or DEBUG is set in the settings."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    root = ctx.find_root()
    if isinstance(root.obj, dict) and "debug" in root.obj:
        return bool(root.obj["debug"])
    return bool(root.params.get("debug"))


def employee_options(func):
    """Add --employee-id and --user-id options to a command."""
    func = click.option(
        "--user-id",
        type=str,
        default=None,
        help="Authenticated user id to resolve to an employee",
    )(func)
    func = click.option(
        "--employee-id",
        type=str,
        default=None,
        help="Employee id (takes precedence over --user-id)",
    )(func)
    return func
