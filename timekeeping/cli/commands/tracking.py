"""Time tracking commands: start, stop, status, entries and stats."""

from typing import Optional

import click

from timekeeping.calculators.time_utils import format_elapsed, format_hours
from timekeeping.cli.context import build_context, employee_options, is_debug
from timekeeping.cli.error_handlers import with_error_handling
from timekeeping.cli.utils.formatters import (
    format_info,
    format_success,
    format_table,
    format_warning,
)

_TIME_FORMAT = "%Y-%m-%d %H:%M"


def _local(moment) -> str:
    """Render a stored instant in the local timezone."""
    return moment.astimezone().strftime(_TIME_FORMAT)


@click.command(name="start")
@employee_options
@click.option("--project-id", type=str, default=None, help="Project to book the time on")
@click.option("--description", type=str, default=None, help="What you are working on")
def start_tracking(
    employee_id: Optional[str],
    user_id: Optional[str],
    project_id: Optional[str],
    description: Optional[str],
):
    """Start tracking time.

    A running entry is stopped first, so only one entry is ever open.

    Example:
        timekeeping-cli start --user-id u-42 --project-id p-7
    """
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        previous = app.ledger.active_entry(target)
        entry = app.ledger.start(target, project_id=project_id, description=description)

        if previous is not None:
            click.echo(format_info(f"Stopped running entry {previous.id}"))
        click.echo(
            format_success(
                f"Time tracking started at {_local(entry.start_time)} "
                f"(entry {entry.id})"
            )
        )


@click.command(name="stop")
@employee_options
def stop_tracking(employee_id: Optional[str], user_id: Optional[str]):
    """Stop the running time entry.

    Example:
        timekeeping-cli stop --user-id u-42
    """
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        entry = app.ledger.stop(target)
        if entry is None:
            click.echo(format_warning("No time entry is running"))
            return

        click.echo(
            format_success(
                f"Time tracking stopped after {format_hours(app.ledger.duration(entry))}"
            )
        )
        stats = app.ledger.stats(target, use_cache=True)
        click.echo(f"Today's total: {format_hours(stats.today)}")


@click.command(name="status")
@employee_options
def tracking_status(employee_id: Optional[str], user_id: Optional[str]):
    """Show whether time is being tracked and today's total."""
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        active = app.ledger.active_entry(target)
        if active is None:
            click.echo(format_info("Not tracking"))
        else:
            click.echo(
                format_success(
                    f"Working since {_local(active.start_time)} "
                    f"({format_elapsed(app.ledger.elapsed(active))})"
                )
            )
            if active.description:
                click.echo(f"  {active.description}")

        stats = app.ledger.stats(target, use_cache=True)
        click.echo(f"Today's total: {format_hours(stats.today)}")


@click.command(name="entries")
@employee_options
@click.option(
    "--limit", type=click.IntRange(min=1), default=20, help="Number of entries to show"
)
def list_entries(employee_id: Optional[str], user_id: Optional[str], limit: int):
    """List recent time entries, newest first."""
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        entries = app.ledger.list_entries(target)[:limit]
        if not entries:
            click.echo(format_info("No time entries yet."))
            return

        rows = [
            [
                _local(entry.start_time),
                _local(entry.end_time) if entry.end_time else "running",
                format_hours(app.ledger.duration(entry)),
                entry.project_id or "-",
                entry.description or "",
            ]
            for entry in entries
        ]
        click.echo(format_table(["Start", "End", "Duration", "Project", "Description"], rows))


@click.command(name="stats")
@employee_options
def time_stats(employee_id: Optional[str], user_id: Optional[str]):
    """Show hours tracked today, this week, this month and per day."""
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        stats = app.ledger.stats(target)
        rows = [
            ["Today", format_hours(stats.today)],
            ["This Week", format_hours(stats.week)],
            ["This Month", format_hours(stats.month)],
            ["Average/Day", format_hours(stats.average)],
        ]
        click.echo(format_table(["Period", "Hours"], rows))
