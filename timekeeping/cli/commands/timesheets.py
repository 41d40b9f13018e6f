"""Weekly timesheet commands."""

import datetime as dt
from typing import Optional

import click

from timekeeping.calculators.time_utils import format_hours
from timekeeping.cli.context import build_context, employee_options, is_debug
from timekeeping.cli.error_handlers import with_error_handling
from timekeeping.cli.utils.formatters import (
    format_info,
    format_status,
    format_success,
    format_table,
)
from timekeeping.models.timesheet import TimesheetStatus


@click.group(name="timesheet")
def timesheet():
    """Create, submit and list weekly timesheets."""


@timesheet.command(name="create")
@employee_options
@click.option(
    "--week",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Any date in the week (YYYY-MM-DD, default: today)",
)
def create_timesheet(
    employee_id: Optional[str], user_id: Optional[str], week: Optional[dt.datetime]
):
    """Create the draft timesheet for a week.

    Example:
        timekeeping-cli timesheet create --user-id u-42 --week 2024-03-06
    """
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        week_date = week.date() if week else dt.date.today()
        sheet = app.aggregator.create(target, week_date)
        click.echo(
            format_success(
                f"Timesheet {sheet.id} for {sheet.week_start} to {sheet.week_end}: "
                f"{format_hours(sheet.total_hours)}"
            )
        )
        click.echo(f"  Status: {format_status(sheet.status.value)}")


@timesheet.command(name="submit")
@click.argument("timesheet_id")
def submit_timesheet(timesheet_id: str):
    """Submit a draft timesheet for review."""
    with with_error_handling(is_debug()):
        app = build_context()
        sheet = app.aggregator.submit(timesheet_id)
        click.echo(
            format_success(
                f"Weekly timesheet submitted with {sheet.total_hours:.2f} hours"
            )
        )


@timesheet.command(name="list")
@employee_options
@click.option(
    "--status",
    type=click.Choice([s.value for s in TimesheetStatus], case_sensitive=False),
    default=None,
    help="Only show timesheets with this status",
)
def list_timesheets(
    employee_id: Optional[str], user_id: Optional[str], status: Optional[str]
):
    """List weekly timesheets, most recent week first."""
    with with_error_handling(is_debug()):
        app = build_context()
        target = app.resolve_employee_id(employee_id, user_id)

        status_filter = TimesheetStatus(status.lower()) if status else None
        sheets = app.aggregator.list_timesheets(target, status=status_filter)
        if not sheets:
            click.echo(format_info("No timesheets found."))
            return

        rows = [
            [
                sheet.id,
                f"{sheet.week_start} - {sheet.week_end}",
                format_hours(sheet.total_hours),
                sheet.status.value,
            ]
            for sheet in sheets
        ]
        click.echo(format_table(["ID", "Week", "Hours", "Status"], rows))
