"""Weekly utilization report command."""

import datetime as dt
from typing import Optional

import click

from timekeeping.aggregators.weekly_hours_calculator import WeeklyHoursCalculator
from timekeeping.cli.context import build_context, is_debug
from timekeeping.cli.error_handlers import with_error_handling
from timekeeping.cli.utils.formatters import format_info


@click.command(name="report-weekly")
@click.option(
    "--start-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="First day to include (YYYY-MM-DD)",
)
@click.option(
    "--end-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Last day to include (YYYY-MM-DD)",
)
@click.option("--project-id", type=str, default=None, help="Only count this project")
def report_weekly(
    start_date: Optional[dt.datetime],
    end_date: Optional[dt.datetime],
    project_id: Optional[str],
):
    """Show hours per employee and week as a matrix.

    Example:
        timekeeping-cli report-weekly --start-date 2024-03-01 --end-date 2024-03-31
    """
    with with_error_handling(is_debug()):
        if start_date and end_date and start_date > end_date:
            raise click.BadParameter("--start-date must not be after --end-date")

        app = build_context()
        calculator = WeeklyHoursCalculator()

        entries = []
        for employee in app.directory.list_employees():
            entries.extend(app.ledger.list_entries(employee.id))

        entries = calculator.filter_by_date_range(
            entries,
            start_date.date() if start_date else None,
            end_date.date() if end_date else None,
        )
        if project_id:
            entries = calculator.filter_by_project(entries, project_id)

        matrix = calculator.generate_weekly_matrix(calculator.calculate_weekly_hours(entries))
        if matrix.empty:
            click.echo(format_info("No tracked time matches the filters."))
            return

        names = {e.id: e.full_name for e in app.directory.list_employees()}
        matrix.index = [names.get(employee_id, employee_id) for employee_id in matrix.index]
        click.echo(matrix.round(2).to_string())
