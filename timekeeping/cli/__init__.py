"""Timekeeping CLI.

This module provides a command-line interface for tracking working time,
building weekly timesheets and reporting tracked hours.
"""

import click

from timekeeping import __version__
from timekeeping.cli.commands import (
    employee,
    list_entries,
    project,
    report_weekly,
    start_tracking,
    stop_tracking,
    time_stats,
    timesheet,
    tracking_status,
)
from timekeeping.cli.error_handlers import with_error_handling
from timekeeping.config.logging_config import LoggingConfig, configure_logging
from timekeeping.config.settings import get_config


@click.group(help="Timekeeping CLI - Track working time and submit weekly timesheets")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Verbose logging and full stack traces")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Timekeeping CLI main entry point.

    DEBUG and LOG_LEVEL come from the settings (environment or .env);
    --debug overrides both.
    """
    with with_error_handling(debug):
        settings = get_config()
    debug = debug or settings.debug
    ctx.obj = {"debug": debug}

    log_level = "DEBUG" if debug else settings.log_level
    configure_logging(LoggingConfig.from_env(log_level=log_level))


# Register commands
cli.add_command(start_tracking)
cli.add_command(stop_tracking)
cli.add_command(tracking_status)
cli.add_command(list_entries)
cli.add_command(time_stats)
cli.add_command(timesheet)
cli.add_command(report_weekly)
cli.add_command(employee)
cli.add_command(project)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
