"""Error handling for CLI commands."""

import sys
import traceback

import click
from pydantic import ValidationError

from timekeeping.cli.utils.formatters import format_error, format_warning
from timekeeping.errors import InvalidStateError, NotFoundError, StoreError

EXIT_INVALID_INPUT = 2
EXIT_NOT_FOUND = 3
EXIT_INVALID_STATE = 4
EXIT_STORE_FAILURE = 5
EXIT_INTERRUPTED = 130
EXIT_UNEXPECTED = 255


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error raised by a command.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace for unexpected errors

    Returns:
        Process exit code for the error kind
    """
    if isinstance(error, NotFoundError):
        click.echo(format_error(f"Not Found: {error}"))
        if error.entity.startswith("employee"):
            click.echo(
                format_warning(
                    "Hint: Pass --employee-id, or link your user with "
                    "'employee add --user-id'"
                )
            )
        return EXIT_NOT_FOUND

    elif isinstance(error, InvalidStateError):
        click.echo(format_error(f"Invalid State: {error}"))
        return EXIT_INVALID_STATE

    elif isinstance(error, StoreError):
        click.echo(format_error(f"Storage Error: {error}"))
        if error.cause is not None:
            click.echo(format_warning(f"Cause: {type(error.cause).__name__}: {error.cause}"))
        click.echo(format_warning("Hint: Nothing was changed; retry the command"))
        return EXIT_STORE_FAILURE

    elif isinstance(error, ValidationError):
        click.echo(format_error("Invalid Input"))
        for issue in error.errors():
            location = ".".join(str(part) for part in issue["loc"])
            click.echo(f"  {location}: {issue['msg']}")
        return EXIT_INVALID_INPUT

    elif isinstance(error, (click.Abort, KeyboardInterrupt)):
        click.echo(format_warning("\nOperation cancelled by user"))
        return EXIT_INTERRUPTED

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
    click.echo(str(error))

    if debug:
        click.echo("\nFull stack trace:")
        click.echo(
            "".join(traceback.format_exception(type(error), error, error.__traceback__))
        )
    else:
        click.echo(format_warning("\nRun with --debug flag for full stack trace"))

    return EXIT_UNEXPECTED


class ErrorHandler:
    """Context manager turning command exceptions into exit codes.

    Click's own usage errors are left for click to report.

    Example:
        @click.command()
        def stop():
            with with_error_handling(is_debug()):
                ...
    """

    def __init__(self, show_debug: bool):
        self.show_debug = show_debug

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is None or isinstance(exc_val, (click.ClickException, SystemExit)):
            return False
        exit_code = handle_cli_error(exc_val, self.show_debug)
        sys.exit(exit_code)


def with_error_handling(debug: bool = False) -> ErrorHandler:
    """Create the error handling context for a command body."""
    return ErrorHandler(debug)
