"""Unit tests for CLI error handling."""

import click
import pytest
from click.testing import CliRunner
from pydantic import ValidationError

from timekeeping.cli.error_handlers import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_INPUT,
    EXIT_INVALID_STATE,
    EXIT_NOT_FOUND,
    EXIT_STORE_FAILURE,
    EXIT_UNEXPECTED,
    handle_cli_error,
    with_error_handling,
)
from timekeeping.errors import InvalidStateError, NotFoundError, StoreError
from timekeeping.models.employee import Project


def validation_error() -> ValidationError:
    try:
        Project(id="p-1", name="   ")
    except ValidationError as e:
        return e
    raise AssertionError("expected a validation error")


class TestHandleCliError:
    """Test messages and exit codes per error kind."""

    def test_not_found(self, capsys):
        code = handle_cli_error(NotFoundError("timesheet", "ts-1"))

        out = capsys.readouterr().out
        assert code == EXIT_NOT_FOUND
        assert "Not Found: Timesheet not found: ts-1" in out
        assert "Hint" not in out

    def test_not_found_employee_has_hint(self, capsys):
        handle_cli_error(NotFoundError("employee for user", "u-1"))

        assert "employee add --user-id" in capsys.readouterr().out

    def test_invalid_state(self, capsys):
        code = handle_cli_error(InvalidStateError("already submitted", "submitted"))

        assert code == EXIT_INVALID_STATE
        assert "Invalid State: already submitted" in capsys.readouterr().out

    def test_store_error_with_cause(self, capsys):
        code = handle_cli_error(StoreError("Failed to write", OSError("disk full")))

        out = capsys.readouterr().out
        assert code == EXIT_STORE_FAILURE
        assert "Storage Error: Failed to write" in out
        assert "Cause: OSError: disk full" in out

    def test_validation_error(self, capsys):
        code = handle_cli_error(validation_error())

        out = capsys.readouterr().out
        assert code == EXIT_INVALID_INPUT
        assert "Invalid Input" in out
        assert "name:" in out

    def test_abort(self, capsys):
        assert handle_cli_error(click.Abort()) == EXIT_INTERRUPTED
        assert "cancelled" in capsys.readouterr().out

    def test_unexpected_without_debug(self, capsys):
        code = handle_cli_error(RuntimeError("boom"))

        out = capsys.readouterr().out
        assert code == EXIT_UNEXPECTED
        assert "Unexpected Error: RuntimeError" in out
        assert "--debug" in out

    def test_unexpected_with_debug_shows_trace(self, capsys):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)

        assert "Full stack trace" in capsys.readouterr().out


class TestErrorHandlerContext:
    """Test the context manager inside a click command."""

    def test_domain_error_becomes_exit_code(self):
        @click.command()
        def command():
            with with_error_handling():
                raise NotFoundError("project", "p-1")

        result = CliRunner().invoke(command)

        assert result.exit_code == EXIT_NOT_FOUND
        assert "Project not found: p-1" in result.output

    def test_click_exceptions_pass_through(self):
        @click.command()
        def command():
            with with_error_handling():
                raise click.UsageError("missing option")

        result = CliRunner().invoke(command)

        assert result.exit_code == 2
        assert "missing option" in result.output

    def test_success_is_untouched(self):
        @click.command()
        def command():
            with with_error_handling():
                click.echo("done")

        result = CliRunner().invoke(command)

        assert result.exit_code == 0
        assert result.output == "done\n"
