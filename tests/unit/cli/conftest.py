"""Fixtures for CLI command tests."""

import pytest
from click.testing import CliRunner

from timekeeping.cli.context import AppContext

COMMAND_MODULES = [
    "timekeeping.cli.commands.tracking",
    "timekeeping.cli.commands.timesheets",
    "timekeeping.cli.commands.report",
    "timekeeping.cli.commands.directory",
]


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def app(test_config, store, directory, catalog, ledger, aggregator):
    """Services backed by the in-memory store and frozen clock."""
    return AppContext(
        settings=test_config,
        store=store,
        directory=directory,
        projects=catalog,
        ledger=ledger,
        aggregator=aggregator,
    )


@pytest.fixture
def patched_context(app, monkeypatch):
    """Make every command use the shared test services."""
    monkeypatch.setattr(app.settings, "debug", False)
    monkeypatch.setattr(app.settings, "log_level", "WARNING")
    for module in COMMAND_MODULES:
        monkeypatch.setattr(f"{module}.build_context", lambda: app)
    return app
