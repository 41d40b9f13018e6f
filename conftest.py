"""
Global pytest configuration and fixtures.
"""
import datetime as dt
from typing import Dict

import pytest

from timekeeping.aggregators.timesheet_aggregator import TimesheetAggregator
from timekeeping.config import TimekeepingConfig, reload_config
from timekeeping.services.directory import EmployeeDirectory, ProjectCatalog
from timekeeping.services.record_store import InMemoryRecordStore
from timekeeping.tracking.time_entry_ledger import TimeEntryLedger


class FixedClock:
    """Controllable clock for deterministic tests."""

    def __init__(self, now: dt.datetime):
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs) -> dt.datetime:
        """Move the clock forward by timedelta keyword arguments."""
        self.now = self.now + dt.timedelta(**kwargs)
        return self.now


@pytest.fixture
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'STORE_BACKEND': 'memory',
        'STORE_FILE_PATH': 'data/test-store.json',
        'TIMEKEEPING_USER_ID': 'user-test',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import timekeeping.config.settings
    timekeeping.config.settings._config = None

    yield test_env_vars

    timekeeping.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> TimekeepingConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen on Wednesday 2024-03-06 09:00."""
    return FixedClock(dt.datetime(2024, 3, 6, 9, 0))


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def directory(store) -> EmployeeDirectory:
    return EmployeeDirectory(store)


@pytest.fixture
def catalog(store) -> ProjectCatalog:
    return ProjectCatalog(store)


@pytest.fixture
def employee(directory):
    """A registered employee linked to user 'user-ada'."""
    return directory.register("Ada Lovelace", user_id="user-ada")


@pytest.fixture
def ledger(store, directory, clock) -> TimeEntryLedger:
    return TimeEntryLedger(store, directory, clock=clock)


@pytest.fixture
def aggregator(store, ledger, clock) -> TimesheetAggregator:
    return TimesheetAggregator(store, ledger, clock=clock)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as exercising a CLI command"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "tests/unit/cli/" in str(item.fspath):
            item.add_marker(pytest.mark.cli)


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """Drop handlers installed by CLI invocations after each test."""
    yield
    from timekeeping.config.logging_config import reset_logging
    reset_logging()
