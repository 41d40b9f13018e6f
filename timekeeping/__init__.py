"""Employee time tracking and weekly timesheet reconciliation."""

__version__ = "1.0.0"
