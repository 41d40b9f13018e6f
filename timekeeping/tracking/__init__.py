"""Time tracking: the per-employee ledger of open and closed work intervals."""

from timekeeping.tracking.time_entry_ledger import (
    TimeEntryLedger,
    TimeStats,
    compute_stats,
)

__all__ = ["TimeEntryLedger", "TimeStats", "compute_stats"]
