"""
Domain exceptions for the timekeeping system.
"""

from typing import Optional


class TimekeepingError(Exception):
    """Base exception for all timekeeping failures."""

    pass


class NotFoundError(TimekeepingError):
    """Raised when a referenced employee, entry or timesheet does not exist."""

    def __init__(self, entity: str, identifier: str):
        """
        Initialize not-found error.

        Args:
            entity: Kind of record that was looked up (e.g. "employee")
            identifier: The id or key that did not resolve
        """
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity.capitalize()} not found: {identifier}")


class InvalidStateError(TimekeepingError):
    """Raised when a status transition is not allowed from the current status."""

    def __init__(self, message: str, current_status: Optional[str] = None):
        self.current_status = current_status
        super().__init__(message)


class StoreError(TimekeepingError):
    """Raised when the record store fails (I/O, decoding or missing record).

    The underlying exception, if any, is kept in ``cause`` and chained as
    ``__cause__`` by the raising code.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
