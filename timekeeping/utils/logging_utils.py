"""Structured logging utilities with context support."""

import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional

# Thread-local storage for log context
_thread_local = threading.local()


def get_log_context() -> Dict[str, Any]:
    """
    Get a copy of the fields currently bound by LogContext.

    Returns:
        Dictionary of context fields (empty when none are bound)
    """
    return dict(getattr(_thread_local, "context", {}))


class LogContext:
    """
    Context manager for adding structured fields to log records.

    Fields are stored in thread-local storage and copied onto every record
    that passes a handler carrying ``_ContextFilter``. Nested contexts merge
    their fields and restore the outer ones on exit.

    Example:
        with LogContext(employee_id="emp-1"):
            logger.info("Starting time tracking")
            # Record carries employee_id="emp-1"
    """

    def __init__(self, **kwargs):
        self.fields = kwargs
        self.previous_context: Optional[Dict[str, Any]] = None

    def __enter__(self):
        if not hasattr(_thread_local, "context"):
            _thread_local.context = {}

        self.previous_context = _thread_local.context.copy()
        _thread_local.context.update(self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _thread_local.context = self.previous_context or {}


class _ContextFilter(logging.Filter):
    """Logging filter that adds context fields to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in getattr(_thread_local, "context", {}).items():
            setattr(record, key, value)
        return True


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Decorator to log function entry, exit and exceptions.

    Args:
        func: Function to decorate (when used without arguments)
        include_args: Whether to include function arguments in logs
        level: Log level to use for entry/exit (DEBUG, INFO, ...)

    Returns:
        Decorated function

    Example:
        @log_function_call
        def save(self):
            ...

        @log_function_call(include_args=True, level="INFO")
        def insert(self, table, record):
            ...
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())

            if include_args:
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                signature = ", ".join(args_repr + kwargs_repr)
                logger.log(log_level, f"Entering {f.__qualname__} with args: {signature}")
            else:
                logger.log(log_level, f"Entering {f.__qualname__}")

            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(f"Exception in {f.__qualname__}: {type(e).__name__}: {e}")
                raise

            logger.log(log_level, f"Exiting {f.__qualname__}")
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)
