"""Output formatting utilities for the CLI."""

from typing import List, Sequence

import click

_STATUS_COLORS = {
    "draft": "yellow",
    "submitted": "blue",
    "approved": "green",
    "rejected": "red",
}


def format_success(message: str) -> str:
    """Green check-marked message."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Red cross-marked message."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Yellow warning message."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Blue informational message."""
    return click.style(f"ℹ {message}", fg="blue")


def format_status(status: str) -> str:
    """Color a timesheet status by its lifecycle stage."""
    return click.style(status, fg=_STATUS_COLORS.get(status, "white"))


def format_table(
    headers: Sequence[str], rows: List[Sequence[object]], max_width: int = 60
) -> str:
    """Format rows as a boxed plain-text table.

    Args:
        headers: Column headers
        rows: Data rows; cells are converted with str() and truncated
        max_width: Maximum width of any column

    Returns:
        The table as a string, or "" when there are no headers
    """
    if not headers:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [min(w, max_width) for w in widths]

    def render(cells: Sequence[object]) -> str:
        padded = [
            f" {str(cell)[: widths[i]]:<{widths[i]}} "
            for i, cell in enumerate(cells[: len(widths)])
        ]
        return "|" + "|".join(padded) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, render(headers), separator]
    if rows:
        lines.extend(render(row) for row in rows)
        lines.append(separator)

    return "\n".join(lines)
