"""Simple message printing helpers.

Messages are interpolated into Rich markup, so callers must escape any
record text (titles, names) that could contain ``[``.
"""

from __future__ import annotations

from rich.markup import escape

from booklib.exceptions import BookLibError
from booklib.ui.core import console, err_console


def print_success(message: str) -> None:
    """Print a success message with checkmark.

    Example:
        >>> print_success("Added 'Dune'")
          ✓ Added 'Dune'
    """
    console.print(f"  [success]✓[/] {message}")


def print_error(message: str) -> None:
    """Print an error message with X to stderr."""
    err_console.print(f"  [error]✗[/] {message}")


def print_warning(message: str) -> None:
    console.print(f"  [warning]![/] {message}")


def print_info(message: str) -> None:
    """Print an info message.

    Example:
        >>> print_info("No changes")
          → No changes
    """
    console.print(f"  [info]→[/] {message}")


def print_booklib_error(error: BookLibError, hint: str | None = None) -> None:
    """Print a booklib error and its details to stderr.

    Args:
        error: The error to show
        hint: Optional suggestion printed underneath
    """
    print_error(escape(error.message))
    for key, value in error.details.items():
        if value is None:
            continue
        err_console.print(f"    [dim]{key}:[/] {escape(str(value))}")
    if hint:
        err_console.print(f"    [hint]{hint}[/]")
