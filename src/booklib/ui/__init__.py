"""Rich console output for booklib.

Modules:
    core: Console instances and theme
    messages: Status line helpers (success, error, warning, info)
    tables: Book and author tables

Usage:
    from booklib.ui import console, print_success
    from booklib.ui.tables import print_book_table
"""

from __future__ import annotations

from booklib.ui.core import BOOKLIB_THEME, console, err_console
from booklib.ui.messages import (
    print_booklib_error,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from booklib.ui.tables import build_book_table, print_author_table, print_book_table

__all__ = [
    "BOOKLIB_THEME",
    "console",
    "err_console",
    "print_booklib_error",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "build_book_table",
    "print_author_table",
    "print_book_table",
]
