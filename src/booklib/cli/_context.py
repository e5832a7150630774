"""Runtime context for CLI commands.

Initialized once in the main callback and available to every command as
``ctx.obj``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer

from booklib.config import Settings
from booklib.exceptions import BookLibError, LibraryIOError
from booklib.library import Library
from booklib.ui.messages import print_booklib_error

logger = logging.getLogger(__name__)


@dataclass
class RuntimeContext:
    """Global options and resolved settings.

    Example:
        @app.command()
        def my_command(ctx: typer.Context) -> None:
            runtime = get_runtime_context(ctx)
            with cli_errors():
                library = runtime.load_library()
                ...
                runtime.save_library(library)
    """

    settings: Settings
    verbose: bool = False

    @property
    def library_file(self) -> Path:
        return self.settings.library_file

    def load_library(self) -> Library:
        return Library.load(self.library_file)

    def save_library(self, library: Library) -> Path:
        return library.save(self.library_file)


def get_runtime_context(ctx: typer.Context) -> RuntimeContext:
    """Fetch the RuntimeContext stored by the main callback."""
    runtime = ctx.find_object(RuntimeContext)
    if runtime is None:
        raise RuntimeError("booklib CLI context was not initialized")
    return runtime


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report a BookLibError on stderr and exit with status 1."""
    try:
        yield
    except BookLibError as e:
        logger.debug("Command failed: %r", e)
        hint = None
        if isinstance(e, LibraryIOError) and e.operation == "read":
            hint = "Run 'booklib init' to create a new library."
        print_booklib_error(e, hint)
        raise typer.Exit(1) from e
