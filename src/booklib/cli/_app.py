"""App configuration, callbacks, and shared types for the CLI.

This module contains the Typer application factories, the main callback,
and the enums and option aliases shared by the command modules.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from booklib.comparators import SortOrder
from booklib.models import CoverType

logger = logging.getLogger(__name__)

# =============================================================================
# Help Panel Names
# =============================================================================

LIBRARY_COMMANDS = "Library"
EDIT_COMMANDS = "Editing"
SEARCH_COMMANDS = "Search"


# =============================================================================
# Shared Enums
# =============================================================================


class CoverOption(str, Enum):
    """Cover types accepted when adding or editing a book."""

    hard = "hard"
    soft = "soft"

    @property
    def cover_type(self) -> CoverType:
        return CoverType.HARDCOVER if self is CoverOption.hard else CoverType.SOFTCOVER


class CoverFilter(str, Enum):
    """Cover types accepted by ``search book``."""

    hard = "hard"
    soft = "soft"
    any = "any"

    @property
    def cover_type(self) -> CoverType:
        return {
            CoverFilter.hard: CoverType.HARDCOVER,
            CoverFilter.soft: CoverType.SOFTCOVER,
            CoverFilter.any: CoverType.ANYCOVER,
        }[self]


# =============================================================================
# Shared Options
# =============================================================================

SortOpt = Annotated[
    SortOrder | None,
    typer.Option("--sort", "-s", help="Sort by title, author or year."),
]

ReverseOpt = Annotated[
    bool,
    typer.Option("--reverse", "-r", help="Reverse the sort order (default from config)."),
]

IgnoreCaseOpt = Annotated[
    bool,
    typer.Option(
        "--ignore-case",
        "-i",
        help="Ignore case when matching (default from config).",
    ),
]


# =============================================================================
# Version Callback
# =============================================================================


def get_version() -> str:
    """Installed package version, falling back to ``booklib.__version__``."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("booklib")
    except PackageNotFoundError:
        from booklib import __version__

        return __version__


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from booklib.ui.core import console

        console.print(f"booklib v{get_version()}")
        raise typer.Exit()


# =============================================================================
# App Factory
# =============================================================================


MAIN_EPILOG = """
[bold cyan]Quick Start:[/]
  [dim]1.[/] booklib init                           [dim]# Create an empty library[/]
  [dim]2.[/] booklib add "Dune" -a "Frank Herbert"  [dim]# Add a book[/]
  [dim]3.[/] booklib list --sort author             [dim]# Show the library[/]
  [dim]4.[/] booklib search author --last "Herb*"   [dim]# Find books[/]

[bold cyan]Tips:[/]
  - Global flags like [green]--library[/] go [bold]BEFORE[/] the command
  - [green]*[/] in search patterns matches any run of characters
"""


def make_app() -> typer.Typer:
    """Create and configure the main Typer application."""
    return typer.Typer(
        name="booklib",
        help="Personal book library manager",
        epilog=MAIN_EPILOG,
        rich_markup_mode="rich",
        pretty_exceptions_enable=True,
        pretty_exceptions_show_locals=False,
        no_args_is_help=True,
        add_completion=True,
        context_settings={"help_option_names": ["-h", "--help"]},
    )


SEARCH_EPILOG = """
[bold cyan]Examples:[/]
  booklib search book --title "*Seasons"   [dim]# Title pattern[/]
  booklib search book --year 1996 --cover soft
  booklib search author --last cook -i     [dim]# Any case[/]
  booklib search series "Black Company"
"""


def make_search_app() -> typer.Typer:
    """Create the search sub-app."""
    return typer.Typer(
        name="search",
        help="Search the library by book, author or series",
        epilog=SEARCH_EPILOG,
        rich_markup_mode="rich",
        no_args_is_help=True,
    )


# =============================================================================
# Logging Setup Helper
# =============================================================================


def setup_logging(verbose: bool, log_level: str, log_file: Path | None) -> None:
    """Configure logging from settings; ``--verbose`` forces DEBUG."""
    from booklib.logging_setup import setup_logging as _setup_logging

    _setup_logging(
        log_level="DEBUG" if verbose else log_level,
        log_file=log_file,
        rich_console=True,
    )


# =============================================================================
# Main Callback Factory
# =============================================================================


def create_main_callback(app: typer.Typer) -> None:
    """Register the main callback on the app."""

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                "-V",
                callback=version_callback,
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option("--verbose", "-v", help="Enable verbose (DEBUG) logging."),
        ] = False,
        log: Annotated[
            bool,
            typer.Option(
                "--log",
                help="Also log to the default log file when logging.file is not set.",
            ),
        ] = False,
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to config.yaml.",
                exists=False,
            ),
        ] = None,
        library: Annotated[
            Path | None,
            typer.Option(
                "--library",
                "-l",
                help="Library file to use (overrides config and BOOKLIB_LIBRARY_FILE).",
            ),
        ] = None,
    ) -> None:
        """Personal book library manager.

        Keeps books and their authors in a single XML library file
        ([cyan].bdb[/]), backed up on every save.
        """
        from booklib.cli._context import RuntimeContext
        from booklib.config import load_settings
        from booklib.exceptions import ConfigurationError
        from booklib.ui.messages import print_booklib_error

        try:
            settings = load_settings(config)
        except ConfigurationError as e:
            print_booklib_error(e)
            raise typer.Exit(2) from e

        if library is not None:
            settings = settings.model_copy(update={"library_file": library})

        log_file = settings.logging.file
        if log_file is None and log:
            from booklib.paths import default_log_file

            log_file = default_log_file()
        setup_logging(verbose, settings.logging.level, log_file)
        logger.debug("Using library file %s", settings.library_file)

        ctx.obj = RuntimeContext(settings=settings, verbose=verbose)
