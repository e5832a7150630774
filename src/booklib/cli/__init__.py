"""booklib CLI, built with Typer and Rich.

The CLI is organized as:
- Library commands on the main app (init, list, authors, add, remove, edit)
- The ``search`` sub-app (search book, search author, search series)
"""

from __future__ import annotations

from booklib.cli._app import (
    EDIT_COMMANDS,
    LIBRARY_COMMANDS,
    SEARCH_COMMANDS,
    CoverFilter,
    CoverOption,
    create_main_callback,
    get_version,
    make_app,
    make_search_app,
)
from booklib.cli._context import RuntimeContext, cli_errors, get_runtime_context
from booklib.cli.library import register_library_commands
from booklib.cli.search import register_search_commands

# Create main app and sub-apps
app = make_app()
search_app = make_search_app()

app.add_typer(search_app, name="search", rich_help_panel=SEARCH_COMMANDS)

# Register main callback (handles --version, --verbose, --config, --library)
create_main_callback(app)

register_library_commands(app)
register_search_commands(search_app)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> int:
    """Main entry point for the CLI."""
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0


__all__ = [
    # App instances
    "app",
    "search_app",
    # Entry point
    "main",
    # Context
    "RuntimeContext",
    "get_runtime_context",
    "cli_errors",
    # Enums
    "CoverOption",
    "CoverFilter",
    # Helpers
    "get_version",
    # Constants
    "LIBRARY_COMMANDS",
    "EDIT_COMMANDS",
    "SEARCH_COMMANDS",
]
