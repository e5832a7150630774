"""Core console configuration and theme for booklib output.

Everything the CLI prints goes through these two consoles, so tests can
capture output and the theme is applied in one place.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

# =============================================================================
# Theme Configuration
# =============================================================================

BOOKLIB_THEME = Theme(
    {
        # Status colors
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        # Text styles
        "title": "bold white",
        "dim": "dim",
        "highlight": "bold magenta",
        # Record fields
        "path": "cyan",
        "author": "cyan",
        "series": "magenta",
        "isbn": "yellow",
        "year": "green",
        "hint": "dim italic",
    }
)

# =============================================================================
# Console Instances
# =============================================================================

# Primary console for normal output
console = Console(theme=BOOKLIB_THEME, stderr=False)

# Error console for stderr output
err_console = Console(theme=BOOKLIB_THEME, stderr=True)
