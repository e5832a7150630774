"""Cross-platform path handling using platformdirs.

Provides per-user paths with environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

from platformdirs import user_config_dir, user_data_dir, user_log_dir

from booklib.models import LIBRARY_SUFFIX

logger = logging.getLogger(__name__)

APP_NAME = "booklib"
APPAUTHOR: Literal[False] = False  # Avoid "CompanyName/AppName" nesting on Windows

DEFAULT_LIBRARY_NAME = "library" + LIBRARY_SUFFIX
CONFIG_FILE_NAME = "config.yaml"
LOG_FILE_NAME = "booklib.log"


def _env_override(env_var: str) -> Path | None:
    """Path from ``env_var`` if it is set and non-empty."""
    v = os.environ.get(env_var)
    return Path(v).expanduser() if v else None


def data_dir(*, ensure: bool = True) -> Path:
    """Get application data directory.

    Linux: ~/.local/share/booklib
    macOS: ~/Library/Application Support/booklib
    Windows: C:\\Users\\<user>\\AppData\\Local\\booklib

    Override with BOOKLIB_DATA_DIR.

    Args:
        ensure: Create directory if it doesn't exist
    """
    d = _env_override("BOOKLIB_DATA_DIR") or Path(user_data_dir(APP_NAME, APPAUTHOR))
    if ensure:
        d.mkdir(parents=True, exist_ok=True)
    return d


def log_dir(*, ensure: bool = True) -> Path:
    """Get application log directory.

    Linux: ~/.local/state/booklib/log
    macOS: ~/Library/Logs/booklib

    Override with BOOKLIB_LOG_DIR.
    """
    d = _env_override("BOOKLIB_LOG_DIR") or Path(user_log_dir(APP_NAME, APPAUTHOR))
    if ensure:
        d.mkdir(parents=True, exist_ok=True)
    return d


def config_dir() -> Path:
    """Get the config directory (not created).

    Linux: ~/.config/booklib

    Override with BOOKLIB_CONFIG_DIR.
    """
    return _env_override("BOOKLIB_CONFIG_DIR") or Path(user_config_dir(APP_NAME, APPAUTHOR))


def default_config_file() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def default_library_file() -> Path:
    """Library used when none is configured: ``data_dir()/library.bdb``."""
    return data_dir(ensure=False) / DEFAULT_LIBRARY_NAME


def default_log_file() -> Path:
    """Log file used by ``booklib --log``: ``log_dir()/booklib.log``."""
    return log_dir(ensure=False) / LOG_FILE_NAME
