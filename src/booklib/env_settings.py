"""Environment-based settings using pydantic-settings.

Environment variables are loaded automatically and are overridden by the
YAML config file and by command line options.

Usage:
    from booklib.env_settings import get_env_settings

    env = get_env_settings()
    print(env.library_file)  # From BOOKLIB_LIBRARY_FILE

Environment Variables:
    BOOKLIB_LIBRARY_FILE - Library file to open (default: data dir/library.bdb)
    BOOKLIB_LOG_LEVEL - Logging level (default: "WARNING")
    BOOKLIB_LOG_FILE - Optional log file, written at DEBUG
    BOOKLIB_CASE_INSENSITIVE - Default for case-insensitive search (default: false)

    Path Overrides (from platformdirs):
        BOOKLIB_DATA_DIR - Override data directory
        BOOKLIB_LOG_DIR - Override log directory
        BOOKLIB_CONFIG_DIR - Override config directory
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def validate_log_level(v: str, field_name: str = "log level") -> str:
    """Normalize a log level name to upper case.

    Raises:
        ValueError: If it is not a standard level name
    """
    upper = v.upper()
    if upper not in VALID_LOG_LEVELS:
        raise ValueError(f"{field_name} must be one of {sorted(VALID_LOG_LEVELS)}, got: {v}")
    return upper


class EnvSettings(BaseSettings):
    """Settings read from BOOKLIB_* environment variables.

    Use get_env_settings() to get a cached instance.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOKLIB_",
        extra="ignore",
    )

    library_file: Path | None = Field(default=None, description="Library file to open")
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Path | None = Field(default=None, description="Optional log file")
    case_insensitive: bool = Field(
        default=False, description="Ignore case in searches by default"
    )

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        return validate_log_level(v, "BOOKLIB_LOG_LEVEL")

    @field_validator("library_file", "log_file", mode="before")
    @classmethod
    def empty_path_is_unset(cls, v: object) -> object:
        """Treat ``BOOKLIB_LOG_FILE=`` like an unset variable."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache(maxsize=1)
def get_env_settings() -> EnvSettings:
    """Get cached environment settings.

    The cache is populated on first call; see clear_env_settings_cache().
    """
    return EnvSettings()


def clear_env_settings_cache() -> None:
    """Clear the cached environment settings.

    Useful for testing to ensure fresh settings are loaded.
    """
    get_env_settings.cache_clear()


def load_env_settings_from_file(env_file: Path) -> EnvSettings:
    """Load environment settings from a specific .env file.

    The file's variables are loaded into ``os.environ`` (overriding existing
    values) and the cache is refreshed.
    """
    from dotenv import load_dotenv

    load_dotenv(env_file, override=True)

    clear_env_settings_cache()
    return get_env_settings()
