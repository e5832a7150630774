"""
Configuration loading from the environment and an optional config.yaml.

Configuration Sources (in priority order):
-----------------------------------------
1. Command line options (``--library``, ``--verbose``), applied by the CLI
   on top of what ``load_settings()`` returns.
2. **config.yaml**: structured settings, all optional::

       library_file: ~/books/library.bdb
       search:
         case_insensitive: true
       display:
         sort: author      # title | author | year
         reverse: false
       logging:
         level: INFO
         file: ~/.local/state/booklib/log/booklib.log

3. **Environment** (BOOKLIB_* variables, see ``booklib.env_settings``),
   optionally loaded from a ``.env`` file next to config.yaml.
4. Built-in defaults.

Relative paths in config.yaml are resolved against the config file's
directory. Unknown keys are rejected so typos do not go unnoticed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from booklib.comparators import SortOrder
from booklib.env_settings import get_env_settings, load_env_settings_from_file, validate_log_level
from booklib.exceptions import ConfigurationError
from booklib.paths import default_config_file, default_library_file

logger = logging.getLogger(__name__)


# =============================================================================
# Settings models
# =============================================================================


class SearchSettings(BaseModel):
    """Search defaults (config.yaml ``search`` section)."""

    model_config = ConfigDict(extra="forbid")

    case_insensitive: bool = False


class DisplaySettings(BaseModel):
    """Listing defaults (config.yaml ``display`` section)."""

    model_config = ConfigDict(extra="forbid")

    sort: SortOrder = SortOrder.title
    reverse: bool = False


class LoggingSettings(BaseModel):
    """Logging options (config.yaml ``logging`` section)."""

    model_config = ConfigDict(extra="forbid")

    level: str = "WARNING"
    file: Path | None = None

    @field_validator("level")
    @classmethod
    def check_level(cls, v: str) -> str:
        return validate_log_level(v, "logging.level")


class Settings(BaseModel):
    """Resolved application settings."""

    model_config = ConfigDict(extra="forbid")

    library_file: Path
    config_file: Path | None = None
    search: SearchSettings = Field(default_factory=SearchSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# =============================================================================
# Loading
# =============================================================================


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """
    Load a YAML config file.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML, or
            does not contain a mapping
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(
            f"Unable to read config file {config_path}: {e.strerror or e}",
            config_file=config_path,
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {config_path}: {e}", config_file=config_path
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(data).__name__}",
            config_file=config_path,
        )
    return data


def _resolve_path(value: Any, base_dir: Path) -> Any:
    if not isinstance(value, str) or not value:
        return value
    p = Path(value).expanduser()
    return p if p.is_absolute() else (base_dir / p)


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Overlay one level of nested sections; anything else replaces.

    A key left empty in YAML (``search:``) keeps the base value.
    """
    merged = dict(base)
    for key, value in overlay.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_settings(
    config_file: Path | None = None,
    *,
    env_file: Path | None = None,
) -> Settings:
    """
    Load settings from the environment and config.yaml.

    Args:
        config_file: Config file to read. It must exist when given. When
            None, the default config file is used if it exists.
        env_file: ``.env`` file to load first (default: ``.env`` next to the
            config file, when present)

    Returns:
        Resolved settings (CLI overrides are not applied here)

    Raises:
        ConfigurationError: If the config file is missing, malformed, or has
            invalid values
    """
    explicit = config_file is not None
    config_path = config_file if config_file is not None else default_config_file()
    if explicit and not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}", config_file=config_path)

    if env_file is None and config_path.exists():
        candidate = config_path.parent / ".env"
        env_file = candidate if candidate.exists() else None
    try:
        env = load_env_settings_from_file(env_file) if env_file else get_env_settings()
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid environment settings: {e}") from e

    data: dict[str, Any] = {
        "library_file": env.library_file or default_library_file(),
        "search": {"case_insensitive": env.case_insensitive},
        "logging": {"level": env.log_level, "file": env.log_file},
    }

    if config_path.exists():
        yaml_config = load_yaml_config(config_path)
        base_dir = config_path.parent
        if "library_file" in yaml_config:
            yaml_config["library_file"] = _resolve_path(yaml_config["library_file"], base_dir)
        logging_section = yaml_config.get("logging")
        if isinstance(logging_section, dict) and "file" in logging_section:
            logging_section["file"] = _resolve_path(logging_section["file"], base_dir)
        data = _merge(data, yaml_config)
        data["config_file"] = config_path
        logger.debug("Loaded config file %s", config_path)

    try:
        return Settings.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_file=config_path if config_path.exists() else None,
            field=field or None,
        ) from e
