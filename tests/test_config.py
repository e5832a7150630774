"""Tests for config.yaml loading and settings precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from booklib.comparators import SortOrder
from booklib.config import Settings, load_settings, load_yaml_config
from booklib.env_settings import clear_env_settings_cache
from booklib.exceptions import ConfigurationError


def _write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadYamlConfig:
    """Tests for load_yaml_config()."""

    def test_empty_file(self, tmp_path: Path) -> None:
        assert load_yaml_config(_write_config(tmp_path / "config.yaml", "")) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "config.yaml", "search: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML") as exc_info:
            load_yaml_config(path)
        assert exc_info.value.details["config_file"] == str(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "config.yaml", "- one\n- two\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_yaml_config(path)


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults_without_config(self, tmp_path: Path) -> None:
        settings = load_settings()
        assert isinstance(settings, Settings)
        assert settings.library_file == tmp_path / "data" / "library.bdb"
        assert settings.config_file is None
        assert settings.search.case_insensitive is False
        assert settings.display.sort is SortOrder.title
        assert settings.display.reverse is False
        assert settings.logging.level == "WARNING"
        assert settings.logging.file is None

    def test_environment_values(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("BOOKLIB_LIBRARY_FILE", str(tmp_path / "env.bdb"))
        monkeypatch.setenv("BOOKLIB_CASE_INSENSITIVE", "true")
        clear_env_settings_cache()

        settings = load_settings()
        assert settings.library_file == tmp_path / "env.bdb"
        assert settings.search.case_insensitive is True

    def test_default_config_file_is_used(self, tmp_path: Path) -> None:
        _write_config(tmp_path / "config" / "config.yaml", "display:\n  sort: year\n")
        settings = load_settings()
        assert settings.display.sort is SortOrder.year
        assert settings.config_file == tmp_path / "config" / "config.yaml"

    def test_yaml_overrides_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("BOOKLIB_LIBRARY_FILE", str(tmp_path / "env.bdb"))
        monkeypatch.setenv("BOOKLIB_LOG_LEVEL", "ERROR")
        clear_env_settings_cache()
        config = _write_config(
            tmp_path / "cfg" / "config.yaml",
            "library_file: /srv/yaml.bdb\nlogging:\n  file: /var/log/booklib.log\n",
        )

        settings = load_settings(config)
        assert settings.library_file == Path("/srv/yaml.bdb")
        assert settings.logging.file == Path("/var/log/booklib.log")
        assert settings.logging.level == "ERROR"

    def test_relative_paths_resolve_against_config_dir(self, tmp_path: Path) -> None:
        config = _write_config(
            tmp_path / "cfg" / "config.yaml",
            "library_file: books/mine.bdb\nlogging:\n  file: logs/booklib.log\n",
        )
        settings = load_settings(config)
        assert settings.library_file == tmp_path / "cfg" / "books" / "mine.bdb"
        assert settings.logging.file == tmp_path / "cfg" / "logs" / "booklib.log"

    def test_empty_sections_keep_defaults(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path / "config.yaml", "search:\ndisplay:\n")
        settings = load_settings(config)
        assert settings.search.case_insensitive is False

    def test_env_file_next_to_config(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        # Registered so the value loaded from .env is removed afterwards
        monkeypatch.setenv("BOOKLIB_CASE_INSENSITIVE", "false")
        config = _write_config(tmp_path / "cfg" / "config.yaml", "display:\n  reverse: true\n")
        (tmp_path / "cfg" / ".env").write_text(
            "BOOKLIB_CASE_INSENSITIVE=true\n", encoding="utf-8"
        )
        settings = load_settings(config)
        assert settings.search.case_insensitive is True
        assert settings.display.reverse is True

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        ("text", "field"),
        [
            ("display:\n  sort: isbn\n", "display.sort"),
            ("logging:\n  level: LOUD\n", "logging.level"),
            ("search:\n  case_insensitve: true\n", "search.case_insensitve"),
            ("colour: blue\n", "colour"),
        ],
        ids=["bad-sort", "bad-level", "typo", "unknown-key"],
    )
    def test_invalid_values(self, tmp_path: Path, text: str, field: str) -> None:
        config = _write_config(tmp_path / "config.yaml", text)
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config)
        assert exc_info.value.field == field
        assert exc_info.value.details["config_file"] == str(config)
