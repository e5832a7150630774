"""Shared pytest fixtures and helpers for booklib tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from booklib.env_settings import clear_env_settings_cache
from booklib.library import Library
from booklib.models import Author, Book, CoverType


def make_books() -> list[Book]:
    """Five books by four authors; Stephen King co-wrote two of them."""
    cook = Author(first_name="Glen", last_name="Cook")
    herbert = Author(
        first_name="Frank", middle_name="Patrick", last_name="Herbert", sur_title="Jr."
    )
    return [
        Book(
            title="Bleak Seasons",
            authors=[cook],
            series="Black Company",
            isbn="0812555338",
            publish_year=1996,
            cover_type=CoverType.SOFTCOVER,
        ),
        Book(
            title="The Silver Spike",
            authors=[cook],
            series="Black Company",
            publish_year=1989,
            cover_type=CoverType.SOFTCOVER,
        ),
        Book(title="Dune", authors=[herbert], isbn="0441172717", publish_year=1965),
        Book.from_names("The Talisman", ["Stephen King", "Peter Straub"], publish_year=1984),
        Book.from_names(
            "Black House", ["Stephen King", "Peter Straub"], publish_year=2001, isbn="0375504397"
        ),
    ]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep tests away from the user's real config, data and BOOKLIB_* variables."""
    for name in (
        "BOOKLIB_LIBRARY_FILE",
        "BOOKLIB_LOG_LEVEL",
        "BOOKLIB_LOG_FILE",
        "BOOKLIB_CASE_INSENSITIVE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BOOKLIB_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("BOOKLIB_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("BOOKLIB_LOG_DIR", str(tmp_path / "logs"))
    clear_env_settings_cache()
    yield
    clear_env_settings_cache()


@pytest.fixture
def sample_books() -> list[Book]:
    return make_books()


@pytest.fixture
def sample_library(sample_books: list[Book]) -> Library:
    library = Library()
    for book in sample_books:
        library.add_book(book)
    return library


@pytest.fixture
def library_file(tmp_path: Path, sample_library: Library) -> Path:
    """The sample library saved to a temporary .bdb file."""
    path = tmp_path / "books.bdb"
    sample_library.save(path)
    return path


@pytest.fixture(autouse=True)
def reset_booklib_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging() (the CLI calls it too)."""
    yield
    logger = logging.getLogger("booklib")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
