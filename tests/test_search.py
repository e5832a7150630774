"""Tests for wildcard matching and book search."""

from __future__ import annotations

import pytest

from booklib.exceptions import InvalidArgumentError
from booklib.library import Library
from booklib.models import BADCOVER, Book, CoverType
from booklib.search import BookQuery, SearchType, search_books, wildcard_match, wildcard_to_regex


class TestWildcardMatch:
    """Tests for wildcard_match()."""

    @pytest.mark.parametrize(
        ("pattern", "subject", "expected"),
        [
            ("Mac*", "MacLeod", True),
            ("Mac*", "Macintosh", True),
            ("Mac*", "Smith", False),
            ("*od", "MacLeod", True),
            ("*", "anything", True),
            ("*", "", True),
            ("Leo", "MacLeod", True),
            ("mac*", "MacLeod", False),
        ],
    )
    def test_examples(self, pattern: str, subject: str, expected: bool) -> None:
        assert wildcard_match(pattern, subject) is expected

    def test_case_insensitive(self) -> None:
        assert wildcard_match("mac*", "MacLeod", case_insensitive=True)

    def test_none_never_matches(self) -> None:
        assert wildcard_match("*", None) is False
        assert wildcard_match(None, "MacLeod") is False

    def test_pattern_is_stripped(self) -> None:
        assert wildcard_match("  Dune  ", "Dune")

    def test_regex_characters_keep_their_meaning(self) -> None:
        assert wildcard_match("D.ne", "Dune")
        assert wildcard_match("Du[mn]e", "Dune")

    def test_invalid_pattern(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Invalid search pattern"):
            wildcard_match("Dune[", "Dune")

    def test_regex_translation(self) -> None:
        assert wildcard_to_regex("Mac*") == ".*Mac.*"
        assert wildcard_to_regex("*od") == ".*od.*"
        assert wildcard_to_regex("*") == ".*"
        assert wildcard_to_regex("   ") == ".*"
        assert wildcard_to_regex(".x") == ".*.x.*"
        assert wildcard_to_regex("x", case_insensitive=True) == "(?i).*x.*"


class TestBookQuery:
    """Tests for BookQuery normalization."""

    def test_none_values_mean_unset(self) -> None:
        query = BookQuery(SearchType.BOOK, title=None, year=None, cover_type=None)  # type: ignore[arg-type]
        assert query.title == ""
        assert query.cover_type == BADCOVER

    def test_unknown_type_becomes_bad(self) -> None:
        assert BookQuery(42).search_type is SearchType.BAD  # type: ignore[arg-type]


class TestSearchBooks:
    """Tests for search_books() over the sample library."""

    def _titles(self, library: Library, query: BookQuery, **kwargs: bool) -> list[str]:
        return [b.title for b in library.search(query, **kwargs)]

    def test_book_search_by_title(self, sample_library: Library) -> None:
        assert self._titles(sample_library, BookQuery.for_books(title="The*")) == [
            "The Silver Spike",
            "The Talisman",
        ]

    def test_book_search_by_isbn(self, sample_library: Library) -> None:
        assert self._titles(sample_library, BookQuery.for_books(isbn="0441*")) == ["Dune"]

    def test_book_search_by_year_and_cover(self, sample_library: Library) -> None:
        query = BookQuery.for_books(year=1996, cover_type=CoverType.SOFTCOVER)
        assert self._titles(sample_library, query) == ["Bleak Seasons"]
        query = BookQuery.for_books(year=1996, cover_type=CoverType.HARDCOVER)
        assert self._titles(sample_library, query) == []

    def test_any_cover_matches_all(self, sample_library: Library) -> None:
        query = BookQuery.for_books(cover_type=CoverType.ANYCOVER)
        assert len(sample_library.search(query)) == len(sample_library)

    def test_empty_book_query_matches_all(self, sample_library: Library) -> None:
        results = sample_library.search(BookQuery.for_books())
        assert [b.title for b in results] == [b.title for b in sample_library]

    def test_author_search_any_author(self, sample_library: Library) -> None:
        assert self._titles(sample_library, BookQuery.for_authors(last_name="Straub")) == [
            "Black House",
            "The Talisman",
        ]

    def test_author_search_needs_both_names_on_one_author(
        self, sample_library: Library
    ) -> None:
        query = BookQuery.for_authors(first_name="Stephen", last_name="Straub")
        assert self._titles(sample_library, query) == []

    def test_author_search_case_insensitive(self, sample_library: Library) -> None:
        query = BookQuery.for_authors(first_name="glen")
        assert self._titles(sample_library, query) == []
        assert self._titles(sample_library, query, case_insensitive=True) == [
            "Bleak Seasons",
            "The Silver Spike",
        ]

    def test_author_without_first_name_fails_first_name_pattern(self) -> None:
        library = Library()
        library.add_book(Book.from_names("Republic", "Plato"))
        assert library.search(BookQuery.for_authors(first_name="*")) == []
        assert len(library.search(BookQuery.for_authors(last_name="Pla*"))) == 1

    def test_series_search(self, sample_library: Library) -> None:
        assert self._titles(sample_library, BookQuery.for_series("Black*")) == [
            "Bleak Seasons",
            "The Silver Spike",
        ]

    def test_empty_series_matches_everything(self, sample_library: Library) -> None:
        assert len(sample_library.search(BookQuery.for_series(""))) == len(sample_library)

    def test_bad_search_type(self, sample_library: Library) -> None:
        with pytest.raises(InvalidArgumentError):
            search_books(sample_library.books, BookQuery())
