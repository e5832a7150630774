"""
Book search.

A ``BookQuery`` selects one of three search modes:

1. Book search: optional title and ISBN (wildcard), publish year and cover
   type (exact). Every field that is set must match.
2. Author search: optional first and last name (wildcard). A book matches
   if any one of its authors matches both.
3. Series search: series name (wildcard). An empty series matches every book.

Searches never reorder: results keep the order of the input list.

Wildcards:
    ``*`` matches zero or more characters and cannot be escaped. The rest of
    the pattern is handed to the regular expression engine unchanged, so
    characters such as ``.`` or ``[`` keep their regex meaning. A pattern
    with no leading/trailing ``*`` matches anywhere in the subject.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from booklib.exceptions import InvalidArgumentError
from booklib.models import BADCOVER, BADDATE, Author, Book, CoverType

logger = logging.getLogger(__name__)

WILDCARD = "*"
_WILDCARD_REGEX = ".*"
_CASE_INSENSITIVE_FLAG = "(?i)"


class SearchType(IntEnum):
    """Which fields of a query are used."""

    BAD = -1
    SERIES = 1
    BOOK = 2
    AUTHOR = 3


def wildcard_to_regex(pattern: str, *, case_insensitive: bool = False) -> str:
    """Translate a wildcard pattern into the regex used by ``wildcard_match``."""
    translated = "".join(_WILDCARD_REGEX if c == WILDCARD else c for c in pattern.strip())
    if not translated.startswith(_WILDCARD_REGEX):
        translated = _WILDCARD_REGEX + translated
    if not translated.endswith(_WILDCARD_REGEX):
        translated = translated + _WILDCARD_REGEX
    if case_insensitive:
        translated = _CASE_INSENSITIVE_FLAG + translated
    return translated


def wildcard_match(pattern: str | None, subject: str | None, case_insensitive: bool = False) -> bool:
    """
    Match ``subject`` against a wildcard ``pattern``.

    Args:
        pattern: Search pattern, ``*`` matches any run of characters
        subject: Text to test
        case_insensitive: Ignore case when matching

    Returns:
        True if the whole subject matches. Always False if either is None.

    Raises:
        InvalidArgumentError: If the pattern is not a valid regular expression

    Example:
        >>> wildcard_match("Mac*", "MacLeod")
        True
        >>> wildcard_match("mac*", "MacLeod", case_insensitive=True)
        True
    """
    if pattern is None or subject is None:
        return False
    regex = wildcard_to_regex(pattern, case_insensitive=case_insensitive)
    try:
        return re.fullmatch(regex, subject) is not None
    except re.error as e:
        raise InvalidArgumentError(
            f"Invalid search pattern {pattern!r}: {e}",
            field="pattern",
            details={"regex": regex},
        ) from e


@dataclass
class BookQuery:
    """Search criteria. Empty strings, BADDATE and BADCOVER mean "not set"."""

    search_type: SearchType = SearchType.BAD
    title: str = ""
    isbn: str = ""
    series: str = ""
    first_name: str = ""
    last_name: str = ""
    year: int = BADDATE
    cover_type: int = BADCOVER

    def __post_init__(self) -> None:
        for name in ("title", "isbn", "series", "first_name", "last_name"):
            if getattr(self, name) is None:
                setattr(self, name, "")
        if self.year is None:
            self.year = BADDATE
        if self.cover_type is None:
            self.cover_type = BADCOVER
        try:
            self.search_type = SearchType(self.search_type)
        except ValueError:
            self.search_type = SearchType.BAD

    @classmethod
    def for_books(
        cls,
        *,
        title: str = "",
        isbn: str = "",
        year: int = BADDATE,
        cover_type: int = BADCOVER,
    ) -> BookQuery:
        return cls(SearchType.BOOK, title=title, isbn=isbn, year=year, cover_type=cover_type)

    @classmethod
    def for_authors(cls, *, first_name: str = "", last_name: str = "") -> BookQuery:
        return cls(SearchType.AUTHOR, first_name=first_name, last_name=last_name)

    @classmethod
    def for_series(cls, series: str = "") -> BookQuery:
        return cls(SearchType.SERIES, series=series)


def _book_matches(book: Book, query: BookQuery, case_insensitive: bool) -> bool:
    if query.cover_type not in (BADCOVER, CoverType.ANYCOVER):
        if query.cover_type != book.cover_type:
            return False
    if query.year != BADDATE and query.year != book.publish_year:
        return False
    if query.isbn and not wildcard_match(query.isbn, book.isbn, case_insensitive):
        return False
    if query.title and not wildcard_match(query.title, book.title, case_insensitive):
        return False
    return True


def _author_matches(author: Author, query: BookQuery, case_insensitive: bool) -> bool:
    if query.first_name and not wildcard_match(
        query.first_name, author.first_name, case_insensitive
    ):
        return False
    if query.last_name and not wildcard_match(query.last_name, author.last_name, case_insensitive):
        return False
    return True


def _any_author_matches(book: Book, query: BookQuery, case_insensitive: bool) -> bool:
    return any(_author_matches(a, query, case_insensitive) for a in book.authors)


def _series_matches(book: Book, query: BookQuery, case_insensitive: bool) -> bool:
    if not query.series:
        return True
    return wildcard_match(query.series, book.series, case_insensitive)


_MATCHERS = {
    SearchType.BOOK: _book_matches,
    SearchType.AUTHOR: _any_author_matches,
    SearchType.SERIES: _series_matches,
}


def search_books(
    books: Iterable[Book],
    query: BookQuery,
    case_insensitive: bool = False,
) -> list[Book]:
    """
    Filter ``books`` by ``query``, keeping their relative order.

    Args:
        books: Books to search (usually the library's book list)
        query: Search criteria and mode
        case_insensitive: Ignore case in wildcard fields

    Returns:
        Matching books in input order

    Raises:
        InvalidArgumentError: If the query has no valid search type
    """
    matcher = _MATCHERS.get(query.search_type)
    if matcher is None:
        raise InvalidArgumentError(
            f"Unknown search type: {query.search_type!r}", field="search_type"
        )
    results = [b for b in books if matcher(b, query, case_insensitive)]
    logger.debug(
        "%s search matched %d book(s) (case_insensitive=%s)",
        query.search_type.name.lower(),
        len(results),
        case_insensitive,
    )
    return results
