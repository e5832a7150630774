"""Sort orders over books.

Each ``by_*`` function is a cmp-style comparator returning -1, 0 or 1, so it
can be wrapped with ``functools.cmp_to_key`` or reversed by the caller.
``sort_books()`` does both for the common case.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from enum import Enum

from booklib.models import Book

Comparator = Callable[[Book, Book], int]


class SortOrder(str, Enum):
    """Available book sort orders."""

    title = "title"
    author = "author"
    year = "year"


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def by_title(a: Book, b: Book) -> int:
    """Library order: same record compares equal, otherwise by title."""
    return a.compare_to(b)


def by_author(a: Book, b: Book) -> int:
    """Order by each book's first author.

    Last names are compared first, then first names, with a missing first
    name sorting before any present one. When the first authors match, the
    book with fewer authors comes first.
    """
    first_a = a.primary_author
    first_b = b.primary_author
    if first_a.last_name != first_b.last_name:
        return _cmp(first_a.last_name, first_b.last_name)
    if first_a.first_name != first_b.first_name:
        if first_a.first_name is None:
            return -1
        if first_b.first_name is None:
            return 1
        return _cmp(first_a.first_name, first_b.first_name)
    return _cmp(len(a.authors), len(b.authors))


def by_publish_year(a: Book, b: Book) -> int:
    """Order by publish year, then by title."""
    if a.publish_year == b.publish_year:
        return _cmp(a.title, b.title)
    return -1 if a.publish_year < b.publish_year else 1


COMPARATORS: dict[SortOrder, Comparator] = {
    SortOrder.title: by_title,
    SortOrder.author: by_author,
    SortOrder.year: by_publish_year,
}


def sort_books(
    books: Iterable[Book],
    order: SortOrder | str = SortOrder.title,
    *,
    reverse: bool = False,
) -> list[Book]:
    """Return a new list of ``books`` sorted by ``order``.

    The sort is stable, including when ``reverse`` is set.

    Raises:
        ValueError: If ``order`` is not a known sort order
    """
    comparator = COMPARATORS[SortOrder(order)]
    return sorted(books, key=functools.cmp_to_key(comparator), reverse=reverse)
