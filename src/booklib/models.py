"""Data models for booklib.

Two record types live here:

- ``Author``: a person's name split into title/first/middle/last/surtitle.
- ``Book``: title, series, ISBN, publish year, cover type and 1..10 authors.

Neither record points back at the library or at each other beyond a book's
own author list; which books an author wrote is tracked by the
``Library`` index instead.

Each record has two notions of sameness:

- ``same_record()`` (also ``==``): the identity used for duplicate detection
  and lookups. Authors match on last + first name, books on ISBN (when both
  have one) or title, always case-insensitively.
- ``fields_equal()``: exact structural comparison of every field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from booklib.exceptions import InvalidArgumentError

# An unknown publish year
BADDATE = -1

# An unset cover type in a search query
BADCOVER = -1

MAX_AUTHORS = 10

LIBRARY_SUFFIX = ".bdb"
BACKUP_SUFFIX = ".bak"


class CoverType(IntEnum):
    """Book binding. ANYCOVER is only meaningful in a search query."""

    HARDCOVER = 0
    SOFTCOVER = 1
    ANYCOVER = 2


# Display names, indexed by CoverType value. Also the <covertype> text.
COVER_NAMES = ("Hard Cover", "Soft Cover", "Any Cover")


def _blank_to_none(value: str | None) -> str | None:
    """Optional text fields are None when absent, never ''."""
    if value is None or value == "":
        return None
    return value


def _coerce_cover(value: Any) -> CoverType:
    """Clamp anything that is not a real cover type to SOFTCOVER."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return CoverType.SOFTCOVER
    if number in (CoverType.HARDCOVER, CoverType.SOFTCOVER):
        return CoverType(number)
    return CoverType.SOFTCOVER


def _casefold_or_none(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


@dataclass(eq=False)
class Author:
    """An author's name.

    Only ``last_name`` is required. ``title`` is a pre-name title such as
    "Dr." and ``sur_title`` a post-name one such as "Jr." or "IV".
    """

    last_name: str
    first_name: str | None = None
    middle_name: str | None = None
    title: str | None = None
    sur_title: str | None = None

    def __post_init__(self) -> None:
        if self.last_name is None or not str(self.last_name).strip():
            raise InvalidArgumentError("Author must have a last name", field="last_name")
        self.first_name = _blank_to_none(self.first_name)
        self.middle_name = _blank_to_none(self.middle_name)
        self.title = _blank_to_none(self.title)
        self.sur_title = _blank_to_none(self.sur_title)

    @classmethod
    def from_name(cls, name: str) -> Author:
        """Build an author from a full name such as "Terry Brooks".

        One word is a last name only, two words are first + last, and with
        three or more words everything between the first and last word is
        the middle name. Titles and surtitles are never inferred.

        Raises:
            InvalidArgumentError: If the name is missing or blank
        """
        if name is None:
            raise InvalidArgumentError("Author must have a last name", field="last_name")
        words = name.split()
        if not words:
            raise InvalidArgumentError("Author must have a last name", field="last_name")
        if len(words) == 1:
            return cls(last_name=words[0])
        if len(words) == 2:
            return cls(first_name=words[0], last_name=words[1])
        return cls(
            first_name=words[0],
            middle_name=" ".join(words[1:-1]),
            last_name=words[-1],
        )

    @property
    def key(self) -> tuple[str, str | None]:
        """Identity key: case-folded last and first name."""
        return (self.last_name.casefold(), _casefold_or_none(self.first_name))

    @property
    def full_name(self) -> str:
        """All present name parts, in reading order."""
        parts = (self.title, self.first_name, self.middle_name, self.last_name, self.sur_title)
        return " ".join(p for p in parts if p is not None)

    def same_record(self, other: Author) -> bool:
        """True if both name the same person (last + first name, any case)."""
        return self.key == other.key

    def fields_equal(self, other: Author) -> bool:
        """True if every name field is identical."""
        return (
            self.title == other.title
            and self.first_name == other.first_name
            and self.middle_name == other.middle_name
            and self.last_name == other.last_name
            and self.sur_title == other.sur_title
        )

    def is_modified(self, other: Author) -> bool:
        """Copy any differing name field from ``other`` onto this author.

        Returns:
            True if at least one field changed
        """
        changed = False
        for name in ("sur_title", "first_name", "middle_name", "last_name", "title"):
            new_value = getattr(other, name)
            if getattr(self, name) != new_value:
                setattr(self, name, new_value)
                changed = True
        return changed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self.same_record(other)

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.full_name


@dataclass(eq=False)
class Book:
    """A book record.

    ``publish_year`` is BADDATE when unknown. ``cover_type`` is clamped to
    SOFTCOVER when given anything other than HARDCOVER or SOFTCOVER, so
    ANYCOVER never ends up stored on a book.
    """

    title: str
    authors: list[Author]
    series: str | None = None
    isbn: str | None = None
    publish_year: int = BADDATE
    cover_type: CoverType = CoverType.HARDCOVER

    def __post_init__(self) -> None:
        if not self.title:
            raise InvalidArgumentError("A Book must have a title", field="title")
        if self.authors is None or len(self.authors) == 0:
            raise InvalidArgumentError("A Book must have an author", field="authors")
        if len(self.authors) > MAX_AUTHORS:
            raise InvalidArgumentError(
                f"A Book cannot have more than {MAX_AUTHORS} authors",
                field="authors",
                details={"count": len(self.authors)},
            )
        for author in self.authors:
            if not isinstance(author, Author):
                raise InvalidArgumentError(
                    f"Book authors must be Author records, got {type(author).__name__}",
                    field="authors",
                )
        self.authors = list(self.authors)
        self.series = _blank_to_none(self.series)
        self.isbn = _blank_to_none(self.isbn)
        self.publish_year = BADDATE if self.publish_year is None else int(self.publish_year)
        self.cover_type = _coerce_cover(self.cover_type)

    @classmethod
    def from_names(
        cls,
        title: str,
        names: list[str] | str,
        *,
        series: str | None = None,
        isbn: str | None = None,
        publish_year: int = BADDATE,
        cover_type: int = CoverType.HARDCOVER,
    ) -> Book:
        """Build a book whose authors are given as full-name strings."""
        if names is None:
            raise InvalidArgumentError("A Book must have an author", field="authors")
        if isinstance(names, str):
            names = [names]
        if len(names) > MAX_AUTHORS:
            raise InvalidArgumentError(
                f"A Book cannot have more than {MAX_AUTHORS} authors",
                field="authors",
                details={"count": len(names)},
            )
        return cls(
            title=title,
            authors=[Author.from_name(n) for n in names],
            series=series,
            isbn=isbn,
            publish_year=publish_year,
            cover_type=cover_type,
        )

    @property
    def cover_name(self) -> str:
        return COVER_NAMES[self.cover_type]

    @property
    def primary_author(self) -> Author:
        return self.authors[0]

    def authors_string(self, sep: str = ", ") -> str:
        """Author display names joined by ``sep``."""
        return sep.join(a.full_name for a in self.authors)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def same_record(self, other: Book) -> bool:
        """True if both records describe the same book.

        ISBNs decide when both books have one, even if the titles differ.
        Otherwise the titles decide. Both comparisons ignore case.
        """
        if self.isbn is not None and other.isbn is not None:
            return self.isbn.casefold() == other.isbn.casefold()
        return self.title.casefold() == other.title.casefold()

    def fields_equal(self, other: Book) -> bool:
        """True if every field, including each author's fields, is identical."""
        if (
            self.title != other.title
            or self.series != other.series
            or self.isbn != other.isbn
            or self.publish_year != other.publish_year
            or self.cover_type != other.cover_type
            or len(self.authors) != len(other.authors)
        ):
            return False
        return all(a.fields_equal(b) for a, b in zip(self.authors, other.authors))

    def compare_to(self, other: Book) -> int:
        """Library sort order: 0 for the same record, else by title."""
        if self.same_record(other):
            return 0
        if self.title < other.title:
            return -1
        if self.title > other.title:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.same_record(other)

    # ISBN-or-title equality is not transitive, so there is no usable hash
    __hash__ = None  # type: ignore[assignment]

    # -------------------------------------------------------------------------
    # Diff/merge
    # -------------------------------------------------------------------------

    def is_modified(self, other: Book) -> bool:
        """Merge ``other`` into this book in place.

        Scalar fields are overwritten when they differ. Authors are
        reconciled by identity: authors present in both lists get their
        name details updated, authors only in this book are dropped, then
        authors only in ``other`` are appended in their original order.

        Returns:
            True if anything changed

        Raises:
            InvalidArgumentError: If the merged author list would exceed
                MAX_AUTHORS. The book is left unchanged.
        """
        pairs, kept, added = self._reconcile_authors(other)
        self._check_author_count(len(kept) + len(added))

        changed = False
        for name in ("title", "series", "isbn", "publish_year", "cover_type"):
            new_value = getattr(other, name)
            if getattr(self, name) != new_value:
                setattr(self, name, new_value)
                changed = True

        for orig_author, new_author in pairs:
            if orig_author.is_modified(new_author):
                changed = True

        if len(kept) != len(self.authors) or added:
            changed = True
        self.authors = kept + added
        return changed

    def check_merge(self, other: Book) -> None:
        """Raise InvalidArgumentError if ``is_modified(other)`` would fail."""
        _, kept, added = self._reconcile_authors(other)
        self._check_author_count(len(kept) + len(added))

    def _reconcile_authors(
        self, other: Book
    ) -> tuple[list[tuple[Author, Author]], list[Author], list[Author]]:
        pairs: list[tuple[Author, Author]] = []
        matched_new = [False] * len(other.authors)
        matched_orig = [False] * len(self.authors)
        for i, new_author in enumerate(other.authors):
            for k, orig_author in enumerate(self.authors):
                if new_author.same_record(orig_author):
                    matched_new[i] = True
                    matched_orig[k] = True
                    pairs.append((orig_author, new_author))

        kept = [a for a, seen in zip(self.authors, matched_orig) if seen]
        added = [a for a, seen in zip(other.authors, matched_new) if not seen]
        return pairs, kept, added

    @staticmethod
    def _check_author_count(count: int) -> None:
        if count > MAX_AUTHORS:
            raise InvalidArgumentError(
                f"A Book cannot have more than {MAX_AUTHORS} authors",
                field="authors",
                details={"count": count},
            )

    def __str__(self) -> str:
        return f"{self.title} ({self.authors_string()})"
