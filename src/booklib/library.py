"""
The book library.

A ``Library`` owns two collections that must stay consistent:

- ``books``: every Book, kept in library order (``Book.compare_to``), with no
  two books that are the same record.
- ``authors``: every distinct Author of those books, in the order they were
  first seen.

Which books each author wrote is held in an index keyed by ``Author.key``.
It is only changed by ``add_book()``, ``remove_book()`` and
``modify_book()``, which is what keeps the two collections in step:

- every author of every book is in ``authors`` and its index entry lists
  exactly the books it (co-)wrote;
- an author whose last book is removed is dropped from ``authors``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from booklib.exceptions import (
    DuplicateRecordError,
    InconsistentStateError,
    InvalidArgumentError,
    NotFoundError,
)
from booklib.models import Author, Book
from booklib.search import BookQuery, search_books

logger = logging.getLogger(__name__)

AuthorKey = tuple[str, str | None]


class Library:
    """A sorted collection of books and the authors who wrote them.

    Usage:
        library = Library.load(Path("books.bdb"))
        library.add_book(Book.from_names("Bleak Seasons", ["Glen Cook"]))
        results = library.search(BookQuery.for_authors(last_name="Cook"))
        library.save(Path("books.bdb"))
    """

    def __init__(self) -> None:
        self._books: list[Book] = []
        self._authors: dict[AuthorKey, Author] = {}
        self._author_books: dict[AuthorKey, list[Book]] = {}

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | str) -> Library:
        """Read a library from a ``.bdb`` file."""
        from booklib.codec import read_library

        return read_library(path)

    @classmethod
    def from_records(cls, books: Iterable[Book], authors: Iterable[Author]) -> Library:
        """
        Build a library from an existing book list and author list.

        The books are sorted into library order. Author records from
        ``authors`` are the ones stored, so any title/middle name/surtitle
        they carry is kept.

        Raises:
            DuplicateRecordError: If two books are the same record
            InconsistentStateError: If the two lists do not describe each
                other (an author with no books, or a book author missing
                from ``authors``)
        """
        library = cls()
        for author in authors:
            if author.key in library._authors:
                raise InconsistentStateError(
                    f"Author listed twice: {author}", author=author.full_name
                )
            library._authors[author.key] = author
            library._author_books[author.key] = []

        for book in books:
            for author in book.authors:
                if author.key not in library._authors:
                    raise InconsistentStateError(
                        f"Author {author} of '{book.title}' is not in the author list",
                        author=author.full_name,
                        title=book.title,
                    )
            if library.contains_book(book):
                raise DuplicateRecordError(
                    f"Book listed twice: {book.title}", title=book.title, isbn=book.isbn
                )
            library._insert_sorted(book)
            library._index(book)

        for key, entry in library._author_books.items():
            if not entry:
                raise InconsistentStateError(
                    f"Author {library._authors[key]} has no books",
                    author=library._authors[key].full_name,
                )
        return library

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def books(self) -> list[Book]:
        """Books in library order. A copy; mutate through the library."""
        return list(self._books)

    @property
    def authors(self) -> list[Author]:
        """Distinct authors, in first-seen order."""
        return list(self._authors.values())

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(list(self._books))

    def get_book(self, index: int) -> Book:
        return self._books[index]

    def contains_book(self, book: Book) -> bool:
        return self._position(book) is not None

    def __contains__(self, book: object) -> bool:
        return isinstance(book, Book) and self.contains_book(book)

    def find_book(self, *, title: str | None = None, isbn: str | None = None) -> Book | None:
        """Find a stored book by ISBN or by title, ignoring case.

        When both are given the ISBN is tried first.
        """
        if isbn:
            wanted = isbn.casefold()
            for book in self._books:
                if book.isbn is not None and book.isbn.casefold() == wanted:
                    return book
        if title:
            wanted = title.casefold()
            for book in self._books:
                if book.title.casefold() == wanted:
                    return book
        return None

    def find_author(self, author: Author) -> Author | None:
        """Return the stored author that is the same person, if any."""
        return self._authors.get(author.key)

    def find_author_by_name(self, full_name: str) -> Author | None:
        """Look up an author from a full name such as "Glen Cook".

        A blank name matches nobody.
        """
        try:
            author = Author.from_name(full_name)
        except InvalidArgumentError:
            return None
        return self.find_author(author)

    def find_author_by_last_name(self, last_name: str) -> list[Author]:
        """All authors with this last name, ignoring case and first names."""
        wanted = last_name.casefold()
        return [a for a in self._authors.values() if a.last_name.casefold() == wanted]

    def books_by(self, author: Author) -> list[Book]:
        """Books written or co-written by ``author``, in the order added."""
        return list(self._author_books.get(author.key, []))

    def search(self, query: BookQuery, case_insensitive: bool = False) -> list[Book]:
        """Run a search over the library's books (see ``booklib.search``)."""
        return search_books(self._books, query, case_insensitive)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_book(self, book: Book) -> None:
        """
        Add a book in library order and index its authors.

        Raises:
            DuplicateRecordError: If the same record is already present
        """
        if self.contains_book(book):
            raise DuplicateRecordError(
                f"Book already exists in library: {book.title}",
                title=book.title,
                isbn=book.isbn,
            )
        self._insert_sorted(book)
        for author in book.authors:
            if author.key not in self._authors:
                self._authors[author.key] = author
                self._author_books[author.key] = []
        self._index(book)
        logger.debug("Added book '%s' (%d in library)", book.title, len(self._books))

    def remove_book(self, book: Book) -> Book:
        """
        Remove a book and drop any author left without books.

        Args:
            book: The book to remove, or any record equal to it

        Returns:
            The stored record that was removed

        Raises:
            NotFoundError: If the book is not in the library
            InconsistentStateError: If an author's index entry does not list
                the book
        """
        position = self._position(book)
        if position is None:
            raise NotFoundError(f"Book not found: {book.title}", key=book.isbn or book.title)
        stored = self._books[position]
        self._unindex(stored)
        del self._books[position]
        logger.debug("Removed book '%s' (%d in library)", stored.title, len(self._books))
        return stored

    def modify_book(self, existing: Book, edited: Book) -> bool:
        """
        Merge an edited version into a stored book (see ``Book.is_modified``).

        The book is re-filed afterwards, so a changed title moves it to its
        new place and a changed author list updates the author index.

        Returns:
            True if anything changed

        Raises:
            NotFoundError: If ``existing`` is not in the library
            DuplicateRecordError: If the edit would make the book the same
                record as another stored book. Nothing is changed.
            InvalidArgumentError: If the merged author list would be too
                long. Nothing is changed.
        """
        position = self._position(existing)
        if position is None:
            raise NotFoundError(
                f"Book not found: {existing.title}", key=existing.isbn or existing.title
            )
        stored = self._books[position]
        for other in self._books:
            if other is not stored and other.same_record(edited):
                raise DuplicateRecordError(
                    f"Edit clashes with existing book: {other.title}",
                    title=other.title,
                    isbn=other.isbn,
                )
        stored.check_merge(edited)

        self.remove_book(stored)
        try:
            changed = stored.is_modified(edited)
        finally:
            self.add_book(stored)
        if changed:
            logger.debug("Modified book '%s'", stored.title)
        return changed

    def check_integrity(self) -> None:
        """
        Verify the book list and author index agree.

        Raises:
            InconsistentStateError: On the first mismatch found
        """
        expected: dict[AuthorKey, list[Book]] = {}
        for book in self._books:
            for author in book.authors:
                entry = expected.setdefault(author.key, [])
                if not any(b is book for b in entry):
                    entry.append(book)

        for key in expected.keys() | self._author_books.keys():
            have = self._author_books.get(key)
            want = expected.get(key)
            if key not in self._authors or have is None or want is None:
                name = str(self._authors[key]) if key in self._authors else key[0]
                raise InconsistentStateError(
                    f"Author index out of sync for {name}", author=name
                )
            if len(have) != len(want) or not all(any(h is w for h in have) for w in want):
                raise InconsistentStateError(
                    f"Book list for {self._authors[key]} is out of sync",
                    author=self._authors[key].full_name,
                )
        for i in range(1, len(self._books)):
            if self._books[i - 1].compare_to(self._books[i]) > 0:
                raise InconsistentStateError(
                    f"Books out of order at '{self._books[i].title}'",
                    title=self._books[i].title,
                )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, path: Path | str) -> Path:
        """Write the library to ``path``, backing up any existing file first."""
        from booklib.codec import write_library

        return write_library(self, path)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _position(self, book: Book) -> int | None:
        for i, stored in enumerate(self._books):
            if stored.same_record(book):
                return i
        return None

    def _insert_sorted(self, book: Book) -> None:
        # Before the first strictly greater book, so equal-sorting books stay
        # in insertion order
        i = 0
        while i < len(self._books) and self._books[i].compare_to(book) <= 0:
            i += 1
        self._books.insert(i, book)

    def _index(self, book: Book) -> None:
        for author in book.authors:
            entry = self._author_books[author.key]
            if not any(b is book for b in entry):
                entry.append(book)

    def _unindex(self, book: Book) -> None:
        # Nothing is removed unless every entry holds the book
        found: dict[AuthorKey, tuple[list[Book], int]] = {}
        for author in book.authors:
            # The same person may be listed twice on one book
            if author.key in found:
                continue
            entry = self._author_books.get(author.key)
            position = None
            if entry is not None:
                position = next((i for i, b in enumerate(entry) if b is book), None)
            if entry is None or position is None:
                raise InconsistentStateError(
                    f"Book not found for author {author}",
                    author=author.full_name,
                    title=book.title,
                )
            found[author.key] = (entry, position)

        for key, (entry, position) in found.items():
            del entry[position]
            if not entry:
                del self._author_books[key]
                del self._authors[key]
