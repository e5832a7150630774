"""Tests for the Author and Book records."""

from __future__ import annotations

import pytest

from booklib.exceptions import InvalidArgumentError
from booklib.models import BADDATE, COVER_NAMES, MAX_AUTHORS, Author, Book, CoverType


class TestAuthor:
    """Tests for Author construction and comparison."""

    @pytest.mark.parametrize("last", [None, "", "   "])
    def test_requires_last_name(self, last: str | None) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            Author(last_name=last)  # type: ignore[arg-type]
        assert exc_info.value.field == "last_name"

    def test_blank_optionals_become_none(self) -> None:
        author = Author(last_name="Cook", first_name="", middle_name="", title="", sur_title="")
        assert author.first_name is None
        assert author.middle_name is None
        assert author.title is None
        assert author.sur_title is None

    def test_from_name_single_word(self) -> None:
        author = Author.from_name("Plato")
        assert author.last_name == "Plato"
        assert author.first_name is None

    def test_from_name_two_words(self) -> None:
        author = Author.from_name("Terry Brooks")
        assert (author.first_name, author.last_name) == ("Terry", "Brooks")
        assert author.middle_name is None

    def test_from_name_middle_words_joined(self) -> None:
        author = Author.from_name("  John  Ronald   Reuel Tolkien ")
        assert author.first_name == "John"
        assert author.middle_name == "Ronald Reuel"
        assert author.last_name == "Tolkien"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_from_name_blank(self, name: str) -> None:
        with pytest.raises(InvalidArgumentError):
            Author.from_name(name)

    def test_full_name_reading_order(self) -> None:
        author = Author(
            last_name="King", first_name="Martin", middle_name="Luther", title="Dr.", sur_title="Jr."
        )
        assert author.full_name == "Dr. Martin Luther King Jr."
        assert str(author) == "Dr. Martin Luther King Jr."

    def test_same_record_ignores_case_and_details(self) -> None:
        a = Author(last_name="MacLeod", first_name="Andrew", title="Dr.")
        b = Author(last_name="macleod", first_name="ANDREW", middle_name="J")
        assert a.same_record(b)
        assert a == b
        assert hash(a) == hash(b)
        assert not a.fields_equal(b)

    def test_different_first_name_is_different_author(self) -> None:
        assert Author(last_name="MacLeod", first_name="Andrew") != Author(
            last_name="MacLeod", first_name="Greg"
        )
        assert Author(last_name="MacLeod") != Author(last_name="MacLeod", first_name="Greg")

    def test_is_modified_copies_fields(self) -> None:
        author = Author(last_name="MacLeod", first_name="Andrew")
        changed = author.is_modified(
            Author(last_name="MacLeod", first_name="Andrew", title="Dr.", sur_title="III")
        )
        assert changed is True
        assert author.title == "Dr."
        assert author.sur_title == "III"

    def test_is_modified_no_change(self) -> None:
        author = Author(last_name="Cook", first_name="Glen")
        assert author.is_modified(Author(last_name="Cook", first_name="Glen")) is False


class TestBookConstruction:
    """Tests for Book validation and defaults."""

    def test_requires_title(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            Book(title="", authors=[Author(last_name="Cook")])
        assert exc_info.value.field == "title"

    @pytest.mark.parametrize("authors", [None, []])
    def test_requires_author(self, authors: list[Author] | None) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            Book(title="Dune", authors=authors)  # type: ignore[arg-type]
        assert exc_info.value.field == "authors"

    def test_author_limit(self) -> None:
        names = [f"Author{i}" for i in range(MAX_AUTHORS)]
        assert len(Book.from_names("Anthology", names).authors) == MAX_AUTHORS

        with pytest.raises(InvalidArgumentError) as exc_info:
            Book.from_names("Anthology", names + ["OneTooMany"])
        assert exc_info.value.details["count"] == MAX_AUTHORS + 1

    def test_rejects_non_author_entries(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Book(title="Dune", authors=["Frank Herbert"])  # type: ignore[list-item]

    def test_defaults(self) -> None:
        book = Book.from_names("Dune", "Frank Herbert")
        assert book.series is None
        assert book.isbn is None
        assert book.publish_year == BADDATE
        assert book.cover_type is CoverType.HARDCOVER
        assert book.cover_name == COVER_NAMES[0]

    def test_author_list_is_copied(self) -> None:
        authors = [Author(last_name="Herbert")]
        book = Book(title="Dune", authors=authors)
        authors.append(Author(last_name="Anderson"))
        assert len(book.authors) == 1

    @pytest.mark.parametrize("cover", [CoverType.ANYCOVER, 2, 7, -1, "paperback"])
    def test_out_of_range_cover_clamps_to_soft(self, cover: object) -> None:
        book = Book.from_names("Dune", "Frank Herbert", cover_type=cover)  # type: ignore[arg-type]
        assert book.cover_type is CoverType.SOFTCOVER

    def test_blank_series_and_isbn_are_none(self) -> None:
        book = Book.from_names("Dune", "Frank Herbert", series="", isbn="")
        assert book.series is None
        assert book.isbn is None

    def test_authors_string(self) -> None:
        book = Book.from_names("The Talisman", ["Stephen King", "Peter Straub"])
        assert book.authors_string() == "Stephen King, Peter Straub"
        assert str(book) == "The Talisman (Stephen King, Peter Straub)"


class TestBookComparison:
    """Tests for record identity, structural equality and ordering."""

    def test_isbn_match_overrides_title(self) -> None:
        a = Book.from_names("X", "Someone", isbn="123-456")
        b = Book.from_names("Y", "Someone Else", isbn="123-456")
        assert a == b
        assert a.compare_to(b) == 0

    def test_different_isbns_with_same_title(self) -> None:
        a = Book.from_names("Dune", "Frank Herbert", isbn="1")
        b = Book.from_names("Dune", "Frank Herbert", isbn="2")
        assert a != b
        assert a.compare_to(b) == 0

    def test_title_decides_when_an_isbn_is_missing(self) -> None:
        a = Book.from_names("dune", "Frank Herbert", isbn="1")
        b = Book.from_names("DUNE", "Frank Herbert")
        assert a == b

    def test_compare_to_orders_by_title(self) -> None:
        a = Book.from_names("Alpha", "Someone")
        b = Book.from_names("Beta", "Someone")
        assert a.compare_to(b) == -1
        assert b.compare_to(a) == 1

    def test_books_are_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Book.from_names("Dune", "Frank Herbert"))

    def test_fields_equal(self) -> None:
        a = Book.from_names("Dune", "Frank Herbert", publish_year=1965)
        b = Book.from_names("Dune", "Frank Herbert", publish_year=1965)
        c = Book.from_names("Dune", "Frank Herbert", publish_year=1966)
        assert a.fields_equal(b)
        assert not a.fields_equal(c)
        assert a == c


class TestBookIsModified:
    """Tests for the diff/merge of an edited book into a stored one."""

    def test_merges_author_details_and_adds_coauthor(self) -> None:
        book = Book(title="Shadows", authors=[Author(first_name="Andrew", last_name="MacLeod")])
        edited = Book(
            title="Shadows",
            authors=[
                Author(first_name="Andrew", last_name="MacLeod", title="Dr."),
                Author(first_name="Greg", last_name="MacLeod"),
            ],
        )

        assert book.is_modified(edited) is True
        assert len(book.authors) == 2
        assert book.authors[0].title == "Dr."
        assert book.authors[1].first_name == "Greg"

    def test_drops_authors_missing_from_edit(self) -> None:
        book = Book.from_names("The Talisman", ["Stephen King", "Peter Straub"])
        edited = Book.from_names("The Talisman", ["Peter Straub"])
        assert book.is_modified(edited) is True
        assert [a.last_name for a in book.authors] == ["Straub"]

    def test_keeps_author_instances_that_match(self) -> None:
        book = Book.from_names("The Talisman", ["Stephen King", "Peter Straub"])
        king = book.authors[0]
        book.is_modified(Book.from_names("The Talisman", ["Peter Straub", "Stephen King"]))
        assert book.authors[0] is king

    def test_overwrites_scalars(self) -> None:
        book = Book.from_names("Dune", "Frank Herbert")
        edited = Book.from_names(
            "Dune",
            "Frank Herbert",
            series="Dune Chronicles",
            isbn="0441172717",
            publish_year=1965,
            cover_type=CoverType.SOFTCOVER,
        )
        assert book.is_modified(edited) is True
        assert book.fields_equal(edited)

    def test_clears_optional_fields(self) -> None:
        book = Book.from_names("Dune", "Frank Herbert", series="Dune Chronicles")
        assert book.is_modified(Book.from_names("Dune", "Frank Herbert")) is True
        assert book.series is None

    def test_identical_edit_reports_no_change(self) -> None:
        book = Book.from_names("Dune", "Frank Herbert", publish_year=1965)
        edited = Book.from_names("Dune", "Frank Herbert", publish_year=1965)
        assert book.is_modified(edited) is False

    def test_merge_over_author_limit_leaves_book_unchanged(self) -> None:
        book = Book.from_names("Sampler", ["Ann Smith", "Ann Smith"], publish_year=2000)
        names = ["Ann Smith"] + [f"P{i} Q{i}" for i in range(MAX_AUTHORS - 1)]
        edited = Book.from_names("Sampler", names, publish_year=2001)

        with pytest.raises(InvalidArgumentError) as exc_info:
            book.is_modified(edited)

        assert exc_info.value.field == "authors"
        assert exc_info.value.details["count"] == MAX_AUTHORS + 1
        assert book.publish_year == 2000
        assert [a.full_name for a in book.authors] == ["Ann Smith", "Ann Smith"]

    def test_check_merge(self) -> None:
        book = Book.from_names("Sampler", ["Ann Smith", "Ann Smith"])
        book.check_merge(Book.from_names("Sampler", ["Ann Smith", "Bo Lee"]))
        with pytest.raises(InvalidArgumentError):
            book.check_merge(
                Book.from_names("Sampler", ["Ann Smith"] + [f"P{i} Q{i}" for i in range(9)])
            )
