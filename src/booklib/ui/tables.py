"""Table formatting for books and authors."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape
from rich.table import Table

from booklib.models import BADDATE, Author, Book
from booklib.ui.core import console


def _cell(value: object | None) -> str:
    return escape(str(value)) if value is not None else "[dim]-[/]"


def build_book_table(books: Sequence[Book], title: str = "Books") -> Table:
    """Build a table with one row per book.

    Example:
        ┏━━━┳━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━┳━━━━━━━━┳━━━━━━┳━━━━━━━━━━━━┳━━━━━━━━━━━━┓
        ┃ # ┃ Title           ┃ Authors    ┃ Series ┃ Year ┃ Cover      ┃ ISBN       ┃
        ┡━━━╇━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━╇━━━━━━━━╇━━━━━━╇━━━━━━━━━━━━╇━━━━━━━━━━━━┩
        │ 1 │ Bleak Seasons   │ Glen Cook  │ Black… │ 1996 │ Soft Cover │ 0812555338 │
        └───┴─────────────────┴────────────┴────────┴──────┴────────────┴────────────┘
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="title")
    table.add_column("Authors", style="author")
    table.add_column("Series", style="series")
    table.add_column("Year", style="year", justify="right")
    table.add_column("Cover")
    table.add_column("ISBN", style="isbn")

    for i, book in enumerate(books, 1):
        table.add_row(
            str(i),
            escape(book.title),
            escape(book.authors_string()),
            _cell(book.series),
            _cell(book.publish_year if book.publish_year != BADDATE else None),
            book.cover_name,
            _cell(book.isbn),
        )
    return table


def print_book_table(books: Sequence[Book], title: str = "Books") -> None:
    """Print books as a table, or a dim notice when there are none."""
    if not books:
        console.print(f"[dim]No {title.lower()} found[/]")
        return
    console.print(build_book_table(books, title))


def print_author_table(
    authors: Sequence[Author],
    book_counts: dict[tuple[str, str | None], int] | None = None,
    title: str = "Authors",
) -> None:
    """Print authors, optionally with how many books each has.

    Args:
        authors: Authors to list
        book_counts: Book count keyed by ``Author.key``
        title: Table title
    """
    if not authors:
        console.print(f"[dim]No {title.lower()} found[/]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Last", style="author")
    table.add_column("First")
    table.add_column("Full name")
    if book_counts is not None:
        table.add_column("Books", justify="right")

    for author in authors:
        row = [escape(author.last_name), _cell(author.first_name), escape(author.full_name)]
        if book_counts is not None:
            row.append(str(book_counts.get(author.key, 0)))
        table.add_row(*row)

    console.print(table)
