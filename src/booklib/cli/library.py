"""Library commands.

Commands: init, list, authors, add, remove, edit
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from booklib.cli._app import (
    EDIT_COMMANDS,
    LIBRARY_COMMANDS,
    CoverOption,
    ReverseOpt,
    SortOpt,
)
from booklib.cli._context import cli_errors, get_runtime_context

AuthorsOpt = Annotated[
    list[str] | None,
    typer.Option(
        "--author",
        "-a",
        help="Author full name, e.g. \"Glen Cook\". Repeat for co-authors.",
    ),
]
SeriesOpt = Annotated[str | None, typer.Option("--series", help="Series name.")]
IsbnOpt = Annotated[str | None, typer.Option("--isbn", help="ISBN.")]
YearOpt = Annotated[int | None, typer.Option("--year", "-y", help="Publish year.")]
CoverOpt = Annotated[CoverOption | None, typer.Option("--cover", help="Cover type.")]
KeyArg = Annotated[
    str,
    typer.Argument(metavar="KEY", help="ISBN or title of the book (any case)."),
]


def register_library_commands(app: typer.Typer) -> None:
    """Register library commands on the main app."""

    @app.command("init", rich_help_panel=LIBRARY_COMMANDS)
    def init_command(
        ctx: typer.Context,
        path: Annotated[
            Path | None,
            typer.Argument(help="Where to create the library (default: configured file)."),
        ] = None,
        force: Annotated[
            bool,
            typer.Option("--force", "-f", help="Overwrite an existing library."),
        ] = False,
    ) -> None:
        """Create an empty library file.

        An existing file is kept as [cyan].bak[/] when [green]--force[/] is used.
        """
        from booklib.codec import backup_path
        from booklib.library import Library
        from booklib.ui.messages import print_error, print_success, print_warning

        runtime = get_runtime_context(ctx)
        target = path or runtime.library_file
        if target.exists():
            if not force:
                print_error(f"Library already exists: [path]{escape(str(target))}[/]")
                raise typer.Exit(1)
            print_warning(
                "Replacing existing library, previous copy kept as "
                f"[path]{escape(str(backup_path(target)))}[/]"
            )

        with cli_errors():
            target.parent.mkdir(parents=True, exist_ok=True)
            Library().save(target)
        print_success(f"Created library [path]{escape(str(target))}[/]")

    @app.command("list", rich_help_panel=LIBRARY_COMMANDS)
    def list_command(
        ctx: typer.Context,
        sort: SortOpt = None,
        reverse: ReverseOpt = False,
    ) -> None:
        """List every book in the library.

        [bold]Examples:[/]
          booklib list                 # Title order
          booklib list --sort year -r  # Newest first
        """
        from booklib.comparators import sort_books
        from booklib.ui.tables import print_book_table

        runtime = get_runtime_context(ctx)
        display = runtime.settings.display
        with cli_errors():
            library = runtime.load_library()
        books = sort_books(library.books, sort or display.sort, reverse=reverse or display.reverse)
        print_book_table(books)

    @app.command("authors", rich_help_panel=LIBRARY_COMMANDS)
    def authors_command(
        ctx: typer.Context,
        last: Annotated[
            str | None,
            typer.Option("--last", help="Only authors with this last name (any case)."),
        ] = None,
    ) -> None:
        """List authors and how many books each has."""
        from booklib.ui.tables import print_author_table

        runtime = get_runtime_context(ctx)
        with cli_errors():
            library = runtime.load_library()
        authors = library.find_author_by_last_name(last) if last else library.authors
        counts = {a.key: len(library.books_by(a)) for a in authors}
        print_author_table(authors, counts)

    @app.command("add", rich_help_panel=EDIT_COMMANDS)
    def add_command(
        ctx: typer.Context,
        title: Annotated[str, typer.Argument(help="Book title.")],
        author: AuthorsOpt = None,
        series: SeriesOpt = None,
        isbn: IsbnOpt = None,
        year: YearOpt = None,
        cover: CoverOpt = None,
    ) -> None:
        """Add a book and save the library.

        [bold]Example:[/]
          booklib add "Bleak Seasons" -a "Glen Cook" --series "Black Company" --year 1996
        """
        from booklib.models import BADDATE, Book, CoverType
        from booklib.ui.messages import print_success

        runtime = get_runtime_context(ctx)
        with cli_errors():
            book = Book.from_names(
                title,
                author or [],
                series=series,
                isbn=isbn,
                publish_year=BADDATE if year is None else year,
                cover_type=cover.cover_type if cover else CoverType.HARDCOVER,
            )
            library = runtime.load_library()
            library.add_book(book)
            runtime.save_library(library)
        print_success(f"Added [title]{escape(str(book))}[/]")

    @app.command("remove", rich_help_panel=EDIT_COMMANDS)
    def remove_command(ctx: typer.Context, key: KeyArg) -> None:
        """Remove a book and save the library.

        Authors left without any book are removed too.
        """
        from booklib.exceptions import NotFoundError
        from booklib.ui.messages import print_success

        runtime = get_runtime_context(ctx)
        with cli_errors():
            library = runtime.load_library()
            book = library.find_book(isbn=key, title=key)
            if book is None:
                raise NotFoundError(f"No book with ISBN or title {key!r}", key=key)
            removed = library.remove_book(book)
            runtime.save_library(library)
        print_success(f"Removed [title]{escape(str(removed))}[/]")

    @app.command("edit", rich_help_panel=EDIT_COMMANDS)
    def edit_command(
        ctx: typer.Context,
        key: KeyArg,
        title: Annotated[str | None, typer.Option("--title", "-t", help="New title.")] = None,
        author: AuthorsOpt = None,
        series: SeriesOpt = None,
        isbn: IsbnOpt = None,
        year: YearOpt = None,
        cover: CoverOpt = None,
    ) -> None:
        """Edit a book in place and save the library if anything changed.

        Options that are not given keep their current value. Pass an empty
        string to clear [green]--series[/] or [green]--isbn[/]. When
        [green]--author[/] is given it replaces the whole author list.
        """
        from booklib.exceptions import NotFoundError
        from booklib.models import Author, Book
        from booklib.ui.messages import print_info, print_success

        runtime = get_runtime_context(ctx)
        with cli_errors():
            library = runtime.load_library()
            stored = library.find_book(isbn=key, title=key)
            if stored is None:
                raise NotFoundError(f"No book with ISBN or title {key!r}", key=key)
            edited = Book(
                title=stored.title if title is None else title,
                authors=[Author.from_name(n) for n in author] if author else stored.authors,
                series=stored.series if series is None else series,
                isbn=stored.isbn if isbn is None else isbn,
                publish_year=stored.publish_year if year is None else year,
                cover_type=stored.cover_type if cover is None else cover.cover_type,
            )
            changed = library.modify_book(stored, edited)
            if changed:
                runtime.save_library(library)

        if changed:
            print_success(f"Updated [title]{escape(str(stored))}[/]")
        else:
            print_info("No changes")
