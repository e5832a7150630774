"""Search commands.

Commands: search book, search author, search series
"""

from __future__ import annotations

from typing import Annotated

import typer

from booklib.cli._app import CoverFilter, IgnoreCaseOpt, ReverseOpt, SortOpt
from booklib.cli._context import RuntimeContext, cli_errors, get_runtime_context
from booklib.comparators import SortOrder, sort_books
from booklib.search import BookQuery


def _run_query(
    runtime: RuntimeContext,
    query: BookQuery,
    *,
    ignore_case: bool,
    sort: SortOrder | None,
    reverse: bool,
) -> None:
    """Run ``query`` against the library and print the matches.

    Matches stay in library order unless a sort is requested.
    """
    from booklib.ui.tables import print_book_table

    case_insensitive = ignore_case or runtime.settings.search.case_insensitive
    with cli_errors():
        library = runtime.load_library()
        results = library.search(query, case_insensitive)
    if sort is not None or reverse:
        results = sort_books(results, sort or SortOrder.title, reverse=reverse)
    print_book_table(results, title="Matches")


def register_search_commands(search_app: typer.Typer) -> None:
    """Register search commands on the search sub-app."""

    @search_app.command("book")
    def search_book(
        ctx: typer.Context,
        title: Annotated[str, typer.Option("--title", "-t", help="Title pattern.")] = "",
        isbn: Annotated[str, typer.Option("--isbn", help="ISBN pattern.")] = "",
        year: Annotated[
            int | None, typer.Option("--year", "-y", help="Exact publish year.")
        ] = None,
        cover: Annotated[
            CoverFilter | None, typer.Option("--cover", help="Cover type.")
        ] = None,
        ignore_case: IgnoreCaseOpt = False,
        sort: SortOpt = None,
        reverse: ReverseOpt = False,
    ) -> None:
        """Find books by title, ISBN, year and cover.

        Every option given must match. With no options every book matches.
        """
        from booklib.models import BADCOVER, BADDATE

        query = BookQuery.for_books(
            title=title,
            isbn=isbn,
            year=BADDATE if year is None else year,
            cover_type=BADCOVER if cover is None else cover.cover_type,
        )
        _run_query(
            get_runtime_context(ctx), query, ignore_case=ignore_case, sort=sort, reverse=reverse
        )

    @search_app.command("author")
    def search_author(
        ctx: typer.Context,
        first: Annotated[str, typer.Option("--first", help="First name pattern.")] = "",
        last: Annotated[str, typer.Option("--last", help="Last name pattern.")] = "",
        ignore_case: IgnoreCaseOpt = False,
        sort: SortOpt = None,
        reverse: ReverseOpt = False,
    ) -> None:
        """Find books where any author matches both name patterns."""
        query = BookQuery.for_authors(first_name=first, last_name=last)
        _run_query(
            get_runtime_context(ctx), query, ignore_case=ignore_case, sort=sort, reverse=reverse
        )

    @search_app.command("series")
    def search_series(
        ctx: typer.Context,
        series: Annotated[
            str, typer.Argument(help="Series pattern. Empty matches every book.")
        ] = "",
        ignore_case: IgnoreCaseOpt = False,
        sort: SortOpt = None,
        reverse: ReverseOpt = False,
    ) -> None:
        """Find books in a series."""
        query = BookQuery.for_series(series)
        _run_query(
            get_runtime_context(ctx), query, ignore_case=ignore_case, sort=sort, reverse=reverse
        )
