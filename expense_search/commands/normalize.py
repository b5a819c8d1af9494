"""Print the normalized form of a search query."""

from __future__ import annotations

import click

from expense_search.cli import Context, pass_context
from expense_search.commands._common import resolve_query
from expense_search.search.query import build_search_query_string
from expense_search.utils.output import print_query


@click.command("normalize")
@click.argument("query", nargs=-1)
@click.option(
    "--with-hash",
    is_flag=True,
    default=False,
    help="Append the query hash",
)
@pass_context
def cli(ctx: Context, query: tuple[str, ...], with_hash: bool) -> None:
    """Rewrite QUERY with root keys first and every default made explicit.

    The output parses back to the same query and normalizes to itself.

    \b
    Example:
      $ expense-search normalize "merchant:Starbucks type:expense"
      type:expense status:all sortBy:date sortOrder:desc merchant:Starbucks
    """
    query_json = resolve_query(ctx, query)
    print_query(
        build_search_query_string(query_json),
        query_json.hash if with_hash else None,
    )
