"""Print the canonical hash of a search query."""

from __future__ import annotations

import click

from expense_search.cli import Context, pass_context
from expense_search.commands._common import resolve_query
from expense_search.search.query import build_canonical_query
from expense_search.utils.output import verbose


@click.command("hash")
@click.argument("query", nargs=-1)
@pass_context
def cli(ctx: Context, query: tuple[str, ...]) -> None:
    """Print the hash identifying QUERY.

    Queries that differ only in filter order, or in the order of values
    inside a filter, hash the same.
    """
    query_json = resolve_query(ctx, query)
    verbose(f"Canonical form: {build_canonical_query(query_json)}")
    click.echo(str(query_json.hash))
