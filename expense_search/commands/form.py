"""Show the advanced filter form values for a search query."""

from __future__ import annotations

import json
from pathlib import Path

import click

from expense_search.cli import EXIT_PAYLOAD_ERROR, Context, pass_context
from expense_search.commands._common import (
    load_json_file_or_exit,
    print_renderables,
    resolve_query,
)
from expense_search.exceptions import PayloadError
from expense_search.models import ReferenceData
from expense_search.search.form import (
    build_filter_form_values_from_query,
    get_search_header_title,
    standardize_query_json,
)
from expense_search.utils.output import create_table, error, info


@click.command("form")
@click.argument("query", nargs=-1)
@click.option(
    "--reference",
    "-r",
    "reference_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="JSON file with policyCategories, policyTags, currencyList, "
    "personalDetails, cardList, reports and taxRates",
)
@click.option(
    "--standardize",
    is_flag=True,
    default=False,
    help="Replace emails, bank names and tax rate names with IDs first",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the form values as JSON",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    reference_path: Path,
    standardize: bool,
    as_json: bool,
) -> None:
    """Turn QUERY into advanced filter form values.

    Filter values that do not resolve against the reference collections
    (a deleted tag, a removed card, an unknown currency) are dropped.

    \b
    Examples:
      expense-search form "tag:Engineering category:Travel" -r reference.json
      expense-search form --json "from:jane@example.com" -r reference.json --standardize
    """
    query_json = resolve_query(ctx, query)
    data = load_json_file_or_exit(reference_path, "reference")
    try:
        reference = ReferenceData.from_payload(data)
    except PayloadError as e:
        error(str(e))
        raise SystemExit(EXIT_PAYLOAD_ERROR)

    if standardize:
        query_json = standardize_query_json(query_json, reference)

    form_values = build_filter_form_values_from_query(query_json, reference)

    if as_json:
        click.echo(json.dumps(form_values, indent=2))
        return

    info(get_search_header_title(query_json, reference))
    table = create_table(show_header=True, header_style="bold")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in form_values.items():
        table.add_row(key, ", ".join(value) if isinstance(value, list) else str(value))
    print_renderables(table)
