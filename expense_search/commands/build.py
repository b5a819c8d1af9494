"""Build a search query from advanced filter form values."""

from __future__ import annotations

import click

from expense_search.cli import EXIT_PARSE_ERROR, Context, pass_context
from expense_search.constants import (
    FILTER_KEY_CARD_ID,
    FILTER_KEY_CATEGORY,
    FILTER_KEY_CURRENCY,
    FILTER_KEY_DESCRIPTION,
    FILTER_KEY_EXPENSE_TYPE,
    FILTER_KEY_FROM,
    FILTER_KEY_IN,
    FILTER_KEY_KEYWORD,
    FILTER_KEY_MERCHANT,
    FILTER_KEY_REPORT_ID,
    FILTER_KEY_TAG,
    FILTER_KEY_TAX_RATE,
    FILTER_KEY_TO,
    FORM_KEY_DATE_AFTER,
    FORM_KEY_DATE_BEFORE,
    FORM_KEY_GREATER_THAN,
    FORM_KEY_LESS_THAN,
    FORM_KEY_POLICY_ID,
    FORM_KEY_STATUS,
    FORM_KEY_TYPE,
    TRANSACTION_TYPES,
)
from expense_search.search.form import build_query_string_from_filter_form_values
from expense_search.search.query import build_search_query_json
from expense_search.utils.output import error, print_query


@click.command("build")
@click.option("--type", "type_", default=None, help="Search type (default: from config)")
@click.option("--status", default=None, help="Search status (default: from config)")
@click.option("--policy-id", default=None, help="Policy ID (default: from config)")
@click.option("--merchant", default=None, help="Merchant name")
@click.option("--description", default=None, help="Expense description")
@click.option("--report-id", default=None, help="Report ID")
@click.option("--keyword", default=None, help="Free text, space separated")
@click.option("--category", multiple=True, help="Category (repeatable)")
@click.option("--tag", multiple=True, help="Tag (repeatable)")
@click.option("--card-id", multiple=True, help="Card ID (repeatable)")
@click.option("--tax-rate", multiple=True, help="Tax rate ID (repeatable)")
@click.option(
    "--expense-type",
    multiple=True,
    type=click.Choice(TRANSACTION_TYPES),
    help="Expense type (repeatable)",
)
@click.option("--currency", multiple=True, help="Currency code (repeatable)")
@click.option("--from", "from_", multiple=True, help="Submitter account ID (repeatable)")
@click.option("--to", multiple=True, help="Approver account ID (repeatable)")
@click.option("--in", "in_", multiple=True, help="Chat report ID (repeatable)")
@click.option("--date-before", default=None, help="Only expenses before YYYY-MM-DD")
@click.option("--date-after", default=None, help="Only expenses after YYYY-MM-DD")
@click.option("--less-than", default=None, help="Only amounts below this value")
@click.option("--greater-than", default=None, help="Only amounts above this value")
@click.option(
    "--with-hash",
    is_flag=True,
    default=False,
    help="Append the query hash",
)
@pass_context
def cli(
    ctx: Context,
    type_: str | None,
    status: str | None,
    policy_id: str | None,
    merchant: str | None,
    description: str | None,
    report_id: str | None,
    keyword: str | None,
    category: tuple[str, ...],
    tag: tuple[str, ...],
    card_id: tuple[str, ...],
    tax_rate: tuple[str, ...],
    expense_type: tuple[str, ...],
    currency: tuple[str, ...],
    from_: tuple[str, ...],
    to: tuple[str, ...],
    in_: tuple[str, ...],
    date_before: str | None,
    date_after: str | None,
    less_than: str | None,
    greater_than: str | None,
    with_hash: bool,
) -> None:
    """Build a query string from filter form options.

    Sorting is always date, descending. Values picked twice are written once.

    \b
    Example:
      $ expense-search build --type expense --category Travel --category Meals \\
          --greater-than 100
      sortBy:date sortOrder:desc type:expense status:all category:Travel,Meals amount>100
    """
    config = ctx.config
    form_values = {
        FORM_KEY_TYPE: type_ or config.default_type,
        FORM_KEY_STATUS: status or config.default_status,
        FORM_KEY_POLICY_ID: policy_id or config.default_policy_id,
        FILTER_KEY_MERCHANT: merchant,
        FILTER_KEY_DESCRIPTION: description,
        FILTER_KEY_REPORT_ID: report_id,
        FILTER_KEY_KEYWORD: keyword,
        FILTER_KEY_CATEGORY: list(category),
        FILTER_KEY_TAG: list(tag),
        FILTER_KEY_CARD_ID: list(card_id),
        FILTER_KEY_TAX_RATE: list(tax_rate),
        FILTER_KEY_EXPENSE_TYPE: list(expense_type),
        FILTER_KEY_CURRENCY: list(currency),
        FILTER_KEY_FROM: list(from_),
        FILTER_KEY_TO: list(to),
        FILTER_KEY_IN: list(in_),
        FORM_KEY_DATE_BEFORE: date_before,
        FORM_KEY_DATE_AFTER: date_after,
        FORM_KEY_LESS_THAN: less_than,
        FORM_KEY_GREATER_THAN: greater_than,
    }
    query = build_query_string_from_filter_form_values(form_values)

    result = build_search_query_json(query)
    if result.query is None:
        error(f"Form values produce an invalid query: {result.error}")
        raise SystemExit(EXIT_PARSE_ERROR)

    print_query(query, result.query.hash if with_hash else None)
