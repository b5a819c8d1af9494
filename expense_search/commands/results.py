"""Group, sort and display a search results payload."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from expense_search.cli import EXIT_PAYLOAD_ERROR, Context, pass_context
from expense_search.commands._common import (
    load_json_file_or_exit,
    print_renderables,
    resolve_query,
)
from expense_search.exceptions import PayloadError
from expense_search.models import SearchResults, format_personal_details
from expense_search.results.list_items import (
    ReportActionListItem,
    ReportListItem,
    TransactionListItem,
)
from expense_search.results.sections import build_sections
from expense_search.results.sorting import get_sorted_sections
from expense_search.search.form import get_expense_type_label
from expense_search.utils.formatting import format_currency
from expense_search.utils.output import create_table, error, info


def _format_date(value: str | None, show_year: bool) -> str:
    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return parsed.strftime("%b %d, %Y" if show_year else "%b %d")


def _transactions_table(items: list[TransactionListItem], title: str | None = None) -> Table:
    first = items[0] if items else None
    show_merchant = bool(first and first.should_show_merchant)
    show_category = first is None or first.should_show_category is not False
    show_tag = first is None or first.should_show_tag is not False
    show_tax = bool(first and first.should_show_tax)

    table = create_table(title=title, show_header=True, header_style="bold")
    table.add_column("Date", no_wrap=True)
    if show_merchant:
        table.add_column("Merchant")
    table.add_column("Description")
    table.add_column("From")
    table.add_column("To")
    if show_category:
        table.add_column("Category")
    if show_tag:
        table.add_column("Tag")
    if show_tax:
        table.add_column("Tax", justify="right")
    table.add_column("Type")
    table.add_column("Total", justify="right", style="amount")

    for item in items:
        row = [_format_date(item.date, item.should_show_year)]
        if show_merchant:
            row.append(item.formatted_merchant)
        row.extend(
            [
                (item.comment.comment if item.comment else None) or "",
                item.formatted_from,
                item.formatted_to,
            ]
        )
        if show_category:
            row.append(item.category or "")
        if show_tag:
            row.append(item.tag or "")
        if show_tax:
            row.append(
                format_currency(item.tax_amount, item.currency) if item.tax_amount else ""
            )
        row.append(get_expense_type_label(item.transaction_type) if item.transaction_type else "")
        row.append(format_currency(item.formatted_total or 0, item.currency))
        table.add_row(*(escape(cell) for cell in row))
    return table


def _report_title(item: ReportListItem) -> str:
    name = item.report_name or item.report_id
    parts = [f"[report.name]{escape(name)}[/report.name]"]
    if item.from_details is not None or item.to_details is not None:
        sender = format_personal_details(item.from_details)
        receiver = format_personal_details(item.to_details)
        if sender or receiver:
            parts.append(escape(f"{sender} -> {receiver}"))
    if item.total is not None:
        parts.append(escape(format_currency(abs(item.total), item.currency)))
    return "  ".join(parts)


def _report_actions_table(items: list[ReportActionListItem]) -> Table:
    table = create_table(show_header=True, header_style="bold")
    table.add_column("Date", no_wrap=True)
    table.add_column("From")
    table.add_column("Message")
    for item in items:
        table.add_row(
            escape(item.date or ""),
            escape(item.formatted_from),
            escape(item.message or ""),
        )
    return table


@click.command("results")
@click.argument(
    "payload_path",
    metavar="PAYLOAD",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--query",
    "-Q",
    "query",
    default=None,
    help="Search query the payload answers (default: canned query from config)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the sorted list items as JSON",
)
@pass_context
def cli(ctx: Context, payload_path: Path, query: str | None, as_json: bool) -> None:
    """Build sorted list sections from a search results PAYLOAD.

    PAYLOAD is a JSON file holding ``{"data": {...}, "search": {...}}`` or
    the bare data mapping. The query's type and status choose the layout:
    chat searches list report actions, status:all lists transactions and
    any other status groups transactions under their reports.

    \b
    Examples:
      expense-search results payload.json
      expense-search results payload.json --query "type:expense status:outstanding"
      expense-search results payload.json -Q "sortBy:amount sortOrder:asc" --json
    """
    query_json = resolve_query(ctx, (query,) if query else ())
    data = load_json_file_or_exit(payload_path, "results")
    try:
        results = SearchResults.from_payload(data)
    except PayloadError as e:
        error(str(e))
        raise SystemExit(EXIT_PAYLOAD_ERROR)

    sections = build_sections(query_json.type, query_json.status, results)
    items = get_sorted_sections(
        query_json.type,
        query_json.status,
        sections,
        query_json.sort_by,
        query_json.sort_order,
    )

    if as_json:
        click.echo(json.dumps([asdict(item) for item in items], indent=2))
        return

    if not items:
        info("No results")
        return

    if isinstance(items[0], ReportActionListItem):
        print_renderables(_report_actions_table(items))  # type: ignore[arg-type]
    elif isinstance(items[0], ReportListItem):
        print_renderables(
            *(
                _transactions_table(report.transactions, title=_report_title(report))
                for report in items  # type: ignore[union-attr]
            )
        )
    else:
        print_renderables(_transactions_table(items))  # type: ignore[arg-type]
