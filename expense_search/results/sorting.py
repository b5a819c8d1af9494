"""Ordering of built list items."""

from __future__ import annotations

import locale
from collections.abc import Callable, Sequence
from functools import cmp_to_key
from typing import Any, TypeVar

from expense_search.constants import (
    COLUMN_SORT_PROPERTIES,
    DATA_TYPE_CHAT,
    SORT_ORDER_ASC,
    STATUS_ALL,
)
from expense_search.results.list_items import (
    ListItem,
    ReportActionListItem,
    ReportListItem,
    TransactionListItem,
)
from expense_search.utils.formatting import effective_date

T = TypeVar("T")


def _sort_defined(
    items: Sequence[T],
    value_of: Callable[[T], Any],
    compare: Callable[[Any, Any], float],
) -> list[T]:
    """Sort the items that have a value; items without one keep their index.

    Returns a new list.
    """
    positions = [index for index, item in enumerate(items) if value_of(item) is not None]
    ordered = sorted(
        (items[index] for index in positions),
        key=cmp_to_key(lambda a, b: compare(value_of(a), value_of(b))),
    )
    result = list(items)
    for index, item in zip(positions, ordered):
        result[index] = item
    return result


def _compare_values(a: Any, b: Any) -> float:
    if isinstance(a, str) or isinstance(b, str):
        return locale.strcoll(str(a).casefold(), str(b).casefold())
    return a - b


def _compare_strings_desc(a: str, b: str) -> int:
    a, b = a.lower(), b.lower()
    return (b > a) - (b < a)


def _sort_value(item: TransactionListItem, sort_property: str) -> Any:
    if sort_property == "comment":
        return item.comment.comment if item.comment else None
    return getattr(item, sort_property, None)


def get_sorted_transaction_data(
    items: Sequence[TransactionListItem],
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> list[TransactionListItem]:
    """Sort transaction rows by a table column.

    Text columns compare case-insensitively with the process ``LC_COLLATE``,
    numeric columns numerically. Unsortable columns leave the order as is.
    The CLI sets ``LC_COLLATE`` from the environment; library callers set
    it themselves with ``locale.setlocale``.
    """
    if not sort_by or not sort_order:
        return list(items)

    sort_property = COLUMN_SORT_PROPERTIES.get(sort_by)
    if not sort_property:
        return list(items)

    direction = 1 if sort_order == SORT_ORDER_ASC else -1
    return _sort_defined(
        items,
        lambda item: _sort_value(item, sort_property),
        lambda a, b: direction * _compare_values(a, b),
    )


def get_report_newest_transaction_date(report: ReportListItem) -> str | None:
    """Latest effective date among the report's transactions."""
    dates = [
        effective_date(transaction.created, transaction.modified_created)
        for transaction in report.transactions
    ]
    dates = [value for value in dates if value]
    if not dates:
        return None
    return max(dates)


def get_sorted_report_data(items: Sequence[ReportListItem]) -> list[ReportListItem]:
    """Reports with the most recent activity first."""
    return _sort_defined(items, get_report_newest_transaction_date, _compare_strings_desc)


def get_sorted_report_action_data(
    items: Sequence[ReportActionListItem],
) -> list[ReportActionListItem]:
    """Newest chat actions first."""
    return _sort_defined(items, lambda item: item.created, _compare_strings_desc)


def get_sorted_sections(
    data_type: str,
    status: str,
    items: Sequence[ListItem],
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> list[ListItem]:
    """Sort list items the way :func:`build_sections` chose to build them."""
    if data_type == DATA_TYPE_CHAT:
        return get_sorted_report_action_data(items)  # type: ignore[arg-type]
    if status == STATUS_ALL:
        return get_sorted_transaction_data(items, sort_by, sort_order)  # type: ignore[arg-type]
    return get_sorted_report_data(items)  # type: ignore[arg-type]
