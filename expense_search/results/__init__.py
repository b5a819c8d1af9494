"""Turn search results into sorted, display-ready list items."""

from expense_search.results.list_items import (
    ListItem,
    ReportActionListItem,
    ReportListItem,
    TransactionListItem,
)
from expense_search.results.sections import build_sections, get_list_item_type
from expense_search.results.sorting import get_sorted_sections

__all__ = [
    "ListItem",
    "ReportActionListItem",
    "ReportListItem",
    "TransactionListItem",
    "build_sections",
    "get_list_item_type",
    "get_sorted_sections",
]
