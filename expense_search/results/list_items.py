"""Display-ready list items built from search results."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Union

from expense_search.models import PersonalDetails, Report, ReportAction, Transaction


def _copy_fields(record: Any, base: type) -> dict[str, Any]:
    return {f.name: getattr(record, f.name) for f in fields(base)}


@dataclass
class TransactionListItem(Transaction):
    """One transaction row, with resolved parties and display fields."""

    from_details: PersonalDetails | None = None
    to_details: PersonalDetails | None = None
    formatted_from: str = ""
    formatted_to: str = ""
    formatted_total: int | None = None
    formatted_merchant: str = ""
    date: str | None = None
    should_show_merchant: bool = False
    should_show_category: bool | None = None
    should_show_tag: bool | None = None
    should_show_tax: bool | None = None
    should_show_year: bool = False
    key_for_list: str = ""

    @classmethod
    def from_transaction(cls, transaction: Transaction, **extra: Any) -> TransactionListItem:
        return cls(**_copy_fields(transaction, Transaction), **extra)


@dataclass
class ReportListItem(Report):
    """One report header owning its transaction rows.

    A report whose transactions arrived without the report record itself
    has only ``report_id`` set.
    """

    from_details: PersonalDetails | None = None
    to_details: PersonalDetails | None = None
    transactions: list[TransactionListItem] = field(default_factory=list)
    key_for_list: str = ""

    @classmethod
    def from_report(cls, report: Report, **extra: Any) -> ReportListItem:
        values = _copy_fields(report, Report)
        values.update(extra)
        return cls(**values)


@dataclass
class ReportActionListItem(ReportAction):
    """One chat message row."""

    from_details: PersonalDetails | None = None
    formatted_from: str = ""
    date: str | None = None
    key_for_list: str = ""

    @classmethod
    def from_report_action(cls, action: ReportAction, **extra: Any) -> ReportActionListItem:
        return cls(**_copy_fields(action, ReportAction), **extra)


ListItem = Union[TransactionListItem, ReportListItem, ReportActionListItem]


def is_transaction_list_item(item: object) -> bool:
    return isinstance(item, TransactionListItem)


def is_report_list_item(item: object) -> bool:
    return isinstance(item, ReportListItem)


def is_report_action_list_item(item: object) -> bool:
    return isinstance(item, ReportActionListItem)
