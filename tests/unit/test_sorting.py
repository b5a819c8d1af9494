"""Unit tests for list item ordering."""

from __future__ import annotations

import locale
from collections.abc import Generator
from datetime import date

import pytest

from expense_search.models import Comment, SearchResults
from expense_search.results.list_items import (
    ReportActionListItem,
    ReportListItem,
    TransactionListItem,
)
from expense_search.results.sections import build_sections
from expense_search.results.sorting import (
    get_report_newest_transaction_date,
    get_sorted_report_action_data,
    get_sorted_report_data,
    get_sorted_sections,
    get_sorted_transaction_data,
)


def _item(key: str, **fields: object) -> TransactionListItem:
    return TransactionListItem(transaction_id=key, key_for_list=key, **fields)  # type: ignore[arg-type]


def _keys(items: list) -> list[str]:
    return [item.key_for_list for item in items]


@pytest.fixture
def utf8_collation() -> Generator[str, None, None]:
    """Switch LC_COLLATE to a UTF-8 locale with real collation rules, if one is installed."""
    saved = locale.setlocale(locale.LC_COLLATE)
    for name in ("en_US.UTF-8", "en_US.utf8", "de_DE.UTF-8", "en_GB.UTF-8"):
        try:
            locale.setlocale(locale.LC_COLLATE, name)
        except locale.Error:
            continue
        try:
            yield name
        finally:
            locale.setlocale(locale.LC_COLLATE, saved)
        return
    pytest.skip("no UTF-8 locale with collation rules is installed")


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class TestSortedTransactionData:
    def test_numeric_ascending_and_descending(self) -> None:
        items = [
            _item("a", formatted_total=300),
            _item("b", formatted_total=100),
            _item("c", formatted_total=200),
        ]
        assert _keys(get_sorted_transaction_data(items, "amount", "asc")) == ["b", "c", "a"]
        assert _keys(get_sorted_transaction_data(items, "amount", "desc")) == ["a", "c", "b"]

    def test_text_is_case_insensitive(self) -> None:
        items = [
            _item("a", formatted_merchant="delta"),
            _item("b", formatted_merchant="Apple"),
            _item("c", formatted_merchant="beta"),
        ]
        assert _keys(get_sorted_transaction_data(items, "merchant", "asc")) == ["b", "c", "a"]

    def test_missing_values_keep_their_position(self) -> None:
        items = [
            _item("a", formatted_total=None),
            _item("b", formatted_total=300),
            _item("c", formatted_total=None),
            _item("d", formatted_total=100),
        ]
        assert _keys(get_sorted_transaction_data(items, "amount", "asc")) == ["a", "d", "c", "b"]
        assert _keys(get_sorted_transaction_data(items, "amount", "desc")) == ["a", "b", "c", "d"]

    def test_description_sorts_by_comment(self) -> None:
        items = [
            _item("a", comment=Comment("zebra")),
            _item("b", comment=Comment(None)),
            _item("c", comment=Comment("apple")),
        ]
        assert _keys(get_sorted_transaction_data(items, "description", "asc")) == ["c", "b", "a"]

    @pytest.mark.parametrize(
        ("sort_by", "sort_order"),
        [
            (None, "asc"),
            ("amount", None),
            ("receipt", "asc"),
            ("taxAmount", "desc"),
            ("bogus", "asc"),
        ],
    )
    def test_unsortable_keeps_order(self, sort_by: str | None, sort_order: str | None) -> None:
        items = [_item("b", formatted_total=2), _item("a", formatted_total=1)]
        assert _keys(get_sorted_transaction_data(items, sort_by, sort_order)) == ["b", "a"]

    def test_input_not_mutated(self) -> None:
        items = [_item("a", formatted_total=2), _item("b", formatted_total=1)]
        get_sorted_transaction_data(items, "amount", "asc")
        assert _keys(items) == ["a", "b"]

    def test_text_follows_locale_collation(self, utf8_collation: str) -> None:
        items = [
            _item("z", formatted_merchant="Zeta"),
            _item("e", formatted_merchant="Éclair"),
            _item("a", formatted_merchant="apple"),
        ]
        assert _keys(get_sorted_transaction_data(items, "merchant", "asc")) == ["a", "e", "z"]
        assert _keys(get_sorted_transaction_data(items, "merchant", "desc")) == ["z", "e", "a"]

    def test_stable_for_equal_values(self) -> None:
        items = [_item("a", category="X"), _item("b", category="X"), _item("c", category="A")]
        assert _keys(get_sorted_transaction_data(items, "category", "asc")) == ["c", "a", "b"]


# ---------------------------------------------------------------------------
# Reports and report actions
# ---------------------------------------------------------------------------


def _report(key: str, *dates: str | None) -> ReportListItem:
    return ReportListItem(
        report_id=key,
        key_for_list=key,
        transactions=[_item(f"{key}{i}", created=value) for i, value in enumerate(dates)],
    )


class TestSortedReportData:
    def test_newest_transaction_date(self) -> None:
        report = _report("r", "2024-01-05", "2024-03-01", "2024-02-10")
        assert get_report_newest_transaction_date(report) == "2024-03-01"

    def test_newest_date_uses_modified_date(self) -> None:
        report = ReportListItem(
            report_id="r",
            transactions=[_item("t", created="2024-01-01", modified_created="2024-05-01")],
        )
        assert get_report_newest_transaction_date(report) == "2024-05-01"

    def test_no_dates(self) -> None:
        assert get_report_newest_transaction_date(_report("r")) is None
        assert get_report_newest_transaction_date(_report("r", None)) is None

    def test_most_recent_first(self) -> None:
        reports = [
            _report("old", "2023-01-01"),
            _report("new", "2024-05-01"),
            _report("mid", "2024-01-01"),
        ]
        assert _keys(get_sorted_report_data(reports)) == ["new", "mid", "old"]

    def test_report_without_dates_keeps_position(self) -> None:
        reports = [_report("old", "2023-01-01"), _report("none"), _report("new", "2024-05-01")]
        assert _keys(get_sorted_report_data(reports)) == ["new", "none", "old"]


class TestSortedReportActionData:
    def test_newest_first(self) -> None:
        actions = [
            ReportActionListItem(report_action_id="1", created="2024-01-01", key_for_list="1"),
            ReportActionListItem(report_action_id="2", created="2024-03-01", key_for_list="2"),
            ReportActionListItem(report_action_id="3", created="2024-02-01", key_for_list="3"),
        ]
        assert _keys(get_sorted_report_action_data(actions)) == ["2", "3", "1"]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


class TestSortedSections:
    def test_transactions_by_date(self, search_results: SearchResults) -> None:
        items = build_sections("expense", "all", search_results, date(2024, 6, 1))
        assert _keys(get_sorted_sections("expense", "all", items, "date", "desc")) == [
            "2",
            "1",
            "3",
        ]

    def test_reports_by_newest_transaction(self, search_results: SearchResults) -> None:
        items = build_sections("expense", "outstanding", search_results, date(2024, 6, 1))
        assert _keys(get_sorted_sections("expense", "outstanding", items)) == ["100", "200"]
