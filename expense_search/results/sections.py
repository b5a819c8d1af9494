"""Group and format search results into list items."""

from __future__ import annotations

import logging
from datetime import date

from expense_search.constants import (
    ACTION_TYPE_PAID,
    ACTION_TYPE_VIEW,
    DATA_TYPE_CHAT,
    HIDDEN_MERCHANTS,
    OWNER_EMAIL_FAKE,
    REPORT_TYPE_EXPENSE,
    REPORT_TYPE_IOU,
    STATUS_ALL,
)
from expense_search.models import (
    EMPTY_PERSONAL_DETAILS,
    PersonalDetails,
    Report,
    ReportActionGroup,
    SearchResults,
    Transaction,
    format_personal_details,
)
from expense_search.results.list_items import (
    ListItem,
    ReportActionListItem,
    ReportListItem,
    TransactionListItem,
)
from expense_search.utils.formatting import effective_date, format_currency, is_other_year
from expense_search.utils.messages import translate

logger = logging.getLogger(__name__)


def get_transaction_amount(transaction: Transaction, is_from_expense_report: bool = False) -> int:
    """Amount to display for a transaction.

    Expense reports store amounts with the opposite sign, so the stored
    value is negated. Elsewhere the absolute value is shown. An edited
    amount wins over the original one.
    """
    if not is_from_expense_report:
        if transaction.modified_amount:
            return abs(transaction.modified_amount)
        return abs(transaction.amount)

    if transaction.modified_amount:
        return -transaction.modified_amount
    return -transaction.amount if transaction.amount else 0


def should_show_merchant(results: SearchResults) -> bool:
    """Whether any transaction has a real merchant worth a column."""
    return any(
        transaction.display_merchant not in HIDDEN_MERCHANTS for transaction in results.transactions
    )


def should_show_year(data: SearchResults | list[ListItem], today: date | None = None) -> bool:
    """Whether any record is dated outside the current year.

    Accepts raw results or already built list items.
    """
    if isinstance(data, SearchResults):
        for record in data.records:
            if isinstance(record, Transaction):
                if is_other_year(effective_date(record.created, record.modified_created), today):
                    return True
            elif isinstance(record, ReportActionGroup):
                if any(is_other_year(action.created, today) for action in record.actions):
                    return True
        return False

    for item in data:
        if isinstance(item, ReportListItem):
            candidates = [effective_date(t.created, t.modified_created) for t in item.transactions]
        elif isinstance(item, TransactionListItem):
            candidates = [effective_date(item.created, item.modified_created)]
        else:
            candidates = [item.created]
        if any(is_other_year(candidate, today) for candidate in candidates):
            return True
    return False


def _resolve_parties(
    results: SearchResults, account_id: int | None, manager_id: int | None
) -> tuple[PersonalDetails | None, PersonalDetails | None]:
    from_details = results.get_personal_details(account_id)
    to_details = results.get_personal_details(manager_id) if manager_id else EMPTY_PERSONAL_DETAILS
    return from_details, to_details


def _build_transaction_item(
    transaction: Transaction,
    results: SearchResults,
    *,
    show_merchant: bool,
    show_year: bool,
) -> TransactionListItem:
    from_details, to_details = _resolve_parties(
        results, transaction.account_id, transaction.manager_id
    )
    merchant = transaction.display_merchant
    metadata = results.metadata
    return TransactionListItem.from_transaction(
        transaction,
        from_details=from_details,
        to_details=to_details,
        formatted_from=format_personal_details(from_details),
        formatted_to=format_personal_details(to_details),
        formatted_total=get_transaction_amount(
            transaction, transaction.report_type == REPORT_TYPE_EXPENSE
        ),
        formatted_merchant="" if merchant in HIDDEN_MERCHANTS else merchant,
        date=effective_date(transaction.created, transaction.modified_created),
        should_show_merchant=show_merchant,
        should_show_category=metadata.should_show_category_column,
        should_show_tag=metadata.should_show_tag_column,
        should_show_tax=metadata.should_show_tax_column,
        should_show_year=show_year,
        key_for_list=transaction.transaction_id,
    )


def get_transactions_sections(
    results: SearchResults, today: date | None = None
) -> list[TransactionListItem]:
    """One flat row per transaction."""
    show_merchant = should_show_merchant(results)
    show_year = should_show_year(results, today)
    return [
        _build_transaction_item(
            transaction, results, show_merchant=show_merchant, show_year=show_year
        )
        for transaction in results.transactions
    ]


def get_report_actions_sections(results: SearchResults) -> list[ReportActionListItem]:
    """One row per chat action; deleted actions are left out."""
    items: list[ReportActionListItem] = []
    for action in results.report_actions:
        if action.deleted:
            continue
        from_details = results.get_personal_details(action.account_id)
        items.append(
            ReportActionListItem.from_report_action(
                action,
                from_details=from_details,
                formatted_from=format_personal_details(from_details),
                date=action.created,
                key_for_list=action.report_action_id,
            )
        )
    return items


def get_iou_report_name(results: SearchResults, report: Report) -> str | None:
    """Name for an IOU report, e.g. "Jane owes $12.00"; other actions keep the stored name."""
    payer = (
        results.get_personal_details(report.manager_id)
        if report.manager_id
        else EMPTY_PERSONAL_DETAILS
    )
    payer_name = format_personal_details(payer, translate("common.hidden"))
    amount = format_currency(report.total or 0, report.currency)

    if report.action == ACTION_TYPE_VIEW:
        return translate("iou.payerOwesAmount", payer=payer_name, amount=amount)
    if report.action == ACTION_TYPE_PAID:
        return translate("iou.payerPaidAmount", payer=payer_name, amount=amount)
    return report.report_name


def get_report_sections(results: SearchResults, today: date | None = None) -> list[ReportListItem]:
    """One item per report, each owning its transaction rows.

    Records may arrive in any order: a transaction seen before its report
    opens a header-less group that the report fills in later.
    """
    show_merchant = should_show_merchant(results)
    show_year = should_show_year(results, today)
    groups: dict[str, ReportListItem] = {}

    for record in results.records:
        if isinstance(record, Report):
            existing = groups.get(record.report_id)
            from_details, to_details = _resolve_parties(
                results, record.account_id, record.manager_id
            )
            report_name = (
                get_iou_report_name(results, record)
                if record.type == REPORT_TYPE_IOU
                else record.report_name
            )
            groups[record.report_id] = ReportListItem.from_report(
                record,
                report_name=report_name,
                from_details=from_details,
                to_details=to_details,
                transactions=existing.transactions if existing else [],
                key_for_list=record.report_id,
            )
        elif isinstance(record, Transaction):
            report_id = record.report_id or ""
            group = groups.get(report_id)
            if group is None:
                logger.debug("Transaction %s precedes its report %s", record.transaction_id, report_id)
                group = ReportListItem(report_id=report_id, key_for_list=report_id)
                groups[report_id] = group
            group.transactions.append(
                _build_transaction_item(
                    record, results, show_merchant=show_merchant, show_year=show_year
                )
            )

    return list(groups.values())


def get_list_item_type(
    data_type: str, status: str
) -> type[TransactionListItem] | type[ReportListItem] | type[ReportActionListItem]:
    """List item class the sections for a type and status are built from."""
    if data_type == DATA_TYPE_CHAT:
        return ReportActionListItem
    if status == STATUS_ALL:
        return TransactionListItem
    return ReportListItem


def build_sections(
    data_type: str, status: str, results: SearchResults, today: date | None = None
) -> list[TransactionListItem] | list[ReportListItem] | list[ReportActionListItem]:
    """Build list items for a search response.

    Chat searches give report action rows, ``status:all`` gives flat
    transaction rows and any other status groups transactions by report.
    """
    if data_type == DATA_TYPE_CHAT:
        return get_report_actions_sections(results)
    if status == STATUS_ALL:
        return get_transactions_sections(results, today)
    return get_report_sections(results, today)


def is_search_results_empty(results: SearchResults) -> bool:
    return not results.transactions


def is_correct_search_user_name(display_name: str | None) -> bool:
    """Whether a display name belongs to a real user rather than the placeholder owner."""
    return bool(display_name) and display_name.upper() != OWNER_EMAIL_FAKE
