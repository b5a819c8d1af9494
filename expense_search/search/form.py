"""Conversion between structured queries and advanced filter form values."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Container, Mapping
from typing import Any

from expense_search.constants import (
    DATA_TYPE_EXPENSE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    FILTER_KEY_AMOUNT,
    FILTER_KEY_CARD_ID,
    FILTER_KEY_CATEGORY,
    FILTER_KEY_CURRENCY,
    FILTER_KEY_DATE,
    FILTER_KEY_EXPENSE_TYPE,
    FILTER_KEY_FROM,
    FILTER_KEY_IN,
    FILTER_KEY_KEYWORD,
    FILTER_KEY_TAG,
    FILTER_KEY_TAX_RATE,
    FILTER_KEY_TO,
    FILTER_KEYS,
    FORM_KEY_DATE_AFTER,
    FORM_KEY_DATE_BEFORE,
    FORM_KEY_GREATER_THAN,
    FORM_KEY_LESS_THAN,
    FORM_KEY_POLICY_ID,
    FORM_KEY_STATUS,
    FORM_KEY_TYPE,
    FORM_LIST_VALUE_KEYS,
    FORM_SINGLE_VALUE_KEYS,
    OPERATOR_AND,
    OPERATOR_GREATER_THAN,
    OPERATOR_LOWER_THAN,
    ROOT_KEY_POLICY_ID,
    ROOT_KEY_SORT_BY,
    ROOT_KEY_SORT_ORDER,
    ROOT_KEY_STATUS,
    ROOT_KEY_TYPE,
    STATUS_ALL,
    STATUSES_BY_TYPE,
    TRANSACTION_TYPE_CARD,
    TRANSACTION_TYPE_CASH,
    TRANSACTION_TYPE_DISTANCE,
    TRANSACTION_TYPES,
)
from expense_search.models import ReferenceData
from expense_search.search.ast_nodes import ASTNode, QueryFilter, SearchQueryJSON
from expense_search.search.filters import flatten_filters
from expense_search.search.query import build_filter_string, sanitize_string
from expense_search.utils.formatting import is_valid_amount, is_valid_date
from expense_search.utils.messages import translate

logger = logging.getLogger(__name__)

FormValues = dict[str, Any]

_EXPENSE_TYPE_MESSAGES: dict[str, str] = {
    TRANSACTION_TYPE_DISTANCE: "common.distance",
    TRANSACTION_TYPE_CARD: "common.card",
    TRANSACTION_TYPE_CASH: "iou.cash",
}


def _build_date_filter_query(form: Mapping[str, Any]) -> str:
    parts = []
    if form.get(FORM_KEY_DATE_BEFORE):
        parts.append(f"{FILTER_KEY_DATE}<{form[FORM_KEY_DATE_BEFORE]}")
    if form.get(FORM_KEY_DATE_AFTER):
        parts.append(f"{FILTER_KEY_DATE}>{form[FORM_KEY_DATE_AFTER]}")
    return " ".join(parts)


def _build_amount_filter_query(form: Mapping[str, Any]) -> str:
    parts = []
    if form.get(FORM_KEY_GREATER_THAN):
        parts.append(f"{FILTER_KEY_AMOUNT}>{form[FORM_KEY_GREATER_THAN]}")
    if form.get(FORM_KEY_LESS_THAN):
        parts.append(f"{FILTER_KEY_AMOUNT}<{form[FORM_KEY_LESS_THAN]}")
    return " ".join(parts)


def build_query_string_from_filter_form_values(form: Mapping[str, Any]) -> str:
    """Build a query string from advanced filter form values.

    Sorting is always reset to date, descending. Type, status and policy
    come first so saved searches built from the form keep stable hashes.
    Date and amount ranges are written last.

    Args:
        form: Form values keyed by form key (``type``, ``category``,
            ``dateBefore``, ...). List fields hold lists of strings.

    Returns:
        The query string.
    """
    parts = [
        f"{ROOT_KEY_SORT_BY}:{DEFAULT_SORT_BY}",
        f"{ROOT_KEY_SORT_ORDER}:{DEFAULT_SORT_ORDER}",
    ]
    for form_key, root_key in (
        (FORM_KEY_TYPE, ROOT_KEY_TYPE),
        (FORM_KEY_STATUS, ROOT_KEY_STATUS),
        (FORM_KEY_POLICY_ID, ROOT_KEY_POLICY_ID),
    ):
        if form.get(form_key):
            parts.append(f"{root_key}:{sanitize_string(form[form_key])}")

    for filter_key in FILTER_KEYS:
        value = form.get(filter_key)
        if not value:
            continue
        if filter_key in FORM_SINGLE_VALUE_KEYS:
            parts.append(f"{filter_key}:{sanitize_string(str(value))}")
        elif filter_key == FILTER_KEY_KEYWORD:
            parts.append(" ".join(sanitize_string(token) for token in str(value).split()))
        elif filter_key in FORM_LIST_VALUE_KEYS and isinstance(value, (list, tuple)):
            # Same value picked twice is written once, first position wins
            unique_values = list(dict.fromkeys(str(item) for item in value))
            parts.append(f"{filter_key}:{','.join(sanitize_string(v) for v in unique_values)}")

    parts.append(_build_date_filter_query(form))
    parts.append(_build_amount_filter_query(form))
    return " ".join(part for part in parts if part).strip()


def _keep_known(filter_key: str, values: list[str], known: Container[str]) -> list[str]:
    kept = [value for value in values if value in known]
    dropped = [value for value in values if value not in known]
    if dropped:
        logger.debug("Dropping unresolved %s filter values: %s", filter_key, dropped)
    return kept


def _first_with_operator(
    query_filters: list[QueryFilter], operator: str, is_valid: Callable[[str], bool]
) -> str | None:
    for query_filter in query_filters:
        value = str(query_filter.value)
        if query_filter.operator == operator and is_valid(value):
            return value
    return None


def build_filter_form_values_from_query(
    query_json: SearchQueryJSON,
    reference: ReferenceData,
) -> FormValues:
    """Turn a structured query into initial advanced filter form values.

    Values that no longer resolve against the reference collections (a
    deleted tag, a removed card, ...) are left out, so the form never shows
    a filter for something that does not exist.

    Args:
        query_json: Parsed query.
        reference: Collections the filter values are checked against.

    Returns:
        Form values keyed by form key. List fields whose values were all
        dropped are omitted.
    """
    form: FormValues = {}
    policy_id = query_json.policy_id

    for filter_key, query_filters in query_json.flat_filters.items():
        values = [str(query_filter.value) for query_filter in query_filters]
        kept: list[str] | None = None

        if filter_key in FORM_SINGLE_VALUE_KEYS:
            form[filter_key] = values[0]
        elif filter_key == FILTER_KEY_EXPENSE_TYPE:
            kept = _keep_known(filter_key, values, TRANSACTION_TYPES)
        elif filter_key == FILTER_KEY_CARD_ID:
            kept = _keep_known(filter_key, values, reference.cards)
        elif filter_key == FILTER_KEY_TAX_RATE:
            kept = _keep_known(filter_key, values, reference.tax_rate_ids())
        elif filter_key == FILTER_KEY_IN:
            kept = _keep_known(filter_key, values, reference.reports)
        elif filter_key in (FILTER_KEY_FROM, FILTER_KEY_TO):
            kept = _keep_known(filter_key, values, reference.personal_details)
        elif filter_key == FILTER_KEY_CURRENCY:
            kept = _keep_known(filter_key, values, reference.currencies)
        elif filter_key == FILTER_KEY_TAG:
            kept = _keep_known(filter_key, values, set(reference.tag_names(policy_id)))
        elif filter_key == FILTER_KEY_CATEGORY:
            kept = _keep_known(filter_key, values, set(reference.category_names(policy_id)))
        elif filter_key == FILTER_KEY_KEYWORD:
            form[filter_key] = " ".join(f'"{value}"' if " " in value else value for value in values)
        elif filter_key == FILTER_KEY_DATE:
            before = _first_with_operator(query_filters, OPERATOR_LOWER_THAN, is_valid_date)
            after = _first_with_operator(query_filters, OPERATOR_GREATER_THAN, is_valid_date)
            if before is not None:
                form[FORM_KEY_DATE_BEFORE] = before
            if after is not None:
                form[FORM_KEY_DATE_AFTER] = after
        elif filter_key == FILTER_KEY_AMOUNT:
            less = _first_with_operator(query_filters, OPERATOR_LOWER_THAN, is_valid_amount)
            greater = _first_with_operator(query_filters, OPERATOR_GREATER_THAN, is_valid_amount)
            if less is not None:
                form[FORM_KEY_LESS_THAN] = less
            if greater is not None:
                form[FORM_KEY_GREATER_THAN] = greater

        if kept:
            form[filter_key] = kept

    known_type = query_json.type in STATUSES_BY_TYPE
    form[FORM_KEY_TYPE] = query_json.type if known_type else DATA_TYPE_EXPENSE
    if known_type and query_json.status in STATUSES_BY_TYPE[query_json.type]:
        form[FORM_KEY_STATUS] = query_json.status
    else:
        form[FORM_KEY_STATUS] = STATUS_ALL

    if policy_id:
        form[FORM_KEY_POLICY_ID] = policy_id

    return form


def get_display_value(filter_key: str, value: str, reference: ReferenceData) -> str:
    """Human readable form of a filter value: login for accounts, bank for cards, name for reports."""
    if filter_key in (FILTER_KEY_FROM, FILTER_KEY_TO):
        details = reference.personal_details.get(value)
        return (details.login if details else None) or value
    if filter_key == FILTER_KEY_CARD_ID:
        card = reference.cards.get(value)
        return (card.bank if card else None) or value
    if filter_key == FILTER_KEY_IN:
        report = reference.reports.get(value)
        return (report.report_name if report else None) or value
    return value


def get_search_header_title(query_json: SearchQueryJSON, reference: ReferenceData) -> str:
    """Title for a search page: type, status and every filter with display values."""
    title = f"type:{query_json.type} status:{query_json.status}"

    for filter_key, query_filters in query_json.flat_filters.items():
        if filter_key == FILTER_KEY_TAX_RATE:
            operator = query_filters[0].operator if query_filters else OPERATOR_AND
            names: list[str] = []
            for query_filter in query_filters:
                rate_id = str(query_filter.value)
                matching = [name for name, ids in reference.tax_rates.items() if rate_id in ids]
                names.extend(matching or [rate_id])
            display_filters = [QueryFilter(operator=operator, value=name) for name in names]
        else:
            display_filters = [
                QueryFilter(
                    operator=query_filter.operator,
                    value=get_display_value(filter_key, str(query_filter.value), reference),
                )
                for query_filter in query_filters
            ]
        rendered = build_filter_string(filter_key, display_filters)
        if rendered:
            title += f" {rendered}"

    return title


def _find_ids_from_display_value(
    filter_key: str,
    value: str | list[str],
    reference: ReferenceData,
) -> str | list[str]:
    values = value if isinstance(value, list) else [value]

    if filter_key in (FILTER_KEY_FROM, FILTER_KEY_TO):
        ids = []
        for email in values:
            details = reference.find_personal_details_by_login(email)
            ids.append(str(details.account_id) if details else email)
    elif filter_key == FILTER_KEY_TAX_RATE:
        ids = [rate_id for name in values for rate_id in reference.tax_rates.get(name, [name])]
    elif filter_key == FILTER_KEY_CARD_ID:
        ids = []
        for bank in values:
            card_ids = [card.card_id for card in reference.cards.values() if card.bank == bank]
            ids.extend(card_ids or [bank])
    else:
        return value

    if len(ids) == 1:
        return ids[0]
    return ids


def standardize_query_json(query_json: SearchQueryJSON, reference: ReferenceData) -> SearchQueryJSON:
    """Copy of the query with display values (emails, bank names, rate names) replaced by IDs.

    The input query is left untouched. The hash is kept, since it
    identifies the query as the user wrote it.
    """
    standard = copy.deepcopy(query_json)
    if standard.filters is None:
        return standard

    stack = [standard.filters]
    while stack:
        node = stack.pop()
        if not node.operator:
            continue
        if isinstance(node.left, ASTNode):
            stack.append(node.left)
        if isinstance(node.right, ASTNode):
            stack.append(node.right)
        if isinstance(node.left, str) and not isinstance(node.right, ASTNode):
            node.right = _find_ids_from_display_value(node.left, node.right, reference)

    standard.flat_filters = flatten_filters(standard.filters)
    return standard


def get_expense_type_label(expense_type: str) -> str:
    """Translated label for an expense type (distance, card, cash)."""
    message_key = _EXPENSE_TYPE_MESSAGES.get(expense_type)
    if message_key is None:
        return expense_type
    return translate(message_key)
