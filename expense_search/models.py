"""Typed records for search results payloads and reference collections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from expense_search.constants import (
    OWNER_ACCOUNT_ID_FAKE,
    PAYLOAD_KEY_PERSONAL_DETAILS,
    PAYLOAD_PREFIX_REPORT,
    PAYLOAD_PREFIX_REPORT_ACTIONS,
    PAYLOAD_PREFIX_TRANSACTION,
)
from expense_search.exceptions import PayloadError

logger = logging.getLogger(__name__)


def _as_mapping(value: Any, source: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PayloadError(source, f"expected an object, got {type(value).__name__}")
    return value


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class PersonalDetails:
    """A directory entry for one account."""

    account_id: int
    display_name: str | None = None
    login: str | None = None
    avatar: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], account_id: int | str | None = None) -> PersonalDetails:
        raw_id = data.get("accountID", account_id)
        return cls(
            account_id=int(raw_id) if raw_id is not None else OWNER_ACCOUNT_ID_FAKE,
            display_name=data.get("displayName"),
            login=data.get("login"),
            avatar=data.get("avatar") or "",
        )


# Stand-in identity for records without a manager
EMPTY_PERSONAL_DETAILS = PersonalDetails(account_id=OWNER_ACCOUNT_ID_FAKE)


def format_personal_details(details: PersonalDetails | None, fallback: str = "") -> str:
    """Display name, else login, else ``fallback``."""
    if details is None:
        return fallback
    if details.display_name is not None:
        return details.display_name
    if details.login is not None:
        return details.login
    return fallback


@dataclass
class Comment:
    """Description container attached to a transaction."""

    comment: str | None = None


@dataclass
class Transaction:
    transaction_id: str
    report_id: str | None = None
    account_id: int | None = None
    manager_id: int | None = None
    amount: int = 0
    modified_amount: int | None = None
    currency: str | None = None
    merchant: str | None = None
    modified_merchant: str | None = None
    category: str | None = None
    tag: str | None = None
    created: str | None = None
    modified_created: str | None = None
    comment: Comment = field(default_factory=Comment)
    report_type: str | None = None
    transaction_type: str | None = None
    action: str | None = None
    tax_amount: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        comment = data.get("comment")
        if isinstance(comment, dict):
            comment_obj = Comment(comment=comment.get("comment"))
        else:
            comment_obj = Comment(comment=comment)
        return cls(
            transaction_id=str(data["transactionID"]),
            report_id=str(data["reportID"]) if data.get("reportID") is not None else None,
            account_id=_optional_int(data.get("accountID")),
            manager_id=_optional_int(data.get("managerID")),
            amount=int(data.get("amount") or 0),
            modified_amount=_optional_int(data.get("modifiedAmount")),
            currency=data.get("currency"),
            merchant=data.get("merchant"),
            modified_merchant=data.get("modifiedMerchant"),
            category=data.get("category"),
            tag=data.get("tag"),
            created=data.get("created"),
            modified_created=data.get("modifiedCreated"),
            comment=comment_obj,
            report_type=data.get("reportType"),
            transaction_type=data.get("transactionType"),
            action=data.get("action"),
            tax_amount=_optional_int(data.get("taxAmount")),
        )

    @property
    def display_merchant(self) -> str:
        """The edited merchant when set, else the original one."""
        if self.modified_merchant:
            return self.modified_merchant
        return self.merchant or ""


@dataclass
class Report:
    report_id: str
    report_name: str | None = None
    type: str | None = None
    total: int | None = None
    currency: str | None = None
    account_id: int | None = None
    manager_id: int | None = None
    action: str | None = None
    created: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Report:
        return cls(
            report_id=str(data["reportID"]),
            report_name=data.get("reportName"),
            type=data.get("type"),
            total=_optional_int(data.get("total")),
            currency=data.get("currency"),
            account_id=_optional_int(data.get("accountID")),
            manager_id=_optional_int(data.get("managerID")),
            action=data.get("action"),
            created=data.get("created"),
        )


@dataclass
class ReportAction:
    report_action_id: str
    account_id: int | None = None
    created: str | None = None
    action_name: str | None = None
    message: str | None = None
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportAction:
        message = data.get("message")
        text: str | None = None
        deleted = bool(data.get("deleted"))
        if isinstance(message, list) and message:
            first = message[0] or {}
            text = first.get("text", first.get("html"))
            # An emptied or flagged message body marks a deleted action
            deleted = deleted or bool(first.get("deleted")) or first.get("html") == ""
        elif isinstance(message, str):
            text = message
        return cls(
            report_action_id=str(data["reportActionID"]),
            account_id=_optional_int(data.get("accountID")),
            created=data.get("created"),
            action_name=data.get("actionName"),
            message=text,
            deleted=deleted,
        )


@dataclass
class ReportActionGroup:
    """All report actions the payload lists under one report."""

    report_id: str
    actions: list[ReportAction] = field(default_factory=list)


SearchRecord = Union[Transaction, Report, ReportActionGroup]


@dataclass
class SearchMetadata:
    """Column visibility flags returned alongside results."""

    should_show_category_column: bool | None = None
    should_show_tag_column: bool | None = None
    should_show_tax_column: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SearchMetadata:
        data = data or {}
        columns = data.get("columnsToShow", data)
        return cls(
            should_show_category_column=columns.get("shouldShowCategoryColumn"),
            should_show_tag_column=columns.get("shouldShowTagColumn"),
            should_show_tax_column=columns.get("shouldShowTaxColumn"),
        )


@dataclass
class SearchResults:
    """One search response.

    ``records`` keeps transactions, reports and report action groups in the
    order the payload listed them.
    """

    records: list[SearchRecord] = field(default_factory=list)
    personal_details: dict[str, PersonalDetails] = field(default_factory=dict)
    metadata: SearchMetadata = field(default_factory=SearchMetadata)

    @property
    def transactions(self) -> list[Transaction]:
        return [record for record in self.records if isinstance(record, Transaction)]

    @property
    def reports(self) -> list[Report]:
        return [record for record in self.records if isinstance(record, Report)]

    @property
    def report_actions(self) -> list[ReportAction]:
        return [
            action
            for record in self.records
            if isinstance(record, ReportActionGroup)
            for action in record.actions
        ]

    def get_personal_details(self, account_id: int | None) -> PersonalDetails | None:
        if account_id is None:
            return None
        return self.personal_details.get(str(account_id))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> SearchResults:
        """Build results from the wire payload.

        Accepts either ``{"data": {...}, "search": {...}}`` or the bare data
        mapping. Entity kind is taken from the key prefix.

        Raises:
            PayloadError: If an entry has the wrong shape.
        """
        payload = _as_mapping(payload, "results")
        data = _as_mapping(payload.get("data", payload), "results.data")
        metadata = SearchMetadata.from_dict(_as_mapping(payload.get("search"), "results.search"))

        results = cls(metadata=metadata)
        for key, value in data.items():
            try:
                if key == PAYLOAD_KEY_PERSONAL_DETAILS:
                    for account_id, details in _as_mapping(value, key).items():
                        results.personal_details[str(account_id)] = PersonalDetails.from_dict(
                            _as_mapping(details, f"{key}.{account_id}"), account_id
                        )
                elif key.startswith(PAYLOAD_PREFIX_REPORT_ACTIONS):
                    actions = _as_mapping(value, key)
                    results.records.append(
                        ReportActionGroup(
                            report_id=key[len(PAYLOAD_PREFIX_REPORT_ACTIONS) :],
                            actions=[
                                ReportAction.from_dict(_as_mapping(action, key))
                                for action in actions.values()
                            ],
                        )
                    )
                elif key.startswith(PAYLOAD_PREFIX_REPORT):
                    results.records.append(Report.from_dict(_as_mapping(value, key)))
                elif key.startswith(PAYLOAD_PREFIX_TRANSACTION):
                    results.records.append(Transaction.from_dict(_as_mapping(value, key)))
                elif key != "search":
                    logger.debug("Ignoring unknown results entry %s", key)
            except (KeyError, TypeError, ValueError) as e:
                raise PayloadError(key, str(e)) from e
        return results


@dataclass
class Card:
    card_id: str
    bank: str = ""


@dataclass
class ReferenceData:
    """Collections used to validate and display filter values.

    All mappings are keyed by bare IDs (policy ID, account ID, card ID,
    report ID, currency code). ``tax_rates`` maps a rate name to the IDs
    that rate has across policies.
    """

    policy_categories: dict[str, list[str]] = field(default_factory=dict)
    policy_tags: dict[str, list[str]] = field(default_factory=dict)
    currencies: dict[str, dict[str, Any]] = field(default_factory=dict)
    personal_details: dict[str, PersonalDetails] = field(default_factory=dict)
    cards: dict[str, Card] = field(default_factory=dict)
    reports: dict[str, Report] = field(default_factory=dict)
    tax_rates: dict[str, list[str]] = field(default_factory=dict)

    def category_names(self, policy_id: str | None = None) -> list[str]:
        """Categories of the given (comma separated) policies, or of every policy."""
        if policy_id:
            return [
                name for pid in policy_id.split(",") for name in self.policy_categories.get(pid, [])
            ]
        return [name for names in self.policy_categories.values() for name in names]

    def tag_names(self, policy_id: str | None = None) -> list[str]:
        """Tags of the given (comma separated) policies, or of every policy."""
        if policy_id:
            return [name for pid in policy_id.split(",") for name in self.policy_tags.get(pid, [])]
        return [name for names in self.policy_tags.values() for name in names]

    def tax_rate_ids(self) -> set[str]:
        return {rate_id for ids in self.tax_rates.values() for rate_id in ids}

    def find_personal_details_by_login(self, login: str) -> PersonalDetails | None:
        for details in self.personal_details.values():
            if details.login == login:
                return details
        return None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ReferenceData:
        """Build reference data from raw JSON collections.

        Expected keys (all optional): ``policyCategories`` (policy ID ->
        category name -> category), ``policyTags`` (policy ID -> tag list
        name -> ``{"tags": {name: tag}}``), ``currencyList``,
        ``personalDetails``, ``cardList``, ``reports`` and ``taxRates``.

        Raises:
            PayloadError: If a collection has the wrong shape.
        """
        payload = _as_mapping(payload, "reference")
        reference = cls()
        try:
            for policy_id, categories in _as_mapping(
                payload.get("policyCategories"), "policyCategories"
            ).items():
                reference.policy_categories[str(policy_id)] = [
                    (category or {}).get("name", name)
                    for name, category in _as_mapping(categories, policy_id).items()
                ]

            for policy_id, tag_lists in _as_mapping(payload.get("policyTags"), "policyTags").items():
                names: list[str] = []
                for tag_list in _as_mapping(tag_lists, policy_id).values():
                    tags = _as_mapping((tag_list or {}).get("tags"), policy_id)
                    names.extend((tag or {}).get("name", name) for name, tag in tags.items())
                reference.policy_tags[str(policy_id)] = names

            reference.currencies = dict(_as_mapping(payload.get("currencyList"), "currencyList"))

            for account_id, details in _as_mapping(
                payload.get("personalDetails"), "personalDetails"
            ).items():
                reference.personal_details[str(account_id)] = PersonalDetails.from_dict(
                    _as_mapping(details, account_id), account_id
                )

            for card_id, card in _as_mapping(payload.get("cardList"), "cardList").items():
                card = _as_mapping(card, card_id)
                reference.cards[str(card_id)] = Card(
                    card_id=str(card.get("cardID", card_id)), bank=card.get("bank") or ""
                )

            for report_id, report in _as_mapping(payload.get("reports"), "reports").items():
                report = dict(_as_mapping(report, report_id))
                report.setdefault("reportID", report_id)
                reference.reports[str(report_id)] = Report.from_dict(report)

            for name, ids in _as_mapping(payload.get("taxRates"), "taxRates").items():
                if not isinstance(ids, list):
                    raise PayloadError(f"taxRates.{name}", "expected a list of IDs")
                reference.tax_rates[name] = [str(rate_id) for rate_id in ids]
        except (KeyError, TypeError, ValueError) as e:
            raise PayloadError("reference", str(e)) from e
        return reference
