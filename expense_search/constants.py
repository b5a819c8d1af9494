"""Search syntax keys, operators and other fixed values."""

from __future__ import annotations

# Root keys: they configure the query itself rather than filter it.
ROOT_KEY_TYPE = "type"
ROOT_KEY_STATUS = "status"
ROOT_KEY_SORT_BY = "sortBy"
ROOT_KEY_SORT_ORDER = "sortOrder"
ROOT_KEY_POLICY_ID = "policyID"

# Order in which root keys are written by the query string builder.
ROOT_KEYS: tuple[str, ...] = (
    ROOT_KEY_TYPE,
    ROOT_KEY_STATUS,
    ROOT_KEY_POLICY_ID,
    ROOT_KEY_SORT_BY,
    ROOT_KEY_SORT_ORDER,
)

# Order in which root keys enter the canonical hash string.
HASH_ROOT_KEYS: tuple[str, ...] = (
    ROOT_KEY_POLICY_ID,
    ROOT_KEY_TYPE,
    ROOT_KEY_STATUS,
    ROOT_KEY_SORT_BY,
    ROOT_KEY_SORT_ORDER,
)

FILTER_KEY_AMOUNT = "amount"
FILTER_KEY_DATE = "date"
FILTER_KEY_CATEGORY = "category"
FILTER_KEY_TAG = "tag"
FILTER_KEY_MERCHANT = "merchant"
FILTER_KEY_DESCRIPTION = "description"
FILTER_KEY_REPORT_ID = "reportID"
FILTER_KEY_FROM = "from"
FILTER_KEY_TO = "to"
FILTER_KEY_IN = "in"
FILTER_KEY_CARD_ID = "cardID"
FILTER_KEY_TAX_RATE = "taxRate"
FILTER_KEY_CURRENCY = "currency"
FILTER_KEY_KEYWORD = "keyword"
FILTER_KEY_EXPENSE_TYPE = "expenseType"

# Order in which filter keys are written by the query string builder.
FILTER_KEYS: tuple[str, ...] = (
    FILTER_KEY_AMOUNT,
    FILTER_KEY_DATE,
    FILTER_KEY_CATEGORY,
    FILTER_KEY_TAG,
    FILTER_KEY_MERCHANT,
    FILTER_KEY_DESCRIPTION,
    FILTER_KEY_REPORT_ID,
    FILTER_KEY_FROM,
    FILTER_KEY_TO,
    FILTER_KEY_IN,
    FILTER_KEY_CARD_ID,
    FILTER_KEY_TAX_RATE,
    FILTER_KEY_CURRENCY,
    FILTER_KEY_KEYWORD,
    FILTER_KEY_EXPENSE_TYPE,
)

KNOWN_FILTER_KEYS: frozenset[str] = frozenset(FILTER_KEYS)

OPERATOR_EQUAL_TO = "eq"
OPERATOR_NOT_EQUAL_TO = "neq"
OPERATOR_GREATER_THAN = "gt"
OPERATOR_GREATER_THAN_OR_EQUAL_TO = "gte"
OPERATOR_LOWER_THAN = "lt"
OPERATOR_LOWER_THAN_OR_EQUAL_TO = "lte"
OPERATOR_AND = "and"
OPERATOR_OR = "or"

OPERATOR_SIGNS: dict[str, str] = {
    OPERATOR_EQUAL_TO: ":",
    OPERATOR_NOT_EQUAL_TO: "!=",
    OPERATOR_LOWER_THAN: "<",
    OPERATOR_LOWER_THAN_OR_EQUAL_TO: "<=",
    OPERATOR_GREATER_THAN: ">",
    OPERATOR_GREATER_THAN_OR_EQUAL_TO: ">=",
    OPERATOR_AND: ",",
    OPERATOR_OR: " ",
}

SIGN_TO_OPERATOR: dict[str, str] = {
    ":": OPERATOR_EQUAL_TO,
    "!=": OPERATOR_NOT_EQUAL_TO,
    "<": OPERATOR_LOWER_THAN,
    "<=": OPERATOR_LOWER_THAN_OR_EQUAL_TO,
    ">": OPERATOR_GREATER_THAN,
    ">=": OPERATOR_GREATER_THAN_OR_EQUAL_TO,
}

# Data types and the statuses valid for each of them.
DATA_TYPE_EXPENSE = "expense"
DATA_TYPE_INVOICE = "invoice"
DATA_TYPE_TRIP = "trip"
DATA_TYPE_CHAT = "chat"

STATUS_ALL = "all"

STATUSES_BY_TYPE: dict[str, tuple[str, ...]] = {
    DATA_TYPE_EXPENSE: ("all", "drafts", "outstanding", "approved", "paid"),
    DATA_TYPE_INVOICE: ("all", "outstanding", "paid"),
    DATA_TYPE_TRIP: ("all", "current", "past"),
    DATA_TYPE_CHAT: ("all", "unread", "sent", "attachments", "links", "pinned"),
}

SORT_ORDER_ASC = "asc"
SORT_ORDER_DESC = "desc"

TABLE_COLUMN_RECEIPT = "receipt"
TABLE_COLUMN_DATE = "date"
TABLE_COLUMN_MERCHANT = "merchant"
TABLE_COLUMN_DESCRIPTION = "description"
TABLE_COLUMN_FROM = "from"
TABLE_COLUMN_TO = "to"
TABLE_COLUMN_CATEGORY = "category"
TABLE_COLUMN_TAG = "tag"
TABLE_COLUMN_TOTAL_AMOUNT = "amount"
TABLE_COLUMN_TYPE = "type"
TABLE_COLUMN_ACTION = "action"
TABLE_COLUMN_TAX_AMOUNT = "taxAmount"

# Column -> list item attribute used for sorting. None means unsortable.
COLUMN_SORT_PROPERTIES: dict[str, str | None] = {
    TABLE_COLUMN_TO: "formatted_to",
    TABLE_COLUMN_FROM: "formatted_from",
    TABLE_COLUMN_DATE: "date",
    TABLE_COLUMN_TAG: "tag",
    TABLE_COLUMN_MERCHANT: "formatted_merchant",
    TABLE_COLUMN_TOTAL_AMOUNT: "formatted_total",
    TABLE_COLUMN_CATEGORY: "category",
    TABLE_COLUMN_TYPE: "transaction_type",
    TABLE_COLUMN_ACTION: "action",
    TABLE_COLUMN_DESCRIPTION: "comment",
    TABLE_COLUMN_TAX_AMOUNT: None,
    TABLE_COLUMN_RECEIPT: None,
}

DEFAULT_TYPE = DATA_TYPE_EXPENSE
DEFAULT_STATUS = STATUS_ALL
DEFAULT_SORT_BY = TABLE_COLUMN_DATE
DEFAULT_SORT_ORDER = SORT_ORDER_DESC

# Merchant placeholders that are never displayed.
PARTIAL_TRANSACTION_MERCHANT = "(none)"
DEFAULT_MERCHANT = "Expense"
HIDDEN_MERCHANTS: frozenset[str] = frozenset({"", PARTIAL_TRANSACTION_MERCHANT, DEFAULT_MERCHANT})

TRANSACTION_TYPE_DISTANCE = "distance"
TRANSACTION_TYPE_CARD = "card"
TRANSACTION_TYPE_CASH = "cash"
TRANSACTION_TYPES: tuple[str, ...] = (
    TRANSACTION_TYPE_DISTANCE,
    TRANSACTION_TYPE_CARD,
    TRANSACTION_TYPE_CASH,
)

REPORT_TYPE_EXPENSE = "expense"
REPORT_TYPE_IOU = "iou"
REPORT_TYPE_INVOICE = "invoice"
REPORT_TYPE_CHAT = "chat"

ACTION_TYPE_VIEW = "view"
ACTION_TYPE_PAID = "paid"

OWNER_ACCOUNT_ID_FAKE = 0
OWNER_EMAIL_FAKE = "__FAKE__"

DEFAULT_CURRENCY = "USD"

# Entity prefixes used by the raw search results payload.
PAYLOAD_PREFIX_REPORT = "report_"
PAYLOAD_PREFIX_TRANSACTION = "transaction_"
PAYLOAD_PREFIX_REPORT_ACTIONS = "reportActions_"
PAYLOAD_KEY_PERSONAL_DETAILS = "personalDetailsList"

# Advanced filters form keys that do not map one to one onto filter keys.
FORM_KEY_TYPE = "type"
FORM_KEY_STATUS = "status"
FORM_KEY_POLICY_ID = "policyID"
FORM_KEY_DATE_BEFORE = "dateBefore"
FORM_KEY_DATE_AFTER = "dateAfter"
FORM_KEY_LESS_THAN = "lessThan"
FORM_KEY_GREATER_THAN = "greaterThan"

# Form fields holding a single free-form value.
FORM_SINGLE_VALUE_KEYS: tuple[str, ...] = (
    FILTER_KEY_MERCHANT,
    FILTER_KEY_DESCRIPTION,
    FILTER_KEY_REPORT_ID,
)

# Form fields holding a list of values, in output order.
FORM_LIST_VALUE_KEYS: tuple[str, ...] = (
    FILTER_KEY_CATEGORY,
    FILTER_KEY_CARD_ID,
    FILTER_KEY_TAX_RATE,
    FILTER_KEY_EXPENSE_TYPE,
    FILTER_KEY_TAG,
    FILTER_KEY_CURRENCY,
    FILTER_KEY_FROM,
    FILTER_KEY_TO,
    FILTER_KEY_IN,
)
