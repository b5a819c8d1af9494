"""Canonical hashing and string serialization of structured search queries."""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from expense_search.constants import (
    DEFAULT_STATUS,
    DEFAULT_TYPE,
    FILTER_KEY_IN,
    FILTER_KEY_KEYWORD,
    FILTER_KEYS,
    HASH_ROOT_KEYS,
    OPERATOR_EQUAL_TO,
    OPERATOR_NOT_EQUAL_TO,
    OPERATOR_SIGNS,
    ROOT_KEY_POLICY_ID,
    ROOT_KEYS,
)
from expense_search.exceptions import SearchParseError
from expense_search.search.ast_nodes import (
    QueryFilter,
    QueryParseResult,
    SearchQueryJSON,
)
from expense_search.search.filters import flatten_filters
from expense_search.search.parser import parse_query
from expense_search.utils.formatting import hash_text

logger = logging.getLogger(__name__)

HASH_MODULUS = 2**32

# Anything outside this set forces the value to be quoted
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_@./#&+\-\\';,\"]")

# Operators whose adjacent values collapse into one comma separated list
_GROUPABLE_OPERATORS: frozenset[str] = frozenset({OPERATOR_EQUAL_TO, OPERATOR_NOT_EQUAL_TO})


def sanitize_string(value: str) -> str:
    """Quote a value verbatim if it is empty or has characters the grammar treats specially."""
    if not value or _UNSAFE_CHARS_RE.search(value):
        return f'"{value}"'
    return value


def build_filter_string(filter_key: str, query_filters: list[QueryFilter]) -> str:
    """Render one filter key and its constraints in query syntax.

    Adjacent ``eq`` (or ``neq``) constraints share a single ``key:`` segment,
    comma separated. Other operators get a segment each. Keyword equality
    constraints are written as bare space separated free text.

    Example:
        ``[eq A, eq B, gt 5]`` for ``amount`` renders ``amount:A,B amount>5``.
    """
    is_keyword = filter_key == FILTER_KEY_KEYWORD
    delimiter = " " if is_keyword else ","
    segments: list[str] = []
    previous: QueryFilter | None = None

    for query_filter in query_filters:
        value = sanitize_string(str(query_filter.value))
        if (
            previous is not None
            and query_filter.operator == previous.operator
            and query_filter.operator in _GROUPABLE_OPERATORS
        ):
            segments[-1] += f"{delimiter}{value}"
        elif is_keyword and query_filter.operator == OPERATOR_EQUAL_TO:
            segments.append(value)
        else:
            segments.append(f"{filter_key}{OPERATOR_SIGNS[query_filter.operator]}{value}")
        previous = query_filter

    return " ".join(segments)


def _filter_value_sort_key(query_filter: QueryFilter) -> tuple[int, float, str, str]:
    # Numbers order numerically and before strings, strings lexicographically.
    # Equal values order by operator.
    value = query_filter.value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, float(value), "", query_filter.operator)
    return (1, 0.0, str(value), query_filter.operator)


def build_canonical_query(query: SearchQueryJSON) -> str:
    """Order-independent text form of a query, used as hash input."""
    parts: list[str] = []
    for key in HASH_ROOT_KEYS:
        value = query.root_value(key)
        if key == ROOT_KEY_POLICY_ID and not value:
            continue
        parts.append(f"{key}:{value}")

    for filter_key in sorted(query.flat_filters):
        values = sorted(query.flat_filters[filter_key], key=_filter_value_sort_key)
        parts.append(build_filter_string(filter_key, values))

    return " ".join(parts)


def get_query_hash(query: SearchQueryJSON) -> int:
    """Stable 32-bit hash of a query; equal for any ordering of its filters."""
    return hash_text(build_canonical_query(query), HASH_MODULUS)


def build_search_query_json(query: str) -> QueryParseResult:
    """Parse a query string into a structured, hashed query.

    Never raises: a malformed query is logged and reported through the
    returned result, so callers can fall back to a previous query.

    Args:
        query: Raw query string as typed by the user.

    Returns:
        A QueryParseResult holding either the query or the parse error.
    """
    try:
        parsed = parse_query(query)
    except SearchParseError as e:
        logger.warning('Error when parsing search query "%s": %s', query, e)
        return QueryParseResult(error=e)

    result = SearchQueryJSON(
        type=parsed.type,
        status=parsed.status,
        sort_by=parsed.sort_by,
        sort_order=parsed.sort_order,
        policy_id=parsed.policy_id,
        filters=parsed.filters,
        flat_filters=flatten_filters(parsed.filters),
        input_query=query,
    )
    result.hash = get_query_hash(result)
    return QueryParseResult(query=result)


@lru_cache(maxsize=1)
def _default_query_json() -> SearchQueryJSON:
    default = build_search_query_json("").query
    if default is None:
        raise RuntimeError("The empty query must always parse")
    return default


def build_search_query_string(query_json: SearchQueryJSON | None = None) -> str:
    """Serialize a structured query back into query syntax.

    Root keys come first in a fixed order, with defaults filling any gap;
    filter keys follow in their fixed order. Serializing, parsing and
    serializing again yields the same string.
    """
    default_query = _default_query_json()
    parts: list[str] = []

    for key in ROOT_KEYS:
        value = query_json.root_value(key) if query_json is not None else None
        if not value:
            value = default_query.root_value(key)
        if value:
            parts.append(f"{key}:{sanitize_string(value)}")

    if query_json is None:
        return " ".join(parts)

    for filter_key in FILTER_KEYS:
        query_filters = query_json.flat_filters.get(filter_key)
        if query_filters:
            parts.append(build_filter_string(filter_key, query_filters))

    return " ".join(parts)


def normalize_query(query: str) -> str:
    """Rewrite a query with every default the parser fills in made explicit."""
    return build_search_query_string(build_search_query_json(query).query)


def build_canned_search_query(
    type: str = DEFAULT_TYPE,
    status: str = DEFAULT_STATUS,
    policy_id: str | None = None,
) -> str:
    """Normalized query made of only type, status and optionally a policy."""
    query = f"type:{type} status:{status}"
    if policy_id:
        query += f" policyID:{policy_id}"
    return normalize_query(query)


def is_canned_search_query(query_json: SearchQueryJSON) -> bool:
    """Canned queries are defined by type and status alone, without filters."""
    return query_json.filters is None


def get_policy_id_from_search_query(query_json: SearchQueryJSON) -> str | None:
    """First policy of a possibly comma separated ``policyID`` value."""
    if not query_json.policy_id:
        return None
    return query_json.policy_id.split(",")[0]


def get_contextual_suggestion_query(report_id: str) -> str:
    return f"type:chat {FILTER_KEY_IN}:{report_id}"
