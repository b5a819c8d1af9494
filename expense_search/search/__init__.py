"""Search query parsing, canonicalization and serialization."""

from expense_search.exceptions import SearchParseError
from expense_search.search.ast_nodes import (
    ASTNode,
    QueryFilter,
    QueryFilters,
    QueryParseResult,
    SearchQueryJSON,
)
from expense_search.search.filters import flatten_filters
from expense_search.search.form import (
    build_filter_form_values_from_query,
    build_query_string_from_filter_form_values,
    get_search_header_title,
    standardize_query_json,
)
from expense_search.search.parser import parse_query
from expense_search.search.query import (
    build_canned_search_query,
    build_search_query_json,
    build_search_query_string,
    get_query_hash,
    normalize_query,
    sanitize_string,
)

__all__ = [
    "ASTNode",
    "QueryFilter",
    "QueryFilters",
    "QueryParseResult",
    "SearchParseError",
    "SearchQueryJSON",
    "build_canned_search_query",
    "build_filter_form_values_from_query",
    "build_query_string_from_filter_form_values",
    "build_search_query_json",
    "build_search_query_string",
    "flatten_filters",
    "get_query_hash",
    "get_search_header_title",
    "normalize_query",
    "parse_query",
    "sanitize_string",
    "standardize_query_json",
]
