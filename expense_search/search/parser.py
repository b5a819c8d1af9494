"""Parse expense search syntax into a filter tree."""

from __future__ import annotations

from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput
from lark.exceptions import VisitError

from expense_search.constants import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    DEFAULT_STATUS,
    DEFAULT_TYPE,
    FILTER_KEY_KEYWORD,
    OPERATOR_AND,
    OPERATOR_EQUAL_TO,
    ROOT_KEY_POLICY_ID,
    ROOT_KEY_SORT_BY,
    ROOT_KEY_SORT_ORDER,
    ROOT_KEY_STATUS,
    ROOT_KEY_TYPE,
    SIGN_TO_OPERATOR,
)
from expense_search.exceptions import SearchParseError
from expense_search.search.ast_nodes import ASTNode, ParsedQuery


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("expense_search.search").joinpath("grammar.lark").read_text()


_GRAMMAR_TEXT = _load_grammar()

_parser = Lark(
    _GRAMMAR_TEXT,
    parser="earley",
    ambiguity="resolve",
)


class _RootValue:
    """A root key assignment collected while transforming."""

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value


def _leaf_right(values: list[str]) -> str | list[str]:
    # A comma separated set becomes a list, a single value stays scalar
    if len(values) == 1:
        return values[0]
    return values


class _SearchTransformer(Transformer):
    """Transform Lark parse tree into a ParsedQuery."""

    def start(self, items: list[Any]) -> ParsedQuery:
        query = ParsedQuery(
            type=DEFAULT_TYPE,
            status=DEFAULT_STATUS,
            sort_by=DEFAULT_SORT_BY,
            sort_order=DEFAULT_SORT_ORDER,
        )
        filters: ASTNode | None = None
        for item in items:
            if isinstance(item, _RootValue):
                _apply_root_value(query, item)
            elif isinstance(item, ASTNode):
                # Fold leaves left: and(and(f1, f2), f3)
                if filters is None:
                    filters = item
                else:
                    filters = ASTNode(operator=OPERATOR_AND, left=filters, right=item)
        query.filters = filters
        return query

    def root_filter(self, items: list[Any]) -> _RootValue:
        key, operator, values = items
        if operator != OPERATOR_EQUAL_TO:
            raise ValueError(f"'{key}' only supports ':'")
        return _RootValue(key, ",".join(values))

    def standard_filter(self, items: list[Any]) -> ASTNode:
        key, operator, values = items
        return ASTNode(operator=operator, left=key, right=_leaf_right(values))

    def free_text(self, items: list[Any]) -> ASTNode:
        values = items[0]
        return ASTNode(operator=OPERATOR_EQUAL_TO, left=FILTER_KEY_KEYWORD, right=_leaf_right(values))

    def value_list(self, items: list[Any]) -> list[str]:
        return [str(item) for item in items]

    def ROOT_KEY(self, token: Token) -> str:
        return str(token)

    def FILTER_KEY(self, token: Token) -> str:
        return str(token)

    def OPERATOR(self, token: Token) -> str:
        return SIGN_TO_OPERATOR[str(token)]

    def WORD(self, token: Token) -> str:
        return str(token)

    def QUOTED_STRING(self, token: Token) -> str:
        raw = str(token)
        # Strip surrounding quotes
        if raw.startswith('"') and raw.endswith('"'):
            return raw[1:-1]
        return raw


def _apply_root_value(query: ParsedQuery, root: _RootValue) -> None:
    if root.key == ROOT_KEY_TYPE:
        query.type = root.value
    elif root.key == ROOT_KEY_STATUS:
        query.status = root.value
    elif root.key == ROOT_KEY_SORT_BY:
        query.sort_by = root.value
    elif root.key == ROOT_KEY_SORT_ORDER:
        query.sort_order = root.value
    elif root.key == ROOT_KEY_POLICY_ID:
        query.policy_id = root.value


_transformer = _SearchTransformer()


def parse_query(query_string: str) -> ParsedQuery:
    """Parse a search query string into root values and a filter tree.

    Args:
        query_string: The search query to parse.

    Returns:
        A ParsedQuery with defaults applied for missing root keys.

    Raises:
        SearchParseError: If the query cannot be parsed.
    """
    query_string = query_string.strip()
    if not query_string:
        return _transformer.start([])

    try:
        tree = _parser.parse(query_string)
        return _transformer.transform(tree)
    except UnexpectedInput as e:
        raise SearchParseError(query_string, str(e)) from e
    except VisitError as e:
        raise SearchParseError(query_string, str(e.orig_exc)) from e
