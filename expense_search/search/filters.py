"""Flatten a parsed filter tree into per-key constraint lists."""

from __future__ import annotations

from expense_search.constants import KNOWN_FILTER_KEYS
from expense_search.search.ast_nodes import ASTNode, QueryFilter, QueryFilters


def flatten_filters(root: ASTNode | None) -> QueryFilters:
    """Collect every leaf constraint of the tree, grouped by filter key.

    Nodes are visited depth-first, left before right. A node contributes when
    its ``left`` is a known filter key; a list ``right`` contributes one
    constraint per element. Nodes without an operator are never traversed.

    Args:
        root: Filter tree from the parser, or None for a query without filters.

    Returns:
        Mapping of filter key to constraints in encounter order.
    """
    filters: QueryFilters = {}
    if root is None:
        return filters

    # (node, children_pushed) pairs give a post-order walk without recursion
    stack: list[tuple[ASTNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if not node.operator:
            continue

        if not expanded:
            stack.append((node, True))
            # Right is pushed first so the left subtree is visited first
            if isinstance(node.right, ASTNode):
                stack.append((node.right, False))
            if isinstance(node.left, ASTNode):
                stack.append((node.left, False))
            continue

        if not isinstance(node.left, str) or node.left not in KNOWN_FILTER_KEYS:
            continue

        values = node.right if isinstance(node.right, list) else [node.right]
        constraints = filters.setdefault(node.left, [])
        for value in values:
            constraints.append(QueryFilter(operator=node.operator, value=value))

    return filters
