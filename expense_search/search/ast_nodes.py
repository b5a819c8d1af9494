"""Data classes for parsed and structured search queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from expense_search.exceptions import SearchParseError


@dataclass
class ASTNode:
    """One grammar production.

    Leaf constraints carry a filter key in ``left`` and a value (or a list of
    values for comma-separated sets) in ``right``. Combinators (``and``) carry
    nodes on both sides.
    """

    operator: str | None
    left: ASTNode | str
    right: ASTNode | str | list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "operator": self.operator,
            "left": self.left.to_dict() if isinstance(self.left, ASTNode) else self.left,
            "right": self.right.to_dict() if isinstance(self.right, ASTNode) else self.right,
        }


@dataclass(frozen=True)
class QueryFilter:
    """A single constraint, e.g. ``amount>100`` is ``QueryFilter("gt", "100")``."""

    operator: str
    value: str | int | float


QueryFilters = dict[str, list[QueryFilter]]


@dataclass
class ParsedQuery:
    """Raw grammar output: root key values plus the filter tree."""

    type: str
    status: str
    sort_by: str
    sort_order: str
    policy_id: str | None = None
    filters: ASTNode | None = None


@dataclass
class SearchQueryJSON:
    """Structured query with its flattened filters and canonical hash."""

    type: str
    status: str
    sort_by: str
    sort_order: str
    policy_id: str | None = None
    filters: ASTNode | None = None
    flat_filters: QueryFilters = field(default_factory=dict)
    input_query: str = ""
    hash: int = 0

    def root_value(self, key: str) -> str | None:
        """Look up a root key (``type``, ``sortBy``, ...) by its query syntax name."""
        return {
            "type": self.type,
            "status": self.status,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
            "policyID": self.policy_id,
        }.get(key)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "status": self.status,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
            "filters": self.filters.to_dict() if self.filters else None,
            "flatFilters": {
                key: [{"operator": f.operator, "value": f.value} for f in values]
                for key, values in self.flat_filters.items()
            },
            "inputQuery": self.input_query,
            "hash": self.hash,
        }
        if self.policy_id:
            data["policyID"] = self.policy_id
        return data


@dataclass(frozen=True)
class QueryParseResult:
    """Outcome of turning a query string into a :class:`SearchQueryJSON`.

    Exactly one of ``query`` and ``error`` is set.
    """

    query: SearchQueryJSON | None = None
    error: SearchParseError | None = None

    @property
    def ok(self) -> bool:
        return self.query is not None

    def unwrap_or(self, fallback: SearchQueryJSON | None) -> SearchQueryJSON | None:
        """Return the parsed query, or ``fallback`` when parsing failed."""
        return self.query if self.query is not None else fallback
