"""Utility modules for expense-search."""

from expense_search.utils.formatting import format_currency, hash_text
from expense_search.utils.messages import set_locale, translate
from expense_search.utils.output import (
    console,
    error,
    info,
    success,
    warning,
)

__all__ = [
    "console",
    "error",
    "format_currency",
    "hash_text",
    "info",
    "set_locale",
    "success",
    "translate",
    "warning",
]
