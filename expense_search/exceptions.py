"""Exception hierarchy for expense-search."""

from pathlib import Path


class ExpenseSearchError(Exception):
    """Base exception for all expense-search errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all expense-search errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(ExpenseSearchError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Search Errors
class SearchError(ExpenseSearchError):
    """Search query related errors."""

    pass


class SearchParseError(SearchError):
    """Raised when a search query cannot be parsed."""

    def __init__(self, query: str, message: str) -> None:
        self.query = query
        super().__init__(f"Failed to parse search query '{query}': {message}")


# Payload Errors
class PayloadError(ExpenseSearchError):
    """A results or reference payload has an unexpected shape."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid payload {source}: {reason}")


class TemplateRenderError(ExpenseSearchError):
    """Raised when a message template cannot be rendered."""

    pass
