"""expense-search: query building and result formatting for expense search."""

__version__ = "0.1.0"
