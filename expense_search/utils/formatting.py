"""Hashing, currency and date helpers shared by the search modules."""

from __future__ import annotations

import re
from datetime import date

from expense_search.constants import DEFAULT_CURRENCY

_CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
}

# Currencies without minor units
_ZERO_DECIMAL_CURRENCIES: frozenset[str] = frozenset({"JPY", "KRW", "VND", "CLP"})

_YEAR_RE = re.compile(r"^\s*(\d{4})")

# Set by cli.py from the [formatting] default_currency setting
_default_currency: str = DEFAULT_CURRENCY


def hash_text(text: str, modulus: int) -> int:
    """Hash text into ``[0, modulus)``.

    Uses the 31-multiplier string hash over UTF-16 code units with 32-bit
    signed overflow, on the lower-cased text. The value is stable across
    processes and platforms, unlike :func:`hash`.
    """
    h = 0
    encoded = text.lower().encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
        if h & 0x80000000:
            h -= 0x100000000
    return abs(h) % modulus


def set_default_currency(currency: str) -> None:
    """Currency used for amounts whose record carries none."""
    global _default_currency
    _default_currency = currency.upper()


def format_currency(amount_in_cents: int | float, currency: str | None = None) -> str:
    """Format an amount in minor units for display, e.g. ``1234 -> "$12.34"``."""
    code = (currency or _default_currency).upper()
    symbol = _CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount_in_cents < 0 else ""
    value = abs(amount_in_cents) / 100
    if code in _ZERO_DECIMAL_CURRENCIES:
        return f"{sign}{symbol}{value:,.0f}"
    return f"{sign}{symbol}{value:,.2f}"


def effective_date(created: str | None, modified_created: str | None) -> str | None:
    """An edited date wins over the original one."""
    return modified_created if modified_created else created


def date_year(value: str | None) -> int | None:
    """Year of an ISO-like date string, or None when it has none."""
    if not value:
        return None
    match = _YEAR_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def is_other_year(value: str | None, today: date | None = None) -> bool:
    """Whether a date string falls outside the current calendar year."""
    year = date_year(value)
    if year is None:
        return False
    current_year = (today or date.today()).year
    return year != current_year


def is_valid_date(value: str) -> bool:
    """Whether value is a real ``YYYY-MM-DD`` calendar date."""
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


def is_valid_amount(value: str, decimals: int = 2) -> bool:
    """Whether value is a decimal number with at most ``decimals`` fraction digits."""
    fraction = rf"(\.\d{{0,{decimals}}})?" if decimals else ""
    return re.fullmatch(rf"-?\d+{fraction}", value) is not None
