"""Display helpers for monetary amounts.

These functions never touch the rate tables and never raise for odd input:
unknown or malformed codes degrade to plain ``"<code> <amount>"`` text.
"""

from __future__ import annotations

from hotel_fx.currency import EN_US_CURRENCY_PREFIXES, Currency

DEFAULT_SYMBOL_CURRENCY = "LKR"


def format_amount(amount: float) -> str:
    """Return ``amount`` grouped with exactly two decimals, e.g. ``1,234.50``."""

    return f"{amount:,.2f}"


def format_currency(amount: float, currency_code: str) -> str:
    """Format ``amount`` the way an en-US currency formatter would.

    >>> format_currency(1234.5, "USD")
    '$1,234.50'
    >>> format_currency(12.5, "LKR")
    'LKR 12.50'
    >>> format_currency(12.5, "NOTACODE")
    'NOTACODE 12.50'
    """

    currency = Currency.parse(currency_code)
    if not currency.is_iso_designator:
        return f"{currency_code} {amount:.2f}"
    code = currency.code.upper()
    sign = "-" if amount < 0 else ""
    grouped = format_amount(abs(amount))
    prefix = EN_US_CURRENCY_PREFIXES.get(code)
    if prefix is None:
        return f"{sign}{code} {grouped}"
    return f"{sign}{prefix}{grouped}"


def get_currency_symbol(currency_code: str) -> str:
    """Return the display symbol for ``currency_code``, or the code itself."""

    return Currency.parse(currency_code).symbol


def format_amount_with_symbol(amount: float, currency_code: str | None = None) -> str:
    """Prefix a grouped amount (no forced decimals) with the currency symbol.

    >>> format_amount_with_symbol(1500)
    'Rs.1,500'
    >>> format_amount_with_symbol(99.5, "USD")
    '$99.5'
    """

    symbol = get_currency_symbol(currency_code or DEFAULT_SYMBOL_CURRENCY)
    return f"{symbol}{_group_number(amount)}"


def _group_number(amount: float) -> str:
    # Grouping with up to three fraction digits and trailing zeros removed.
    text = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


__all__ = [
    "DEFAULT_SYMBOL_CURRENCY",
    "format_amount",
    "format_amount_with_symbol",
    "format_currency",
    "get_currency_symbol",
]
