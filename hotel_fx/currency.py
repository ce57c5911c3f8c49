"""Currency codes, symbols and the USD pivot used across hotel_fx."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

PIVOT_CURRENCY: Final[str] = "USD"

_ISO_DESIGNATOR = re.compile(r"^[A-Za-z]{3}$")


class KnownCurrency(str, Enum):
    """Currencies the application ships symbols for."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    LKR = "LKR"
    INR = "INR"
    AUD = "AUD"
    CAD = "CAD"
    CHF = "CHF"
    CNY = "CNY"
    SGD = "SGD"
    AED = "AED"
    SAR = "SAR"
    THB = "THB"
    MYR = "MYR"
    MVR = "MVR"
    NZD = "NZD"
    HKD = "HKD"
    KRW = "KRW"
    ZAR = "ZAR"

    @classmethod
    def lookup(cls, code: str) -> "KnownCurrency | None":
        """Return the enum member for ``code`` or ``None`` when it is not known."""

        try:
            return cls(code.strip().upper())
        except ValueError:
            return None


# Symbols shown next to grouped amounts in tables and cards.
CURRENCY_SYMBOLS: Final[dict[KnownCurrency, str]] = {
    KnownCurrency.USD: "$",
    KnownCurrency.EUR: "€",
    KnownCurrency.GBP: "£",
    KnownCurrency.JPY: "¥",
    KnownCurrency.LKR: "Rs.",
    KnownCurrency.INR: "₹",
    KnownCurrency.AUD: "A$",
    KnownCurrency.CAD: "C$",
    KnownCurrency.CHF: "CHF",
    KnownCurrency.CNY: "¥",
    KnownCurrency.SGD: "S$",
    KnownCurrency.AED: "د.إ",
    KnownCurrency.SAR: "﷼",
    KnownCurrency.THB: "฿",
    KnownCurrency.MYR: "RM",
    KnownCurrency.MVR: "Rf",
    KnownCurrency.NZD: "NZ$",
    KnownCurrency.HKD: "HK$",
    KnownCurrency.KRW: "₩",
    KnownCurrency.ZAR: "R",
}

# en-US locale currency prefixes; any other well-formed code is rendered as "<CODE> ".
EN_US_CURRENCY_PREFIXES: Final[dict[str, str]] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CNY": "CN¥",
    "AUD": "A$",
    "CAD": "CA$",
    "NZD": "NZ$",
    "HKD": "HK$",
    "KRW": "₩",
    "ILS": "₪",
    "MXN": "MX$",
    "BRL": "R$",
    "TWD": "NT$",
    "VND": "₫",
    "PHP": "₱",
}


@dataclass(frozen=True, slots=True)
class Currency:
    """A currency code paired with its known variant, if any.

    ``known`` is ``None`` for codes outside :class:`KnownCurrency`; such codes
    still convert when a rate exists, they only lose their display symbol.
    """

    code: str
    known: KnownCurrency | None = None

    @classmethod
    def parse(cls, code: str) -> "Currency":
        cleaned = code.strip()
        return cls(code=cleaned, known=KnownCurrency.lookup(cleaned))

    @property
    def is_known(self) -> bool:
        return self.known is not None

    @property
    def is_iso_designator(self) -> bool:
        """Return True when the code is shaped like an ISO 4217 designator."""

        return bool(_ISO_DESIGNATOR.match(self.code))

    @property
    def is_pivot(self) -> bool:
        return self.code.upper() == PIVOT_CURRENCY

    @property
    def symbol(self) -> str:
        if self.known is None:
            return self.code
        return CURRENCY_SYMBOLS[self.known]


__all__ = [
    "CURRENCY_SYMBOLS",
    "Currency",
    "EN_US_CURRENCY_PREFIXES",
    "KnownCurrency",
    "PIVOT_CURRENCY",
]
