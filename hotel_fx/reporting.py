"""Single-currency aggregates over mixed-currency transactions."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from hotel_fx.conversion import Converter
from hotel_fx.currency import PIVOT_CURRENCY
from hotel_fx.ingestion.models import CurrencyRates
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)

DISPLAY_PRECISION = 2


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    PAYMENT = "payment"
    TRANSFER = "transfer"


@dataclass(frozen=True, slots=True)
class Transaction:
    amount: float
    currency: str
    kind: TransactionKind


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    """Totals of one reporting pass, already rounded for display."""

    currency: str
    total_income: float
    total_expenses: float
    total_payments: float
    net_profit: float
    profit_margin: float
    income_transactions: int
    expense_transactions: int
    transfer_transactions: int

    @property
    def total_transactions(self) -> int:
        return self.income_transactions + self.expense_transactions + self.transfer_transactions


@dataclass(frozen=True, slots=True)
class Reservation:
    id: str
    currency: str
    room_rate: float
    nights: int
    location_id: str
    paid_amount: float = 0.0


@dataclass(frozen=True, slots=True)
class ReservationCharge:
    """An extra charge (minibar, tours, laundry) billed against a reservation."""

    reservation_id: str
    amount: float
    currency: str


@dataclass(frozen=True, slots=True)
class ReservationFinancial:
    reservation_id: str
    currency: str
    room_amount_usd: float
    expenses_usd: float
    paid_amount_usd: float
    balance_due_usd: float


class FinancialReporter:
    """Builds dashboard and report figures on top of a :class:`Converter`.

    Each pass loads a scope's rate table once and converts every row against
    that snapshot rather than hitting the cache per transaction.
    """

    def __init__(self, converter: Converter) -> None:
        self.converter = converter

    def _rates_for(self, tenant_id: str, location_id: str) -> CurrencyRates:
        return self.converter.cache.get_rates(tenant_id, location_id)

    def summarize(
        self,
        transactions: Iterable[Transaction],
        base_currency: str,
        tenant_id: str,
        location_id: str,
    ) -> FinancialSummary:
        rates = self._rates_for(tenant_id, location_id)
        totals: dict[TransactionKind, float] = defaultdict(float)
        counts: dict[TransactionKind, int] = defaultdict(int)
        for transaction in transactions:
            counts[transaction.kind] += 1
            if transaction.kind is TransactionKind.TRANSFER:
                # Transfers only move money between accounts.
                continue
            totals[transaction.kind] += self.converter.convert_with_rates(
                transaction.amount, transaction.currency, base_currency, rates
            )

        total_income = totals[TransactionKind.INCOME] + totals[TransactionKind.PAYMENT]
        total_expenses = totals[TransactionKind.EXPENSE]
        net_profit = total_income - total_expenses
        profit_margin = (net_profit / total_income) * 100 if total_income > 0 else 0.0
        summary = FinancialSummary(
            currency=base_currency,
            total_income=_round(total_income),
            total_expenses=_round(total_expenses),
            total_payments=_round(totals[TransactionKind.PAYMENT]),
            net_profit=_round(net_profit),
            profit_margin=_round(profit_margin),
            income_transactions=counts[TransactionKind.INCOME] + counts[TransactionKind.PAYMENT],
            expense_transactions=counts[TransactionKind.EXPENSE],
            transfer_transactions=counts[TransactionKind.TRANSFER],
        )
        LOGGER.debug(
            "Summarised %s transactions for tenant=%s location=%s in %s",
            summary.total_transactions,
            tenant_id,
            location_id,
            base_currency,
        )
        return summary

    def reservation_financials(
        self,
        reservation: Reservation,
        charges: Iterable[ReservationCharge],
        tenant_id: str,
    ) -> ReservationFinancial:
        """Return room, extras, paid and outstanding amounts of a booking in USD."""

        rates = self._rates_for(tenant_id, reservation.location_id)
        return self._reservation_financial(reservation, charges, rates)

    def reservations_financials(
        self,
        reservations: Sequence[Reservation],
        charges: Iterable[ReservationCharge],
        tenant_id: str,
    ) -> list[ReservationFinancial]:
        """Batch variant of :meth:`reservation_financials`, one rate fetch per location."""

        charges_by_reservation: dict[str, list[ReservationCharge]] = defaultdict(list)
        for charge in charges:
            charges_by_reservation[charge.reservation_id].append(charge)
        rates_by_location: dict[str, CurrencyRates] = {}
        results: list[ReservationFinancial] = []
        for reservation in reservations:
            rates = rates_by_location.get(reservation.location_id)
            if rates is None:
                rates = self._rates_for(tenant_id, reservation.location_id)
                rates_by_location[reservation.location_id] = rates
            results.append(
                self._reservation_financial(
                    reservation, charges_by_reservation.get(reservation.id, []), rates
                )
            )
        return results

    def _reservation_financial(
        self,
        reservation: Reservation,
        charges: Iterable[ReservationCharge],
        rates: CurrencyRates,
    ) -> ReservationFinancial:
        to_usd = self.converter.convert_with_rates
        room_amount = to_usd(
            reservation.room_rate * reservation.nights, reservation.currency, PIVOT_CURRENCY, rates
        )
        paid_amount = to_usd(reservation.paid_amount, reservation.currency, PIVOT_CURRENCY, rates)
        expenses = sum(
            to_usd(charge.amount, charge.currency, PIVOT_CURRENCY, rates) for charge in charges
        )
        return ReservationFinancial(
            reservation_id=reservation.id,
            currency=reservation.currency,
            room_amount_usd=_round(room_amount),
            expenses_usd=_round(expenses),
            paid_amount_usd=_round(paid_amount),
            balance_due_usd=_round(room_amount + expenses - paid_amount),
        )


def _round(value: float) -> float:
    return round(value, DISPLAY_PRECISION)


__all__ = [
    "FinancialReporter",
    "FinancialSummary",
    "Reservation",
    "ReservationCharge",
    "ReservationFinancial",
    "Transaction",
    "TransactionKind",
]
