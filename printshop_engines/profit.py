"""
Module: printshop_engines.profit
Responsibility:
    The Profit Recognition Calculator.  Profit is earned in proportion to the
    cash collected on an invoice, not when the invoice is issued.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Callers (the reporting
    selector) feed it freshly-read invoice figures on every call; nothing is
    cached between calls.

Invariants enforced:
    - ``payment_ratio = min(amount_paid / total_amount, 1)``, and 0 when
      ``total_amount == 0``.
    - ``recognized_profit + pending_profit == invoice_profit`` exactly:
      pending is computed as the remainder after rounding recognized.
    - Aggregates are plain sums of the per-invoice values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from printshop_engines.tracer import traced_engine
from printshop_kernel.db.types import ONE, ZERO, round_money, to_decimal


@dataclass(frozen=True)
class ProfitRecognition:
    """Recognized vs pending profit for a single invoice."""

    invoice_id: UUID | str
    invoice_profit: Decimal
    payment_ratio: Decimal
    recognized_profit: Decimal
    pending_profit: Decimal


@dataclass(frozen=True)
class ProfitTotals:
    """Sum of ProfitRecognition values across invoices."""

    invoice_count: int
    invoice_profit: Decimal
    recognized_profit: Decimal
    pending_profit: Decimal


def payment_ratio(amount_paid: Decimal, total_amount: Decimal) -> Decimal:
    """Share of the invoice collected, capped at 1."""
    if total_amount <= ZERO:
        return ZERO
    return min(max(amount_paid, ZERO) / total_amount, ONE)


class ProfitRecognitionCalculator:
    """Deferred (cash-proportional) profit recognition."""

    def __init__(self, decimal_places: int = 2):
        self._places = decimal_places

    @traced_engine(
        "profit_recognition", "1.0",
        fingerprint_fields=("line_profits", "amount_paid", "total_amount"),
    )
    def recognize(
        self,
        *,
        invoice_id: UUID | str,
        line_profits: Iterable[Decimal],
        amount_paid: Decimal,
        total_amount: Decimal,
    ) -> ProfitRecognition:
        invoice_profit = sum((to_decimal(p) for p in line_profits), ZERO)
        ratio = payment_ratio(to_decimal(amount_paid), to_decimal(total_amount))
        recognized = round_money(invoice_profit * ratio, self._places)
        return ProfitRecognition(
            invoice_id=invoice_id,
            invoice_profit=invoice_profit,
            payment_ratio=ratio,
            recognized_profit=recognized,
            pending_profit=invoice_profit - recognized,
        )

    def aggregate(self, recognitions: Iterable[ProfitRecognition]) -> ProfitTotals:
        count = 0
        profit = recognized = pending = ZERO
        for r in recognitions:
            count += 1
            profit += r.invoice_profit
            recognized += r.recognized_profit
            pending += r.pending_profit
        return ProfitTotals(
            invoice_count=count,
            invoice_profit=profit,
            recognized_profit=recognized,
            pending_profit=pending,
        )
