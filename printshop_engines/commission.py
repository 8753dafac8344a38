"""
Module: printshop_engines.commission
Responsibility:
    Commission arithmetic: the accrued amount for a percentage of an
    order or invoice value, and the paid/pending partition used by the
    commission summary.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``commission_amount = round(base x percentage / 100)``.
    - ``CommissionTotals.total == paid + pending``; rows are partitioned
      by ``paid_status`` only, recomputed from every row passed in.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from printshop_kernel.db.types import HUNDRED, ZERO, round_money, to_decimal
from printshop_kernel.exceptions import InvalidAmountError


class CommissionType(str, Enum):
    SALES = "sales"
    DESIGN = "design"
    PRINT = "print"


class PaidStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


@dataclass(frozen=True)
class CommissionTotals:
    count: int
    total: Decimal
    paid: Decimal
    pending: Decimal


def commission_amount(base: Decimal, percentage: Decimal, decimal_places: int = 2) -> Decimal:
    """
    Amount earned on ``base`` at ``percentage`` percent.

    Raises:
        InvalidAmountError: base is negative, or percentage is outside 0-100.
    """
    base = to_decimal(base)
    percentage = to_decimal(percentage)
    if base < ZERO:
        raise InvalidAmountError("base_amount", base, "cannot be negative")
    if percentage < ZERO or percentage > HUNDRED:
        raise InvalidAmountError("commission_percentage", percentage, "must be between 0 and 100")
    return round_money(base * percentage / HUNDRED, decimal_places)


def partition_commissions(rows: Iterable[tuple[Decimal, str]]) -> CommissionTotals:
    """
    Sum ``(amount, paid_status)`` pairs into paid and pending buckets.

    Anything not marked paid counts as pending.
    """
    count = 0
    paid = pending = ZERO
    for amount, status in rows:
        count += 1
        if PaidStatus(status) == PaidStatus.PAID:
            paid += to_decimal(amount)
        else:
            pending += to_decimal(amount)
    return CommissionTotals(count=count, total=paid + pending, paid=paid, pending=pending)
