"""
Module: printshop_engines.discount
Responsibility:
    The Money & Discount Calculator.  Given an invoice's outstanding balance
    and a discount instruction, compute the discount amount and the amount
    still payable after the discount.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``0 <= discount_amount <= balance``.
    - ``payable_after_discount = max(0, balance - discount_amount)``, so it
      is never negative for any non-negative balance.
    - Negative values and percentages above 100 are rejected as an
      outcome with ``failure`` set.  The calculator never raises for them,
      so a rejected discount cannot escape into ledger mutation half-way.

Usage:
    calc = DiscountCalculator()
    outcome = calc.evaluate(
        balance=Decimal("100"),
        discount=Discount(DiscountType.PERCENTAGE, Decimal("10")),
    )
    outcome.discount_amount          # Decimal("10.00")
    outcome.payable_after_discount   # Decimal("90.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from printshop_engines.tracer import traced_engine
from printshop_kernel.db.types import HUNDRED, ZERO, round_money, to_decimal


class DiscountType(str, Enum):
    """How ``Discount.value`` is interpreted."""

    FIXED = "fixed"  # absolute amount
    PERCENTAGE = "percentage"  # percent of outstanding balance


@dataclass(frozen=True)
class Discount:
    """A discount instruction attached to one allocation."""

    type: DiscountType = DiscountType.FIXED
    value: Decimal = ZERO
    reason: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", DiscountType(self.type))
        object.__setattr__(self, "value", to_decimal(self.value))

    @classmethod
    def none(cls) -> Discount:
        return cls()

    @classmethod
    def of(cls, type: str | DiscountType, value, reason: str | None = None) -> Discount:
        """Build from loosely-typed command input ("fixed"/"percentage", str/int/Decimal)."""
        return cls(type=type, value=value, reason=reason)


@dataclass(frozen=True)
class DiscountOutcome:
    """
    Result of evaluating one discount against one balance.

    Guarantees:
        - When ``failure`` is None: ``discount_amount + payable_after_discount
          == balance`` and both are non-negative.
        - When ``failure`` is set: ``discount_amount`` is zero and
          ``payable_after_discount`` equals ``balance``.
    """

    balance: Decimal
    discount: Discount
    discount_amount: Decimal
    payable_after_discount: Decimal
    failure: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.failure is None


class DiscountCalculator:
    """
    Stateless discount arithmetic.

    Rounding: percentage discounts are rounded to ``decimal_places`` with
    ROUND_HALF_UP before clamping, so the clamp is always applied to the
    amount that will actually be booked.
    """

    def __init__(self, decimal_places: int = 2):
        self._places = decimal_places

    def validate(self, discount: Discount) -> str | None:
        """The rejection reason for ``discount``, or None if it is acceptable."""
        if discount.value < ZERO:
            return "discount value cannot be negative"
        if discount.type == DiscountType.PERCENTAGE and discount.value > HUNDRED:
            return "percentage discount cannot exceed 100"
        return None

    @traced_engine("discount", "1.0", fingerprint_fields=("balance", "discount"))
    def evaluate(self, *, balance: Decimal, discount: Discount) -> DiscountOutcome:
        """
        Compute discount_amount and payable_after_discount for ``balance``.

        Args:
            balance: Outstanding balance ``total_amount - amount_paid``.
                Negative balances are treated as zero.
            discount: Discount instruction.
        """
        balance = max(ZERO, balance)
        failure = self.validate(discount)
        if failure is not None:
            return DiscountOutcome(
                balance=balance,
                discount=discount,
                discount_amount=ZERO,
                payable_after_discount=balance,
                failure=failure,
            )

        if discount.type == DiscountType.PERCENTAGE:
            raw = round_money(balance * discount.value / HUNDRED, self._places)
        else:
            raw = discount.value

        discount_amount = min(max(raw, ZERO), balance)
        payable = max(ZERO, balance - discount_amount)

        return DiscountOutcome(
            balance=balance,
            discount=discount,
            discount_amount=discount_amount,
            payable_after_discount=payable,
        )
