"""
Order Domain Models (``printshop_modules.orders.models``).

Invariants enforced
-------------------
* ``payment_status`` is derived from ``amount_paid`` against
  ``order_value``; see ``order_payment_status``.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID


class OrderPaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


def order_payment_status(amount_paid: Decimal, order_value: Decimal) -> OrderPaymentStatus:
    if amount_paid > 0 and amount_paid >= order_value:
        return OrderPaymentStatus.PAID
    if amount_paid > 0:
        return OrderPaymentStatus.PARTIAL
    return OrderPaymentStatus.UNPAID


@dataclass(frozen=True)
class Order:
    id: UUID
    order_number: str
    customer_id: UUID | None
    description: str | None
    order_value: Decimal
    amount_paid: Decimal
    payment_status: OrderPaymentStatus
