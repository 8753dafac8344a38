"""
Payment Domain Models (``printshop_modules.payments.models``).

Responsibility
--------------
The payment command accepted by ``PaymentAllocator.allocate`` and the
structured result it returns, plus the immutable ``Payment`` record.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* ``PaymentResult`` has either applied allocations or a rejection, never
  both: a rejected command writes nothing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from printshop_engines.discount import Discount, DiscountType
from printshop_modules.invoicing.models import InvoiceStatus


@dataclass(frozen=True)
class AllocationRequest:
    """One (invoice, amount, discount) triple within a payment command."""
    invoice_id: UUID
    amount: Decimal
    discount: Discount = field(default_factory=Discount.none)


@dataclass(frozen=True)
class PaymentCommand:
    """A single incoming payment spread across a customer's invoices."""
    customer_id: UUID
    allocations: tuple[AllocationRequest, ...]
    payment_method: str
    reference_number: str
    actor_id: UUID
    notes: str | None = None


@dataclass(frozen=True)
class AppliedAllocation:
    """What one allocation did to its invoice."""
    invoice_id: UUID
    payment_id: UUID
    amount_received: Decimal
    discount_amount: Decimal
    total_credit: Decimal
    new_amount_paid: Decimal
    new_status: InvoiceStatus


@dataclass(frozen=True)
class AllocationRejection:
    """
    Why a payment command was refused.

    ``index`` is the position of the first invalid allocation, or None when
    the command header (customer, method, reference) was at fault.
    """
    code: str
    message: str
    index: int | None = None
    invoice_id: UUID | None = None


@dataclass(frozen=True)
class PaymentResult:
    applied: tuple[AppliedAllocation, ...] = ()
    rejected: AllocationRejection | None = None

    @property
    def is_success(self) -> bool:
        return self.rejected is None


@dataclass(frozen=True)
class Payment:
    """A recorded payment.  Immutable once written."""
    id: UUID
    invoice_id: UUID
    customer_id: UUID
    amount: Decimal
    payment_method: str
    reference_number: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal
    recorded_by: UUID
    payment_date: datetime
    order_id: UUID | None = None
    discount_reason: str | None = None
    notes: str | None = None
