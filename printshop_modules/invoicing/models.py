"""
Invoicing Domain Models (``printshop_modules.invoicing.models``).

Responsibility
--------------
Frozen dataclass value objects for customers, invoices and invoice items,
and ``derive_status``, the single place an invoice's status is computed.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Returned by
``InvoiceService`` and the payment allocator.

Invariants enforced
-------------------
* ``status`` is a projection of ``is_draft``, ``amount_paid`` and
  ``total_amount``; it is recomputed on every mutation and every read.
* All monetary fields use ``Decimal``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from printshop_engines.pricing import LineInput, SaleType
from printshop_kernel.db.types import ZERO


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states."""
    DRAFT = "draft"
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


def derive_status(is_draft: bool, amount_paid: Decimal, total_amount: Decimal) -> InvoiceStatus:
    """
    Status from payment coverage.

    ``paid`` iff ``amount_paid >= total_amount``; ``partially_paid`` iff
    ``0 < amount_paid < total_amount``.
    """
    if is_draft:
        return InvoiceStatus.DRAFT
    if amount_paid >= total_amount:
        return InvoiceStatus.PAID
    if amount_paid > ZERO:
        return InvoiceStatus.PARTIALLY_PAID
    return InvoiceStatus.UNPAID


@dataclass(frozen=True)
class Customer:
    """A customer who owes money.  Never deleted."""
    id: UUID
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class NewCustomer:
    """Contact details for a customer created on the fly."""
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class ItemInput:
    """One invoice line as entered by staff."""
    description: str
    quantity: Decimal
    unit_price: Decimal
    sale_type: SaleType = SaleType.UNIT
    width_m: Decimal | None = None
    height_m: Decimal | None = None
    cost_per_unit: Decimal = ZERO
    product_id: UUID | None = None

    def to_line_input(self) -> LineInput:
        return LineInput(
            quantity=self.quantity,
            unit_price=self.unit_price,
            sale_type=SaleType(self.sale_type),
            width_m=self.width_m,
            height_m=self.height_m,
            cost_per_unit=self.cost_per_unit,
        )


@dataclass(frozen=True)
class InvoiceItem:
    """A priced line on an invoice."""
    id: UUID
    invoice_id: UUID
    line_number: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal
    sale_type: SaleType
    cost_per_unit: Decimal
    line_cost: Decimal
    line_profit: Decimal
    width_m: Decimal | None = None
    height_m: Decimal | None = None
    area_m2: Decimal | None = None
    product_id: UUID | None = None


@dataclass(frozen=True)
class Invoice:
    """A customer invoice with its items and, when loaded, its payments."""
    id: UUID
    customer_id: UUID
    number: str | None
    is_draft: bool
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    status: InvoiceStatus
    order_id: UUID | None = None
    items: tuple[InvoiceItem, ...] = field(default_factory=tuple)
    payments: tuple = field(default_factory=tuple)
    activated_at: datetime | None = None

    @property
    def outstanding(self) -> Decimal:
        """``total_amount - amount_paid``, floored at zero."""
        return max(ZERO, self.total_amount - self.amount_paid)

    @property
    def overcollected(self) -> Decimal:
        """Cash collected beyond the current total (after an item shrink)."""
        return max(ZERO, self.amount_paid - self.total_amount)

    @property
    def invoice_profit(self) -> Decimal:
        return sum((item.line_profit for item in self.items), ZERO)
