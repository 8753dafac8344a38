"""
Payment ORM Models (``printshop_modules.payments.orm``).

Architecture position
---------------------
**Modules layer** -- persistence.  MUST NOT be imported by
``printshop_kernel``.  Payment rows are append-only; see
``printshop_modules.immutability``.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from printshop_kernel.db.base import TrackedBase


class PaymentModel(TrackedBase):
    """
    ORM model for payments.

    Guarantees:
        - amount is the cash actually received; discount_amount is the
          extra credit the discount gave.  The invoice was credited with
          ``amount + discount_amount``.
        - The row outlives any later edit of the invoice's items.
    """

    __tablename__ = "payments"

    __table_args__ = (
        Index("idx_payments_invoice_id", "invoice_id"),
        Index("idx_payments_customer_id", "customer_id"),
        Index("idx_payments_reference_number", "reference_number"),
    )

    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("invoices.id"), nullable=False
    )
    customer_id: Mapped[UUID] = mapped_column(
        ForeignKey("customers.id"), nullable=False
    )
    order_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("orders.id"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    reference_number: Mapped[str] = mapped_column(String(100), nullable=False)
    discount_type: Mapped[str] = mapped_column(String(20), default="fixed")
    discount_value: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    discount_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    discount_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    recorded_by: Mapped[UUID] = mapped_column(nullable=False)
    payment_date: Mapped[datetime] = mapped_column(nullable=False)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_engines.discount import DiscountType
        from printshop_modules.payments.models import Payment

        return Payment(
            id=self.id,
            invoice_id=self.invoice_id,
            customer_id=self.customer_id,
            amount=self.amount,
            payment_method=self.payment_method,
            reference_number=self.reference_number,
            discount_type=DiscountType(self.discount_type),
            discount_value=self.discount_value,
            discount_amount=self.discount_amount,
            recorded_by=self.recorded_by,
            payment_date=self.payment_date,
            order_id=self.order_id,
            discount_reason=self.discount_reason,
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return f"<PaymentModel {self.reference_number}: {self.amount} -> {self.invoice_id}>"
