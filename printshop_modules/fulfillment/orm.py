"""
Fulfillment ORM Models (``printshop_modules.fulfillment.orm``).

Architecture position
---------------------
**Modules layer** -- persistence.  MUST NOT be imported by
``printshop_kernel``.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from printshop_kernel.db.base import TrackedBase


class SalesOrderRequestModel(TrackedBase):
    """
    ORM model for sales order requests.

    Guarantees:
        - Customer fields are denormalized at intake; ``customer_id`` is
          filled in once an invoice is linked.
        - ``linked_invoice_id`` is a lookup reference only (no cascade).
        - status never holds ``collected``.
        - Rows are never deleted.
    """

    __tablename__ = "sales_order_requests"

    __table_args__ = (
        Index("idx_sales_order_requests_status", "status"),
        Index("idx_sales_order_requests_linked_invoice_id", "linked_invoice_id"),
    )

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(String(4000), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="pending", nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    customer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("customers.id"), nullable=True
    )
    linked_invoice_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("invoices.id"), nullable=True
    )
    designer_id: Mapped[UUID | None] = mapped_column(nullable=True)
    print_operator_id: Mapped[UUID | None] = mapped_column(nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_modules.fulfillment.models import (
            RequestPaymentStatus,
            SalesOrderRequest,
            normalize_status,
        )

        return SalesOrderRequest(
            id=self.id,
            customer_name=self.customer_name,
            description=self.description,
            status=normalize_status(self.status),
            payment_status=RequestPaymentStatus(self.payment_status),
            customer_phone=self.customer_phone,
            customer_email=self.customer_email,
            notes=self.notes,
            customer_id=self.customer_id,
            linked_invoice_id=self.linked_invoice_id,
            designer_id=self.designer_id,
            print_operator_id=self.print_operator_id,
            processed_at=self.processed_at,
        )

    def __repr__(self) -> str:
        return f"<SalesOrderRequestModel {self.id}: {self.status}>"
