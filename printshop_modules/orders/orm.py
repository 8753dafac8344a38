"""
Order ORM Models (``printshop_modules.orders.orm``).

Architecture position
---------------------
**Modules layer** -- persistence.  MUST NOT be imported by
``printshop_kernel``.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from printshop_kernel.db.base import TrackedBase
from printshop_modules.orders.models import order_payment_status


class OrderModel(TrackedBase):
    """
    ORM model for orders.

    Guarantees:
        - order_number is unique (uq_orders_order_number).
        - amount_paid and payment_status are only written by
          ``apply_credit`` (the payment allocator's mirror update).
    """

    __tablename__ = "orders"

    __table_args__ = (
        UniqueConstraint("order_number", name="uq_orders_order_number"),
        Index("idx_orders_customer_id", "customer_id"),
    )

    order_number: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("customers.id"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    order_value: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    amount_paid: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    payment_status: Mapped[str] = mapped_column(String(20), default="unpaid")

    def apply_credit(self, credit: Decimal) -> None:
        """Add ``credit`` to the mirror and re-derive payment_status."""
        self.amount_paid = (self.amount_paid or Decimal("0")) + credit
        self.payment_status = order_payment_status(self.amount_paid, self.order_value).value

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_modules.orders.models import Order, OrderPaymentStatus

        return Order(
            id=self.id,
            order_number=self.order_number,
            customer_id=self.customer_id,
            description=self.description,
            order_value=self.order_value,
            amount_paid=self.amount_paid,
            payment_status=OrderPaymentStatus(self.payment_status),
        )

    def __repr__(self) -> str:
        return f"<OrderModel {self.order_number}: {self.payment_status}>"
