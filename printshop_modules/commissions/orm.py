"""
Commission ORM Models (``printshop_modules.commissions.orm``).

Architecture position
---------------------
**Modules layer** -- persistence.  A paid row is frozen; see
``printshop_modules.immutability``.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from printshop_kernel.db.base import TrackedBase


class CommissionModel(TrackedBase):
    """
    ORM model for commissions.

    Guarantees:
        - Keyed to an order, an invoice, or both.
        - commission_amount is fixed at accrual time.
    """

    __tablename__ = "commissions"

    __table_args__ = (
        Index("idx_commissions_user_id", "user_id"),
        Index("idx_commissions_paid_status", "paid_status"),
        Index("idx_commissions_order_id", "order_id"),
    )

    order_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("orders.id"), nullable=True
    )
    invoice_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("invoices.id"), nullable=True
    )
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    commission_type: Mapped[str] = mapped_column(String(20), nullable=False)
    commission_percentage: Mapped[Decimal] = mapped_column(nullable=False)
    base_amount: Mapped[Decimal] = mapped_column(nullable=False)
    commission_amount: Mapped[Decimal] = mapped_column(nullable=False)
    paid_status: Mapped[str] = mapped_column(String(10), default="unpaid", nullable=False)
    paid_at: Mapped[datetime | None] = mapped_column(nullable=True)
    paid_by: Mapped[UUID | None] = mapped_column(nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_engines.commission import CommissionType, PaidStatus
        from printshop_modules.commissions.models import Commission

        return Commission(
            id=self.id,
            user_id=self.user_id,
            commission_type=CommissionType(self.commission_type),
            commission_percentage=self.commission_percentage,
            base_amount=self.base_amount,
            commission_amount=self.commission_amount,
            paid_status=PaidStatus(self.paid_status),
            order_id=self.order_id,
            invoice_id=self.invoice_id,
            paid_at=self.paid_at,
            paid_by=self.paid_by,
        )

    def __repr__(self) -> str:
        return f"<CommissionModel {self.commission_type} {self.commission_amount}: {self.paid_status}>"
