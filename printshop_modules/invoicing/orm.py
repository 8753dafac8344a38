"""
Invoicing ORM Models (``printshop_modules.invoicing.orm``).

Responsibility
--------------
SQLAlchemy persistence models for customers, invoices and invoice items.
Maps frozen domain dataclasses from ``models.py`` to database tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``printshop_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``printshop_kernel``.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from printshop_kernel.db.base import TrackedBase
from printshop_modules.invoicing.models import derive_status


# ---------------------------------------------------------------------------
# 1. CustomerModel
# ---------------------------------------------------------------------------


class CustomerModel(TrackedBase):
    """ORM model for customers.  Rows are referenced, never deleted."""

    __tablename__ = "customers"

    __table_args__ = (
        Index("idx_customers_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_modules.invoicing.models import Customer

        return Customer(
            id=self.id,
            name=self.name,
            phone=self.phone,
            email=self.email,
            address=self.address,
        )

    def __repr__(self) -> str:
        return f"<CustomerModel {self.name}>"


# ---------------------------------------------------------------------------
# 2. InvoiceModel
# ---------------------------------------------------------------------------


class InvoiceModel(TrackedBase):
    """
    ORM model for invoices.

    Maps to the ``Invoice`` frozen dataclass.  Items are stored in a
    separate child table via the ``items`` relationship and are replaced
    as a set.

    Guarantees:
        - number is unique (uq_invoices_number).
        - status is persisted for querying but rewritten by
          ``refresh_status`` on every mutation path.
        - amount_paid is only written by the payment allocator.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        UniqueConstraint("number", name="uq_invoices_number"),
        Index("idx_invoices_customer_id", "customer_id"),
        Index("idx_invoices_status", "status"),
        Index("idx_invoices_order_id", "order_id"),
    )

    customer_id: Mapped[UUID] = mapped_column(
        ForeignKey("customers.id"), nullable=False
    )
    order_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("orders.id"), nullable=True
    )
    number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_draft: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    tax_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    amount_paid: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(20), default="draft")
    activated_at: Mapped[datetime | None] = mapped_column(nullable=True)

    items: Mapped[list["InvoiceItemModel"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItemModel.line_number",
        lazy="selectin",
    )

    def refresh_status(self) -> str:
        """Re-derive ``status`` from the current money fields."""
        self.status = derive_status(
            self.is_draft, self.amount_paid, self.total_amount,
        ).value
        return self.status

    def to_dto(self, payments: tuple = ()):
        """Convert ORM model to frozen dataclass.

        The DTO status is derived afresh, never copied from the column.
        """
        from printshop_modules.invoicing.models import Invoice

        return Invoice(
            id=self.id,
            customer_id=self.customer_id,
            number=self.number,
            is_draft=self.is_draft,
            subtotal=self.subtotal,
            tax_amount=self.tax_amount,
            total_amount=self.total_amount,
            amount_paid=self.amount_paid,
            status=derive_status(self.is_draft, self.amount_paid, self.total_amount),
            order_id=self.order_id,
            items=tuple(item.to_dto() for item in self.items),
            payments=payments,
            activated_at=self.activated_at,
        )

    def __repr__(self) -> str:
        return f"<InvoiceModel {self.number}: {self.status}>"


# ---------------------------------------------------------------------------
# 3. InvoiceItemModel
# ---------------------------------------------------------------------------


class InvoiceItemModel(TrackedBase):
    """
    ORM model for invoice items (child of InvoiceModel).

    Guarantees:
        - (invoice_id, line_number) is unique.
        - amount, area_m2, line_cost and line_profit are written from the
          pricing engine, never from caller input.
    """

    __tablename__ = "invoice_items"

    __table_args__ = (
        UniqueConstraint(
            "invoice_id", "line_number", name="uq_invoice_items_line",
        ),
        Index("idx_invoice_items_product_id", "product_id"),
    )

    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("invoices.id"), nullable=False
    )
    line_number: Mapped[int] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    product_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("products.id"), nullable=True
    )
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    sale_type: Mapped[str] = mapped_column(String(10), default="unit")
    width_m: Mapped[Decimal | None] = mapped_column(nullable=True)
    height_m: Mapped[Decimal | None] = mapped_column(nullable=True)
    area_m2: Mapped[Decimal | None] = mapped_column(nullable=True)
    cost_per_unit: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    line_cost: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    line_profit: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    invoice: Mapped["InvoiceModel"] = relationship(back_populates="items")

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_engines.pricing import SaleType
        from printshop_modules.invoicing.models import InvoiceItem

        return InvoiceItem(
            id=self.id,
            invoice_id=self.invoice_id,
            line_number=self.line_number,
            description=self.description,
            quantity=self.quantity,
            unit_price=self.unit_price,
            amount=self.amount,
            sale_type=SaleType(self.sale_type),
            cost_per_unit=self.cost_per_unit,
            line_cost=self.line_cost,
            line_profit=self.line_profit,
            width_m=self.width_m,
            height_m=self.height_m,
            area_m2=self.area_m2,
            product_id=self.product_id,
        )

    def __repr__(self) -> str:
        return f"<InvoiceItemModel {self.invoice_id}:{self.line_number}>"
