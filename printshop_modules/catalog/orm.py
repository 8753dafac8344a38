"""
Catalog ORM Models (``printshop_modules.catalog.orm``).

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``printshop_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``printshop_kernel``.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from printshop_kernel.db.base import TrackedBase


class ProductModel(TrackedBase):
    """
    ORM model for catalog products.

    Guarantees:
        - sku is unique when present (uq_products_sku).
        - stock_quantity is only ever read by the invoicing module.
    """

    __tablename__ = "products"

    __table_args__ = (
        UniqueConstraint("sku", name="uq_products_sku"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stock_quantity: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    unit_price: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    cost_per_unit: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_modules.catalog.models import Product

        return Product(
            id=self.id,
            name=self.name,
            sku=self.sku,
            stock_quantity=self.stock_quantity,
            unit_price=self.unit_price,
            cost_per_unit=self.cost_per_unit,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "ProductModel":
        """Create ORM model from frozen dataclass."""
        return cls(
            id=dto.id,
            name=dto.name,
            sku=dto.sku,
            stock_quantity=dto.stock_quantity,
            unit_price=dto.unit_price,
            cost_per_unit=dto.cost_per_unit,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<ProductModel {self.sku or self.id}: {self.name}>"
