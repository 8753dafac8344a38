"""
Catalog Service (``printshop_modules.catalog.service``).

Product registration.  Stock levels are maintained outside this engine;
``set_stock`` exists for intake tooling and tests.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from printshop_kernel.db.types import ZERO, to_decimal
from printshop_kernel.exceptions import InvalidAmountError, MissingFieldError, ProductNotFoundError
from printshop_kernel.logging_config import get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.catalog.models import Product
from printshop_modules.catalog.orm import ProductModel

logger = get_logger("modules.catalog.service")


class CatalogService(TransactionalService):

    def __init__(self, session: Session, auto_commit: bool = True):
        super().__init__(session, auto_commit=auto_commit)

    def create_product(
        self,
        name: str,
        actor_id: UUID,
        stock_quantity: Decimal = ZERO,
        unit_price: Decimal = ZERO,
        cost_per_unit: Decimal = ZERO,
        sku: str | None = None,
    ) -> Product:
        if not name or not name.strip():
            raise MissingFieldError("name")
        dto = Product(
            id=uuid4(),
            name=name.strip(),
            sku=sku,
            stock_quantity=to_decimal(stock_quantity),
            unit_price=to_decimal(unit_price),
            cost_per_unit=to_decimal(cost_per_unit),
        )
        for field_name in ("stock_quantity", "unit_price", "cost_per_unit"):
            if getattr(dto, field_name) < ZERO:
                raise InvalidAmountError(field_name, getattr(dto, field_name), "cannot be negative")

        with self.unit_of_work("create_product"):
            self.session.add(ProductModel.from_dto(dto, created_by_id=actor_id))

        logger.info("product_created", extra={"product_id": str(dto.id), "sku": sku})
        return dto

    def set_stock(self, product_id: UUID, stock_quantity: Decimal, actor_id: UUID) -> Product:
        quantity = to_decimal(stock_quantity)
        if quantity < ZERO:
            raise InvalidAmountError("stock_quantity", quantity, "cannot be negative")
        with self.unit_of_work("set_stock"):
            product = self.session.get(ProductModel, product_id)
            if product is None:
                raise ProductNotFoundError(str(product_id))
            product.stock_quantity = quantity
            product.updated_by_id = actor_id
        logger.info(
            "product_stock_set",
            extra={"product_id": str(product_id), "stock_quantity": str(quantity)},
        )
        return product.to_dto()
