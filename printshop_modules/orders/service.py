"""
Order Service (``printshop_modules.orders.service``).

Order intake.  The payment mirror is never written here; only the payment
allocator credits an order.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from printshop_kernel.db.types import ZERO, to_decimal
from printshop_kernel.exceptions import (
    CustomerNotFoundError,
    InvalidAmountError,
    MissingFieldError,
    OrderNotFoundError,
    ValidationError,
)
from printshop_kernel.logging_config import get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.orders.models import Order, OrderPaymentStatus
from printshop_modules.orders.orm import OrderModel

logger = get_logger("modules.orders.service")


class OrderService(TransactionalService):

    def __init__(self, session: Session, auto_commit: bool = True):
        super().__init__(session, auto_commit=auto_commit)

    def create_order(
        self,
        order_number: str,
        order_value: Decimal,
        actor_id: UUID,
        customer_id: UUID | None = None,
        description: str | None = None,
    ) -> Order:
        from printshop_modules.invoicing.orm import CustomerModel

        if not order_number or not order_number.strip():
            raise MissingFieldError("order_number")
        value = to_decimal(order_value)
        if value < ZERO:
            raise InvalidAmountError("order_value", value, "cannot be negative")

        with self.unit_of_work("create_order"):
            if customer_id is not None and self.session.get(CustomerModel, customer_id) is None:
                raise CustomerNotFoundError(str(customer_id))
            existing = self.session.execute(
                select(OrderModel.id).where(OrderModel.order_number == order_number.strip())
            ).first()
            if existing is not None:
                raise ValidationError(f"Order number already in use: {order_number}")
            order = OrderModel(
                order_number=order_number.strip(),
                customer_id=customer_id,
                description=description,
                order_value=value,
                amount_paid=ZERO,
                payment_status=OrderPaymentStatus.UNPAID.value,
                created_by_id=actor_id,
            )
            self.session.add(order)
            self.session.flush()

        logger.info(
            "order_created",
            extra={"order_id": str(order.id), "order_number": order.order_number},
        )
        return order.to_dto()

    def get_order(self, order_id: UUID) -> Order:
        order = self.session.get(OrderModel, order_id)
        if order is None:
            raise OrderNotFoundError(str(order_id))
        return order.to_dto()
