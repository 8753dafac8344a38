"""
Commissions Module Service - accrual and one-way settlement.

Commission rows are created by the external order-progression trigger
through ``accrue``; this service's own lifecycle job is ``mark_paid``.
Aggregates are recomputed from every row on each call.

Usage:
    service = CommissionService(session, clock=clock)
    c = service.accrue(user_id, "sales", Decimal("5"), Decimal("1000"),
                       actor_id=actor_id, order_id=order.id)
    service.mark_paid(c.id, actor_id=accountant_id)
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from printshop_config import ShopConfig, get_active_config
from printshop_engines.commission import (
    CommissionTotals,
    CommissionType,
    PaidStatus,
    commission_amount,
    partition_commissions,
)
from printshop_kernel.db.types import to_decimal
from printshop_kernel.domain.clock import Clock, SystemClock
from printshop_kernel.exceptions import (
    CommissionAlreadyPaidError,
    CommissionNotFoundError,
    InvoiceNotFoundError,
    MissingFieldError,
    OrderNotFoundError,
)
from printshop_kernel.logging_config import LogContext, get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.commissions.models import Commission, CommissionSettlement
from printshop_modules.commissions.orm import CommissionModel
from printshop_modules.invoicing.orm import InvoiceModel
from printshop_modules.orders.orm import OrderModel

logger = get_logger("modules.commissions.service")


class CommissionService(TransactionalService):

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ShopConfig | None = None,
        auto_commit: bool = True,
    ):
        super().__init__(session, auto_commit=auto_commit)
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()

    def accrue(
        self,
        user_id: UUID,
        commission_type: CommissionType | str,
        percentage: Decimal,
        base_amount: Decimal,
        actor_id: UUID,
        order_id: UUID | None = None,
        invoice_id: UUID | None = None,
    ) -> Commission:
        """
        Record an unpaid commission of ``base_amount x percentage / 100``.

        Raises:
            MissingFieldError: neither order_id nor invoice_id given.
            InvalidAmountError: negative base or percentage outside 0-100.
        """
        if order_id is None and invoice_id is None:
            raise MissingFieldError("order_id")
        commission_type = CommissionType(commission_type)
        percentage = to_decimal(percentage)
        base_amount = to_decimal(base_amount)
        amount = commission_amount(base_amount, percentage, self._config.money_decimal_places)

        with self.unit_of_work("accrue_commission"):
            if order_id is not None and self.session.get(OrderModel, order_id) is None:
                raise OrderNotFoundError(str(order_id))
            if invoice_id is not None and self.session.get(InvoiceModel, invoice_id) is None:
                raise InvoiceNotFoundError(str(invoice_id))
            commission = CommissionModel(
                id=uuid4(),
                order_id=order_id,
                invoice_id=invoice_id,
                user_id=user_id,
                commission_type=commission_type.value,
                commission_percentage=percentage,
                base_amount=base_amount,
                commission_amount=amount,
                paid_status=PaidStatus.UNPAID.value,
                created_by_id=actor_id,
            )
            self.session.add(commission)
            self.session.flush()

        logger.info(
            "commission_accrued",
            extra={
                "commission_id": str(commission.id),
                "user_id": str(user_id),
                "commission_type": commission_type.value,
                "commission_amount": str(amount),
            },
        )
        return commission.to_dto()

    def mark_paid(self, commission_id: UUID, actor_id: UUID) -> CommissionSettlement:
        """
        Settle a commission.  Irreversible.

        Raises:
            CommissionNotFoundError: unknown id.
            CommissionAlreadyPaidError: already settled.
        """
        with LogContext.bind(command="mark_commission_paid", actor_id=actor_id):
            with self.unit_of_work("mark_commission_paid"):
                commission = self.session.execute(
                    select(CommissionModel)
                    .where(CommissionModel.id == commission_id)
                    .with_for_update()
                    .execution_options(populate_existing=True)
                ).scalar_one_or_none()
                if commission is None:
                    raise CommissionNotFoundError(str(commission_id))
                if commission.paid_status == PaidStatus.PAID.value:
                    raise CommissionAlreadyPaidError(str(commission_id))

                paid_at = self._clock.now()
                commission.paid_status = PaidStatus.PAID.value
                commission.paid_at = paid_at
                commission.paid_by = actor_id
                commission.updated_by_id = actor_id
                self.session.flush()

            logger.info(
                "commission_paid",
                extra={
                    "commission_id": str(commission_id),
                    "commission_amount": str(commission.commission_amount),
                },
            )
            return CommissionSettlement(
                commission_id=commission_id,
                paid_status=PaidStatus.PAID,
                paid_at=paid_at,
                paid_by=actor_id,
            )

    def get_commission(self, commission_id: UUID) -> Commission:
        commission = self.session.get(CommissionModel, commission_id)
        if commission is None:
            raise CommissionNotFoundError(str(commission_id))
        return commission.to_dto()

    def list_commissions(
        self,
        user_id: UUID | None = None,
        paid_status: PaidStatus | str | None = None,
    ) -> list[Commission]:
        query = select(CommissionModel).order_by(CommissionModel.created_at)
        if user_id is not None:
            query = query.where(CommissionModel.user_id == user_id)
        if paid_status is not None:
            query = query.where(CommissionModel.paid_status == PaidStatus(paid_status).value)
        return [row.to_dto() for row in self.session.execute(query).scalars().all()]

    def summary(self, user_id: UUID | None = None) -> CommissionTotals:
        """Total / paid / pending sums over every matching row."""
        query = select(CommissionModel.commission_amount, CommissionModel.paid_status)
        if user_id is not None:
            query = query.where(CommissionModel.user_id == user_id)
        return partition_commissions(self.session.execute(query).all())
