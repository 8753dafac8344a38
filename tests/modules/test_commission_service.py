"""
Tests for commission accrual and one-way settlement.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from printshop_engines.commission import CommissionType, PaidStatus
from printshop_kernel.exceptions import (
    CommissionAlreadyPaidError,
    CommissionNotFoundError,
    InvalidAmountError,
    MissingFieldError,
    OrderNotFoundError,
)


@pytest.fixture
def order(order_service, customer, test_actor_id):
    return order_service.create_order("ORD-100", Decimal("1000"), test_actor_id, customer_id=customer.id)


class TestAccrue:

    def test_amount_from_base_and_percentage(self, commission_service, order, test_actor_id):
        user_id = uuid4()

        commission = commission_service.accrue(
            user_id, "sales", Decimal("5"), Decimal("1000"), test_actor_id, order_id=order.id,
        )

        assert commission.commission_amount == Decimal("50")
        assert commission.commission_type == CommissionType.SALES
        assert commission.paid_status == PaidStatus.UNPAID
        assert commission.order_id == order.id

    def test_keyed_to_invoice(self, commission_service, invoice_100, test_actor_id):
        commission = commission_service.accrue(
            uuid4(), CommissionType.DESIGN, Decimal("10"), Decimal("100"), test_actor_id,
            invoice_id=invoice_100.id,
        )

        assert commission.invoice_id == invoice_100.id
        assert commission.commission_amount == Decimal("10")

    def test_needs_order_or_invoice(self, commission_service, test_actor_id):
        with pytest.raises(MissingFieldError):
            commission_service.accrue(uuid4(), "print", Decimal("5"), Decimal("100"), test_actor_id)

    def test_unknown_order(self, commission_service, test_actor_id):
        with pytest.raises(OrderNotFoundError):
            commission_service.accrue(
                uuid4(), "print", Decimal("5"), Decimal("100"), test_actor_id, order_id=uuid4(),
            )

    def test_percentage_out_of_range(self, commission_service, order, test_actor_id):
        with pytest.raises(InvalidAmountError):
            commission_service.accrue(
                uuid4(), "sales", Decimal("150"), Decimal("100"), test_actor_id, order_id=order.id,
            )


class TestMarkPaid:

    def test_settles_once(self, commission_service, order, clock, test_actor_id):
        commission = commission_service.accrue(
            uuid4(), "sales", Decimal("5"), Decimal("1000"), test_actor_id, order_id=order.id,
        )
        accountant = uuid4()

        settlement = commission_service.mark_paid(commission.id, accountant)

        assert settlement.paid_status == PaidStatus.PAID
        assert settlement.paid_by == accountant
        assert settlement.paid_at == clock.now()
        stored = commission_service.get_commission(commission.id)
        assert stored.paid_status == PaidStatus.PAID
        assert stored.paid_by == accountant

    def test_second_settlement_rejected(self, commission_service, order, test_actor_id):
        commission = commission_service.accrue(
            uuid4(), "sales", Decimal("5"), Decimal("1000"), test_actor_id, order_id=order.id,
        )
        commission_service.mark_paid(commission.id, test_actor_id)

        with pytest.raises(CommissionAlreadyPaidError):
            commission_service.mark_paid(commission.id, test_actor_id)

        assert commission_service.get_commission(commission.id).paid_status == PaidStatus.PAID

    def test_unknown(self, commission_service, test_actor_id):
        with pytest.raises(CommissionNotFoundError):
            commission_service.mark_paid(uuid4(), test_actor_id)


class TestSummary:

    def test_partitioned_per_user(self, commission_service, order, test_actor_id):
        designer, sales = uuid4(), uuid4()
        paid = commission_service.accrue(
            designer, "design", Decimal("10"), Decimal("500"), test_actor_id, order_id=order.id,
        )
        commission_service.accrue(
            designer, "design", Decimal("10"), Decimal("200"), test_actor_id, order_id=order.id,
        )
        commission_service.accrue(
            sales, "sales", Decimal("5"), Decimal("1000"), test_actor_id, order_id=order.id,
        )
        commission_service.mark_paid(paid.id, test_actor_id)

        designer_totals = commission_service.summary(user_id=designer)
        assert designer_totals.count == 2
        assert designer_totals.paid == Decimal("50")
        assert designer_totals.pending == Decimal("20")

        everyone = commission_service.summary()
        assert everyone.total == Decimal("120")

    def test_list_filters(self, commission_service, order, test_actor_id):
        user_id = uuid4()
        commission = commission_service.accrue(
            user_id, "print", Decimal("5"), Decimal("100"), test_actor_id, order_id=order.id,
        )
        commission_service.mark_paid(commission.id, test_actor_id)
        commission_service.accrue(
            user_id, "print", Decimal("5"), Decimal("100"), test_actor_id, order_id=order.id,
        )

        assert len(commission_service.list_commissions(user_id=user_id)) == 2
        assert len(commission_service.list_commissions(paid_status="unpaid")) == 1
