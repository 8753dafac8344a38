"""
Tests for ORM-level immutability enforcement.

Each test goes around the services and edits rows directly, the way a
careless script or admin console would.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from printshop_kernel.exceptions import ImmutabilityViolationError
from printshop_modules.commissions.orm import CommissionModel
from printshop_modules.fulfillment.orm import SalesOrderRequestModel
from printshop_modules.immutability import (
    register_immutability_listeners,
    unregister_immutability_listeners,
)
from printshop_modules.invoicing.orm import InvoiceModel
from printshop_modules.payments.models import AllocationRequest, PaymentCommand
from printshop_modules.payments.orm import PaymentModel
from tests.modules.conftest import unit_item


@pytest.fixture
def payment(session, allocator, customer, invoice_100, test_actor_id):
    allocator.allocate(
        PaymentCommand(
            customer_id=customer.id,
            allocations=(AllocationRequest(invoice_100.id, Decimal("40")),),
            payment_method="cash",
            reference_number="RCPT-1",
            actor_id=test_actor_id,
        )
    )
    return session.query(PaymentModel).one()


@pytest.fixture
def commission(commission_service, invoice_100, test_actor_id):
    return commission_service.accrue(
        uuid4(), "sales", Decimal("5"), Decimal("100"), test_actor_id, invoice_id=invoice_100.id,
    )


class TestPaymentImmutability:

    def test_update_blocked(self, session, payment):
        payment.amount = Decimal("400")

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()

        assert exc_info.value.entity_type == "Payment"
        assert exc_info.value.code == "IMMUTABILITY_VIOLATION"

    def test_delete_blocked(self, session, payment):
        session.delete(payment)

        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_audit_fields_may_change(self, session, payment, test_actor_id):
        payment.updated_by_id = test_actor_id

        session.flush()

    def test_violation_logged(self, session, payment, captured_logs):
        payment.notes = "edited"

        with pytest.raises(ImmutabilityViolationError):
            session.flush()

        records = [r for r in captured_logs() if r["message"] == "immutability_violation_blocked"]
        assert records[0]["field"] == "notes"
        assert records[0]["operation"] == "UPDATE"


class TestCommissionImmutability:

    def test_unpaid_commission_editable(self, session, commission):
        row = session.get(CommissionModel, commission.id)
        row.commission_amount = Decimal("6")

        session.flush()

    def test_settlement_allowed(self, commission_service, commission, test_actor_id):
        commission_service.mark_paid(commission.id, test_actor_id)

    def test_paid_commission_frozen(self, session, commission_service, commission, test_actor_id):
        commission_service.mark_paid(commission.id, test_actor_id)
        row = session.get(CommissionModel, commission.id)
        row.commission_amount = Decimal("999")

        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_paid_cannot_revert(self, session, commission_service, commission, test_actor_id):
        commission_service.mark_paid(commission.id, test_actor_id)
        row = session.get(CommissionModel, commission.id)
        row.paid_status = "unpaid"

        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_paid_commission_delete_blocked(self, session, commission_service, commission, test_actor_id):
        commission_service.mark_paid(commission.id, test_actor_id)
        session.delete(session.get(CommissionModel, commission.id))

        with pytest.raises(ImmutabilityViolationError):
            session.flush()


class TestInvoiceAndRequestDeletes:

    def test_activated_invoice_delete_blocked(self, session, invoice_100):
        session.delete(session.get(InvoiceModel, invoice_100.id))

        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_draft_deletable(self, session, invoice_service, customer, test_actor_id):
        draft = invoice_service.create_draft(customer.id, [unit_item("10")], test_actor_id)

        session.delete(session.get(InvoiceModel, draft.id))
        session.flush()

        assert session.get(InvoiceModel, draft.id) is None

    def test_request_delete_blocked(self, session, fulfillment_service, test_actor_id):
        request = fulfillment_service.create_request("Jane", "Posters", test_actor_id)
        session.delete(session.get(SalesOrderRequestModel, request.id))

        with pytest.raises(ImmutabilityViolationError):
            session.flush()


class TestRegistration:

    def test_register_is_idempotent(self, session, payment):
        register_immutability_listeners()
        session.delete(payment)

        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_unregister_lifts_enforcement(self, session, payment):
        unregister_immutability_listeners()
        try:
            payment.notes = "annotated"
            session.flush()
        finally:
            register_immutability_listeners()
