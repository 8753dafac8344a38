"""
Tests for the catalog and order intake services, and the order payment
mirror the allocator maintains.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from printshop_kernel.exceptions import (
    CustomerNotFoundError,
    InvalidAmountError,
    MissingFieldError,
    OrderNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from printshop_modules.catalog.selectors import CatalogStockLookup
from printshop_modules.orders.models import OrderPaymentStatus, order_payment_status
from printshop_modules.payments.models import AllocationRequest, PaymentCommand
from tests.modules.conftest import unit_item


class TestCatalog:

    def test_create_product(self, session, catalog_service, test_actor_id):
        product = catalog_service.create_product(
            " Gloss paper ", test_actor_id, stock_quantity=Decimal("40"), sku="GP-A3",
        )

        assert product.name == "Gloss paper"
        level = CatalogStockLookup(session).stock_for(product.id)
        assert level.stock_quantity == Decimal("40")

    def test_negative_values_rejected(self, catalog_service, test_actor_id):
        with pytest.raises(InvalidAmountError):
            catalog_service.create_product("Ink", test_actor_id, unit_price=Decimal("-1"))

    def test_name_required(self, catalog_service, test_actor_id):
        with pytest.raises(MissingFieldError):
            catalog_service.create_product(" ", test_actor_id)

    def test_set_stock(self, session, catalog_service, test_actor_id):
        product = catalog_service.create_product("Ink", test_actor_id)

        updated = catalog_service.set_stock(product.id, Decimal("12"), test_actor_id)

        assert updated.stock_quantity == Decimal("12")
        assert CatalogStockLookup(session).get_product(product.id).stock_quantity == Decimal("12")

    def test_set_stock_unknown_product(self, catalog_service, test_actor_id):
        with pytest.raises(ProductNotFoundError):
            catalog_service.set_stock(uuid4(), Decimal("1"), test_actor_id)

    def test_lookup_unknown_product(self, session):
        lookup = CatalogStockLookup(session)

        assert lookup.stock_for(uuid4()) is None
        assert lookup.get_product(uuid4()) is None


class TestOrders:

    def test_create_order(self, order_service, customer, test_actor_id):
        order = order_service.create_order(
            "ORD-1", Decimal("250"), test_actor_id, customer_id=customer.id, description="Shop signage",
        )

        assert order.payment_status == OrderPaymentStatus.UNPAID
        assert order.amount_paid == Decimal("0")
        assert order_service.get_order(order.id).order_number == "ORD-1"

    def test_duplicate_number(self, order_service, test_actor_id):
        order_service.create_order("ORD-1", Decimal("10"), test_actor_id)

        with pytest.raises(ValidationError):
            order_service.create_order("ORD-1", Decimal("20"), test_actor_id)

    def test_unknown_customer(self, order_service, test_actor_id):
        with pytest.raises(CustomerNotFoundError):
            order_service.create_order("ORD-2", Decimal("10"), test_actor_id, customer_id=uuid4())

    def test_negative_value(self, order_service, test_actor_id):
        with pytest.raises(InvalidAmountError):
            order_service.create_order("ORD-3", Decimal("-10"), test_actor_id)

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFoundError):
            order_service.get_order(uuid4())


class TestOrderMirror:

    def test_credited_through_invoice_payments(
        self, order_service, allocator, create_active_invoice, customer, test_actor_id,
    ):
        order = order_service.create_order("ORD-9", Decimal("300"), test_actor_id, customer_id=customer.id)
        invoice = create_active_invoice(customer.id, [unit_item("300")], order_id=order.id)

        allocator.allocate(
            PaymentCommand(
                customer_id=customer.id,
                allocations=(AllocationRequest(invoice.id, Decimal("100")),),
                payment_method="bank_transfer",
                reference_number="TRX-1",
                actor_id=test_actor_id,
            )
        )
        partial = order_service.get_order(order.id)
        allocator.allocate(
            PaymentCommand(
                customer_id=customer.id,
                allocations=(AllocationRequest(invoice.id, Decimal("200")),),
                payment_method="bank_transfer",
                reference_number="TRX-2",
                actor_id=test_actor_id,
            )
        )
        settled = order_service.get_order(order.id)

        assert partial.payment_status == OrderPaymentStatus.PARTIAL
        assert partial.amount_paid == Decimal("100")
        assert settled.payment_status == OrderPaymentStatus.PAID
        assert settled.amount_paid == Decimal("300")

    @pytest.mark.parametrize(
        "paid, value, expected",
        [
            ("0", "100", OrderPaymentStatus.UNPAID),
            ("40", "100", OrderPaymentStatus.PARTIAL),
            ("100", "100", OrderPaymentStatus.PAID),
            ("120", "100", OrderPaymentStatus.PAID),
            ("0", "0", OrderPaymentStatus.UNPAID),
        ],
    )
    def test_status_derivation(self, paid, value, expected):
        assert order_payment_status(Decimal(paid), Decimal(value)) == expected
