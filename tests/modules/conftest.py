"""
Shared fixtures for module tests.

Services are built on the per-test session with the deterministic clock
and default config.  Factory fixtures create the parent rows (customers,
products, activated invoices) that most tests start from.

Every fixture is opt-in.  No autouse.
"""

from decimal import Decimal
from itertools import count

import pytest

from printshop_engines.pricing import SaleType
from printshop_modules.catalog.service import CatalogService
from printshop_modules.commissions.service import CommissionService
from printshop_modules.fulfillment.service import FulfillmentService
from printshop_modules.invoicing.models import ItemInput
from printshop_modules.invoicing.service import InvoiceService
from printshop_modules.orders.service import OrderService
from printshop_modules.payments.service import PaymentAllocator
from printshop_modules.reporting.selectors import ReportingSelector
from printshop_modules.reporting.service import ExpenseService


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def invoice_service(session, clock, config):
    return InvoiceService(session, clock=clock, config=config)


@pytest.fixture
def allocator(session, clock, config):
    return PaymentAllocator(session, clock=clock, config=config)


@pytest.fixture
def commission_service(session, clock, config):
    return CommissionService(session, clock=clock, config=config)


@pytest.fixture
def fulfillment_service(session, clock, config):
    return FulfillmentService(session, clock=clock, config=config)


@pytest.fixture
def catalog_service(session):
    return CatalogService(session)


@pytest.fixture
def order_service(session):
    return OrderService(session)


@pytest.fixture
def expense_service(session, clock):
    return ExpenseService(session, clock=clock)


@pytest.fixture
def reporting(session, config):
    return ReportingSelector(session, config=config)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def unit_item(price, quantity="1", cost="0", description="Business cards", product_id=None):
    return ItemInput(
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(price),
        cost_per_unit=Decimal(cost),
        product_id=product_id,
    )


def area_item(price, width, height, quantity="1", cost="0", description="Banner"):
    return ItemInput(
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(price),
        sale_type=SaleType.AREA,
        width_m=Decimal(width),
        height_m=Decimal(height),
        cost_per_unit=Decimal(cost),
    )


@pytest.fixture
def customer(invoice_service, test_actor_id):
    return invoice_service.create_customer("Acme Signs", test_actor_id, phone="0700000001")


@pytest.fixture
def other_customer(invoice_service, test_actor_id):
    return invoice_service.create_customer("Bright Prints", test_actor_id)


@pytest.fixture
def create_active_invoice(invoice_service, test_actor_id):
    """
    Factory: create and activate an invoice for a customer.

    Usage::

        invoice = create_active_invoice(customer.id, [unit_item("100")])
    """
    numbers = count(1)

    def _create(customer_id, items, number=None, order_id=None):
        draft = invoice_service.create_draft(customer_id, items, test_actor_id, order_id=order_id)
        return invoice_service.activate(
            draft.id, number or f"INV-{next(numbers):04d}", test_actor_id,
        )

    return _create


@pytest.fixture
def invoice_100(customer, create_active_invoice):
    """An activated invoice totalling 100 with 40 of line profit."""
    return create_active_invoice(customer.id, [unit_item("100", cost="60")])
