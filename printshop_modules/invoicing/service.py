"""
Invoicing Module Service - the Invoice Lifecycle Manager.

Thin glue layer that:
1. Prices items with the pricing engine (unit and area formulas, VAT)
2. Consults the read-only StockLookup on activation and on edits of
   active invoices
3. Rewrites the persisted status from payment coverage after every change

All arithmetic lives in engines.  This service owns the transaction
boundary unless constructed with ``auto_commit=False``, in which case the
caller (e.g. FulfillmentService) owns it.

Usage:
    service = InvoiceService(session, clock=clock)
    customer = service.create_customer("Acme Signs", actor_id=actor_id)
    draft = service.create_draft(customer.id, [ItemInput(...)], actor_id=actor_id)
    invoice = service.activate(draft.id, "INV-0001", actor_id=actor_id)
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from printshop_config import ShopConfig, get_active_config
from printshop_engines.pricing import PricedLine, invoice_totals, price_item
from printshop_kernel.db.types import ZERO, to_decimal
from printshop_kernel.domain.clock import Clock, SystemClock
from printshop_kernel.exceptions import (
    CollectedExceedsTotalError,
    CustomerNotFoundError,
    DuplicateInvoiceNumberError,
    InsufficientStockError,
    InvalidInvoiceNumberError,
    InvalidItemError,
    InvoiceNotFoundError,
    InvoiceStateError,
    MissingFieldError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from printshop_kernel.logging_config import LogContext, get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.catalog.models import StockLookup
from printshop_modules.catalog.selectors import CatalogStockLookup
from printshop_modules.invoicing.models import (
    Customer,
    Invoice,
    InvoiceStatus,
    ItemInput,
)
from printshop_modules.invoicing.orm import (
    CustomerModel,
    InvoiceItemModel,
    InvoiceModel,
)
from printshop_modules.invoicing.workflows import INVOICE_WORKFLOW
from printshop_modules.orders.orm import OrderModel

logger = get_logger("modules.invoicing.service")


def load_invoice_for_update(session: Session, invoice_id: UUID) -> InvoiceModel:
    """
    Re-read an invoice row with ``SELECT ... FOR UPDATE``.

    Every write path goes through here so that validation runs against the
    freshest committed values, not a caller's snapshot.

    Raises:
        InvoiceNotFoundError: no such invoice.
    """
    invoice = session.execute(
        select(InvoiceModel)
        .where(InvoiceModel.id == invoice_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if invoice is None:
        raise InvoiceNotFoundError(str(invoice_id))
    return invoice


class InvoiceService(TransactionalService):
    """
    Draft -> active -> paid/partially-paid lifecycle and item replacement.

    Engine composition:
    - price_item / invoice_totals: line and header arithmetic

    Collaborators:
    - StockLookup: read-only, defaults to CatalogStockLookup on the same
      session.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ShopConfig | None = None,
        stock_lookup: StockLookup | None = None,
        auto_commit: bool = True,
    ):
        super().__init__(session, auto_commit=auto_commit)
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._stock = stock_lookup or CatalogStockLookup(session)

    @property
    def config(self) -> ShopConfig:
        return self._config

    # =========================================================================
    # Customers
    # =========================================================================

    def create_customer(
        self,
        name: str,
        actor_id: UUID,
        phone: str | None = None,
        email: str | None = None,
        address: str | None = None,
    ) -> Customer:
        if not name or not name.strip():
            raise MissingFieldError("name")

        with self.unit_of_work("create_customer"):
            customer = CustomerModel(
                id=uuid4(),
                name=name.strip(),
                phone=phone,
                email=email,
                address=address,
                created_by_id=actor_id,
            )
            self.session.add(customer)
            self.session.flush()

        logger.info("customer_created", extra={"customer_id": str(customer.id)})
        return customer.to_dto()

    def get_customer(self, customer_id: UUID) -> Customer:
        customer = self.session.get(CustomerModel, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return customer.to_dto()

    # =========================================================================
    # Invoices
    # =========================================================================

    def create_draft(
        self,
        customer_id: UUID,
        items: Sequence[ItemInput],
        actor_id: UUID,
        order_id: UUID | None = None,
    ) -> Invoice:
        """
        Create a draft invoice with a ``DRAFT-xxxxxxxx`` placeholder number.

        Drafts are not stock-checked and are excluded from every aggregate.
        """
        with LogContext.bind(command="create_draft", actor_id=actor_id):
            priced = self._price_items(items)

            with self.unit_of_work("create_draft"):
                if self.session.get(CustomerModel, customer_id) is None:
                    raise CustomerNotFoundError(str(customer_id))
                if order_id is not None and self.session.get(OrderModel, order_id) is None:
                    raise OrderNotFoundError(str(order_id))
                self._check_products_exist(items)

                invoice_id = uuid4()
                invoice = InvoiceModel(
                    id=invoice_id,
                    customer_id=customer_id,
                    order_id=order_id,
                    number=f"{self._config.draft_number_prefix}{invoice_id.hex[:8].upper()}",
                    is_draft=True,
                    amount_paid=ZERO,
                    created_by_id=actor_id,
                )
                self._write_items(invoice, items, priced, actor_id)
                invoice.refresh_status()
                self.session.add(invoice)
                self.session.flush()

            logger.info(
                "invoice_draft_created",
                extra={
                    "invoice_id": str(invoice.id),
                    "customer_id": str(customer_id),
                    "item_count": len(priced),
                    "total_amount": str(invoice.total_amount),
                },
            )
            return invoice.to_dto()

    def replace_items(
        self,
        invoice_id: UUID,
        items: Sequence[ItemInput],
        actor_id: UUID,
    ) -> Invoice:
        """
        Replace the invoice's whole item set and recompute its totals.

        ``amount_paid`` is never touched.  For active invoices the stock
        lookup is consulted, and a new total below ``amount_paid`` is
        handled per ``ShopConfig.shrink_policy``: ``reject`` raises
        CollectedExceedsTotalError, ``flag`` keeps the edit and logs
        ``invoice_overcollected`` (the DTO exposes ``overcollected``).
        """
        with LogContext.bind(command="replace_items", actor_id=actor_id, invoice_id=invoice_id):
            priced = self._price_items(items)

            with self.unit_of_work("replace_items"):
                invoice = load_invoice_for_update(self.session, invoice_id)
                current = invoice.refresh_status()
                transition = INVOICE_WORKFLOW.resolve(current, "replace_items")
                if transition is None:
                    raise InvoiceStateError(str(invoice_id), current, "replace_items")

                self._check_products_exist(items)
                if not invoice.is_draft:
                    self._check_stock(items)

                totals = self._totals(priced)
                if totals.total_amount < invoice.amount_paid:
                    if self._config.shrink_policy == "reject":
                        raise CollectedExceedsTotalError(
                            str(invoice_id), invoice.amount_paid, totals.total_amount,
                        )
                    logger.warning(
                        "invoice_overcollected",
                        extra={
                            "invoice_id": str(invoice_id),
                            "amount_paid": str(invoice.amount_paid),
                            "new_total": str(totals.total_amount),
                        },
                    )

                invoice.items.clear()
                self.session.flush()
                self._write_items(invoice, items, priced, actor_id)
                invoice.updated_by_id = actor_id
                new_status = invoice.refresh_status()
                self.session.flush()

            logger.info(
                "invoice_items_replaced",
                extra={
                    "invoice_id": str(invoice_id),
                    "item_count": len(priced),
                    "total_amount": str(invoice.total_amount),
                    "from_status": current,
                    "to_status": new_status,
                },
            )
            return invoice.to_dto()

    def activate(self, invoice_id: UUID, number: str, actor_id: UUID) -> Invoice:
        """
        Assign a real number to a draft, making it permanent.

        Raises:
            InvalidInvoiceNumberError: empty or placeholder number.
            DuplicateInvoiceNumberError: number already in use.
            InvoiceStateError: invoice is not a draft.
            InsufficientStockError: a catalog item exceeds available stock.
        """
        with LogContext.bind(command="activate_invoice", actor_id=actor_id, invoice_id=invoice_id):
            if self._config.is_placeholder_number(number):
                raise InvalidInvoiceNumberError(number)
            number = number.strip()

            with self.unit_of_work("activate_invoice"):
                invoice = load_invoice_for_update(self.session, invoice_id)
                current = invoice.refresh_status()
                if INVOICE_WORKFLOW.resolve(current, "activate") is None:
                    raise InvoiceStateError(str(invoice_id), current, "activate")

                clash = self.session.execute(
                    select(InvoiceModel.id).where(
                        InvoiceModel.number == number,
                        InvoiceModel.id != invoice_id,
                    )
                ).first()
                if clash is not None:
                    raise DuplicateInvoiceNumberError(number)

                self._check_stock(
                    [
                        ItemInput(
                            description=item.description,
                            quantity=item.quantity,
                            unit_price=item.unit_price,
                            product_id=item.product_id,
                        )
                        for item in invoice.items
                    ]
                )

                invoice.number = number
                invoice.is_draft = False
                invoice.activated_at = self._clock.now()
                invoice.updated_by_id = actor_id
                new_status = invoice.refresh_status()
                self.session.flush()

            logger.info(
                "invoice_activated",
                extra={
                    "invoice_id": str(invoice_id),
                    "number": number,
                    "total_amount": str(invoice.total_amount),
                    "status": new_status,
                },
            )
            return invoice.to_dto()

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        """The invoice with its items and payment history."""
        from printshop_modules.payments.orm import PaymentModel

        invoice = self.session.get(InvoiceModel, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(str(invoice_id))
        payments = self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.invoice_id == invoice_id)
            .order_by(PaymentModel.payment_date, PaymentModel.created_at)
        ).scalars().all()
        return invoice.to_dto(payments=tuple(p.to_dto() for p in payments))

    def list_invoices(
        self,
        customer_id: UUID | None = None,
        include_drafts: bool = True,
        status: InvoiceStatus | str | None = None,
    ) -> list[Invoice]:
        query = select(InvoiceModel).order_by(InvoiceModel.created_at, InvoiceModel.number)
        if customer_id is not None:
            query = query.where(InvoiceModel.customer_id == customer_id)
        if not include_drafts:
            query = query.where(InvoiceModel.is_draft.is_(False))
        invoices = [m.to_dto() for m in self.session.execute(query).scalars().all()]
        if status is not None:
            wanted = InvoiceStatus(status)
            invoices = [inv for inv in invoices if inv.status == wanted]
        return invoices

    # =========================================================================
    # Internal
    # =========================================================================

    def _price_items(self, items: Sequence[ItemInput]) -> list[PricedLine]:
        priced = []
        for line_number, item in enumerate(items, start=1):
            if not item.description or not item.description.strip():
                raise InvalidItemError(line_number, "description is required")
            priced.append(
                price_item(
                    item.to_line_input(),
                    line_number=line_number,
                    decimal_places=self._config.money_decimal_places,
                )
            )
        return priced

    def _totals(self, priced: Iterable[PricedLine]):
        return invoice_totals(
            amounts=[line.amount for line in priced],
            vat_percentage=self._config.effective_vat_percentage,
            decimal_places=self._config.money_decimal_places,
        )

    def _write_items(
        self,
        invoice: InvoiceModel,
        items: Sequence[ItemInput],
        priced: Sequence[PricedLine],
        actor_id: UUID,
    ) -> None:
        for line_number, (item, line) in enumerate(zip(items, priced), start=1):
            invoice.items.append(
                InvoiceItemModel(
                    line_number=line_number,
                    description=item.description.strip(),
                    product_id=item.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    amount=line.amount,
                    sale_type=line.sale_type.value,
                    width_m=line.width_m,
                    height_m=line.height_m,
                    area_m2=line.area_m2,
                    cost_per_unit=line.cost_per_unit,
                    line_cost=line.line_cost,
                    line_profit=line.line_profit,
                    created_by_id=actor_id,
                )
            )
        totals = self._totals(priced)
        invoice.subtotal = totals.subtotal
        invoice.tax_amount = totals.tax_amount
        invoice.total_amount = totals.total_amount

    def _check_products_exist(self, items: Iterable[ItemInput]) -> None:
        for item in items:
            if item.product_id is not None and self._stock.stock_for(item.product_id) is None:
                raise ProductNotFoundError(str(item.product_id))

    def _check_stock(self, items: Iterable[ItemInput]) -> None:
        """Requested quantity per product must not exceed its stock."""
        requested: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
        for item in items:
            if item.product_id is not None:
                requested[item.product_id] += to_decimal(item.quantity)

        for product_id, quantity in requested.items():
            level = self._stock.stock_for(product_id)
            if level is None:
                raise ProductNotFoundError(str(product_id))
            if quantity > level.stock_quantity:
                logger.warning(
                    "invoice_stock_insufficient",
                    extra={
                        "product_id": str(product_id),
                        "requested": str(quantity),
                        "available": str(level.stock_quantity),
                    },
                )
                raise InsufficientStockError(str(product_id), quantity, level.stock_quantity)
