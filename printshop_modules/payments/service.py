"""
Payments Module Service - the Payment Allocator.

Spreads one incoming payment across several of a customer's invoices, each
with its own discount, as a single all-or-nothing command:

1. Validate the command header and every allocation against freshly
   locked invoice rows (``SELECT ... FOR UPDATE``), using DiscountCalculator
   for each discount.  Nothing is written in this phase.
2. For each allocation, insert the Payment row, credit the invoice with
   ``amount + discount_amount`` and re-derive its status, mirror the credit
   onto the linked order, and mark linked sales requests paid when the
   invoice became fully paid.
3. Commit once.  Any store fault rolls every write back and propagates.

Validation and precondition failures never escape as exceptions: they come
back as ``PaymentResult.rejected`` naming the first invalid allocation.

Usage:
    allocator = PaymentAllocator(session, clock=clock)
    result = allocator.allocate(PaymentCommand(
        customer_id=customer.id,
        allocations=(AllocationRequest(invoice.id, Decimal("40"),
                                       Discount.of("fixed", "10")),),
        payment_method="cash", reference_number="RCPT-1",
        actor_id=actor_id,
    ))
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from printshop_config import ShopConfig, get_active_config
from printshop_engines.discount import DiscountCalculator, DiscountOutcome
from printshop_kernel.db.types import ZERO, to_decimal
from printshop_kernel.domain.clock import Clock, SystemClock
from printshop_kernel.exceptions import (
    CustomerNotFoundError,
    DiscountOutOfRangeError,
    DuplicateAllocationError,
    InvalidAmountError,
    InvoiceAlreadyPaidError,
    InvoiceNotActiveError,
    InvoiceNotFoundError,
    InvoiceOwnershipError,
    InvoiceStateError,
    MissingFieldError,
    OrderNotFoundError,
    OverpaymentError,
    PrintShopError,
    ValidationError,
)
from printshop_kernel.logging_config import LogContext, get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.fulfillment.models import RequestPaymentStatus
from printshop_modules.fulfillment.orm import SalesOrderRequestModel
from printshop_modules.invoicing.models import InvoiceStatus, derive_status
from printshop_modules.invoicing.orm import CustomerModel, InvoiceModel
from printshop_modules.invoicing.service import load_invoice_for_update
from printshop_modules.invoicing.workflows import INVOICE_WORKFLOW
from printshop_modules.orders.orm import OrderModel
from printshop_modules.payments.models import (
    AllocationRejection,
    AppliedAllocation,
    Payment,
    PaymentCommand,
    PaymentResult,
)
from printshop_modules.payments.orm import PaymentModel

logger = get_logger("modules.payments.service")


class _RejectedAllocation(Exception):
    """Carries a validation failure out of the unit of work."""

    def __init__(self, index: int | None, invoice_id: UUID | None, error: PrintShopError):
        self.index = index
        self.invoice_id = invoice_id
        self.error = error
        super().__init__(str(error))


@dataclass(frozen=True)
class _ValidatedAllocation:
    index: int
    invoice: InvoiceModel
    amount: Decimal
    outcome: DiscountOutcome

    @property
    def total_credit(self) -> Decimal:
        return self.amount + self.outcome.discount_amount


class PaymentAllocator(TransactionalService):
    """
    Atomic multi-invoice payment allocation.

    Engine composition:
    - DiscountCalculator: per-allocation discount and payable-after-discount

    Transaction boundary: one commit per command.  With
    ``auto_commit=False`` the caller owns commit/rollback.
    """

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
        self._discounts = DiscountCalculator(self._config.money_decimal_places)

    # =========================================================================
    # Commands
    # =========================================================================

    def allocate(self, command: PaymentCommand) -> PaymentResult:
        with LogContext.bind(command="allocate_payment", actor_id=command.actor_id):
            logger.info(
                "payment_allocation_started",
                extra={
                    "customer_id": str(command.customer_id),
                    "allocation_count": len(command.allocations),
                    "reference_number": command.reference_number,
                },
            )
            try:
                with self.unit_of_work("allocate_payment"):
                    validated = self._validate(command)
                    applied = self._apply(command, validated)
            except _RejectedAllocation as rejected:
                rejection = AllocationRejection(
                    code=rejected.error.code,
                    message=str(rejected.error),
                    index=rejected.index,
                    invoice_id=rejected.invoice_id,
                )
                logger.warning(
                    "payment_allocation_rejected",
                    extra={
                        "customer_id": str(command.customer_id),
                        "error_code": rejection.code,
                        "allocation_index": rejection.index,
                        "rejected_invoice_id": str(rejection.invoice_id) if rejection.invoice_id else None,
                    },
                )
                return PaymentResult(applied=(), rejected=rejection)

            logger.info(
                "payment_allocation_committed",
                extra={
                    "customer_id": str(command.customer_id),
                    "applied_count": len(applied),
                    "total_received": str(sum((a.amount_received for a in applied), ZERO)),
                    "total_credit": str(sum((a.total_credit for a in applied), ZERO)),
                },
            )
            return PaymentResult(applied=tuple(applied), rejected=None)

    def payments_for_invoice(self, invoice_id: UUID) -> list[Payment]:
        """Every payment recorded against ``invoice_id``, oldest first."""
        if self.session.get(InvoiceModel, invoice_id) is None:
            raise InvoiceNotFoundError(str(invoice_id))
        rows = self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.invoice_id == invoice_id)
            .order_by(PaymentModel.payment_date, PaymentModel.created_at)
        ).scalars().all()
        return [row.to_dto() for row in rows]

    # =========================================================================
    # Phase 1: validation (no writes)
    # =========================================================================

    def _validate(self, command: PaymentCommand) -> list[_ValidatedAllocation]:
        try:
            self._validate_header(command)
        except PrintShopError as exc:
            raise _RejectedAllocation(None, None, exc) from exc

        validated: list[_ValidatedAllocation] = []
        seen: set[UUID] = set()
        for index, request in enumerate(command.allocations):
            try:
                if request.invoice_id in seen:
                    raise DuplicateAllocationError(str(request.invoice_id))
                seen.add(request.invoice_id)
                validated.append(self._validate_allocation(command, index, request))
            except PrintShopError as exc:
                raise _RejectedAllocation(index, request.invoice_id, exc) from exc

        if not any(v.amount > ZERO for v in validated):
            raise _RejectedAllocation(
                None,
                None,
                InvalidAmountError(
                    "amount", ZERO, "at least one allocation must receive a positive amount",
                ),
            )
        return validated

    def _validate_header(self, command: PaymentCommand) -> None:
        if not command.payment_method or not command.payment_method.strip():
            raise MissingFieldError("payment_method")
        if command.payment_method not in self._config.payment_methods:
            raise ValidationError(f"Unsupported payment method: {command.payment_method}")
        if not command.reference_number or not command.reference_number.strip():
            raise MissingFieldError("reference_number")
        if not command.allocations:
            raise MissingFieldError("allocations")
        if self.session.get(CustomerModel, command.customer_id) is None:
            raise CustomerNotFoundError(str(command.customer_id))

    def _validate_allocation(self, command, index, request) -> _ValidatedAllocation:
        try:
            amount = to_decimal(request.amount)
        except ValueError as exc:
            raise InvalidAmountError("amount", request.amount, "not a number") from exc
        if amount < ZERO:
            raise InvalidAmountError("amount", amount, "cannot be negative")

        invoice = load_invoice_for_update(self.session, request.invoice_id)
        invoice_id = str(invoice.id)

        if invoice.customer_id != command.customer_id:
            raise InvoiceOwnershipError(invoice_id, str(command.customer_id))
        if invoice.is_draft or self._config.is_placeholder_number(invoice.number):
            raise InvoiceNotActiveError(invoice_id, invoice.number)

        status = derive_status(invoice.is_draft, invoice.amount_paid, invoice.total_amount)
        if status == InvoiceStatus.PAID:
            raise InvoiceAlreadyPaidError(invoice_id)

        outcome = self._discounts.evaluate(
            balance=invoice.total_amount - invoice.amount_paid,
            discount=request.discount,
        )
        if not outcome.is_valid:
            raise DiscountOutOfRangeError(
                request.discount.type.value, request.discount.value, outcome.failure,
            )
        if amount > outcome.payable_after_discount:
            raise OverpaymentError(invoice_id, amount, outcome.payable_after_discount)

        return _ValidatedAllocation(index=index, invoice=invoice, amount=amount, outcome=outcome)

    # =========================================================================
    # Phase 2: writes
    # =========================================================================

    def _apply(
        self,
        command: PaymentCommand,
        validated: list[_ValidatedAllocation],
    ) -> list[AppliedAllocation]:
        now = self._clock.now()
        applied: list[AppliedAllocation] = []

        for v in validated:
            credit = v.total_credit
            if credit == ZERO:
                continue

            invoice = v.invoice
            old_status = derive_status(False, invoice.amount_paid, invoice.total_amount)
            new_amount_paid = invoice.amount_paid + credit
            new_status = derive_status(False, new_amount_paid, invoice.total_amount)
            action = "settle" if new_status == InvoiceStatus.PAID else "receive_partial_payment"
            if INVOICE_WORKFLOW.resolve(old_status.value, action) is None:
                raise InvoiceStateError(str(invoice.id), old_status.value, action)

            payment = PaymentModel(
                id=uuid4(),
                invoice_id=invoice.id,
                customer_id=command.customer_id,
                order_id=invoice.order_id,
                amount=v.amount,
                payment_method=command.payment_method,
                reference_number=command.reference_number.strip(),
                discount_type=v.outcome.discount.type.value,
                discount_value=v.outcome.discount.value,
                discount_amount=v.outcome.discount_amount,
                discount_reason=v.outcome.discount.reason,
                notes=command.notes,
                recorded_by=command.actor_id,
                payment_date=now,
                created_by_id=command.actor_id,
            )
            self.session.add(payment)

            invoice.amount_paid = new_amount_paid
            invoice.updated_by_id = command.actor_id
            invoice.refresh_status()

            if invoice.order_id is not None:
                self._credit_order(invoice.order_id, credit)

            if new_status == InvoiceStatus.PAID:
                self._mark_linked_requests_paid(invoice.id, command.actor_id)

            self.session.flush()

            logger.info(
                "payment_allocation_applied",
                extra={
                    "invoice_id": str(invoice.id),
                    "payment_id": str(payment.id),
                    "amount_received": str(v.amount),
                    "discount_amount": str(v.outcome.discount_amount),
                    "from_status": old_status.value,
                    "to_status": new_status.value,
                },
            )
            applied.append(
                AppliedAllocation(
                    invoice_id=invoice.id,
                    payment_id=payment.id,
                    amount_received=v.amount,
                    discount_amount=v.outcome.discount_amount,
                    total_credit=credit,
                    new_amount_paid=new_amount_paid,
                    new_status=new_status,
                )
            )

        return applied

    def _credit_order(self, order_id: UUID, credit: Decimal) -> None:
        order = self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id).with_for_update()
        ).scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError(str(order_id))
        order.apply_credit(credit)

    def _mark_linked_requests_paid(self, invoice_id: UUID, actor_id: UUID) -> None:
        requests = self.session.execute(
            select(SalesOrderRequestModel)
            .where(SalesOrderRequestModel.linked_invoice_id == invoice_id)
            .with_for_update()
        ).scalars().all()
        for request in requests:
            if request.payment_status != RequestPaymentStatus.PAID.value:
                request.payment_status = RequestPaymentStatus.PAID.value
                request.updated_by_id = actor_id
                logger.info(
                    "sales_request_marked_paid",
                    extra={"request_id": str(request.id), "invoice_id": str(invoice_id)},
                )
