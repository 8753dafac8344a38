"""
Fulfillment Module Service - the Order Fulfillment State Machine.

Drives a sales request from intake to collection through
``SALES_REQUEST_WORKFLOW``:

1. The invoice gate is evaluated before anything else on every move out
   of ``pending``.  A request without ``linked_invoice_id`` stays put and
   the caller gets ``TransitionResult(error="invoice_required",
   target_status=...)`` to retry after linking or creating an invoice.
2. Designer and print-operator assignment set the assignee and the status
   in one write; the generic ``transition`` refuses those targets.
3. Print-operator assignment additionally needs a paid-or-debt decision.
4. Entering processed/in_design/in_print/printed/completed re-stamps
   ``processed_at``.  ``collected`` is written as ``completed``.

Gate checks run before the status write, inside the same transaction, so
a refused move never reaches the database.

Usage:
    service = FulfillmentService(session, clock=clock)
    request = service.create_request("Jane", "A2 posters", actor_id=actor_id)
    result = service.transition(request.id, "processed", actor_id=actor_id)
    if result.error == "invoice_required":
        service.link_invoice(request.id, invoice.id, actor_id=actor_id)
        result = service.transition(request.id, result.target_status, actor_id=actor_id)
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from printshop_config import ShopConfig, get_active_config
from printshop_kernel.domain.clock import Clock, SystemClock
from printshop_kernel.domain.workflow import Transition
from printshop_kernel.exceptions import (
    InvalidTransitionError,
    InvoiceNotActiveError,
    InvoiceNotFoundError,
    InvoiceNotPaidError,
    InvoiceRequiredError,
    MissingFieldError,
    PaymentDecisionRequiredError,
    SalesRequestNotFoundError,
    ValidationError,
)
from printshop_kernel.logging_config import LogContext, get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.fulfillment.models import (
    RequestPaymentStatus,
    RequestStatus,
    SalesOrderRequest,
    TransitionResult,
    normalize_status,
)
from printshop_modules.fulfillment.orm import SalesOrderRequestModel
from printshop_modules.fulfillment.workflows import (
    ASSIGN_DESIGNER,
    ASSIGN_PRINT_OPERATOR,
    ASSIGNMENT_ACTIONS,
    INVOICE_LINKED,
    PAYMENT_DECIDED,
    SALES_REQUEST_WORKFLOW,
    STAMPED_STATES,
)
from printshop_modules.invoicing.models import (
    Invoice,
    InvoiceStatus,
    ItemInput,
    NewCustomer,
    derive_status,
)
from printshop_modules.invoicing.orm import InvoiceModel
from printshop_modules.invoicing.service import InvoiceService

logger = get_logger("modules.fulfillment.service")

_DECIDED = frozenset({RequestPaymentStatus.PAID.value, RequestPaymentStatus.DEBT.value})


class FulfillmentService(TransactionalService):
    """
    Sales request intake, gated transitions and role assignment.

    Composes an InvoiceService with ``auto_commit=False`` so that creating
    a customer, creating and activating an invoice, and linking it to the
    request commit together.
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
        self._invoices = InvoiceService(
            session, clock=self._clock, config=self._config, auto_commit=False,
        )

    # =========================================================================
    # Intake and queries
    # =========================================================================

    def create_request(
        self,
        customer_name: str,
        description: str,
        actor_id: UUID,
        customer_phone: str | None = None,
        customer_email: str | None = None,
        notes: str | None = None,
    ) -> SalesOrderRequest:
        if not customer_name or not customer_name.strip():
            raise MissingFieldError("customer_name")
        if not description or not description.strip():
            raise MissingFieldError("description")

        with self.unit_of_work("create_sales_request"):
            request = SalesOrderRequestModel(
                id=uuid4(),
                customer_name=customer_name.strip(),
                customer_phone=customer_phone,
                customer_email=customer_email,
                description=description.strip(),
                notes=notes,
                status=SALES_REQUEST_WORKFLOW.initial_state,
                payment_status=RequestPaymentStatus.PENDING.value,
                created_by_id=actor_id,
            )
            self.session.add(request)
            self.session.flush()

        logger.info("sales_request_created", extra={"request_id": str(request.id)})
        return request.to_dto()

    def get_request(self, request_id: UUID) -> SalesOrderRequest:
        request = self.session.get(SalesOrderRequestModel, request_id)
        if request is None:
            raise SalesRequestNotFoundError(str(request_id))
        return request.to_dto()

    def list_requests(self, status: RequestStatus | str | None = None) -> list[SalesOrderRequest]:
        query = select(SalesOrderRequestModel).order_by(SalesOrderRequestModel.created_at)
        if status is not None:
            query = query.where(SalesOrderRequestModel.status == normalize_status(status).value)
        return [row.to_dto() for row in self.session.execute(query).scalars().all()]

    # =========================================================================
    # Transitions
    # =========================================================================

    def transition(
        self,
        request_id: UUID,
        target_status: RequestStatus | str,
        actor_id: UUID,
    ) -> TransitionResult:
        """
        Move a request to ``target_status`` along a non-assignment edge.

        Returns a blocked TransitionResult when the invoice gate refuses.

        Raises:
            InvalidTransitionError: no such edge, unknown status, or the
                target is only reachable through an assignment command.
        """
        try:
            target = normalize_status(target_status)
        except ValueError as exc:
            raise InvalidTransitionError("unknown", str(target_status), "unknown status") from exc

        def choose_edge(request: SalesOrderRequestModel, current: RequestStatus) -> Transition:
            candidates = SALES_REQUEST_WORKFLOW.transitions_between(current.value, target.value)
            generic = [t for t in candidates if t.action not in ASSIGNMENT_ACTIONS]
            if generic:
                return generic[0]
            if candidates:
                raise InvalidTransitionError(
                    current.value, target.value,
                    f"use {candidates[0].action} to move to {target.value}",
                )
            raise InvalidTransitionError(current.value, target.value)

        return self._run(request_id, target, actor_id, "transition", choose_edge)

    def assign_designer(
        self,
        request_id: UUID,
        designer_id: UUID,
        actor_id: UUID,
    ) -> TransitionResult:
        """Assign (or reassign) the designer and move to ``in_design``."""

        def choose_edge(request: SalesOrderRequestModel, current: RequestStatus) -> Transition:
            edge = SALES_REQUEST_WORKFLOW.resolve(current.value, ASSIGN_DESIGNER)
            if edge is None:
                raise InvalidTransitionError(
                    current.value, RequestStatus.IN_DESIGN.value,
                    f"a designer cannot be assigned in {current.value}",
                )
            return edge

        def assign(request: SalesOrderRequestModel) -> None:
            request.designer_id = designer_id

        return self._run(
            request_id, RequestStatus.IN_DESIGN, actor_id, "assign_designer", choose_edge, assign,
        )

    def assign_print_operator(
        self,
        request_id: UUID,
        operator_id: UUID,
        actor_id: UUID,
    ) -> TransitionResult:
        """
        Assign (or reassign) the print operator and move to ``in_print``.

        Blocked with ``payment_decision_required`` while payment_status is
        still pending.
        """

        def choose_edge(request: SalesOrderRequestModel, current: RequestStatus) -> Transition:
            edge = SALES_REQUEST_WORKFLOW.resolve(current.value, ASSIGN_PRINT_OPERATOR)
            if edge is None:
                raise InvalidTransitionError(
                    current.value, RequestStatus.IN_PRINT.value,
                    f"a print operator cannot be assigned in {current.value}",
                )
            return edge

        def assign(request: SalesOrderRequestModel) -> None:
            request.print_operator_id = operator_id

        return self._run(
            request_id, RequestStatus.IN_PRINT, actor_id, "assign_print_operator", choose_edge, assign,
        )

    def _run(self, request_id, target, actor_id, command, choose_edge, assign=None) -> TransitionResult:
        previous: RequestStatus | None = None
        with LogContext.bind(command=command, request_id=request_id, actor_id=actor_id):
            try:
                with self.unit_of_work(command):
                    request = self._load_for_update(request_id)
                    previous = normalize_status(request.status)
                    self._check_guard(INVOICE_LINKED.name, request, previous, target)
                    edge = choose_edge(request, previous)
                    if edge.guard is not None:
                        self._check_guard(edge.guard.name, request, previous, target)
                    if assign is not None:
                        assign(request)
                    self._enter(request, edge.to_state, actor_id)
            except (InvoiceRequiredError, PaymentDecisionRequiredError) as exc:
                logger.warning(
                    "fulfillment_transition_blocked",
                    extra={
                        "error_code": exc.code,
                        "from_status": previous.value,
                        "target_status": target.value,
                    },
                )
                return TransitionResult(
                    request_id=request_id,
                    previous_status=previous,
                    new_status=previous,
                    error=exc.code.lower(),
                    target_status=target,
                )

            logger.info(
                "fulfillment_transition_applied",
                extra={
                    "action": edge.action,
                    "from_status": previous.value,
                    "to_status": edge.to_state,
                },
            )
            return TransitionResult(
                request_id=request_id,
                previous_status=previous,
                new_status=RequestStatus(edge.to_state),
            )

    def _check_guard(
        self,
        guard: str,
        request: SalesOrderRequestModel,
        current: RequestStatus,
        target: RequestStatus,
    ) -> None:
        if guard == INVOICE_LINKED.name:
            if (
                current == RequestStatus.PENDING
                and target != RequestStatus.PENDING
                and request.linked_invoice_id is None
            ):
                raise InvoiceRequiredError(str(request.id), target.value)
        elif guard == PAYMENT_DECIDED.name:
            if request.payment_status not in _DECIDED:
                raise PaymentDecisionRequiredError(
                    str(request.id), request.payment_status, target.value,
                )

    def _enter(self, request: SalesOrderRequestModel, to_state: str, actor_id: UUID) -> None:
        request.status = normalize_status(to_state).value
        if request.status in STAMPED_STATES:
            request.processed_at = self._clock.now()
        request.updated_by_id = actor_id
        self.session.flush()

    # =========================================================================
    # Payment decision
    # =========================================================================

    def record_payment_decision(
        self,
        request_id: UUID,
        decision: RequestPaymentStatus | str,
        actor_id: UUID,
    ) -> SalesOrderRequest:
        """
        Record ``paid`` or ``debt`` so a print operator can be assigned.

        Raises:
            ValidationError: decision is not paid or debt.
            InvoiceRequiredError: no invoice linked yet.
            InvoiceNotPaidError: ``paid`` while the invoice has a balance.
            InvalidTransitionError: downgrading a paid request to debt.
        """
        try:
            decision = RequestPaymentStatus(decision)
        except ValueError as exc:
            raise ValidationError(f"Unknown payment decision: {decision}") from exc
        if decision == RequestPaymentStatus.PENDING:
            raise ValidationError("Payment decision must be paid or debt")

        with LogContext.bind(command="record_payment_decision", request_id=request_id, actor_id=actor_id):
            with self.unit_of_work("record_payment_decision"):
                request = self._load_for_update(request_id)
                if request.linked_invoice_id is None:
                    raise InvoiceRequiredError(str(request_id), RequestStatus.IN_PRINT.value)
                if (
                    request.payment_status == RequestPaymentStatus.PAID.value
                    and decision == RequestPaymentStatus.DEBT
                ):
                    raise InvalidTransitionError(
                        RequestPaymentStatus.PAID.value, decision.value, "payment already settled",
                    )
                if decision == RequestPaymentStatus.PAID:
                    invoice = self.session.get(InvoiceModel, request.linked_invoice_id)
                    status = derive_status(invoice.is_draft, invoice.amount_paid, invoice.total_amount)
                    if status != InvoiceStatus.PAID:
                        raise InvoiceNotPaidError(
                            str(invoice.id), invoice.total_amount - invoice.amount_paid,
                        )
                request.payment_status = decision.value
                request.updated_by_id = actor_id
                self.session.flush()

            logger.info(
                "sales_request_payment_decided",
                extra={"decision": decision.value},
            )
            return request.to_dto()

    # =========================================================================
    # Invoice linking
    # =========================================================================

    def link_invoice(
        self,
        request_id: UUID,
        invoice_id: UUID,
        actor_id: UUID,
    ) -> SalesOrderRequest:
        """
        Link an existing, activated, properly numbered invoice.

        Raises:
            InvoiceNotFoundError: unknown invoice.
            InvoiceNotActiveError: draft or placeholder-numbered invoice.
        """
        with LogContext.bind(command="link_invoice", request_id=request_id, actor_id=actor_id):
            with self.unit_of_work("link_invoice"):
                request = self._load_for_update(request_id)
                invoice = self.session.get(InvoiceModel, invoice_id)
                if invoice is None:
                    raise InvoiceNotFoundError(str(invoice_id))
                self._link(request, invoice, actor_id)
            return request.to_dto()

    def create_invoice_for_request(
        self,
        request_id: UUID,
        items: Sequence[ItemInput],
        number: str,
        actor_id: UUID,
        customer_id: UUID | None = None,
        new_customer: NewCustomer | None = None,
    ) -> tuple[SalesOrderRequest, Invoice]:
        """
        Create (or reuse) a customer, create and activate an invoice, link it.

        Without ``customer_id`` a customer is created from ``new_customer``,
        or from the request's own denormalized contact fields.  Everything
        commits together or not at all.
        """
        if not number or not number.strip():
            raise MissingFieldError("number")

        with LogContext.bind(command="create_invoice_for_request", request_id=request_id, actor_id=actor_id):
            with self.unit_of_work("create_invoice_for_request"):
                request = self._load_for_update(request_id)
                if customer_id is None:
                    contact = new_customer or NewCustomer(
                        name=request.customer_name,
                        phone=request.customer_phone,
                        email=request.customer_email,
                    )
                    customer_id = self._invoices.create_customer(
                        contact.name,
                        actor_id,
                        phone=contact.phone,
                        email=contact.email,
                        address=contact.address,
                    ).id
                draft = self._invoices.create_draft(customer_id, items, actor_id)
                invoice = self._invoices.activate(draft.id, number, actor_id)
                self._link(request, self.session.get(InvoiceModel, invoice.id), actor_id)

            return request.to_dto(), invoice

    def _link(self, request: SalesOrderRequestModel, invoice: InvoiceModel, actor_id: UUID) -> None:
        if invoice.is_draft or self._config.is_placeholder_number(invoice.number):
            raise InvoiceNotActiveError(str(invoice.id), invoice.number)

        request.linked_invoice_id = invoice.id
        request.customer_id = invoice.customer_id
        if derive_status(invoice.is_draft, invoice.amount_paid, invoice.total_amount) == InvoiceStatus.PAID:
            request.payment_status = RequestPaymentStatus.PAID.value
        request.updated_by_id = actor_id
        self.session.flush()

        logger.info(
            "sales_request_invoice_linked",
            extra={
                "linked_invoice_id": str(invoice.id),
                "number": invoice.number,
                "payment_status": request.payment_status,
            },
        )

    # =========================================================================
    # Internal
    # =========================================================================

    def _load_for_update(self, request_id: UUID) -> SalesOrderRequestModel:
        request = self.session.execute(
            select(SalesOrderRequestModel)
            .where(SalesOrderRequestModel.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if request is None:
            raise SalesRequestNotFoundError(str(request_id))
        return request
