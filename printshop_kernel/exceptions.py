"""
Typed Exception Hierarchy for the Print-Shop Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Money and workflow errors must be handled precisely.  Callers catch by type,
read the machine-readable ``code`` class attribute, and remediate from the
structured attributes each exception carries (which invoice, which
allocation, which target status).  Nothing here needs message parsing.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PrintShopError (base)
    |
    +-- ValidationError                 rejected before any mutation;
    |   +-- InvalidAmountError          caller retries with corrected input
    |   +-- MissingFieldError
    |   +-- DiscountOutOfRangeError
    |   +-- OverpaymentError
    |   +-- DuplicateAllocationError
    |   +-- InvalidItemError
    |
    +-- PreconditionFailedError         rejected before any mutation;
    |   +-- InvoiceAlreadyPaidError     carries what the caller must fix
    |   +-- InvoiceNotActiveError
    |   +-- InvoiceNotPaidError
    |   +-- InvoiceOwnershipError
    |   +-- InvalidInvoiceNumberError
    |   +-- DuplicateInvoiceNumberError
    |   +-- InvoiceStateError
    |   +-- CollectedExceedsTotalError
    |   +-- InsufficientStockError
    |   +-- InvoiceRequiredError
    |   +-- PaymentDecisionRequiredError
    |   +-- InvalidTransitionError
    |   +-- CommissionAlreadyPaidError
    |
    +-- NotFoundError
    |   +-- CustomerNotFoundError
    |   +-- InvoiceNotFoundError
    |   +-- ProductNotFoundError
    |   +-- CommissionNotFoundError
    |   +-- SalesRequestNotFoundError
    |   +-- OrderNotFoundError
    |   +-- ExpenseNotFoundError
    |
    +-- ImmutabilityViolationError      raised by ORM listeners

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                          | When Raised
--------------|-------------------------------|----------------------------------------
Validation    | INVALID_AMOUNT                | Negative / zero / non-numeric amount
              | MISSING_FIELD                 | Required command field is empty
              | DISCOUNT_OUT_OF_RANGE         | value < 0, or percentage > 100
              | OVERPAYMENT                   | amount > payable after discount
              | DUPLICATE_ALLOCATION          | Same invoice twice in one command
              | INVALID_ITEM                  | Bad quantity / price / dimensions
--------------|-------------------------------|----------------------------------------
Precondition  | INVOICE_ALREADY_PAID          | Allocation against a paid invoice
              | INVOICE_NOT_ACTIVE            | Draft or unnumbered invoice
              | INVOICE_NOT_PAID              | "paid" decision on an unpaid invoice
              | INVOICE_OWNERSHIP             | Invoice belongs to another customer
              | INVALID_INVOICE_NUMBER        | Empty or placeholder number
              | DUPLICATE_INVOICE_NUMBER      | Number already used
              | INVOICE_STATE                 | Operation not valid in current state
              | COLLECTED_EXCEEDS_TOTAL       | Item edit shrinks total below paid
              | INSUFFICIENT_STOCK            | Requested quantity > stock
              | INVOICE_REQUIRED              | Leaving ``pending`` without invoice
              | PAYMENT_DECISION_REQUIRED     | Print assignment while pending pay
              | INVALID_TRANSITION            | No such edge in the workflow
              | COMMISSION_ALREADY_PAID       | Settling a settled commission
--------------|-------------------------------|----------------------------------------
Not found     | *_NOT_FOUND                   | Unknown id
--------------|-------------------------------|----------------------------------------
Immutability  | IMMUTABILITY_VIOLATION        | Update/delete of a protected record
"""

from decimal import Decimal


class PrintShopError(Exception):
    """
    Base exception for all print-shop kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PRINTSHOP_ERROR"


# =============================================================================
# Validation
# =============================================================================


class ValidationError(PrintShopError):
    """Base exception for input validation failures."""

    code: str = "VALIDATION_ERROR"


class InvalidAmountError(ValidationError):
    """A monetary amount or quantity is out of range."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = str(value)
        self.reason = reason
        super().__init__(f"Invalid {field} ({value}): {reason}")


class MissingFieldError(ValidationError):
    """A required command field was empty."""

    code: str = "MISSING_FIELD"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Required field is missing: {field}")


class DiscountOutOfRangeError(ValidationError):
    """Discount value is negative, or a percentage above 100."""

    code: str = "DISCOUNT_OUT_OF_RANGE"

    def __init__(self, discount_type: str, value: Decimal, reason: str):
        self.discount_type = discount_type
        self.value = str(value)
        self.reason = reason
        super().__init__(f"Discount {discount_type}={value} rejected: {reason}")


class OverpaymentError(ValidationError):
    """Amount received exceeds what is payable after the discount."""

    code: str = "OVERPAYMENT"

    def __init__(self, invoice_id: str, amount: Decimal, payable: Decimal):
        self.invoice_id = invoice_id
        self.amount = str(amount)
        self.payable = str(payable)
        super().__init__(
            f"Amount {amount} exceeds payable {payable} on invoice {invoice_id}"
        )


class DuplicateAllocationError(ValidationError):
    """The same invoice appears more than once in one payment command."""

    code: str = "DUPLICATE_ALLOCATION"

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} allocated more than once")


class InvalidItemError(ValidationError):
    """An invoice item has inconsistent quantities, prices or dimensions."""

    code: str = "INVALID_ITEM"

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Invalid item at line {line_number}: {reason}")


# =============================================================================
# Preconditions
# =============================================================================


class PreconditionFailedError(PrintShopError):
    """Base exception for state preconditions that block a command."""

    code: str = "PRECONDITION_FAILED"


class InvoiceAlreadyPaidError(PreconditionFailedError):
    """Invoice is already fully paid."""

    code: str = "INVOICE_ALREADY_PAID"

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} is already paid")


class InvoiceNotActiveError(PreconditionFailedError):
    """Invoice is still a draft or carries a placeholder number."""

    code: str = "INVOICE_NOT_ACTIVE"

    def __init__(self, invoice_id: str, number: str | None):
        self.invoice_id = invoice_id
        self.number = number
        super().__init__(
            f"Invoice {invoice_id} is not active (number={number!r})"
        )


class InvoiceNotPaidError(PreconditionFailedError):
    """Invoice still has an outstanding balance."""

    code: str = "INVOICE_NOT_PAID"

    def __init__(self, invoice_id: str, outstanding: Decimal):
        self.invoice_id = invoice_id
        self.outstanding = str(outstanding)
        super().__init__(
            f"Invoice {invoice_id} still has {outstanding} outstanding"
        )


class InvoiceOwnershipError(PreconditionFailedError):
    """Invoice does not belong to the paying customer."""

    code: str = "INVOICE_OWNERSHIP"

    def __init__(self, invoice_id: str, customer_id: str):
        self.invoice_id = invoice_id
        self.customer_id = customer_id
        super().__init__(
            f"Invoice {invoice_id} does not belong to customer {customer_id}"
        )


class InvalidInvoiceNumberError(PreconditionFailedError):
    """Invoice number is empty or a placeholder."""

    code: str = "INVALID_INVOICE_NUMBER"

    def __init__(self, number: str | None):
        self.number = number
        super().__init__(f"Not a real invoice number: {number!r}")


class DuplicateInvoiceNumberError(PreconditionFailedError):
    """Invoice number is already assigned to another invoice."""

    code: str = "DUPLICATE_INVOICE_NUMBER"

    def __init__(self, number: str):
        self.number = number
        super().__init__(f"Invoice number already in use: {number}")


class InvoiceStateError(PreconditionFailedError):
    """Operation is not valid in the invoice's current lifecycle state."""

    code: str = "INVOICE_STATE"

    def __init__(self, invoice_id: str, state: str, operation: str):
        self.invoice_id = invoice_id
        self.state = state
        self.operation = operation
        super().__init__(
            f"Cannot {operation} invoice {invoice_id} in state {state}"
        )


class CollectedExceedsTotalError(PreconditionFailedError):
    """Item replacement would drop the total below the amount collected."""

    code: str = "COLLECTED_EXCEEDS_TOTAL"

    def __init__(self, invoice_id: str, amount_paid: Decimal, new_total: Decimal):
        self.invoice_id = invoice_id
        self.amount_paid = str(amount_paid)
        self.new_total = str(new_total)
        super().__init__(
            f"Invoice {invoice_id}: new total {new_total} is below "
            f"amount already collected {amount_paid}"
        )


class InsufficientStockError(PreconditionFailedError):
    """A catalog product does not have enough stock for an item."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: Decimal, available: Decimal):
        self.product_id = product_id
        self.requested = str(requested)
        self.available = str(available)
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )


class InvoiceRequiredError(PreconditionFailedError):
    """
    A sales request cannot leave ``pending`` without a linked invoice.

    The caller links or creates an invoice, then retries the same
    transition to ``target_status``.
    """

    code: str = "INVOICE_REQUIRED"

    def __init__(self, request_id: str, target_status: str):
        self.request_id = request_id
        self.target_status = target_status
        super().__init__(
            f"Sales request {request_id} needs a linked invoice "
            f"before moving to {target_status}"
        )


class PaymentDecisionRequiredError(PreconditionFailedError):
    """Print operator assignment requires payment_status paid or debt."""

    code: str = "PAYMENT_DECISION_REQUIRED"

    def __init__(self, request_id: str, payment_status: str, target_status: str):
        self.request_id = request_id
        self.payment_status = payment_status
        self.target_status = target_status
        super().__init__(
            f"Sales request {request_id} has payment_status={payment_status}; "
            f"record a paid or debt decision before {target_status}"
        )


class InvalidTransitionError(PreconditionFailedError):
    """No workflow edge exists for the requested move."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str = ""):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        message = f"Invalid transition {from_status} -> {to_status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CommissionAlreadyPaidError(PreconditionFailedError):
    """Commission settlement is one-way and already happened."""

    code: str = "COMMISSION_ALREADY_PAID"

    def __init__(self, commission_id: str):
        self.commission_id = commission_id
        super().__init__(f"Commission {commission_id} is already paid")


# =============================================================================
# Not found
# =============================================================================


class NotFoundError(PrintShopError):
    """Base exception for unknown record ids."""

    code: str = "NOT_FOUND"
    entity_type: str = "record"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.entity_type} not found: {entity_id}")


class CustomerNotFoundError(NotFoundError):
    code: str = "CUSTOMER_NOT_FOUND"
    entity_type = "Customer"


class InvoiceNotFoundError(NotFoundError):
    code: str = "INVOICE_NOT_FOUND"
    entity_type = "Invoice"


class ProductNotFoundError(NotFoundError):
    code: str = "PRODUCT_NOT_FOUND"
    entity_type = "Product"


class CommissionNotFoundError(NotFoundError):
    code: str = "COMMISSION_NOT_FOUND"
    entity_type = "Commission"


class SalesRequestNotFoundError(NotFoundError):
    code: str = "SALES_REQUEST_NOT_FOUND"
    entity_type = "SalesOrderRequest"


class OrderNotFoundError(NotFoundError):
    code: str = "ORDER_NOT_FOUND"
    entity_type = "Order"


class ExpenseNotFoundError(NotFoundError):
    code: str = "EXPENSE_NOT_FOUND"
    entity_type = "Expense"


# =============================================================================
# Immutability
# =============================================================================


class ImmutabilityViolationError(PrintShopError):
    """Attempt to modify or delete a record the ledger treats as permanent."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Cannot modify {entity_type} {entity_id}: {reason}"
        )
