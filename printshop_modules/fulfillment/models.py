"""
Fulfillment Domain Models (``printshop_modules.fulfillment.models``).

Responsibility
--------------
Frozen value objects for sales order requests and the structured result
of a workflow transition.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* ``collected`` is an alias: ``normalize_status`` maps it to ``completed``
  before anything is compared or written.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class RequestStatus(str, Enum):
    """Sales request workflow states, in intended forward order."""
    PENDING = "pending"
    PROCESSED = "processed"
    IN_DESIGN = "in_design"
    DESIGN_SUBMITTED = "design_submitted"
    IN_PRINT = "in_print"
    PRINTED = "printed"
    COMPLETED = "completed"


class RequestPaymentStatus(str, Enum):
    """Payment-or-debt decision recorded before print assignment."""
    PENDING = "pending"
    PAID = "paid"
    DEBT = "debt"


STATUS_ALIASES = {"collected": RequestStatus.COMPLETED.value}


def normalize_status(value: str | RequestStatus) -> RequestStatus:
    """
    Parse a status, mapping ``collected`` to ``completed``.

    Raises:
        ValueError: unknown status.
    """
    if isinstance(value, RequestStatus):
        return value
    value = value.strip().lower()
    return RequestStatus(STATUS_ALIASES.get(value, value))


@dataclass(frozen=True)
class SalesOrderRequest:
    id: UUID
    customer_name: str
    description: str
    status: RequestStatus
    payment_status: RequestPaymentStatus
    customer_phone: str | None = None
    customer_email: str | None = None
    notes: str | None = None
    customer_id: UUID | None = None
    linked_invoice_id: UUID | None = None
    designer_id: UUID | None = None
    print_operator_id: UUID | None = None
    processed_at: datetime | None = None


@dataclass(frozen=True)
class TransitionResult:
    """
    Outcome of a transition command.

    On success ``error`` is None and ``new_status`` is the written status.
    When a gate blocks the move, ``error`` is ``invoice_required`` or
    ``payment_decision_required``, ``new_status`` is the unchanged current
    status, and ``target_status`` is what the caller should retry.
    """
    request_id: UUID
    previous_status: RequestStatus
    new_status: RequestStatus
    error: str | None = None
    target_status: RequestStatus | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
