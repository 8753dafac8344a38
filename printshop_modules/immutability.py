"""
ORM-Level Immutability Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

Money that has been received and commissions that have been settled are
history.  Corrections are new rows, never edits.  SQLAlchemy fires mapper
events before UPDATE/DELETE reach the database; the listeners here check
each protected entity and raise ImmutabilityViolationError, which aborts
the flush and leaves the database untouched.

    session.flush()
         |
         v
    [before_update] --> _check_*_update() --> ImmutabilityViolationError
         |
    [before_delete] --> _check_*_delete() --> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity              | When Immutable                 | Rule
--------------------|--------------------------------|-------------------------------
Payment             | ALWAYS (from creation)         | no update, no delete
Commission          | After paid_status = paid       | unpaid -> paid itself allowed
Invoice             | After activation               | no delete (drafts deletable)
SalesOrderRequest   | ALWAYS                         | no delete

updated_at / updated_by_id are audit metadata and may always change.

===============================================================================
USAGE
===============================================================================

    from printshop_modules.immutability import register_immutability_listeners
    register_immutability_listeners()  # once at startup

To temporarily disable (TESTS ONLY):

    unregister_immutability_listeners()
"""

from sqlalchemy import event, inspect
from sqlalchemy.orm.attributes import get_history

from printshop_kernel.exceptions import ImmutabilityViolationError
from printshop_kernel.logging_config import get_logger

logger = get_logger("modules.immutability")

_AUDIT_FIELDS = frozenset({"updated_at", "updated_by_id"})


def _block(entity_type: str, target, operation: str, reason: str, field: str | None = None):
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(target.id),
            "operation": operation,
            "field": field,
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(target.id),
        reason=reason,
    )


def _changed_fields(target) -> list[str]:
    return [
        attr.key
        for attr in inspect(target).attrs
        if attr.key not in _AUDIT_FIELDS and attr.history.has_changes()
    ]


# -----------------------------------------------------------------------------
# Payment
# -----------------------------------------------------------------------------


def _check_payment_update(mapper, connection, target):
    """Payments are append-only.  Corrections are new payment rows."""
    changed = _changed_fields(target)
    if changed:
        _block("Payment", target, "UPDATE", "Payments are append-only", field=changed[0])


def _check_payment_delete(mapper, connection, target):
    _block("Payment", target, "DELETE", "Payments cannot be deleted")


# -----------------------------------------------------------------------------
# Commission
# -----------------------------------------------------------------------------


def _check_commission_update(mapper, connection, target):
    """
    Freeze a commission once it has been paid.

    The settlement write itself (unpaid -> paid, with paid_at/paid_by)
    is allowed.  Anything on a row that was already paid is blocked,
    including moving it back to unpaid.
    """
    history = get_history(target, "paid_status")
    if history.deleted:
        was_paid = history.deleted[0] == "paid"
    elif not history.added:
        was_paid = target.paid_status == "paid"
    else:
        was_paid = False

    if not was_paid:
        return

    changed = _changed_fields(target)
    if changed:
        _block(
            "Commission", target, "UPDATE",
            "Paid commissions are immutable", field=changed[0],
        )


def _check_commission_delete(mapper, connection, target):
    if target.paid_status == "paid":
        _block("Commission", target, "DELETE", "Paid commissions cannot be deleted")


# -----------------------------------------------------------------------------
# Invoice / SalesOrderRequest
# -----------------------------------------------------------------------------


def _check_invoice_delete(mapper, connection, target):
    if not target.is_draft:
        _block("Invoice", target, "DELETE", "Activated invoices cannot be deleted")


def _check_sales_request_delete(mapper, connection, target):
    _block("SalesOrderRequest", target, "DELETE", "Sales requests are never deleted")


# -----------------------------------------------------------------------------
# Registration
# -----------------------------------------------------------------------------


def _listeners():
    from printshop_modules.commissions.orm import CommissionModel
    from printshop_modules.fulfillment.orm import SalesOrderRequestModel
    from printshop_modules.invoicing.orm import InvoiceModel
    from printshop_modules.payments.orm import PaymentModel

    return (
        (PaymentModel, "before_update", _check_payment_update),
        (PaymentModel, "before_delete", _check_payment_delete),
        (CommissionModel, "before_update", _check_commission_update),
        (CommissionModel, "before_delete", _check_commission_delete),
        (InvoiceModel, "before_delete", _check_invoice_delete),
        (SalesOrderRequestModel, "before_delete", _check_sales_request_delete),
    )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Idempotent.  Call after the ORM models are importable and before any
    database work begins.
    """
    for target, event_name, listener_fn in _listeners():
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)
    logger.info("immutability_listeners_registered")


def _safe_remove_listener(target, event_name, listener_fn):
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests that need to bypass the rules.
    """
    for target, event_name, listener_fn in _listeners():
        _safe_remove_listener(target, event_name, listener_fn)
