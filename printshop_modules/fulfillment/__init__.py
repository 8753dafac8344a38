"""
Fulfillment Module.

The Order Fulfillment State Machine: sales requests moved from intake to
collection, gated on a linked invoice and a payment-or-debt decision.
"""

from printshop_modules.fulfillment.models import (
    RequestPaymentStatus,
    RequestStatus,
    SalesOrderRequest,
    TransitionResult,
    normalize_status,
)
from printshop_modules.fulfillment.workflows import SALES_REQUEST_WORKFLOW

__all__ = [
    "RequestPaymentStatus",
    "RequestStatus",
    "SalesOrderRequest",
    "TransitionResult",
    "normalize_status",
    "SALES_REQUEST_WORKFLOW",
]
