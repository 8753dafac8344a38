"""
Payments Module.

The Payment Allocator: one incoming payment spread atomically across a
customer's invoices with independent per-invoice discounts.
"""

from printshop_modules.payments.models import (
    AllocationRejection,
    AllocationRequest,
    AppliedAllocation,
    Payment,
    PaymentCommand,
    PaymentResult,
)

__all__ = [
    "AllocationRejection",
    "AllocationRequest",
    "AppliedAllocation",
    "Payment",
    "PaymentCommand",
    "PaymentResult",
]
