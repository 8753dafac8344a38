"""
Orders Module.

The order record an invoice may be raised against, and its payment mirror
(``amount_paid`` / ``payment_status``) kept in step by the payment
allocator.
"""

from printshop_modules.orders.models import Order, OrderPaymentStatus

__all__ = [
    "Order",
    "OrderPaymentStatus",
]
