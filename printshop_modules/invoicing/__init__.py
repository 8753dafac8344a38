"""
Invoicing Module.

The Invoice Lifecycle Manager: customers, draft invoices, item replacement,
activation by number assignment, and status derived from payment coverage.
"""

from printshop_modules.invoicing.models import (
    Customer,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    ItemInput,
    NewCustomer,
    derive_status,
)
from printshop_modules.invoicing.workflows import INVOICE_WORKFLOW

__all__ = [
    "Customer",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "ItemInput",
    "NewCustomer",
    "derive_status",
    "INVOICE_WORKFLOW",
]
