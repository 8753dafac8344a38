"""
Print-Shop Modules.

Persistence and orchestration over the kernel and the pure engines.
Each module contains:
- Domain models (frozen DTOs)
- ORM models (SQLAlchemy tables)
- Services (commands that own the transaction boundary) or selectors
- Workflows (state machines) where the module has a lifecycle

Modules:
- catalog: products and the read-only stock lookup
- orders: the order record and its payment mirror
- invoicing: customers, invoices, item replacement, activation
- payments: the payment allocator and payment history
- commissions: accrual and one-way settlement
- fulfillment: the gated sales-request state machine
- reporting: profit recognition, financial summary, outstanding debts

Arithmetic lives in printshop_engines; this package reads, validates,
writes and commits.
"""
