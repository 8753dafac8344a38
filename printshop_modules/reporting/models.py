"""
Reporting Domain Models (``printshop_modules.reporting.models``).

Read-side figures for the owner's dashboard and debt list, plus the two
inputs that only reporting consumes: expenses and the opening balance.
Every figure is recomputed from source rows on each query.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from printshop_engines.commission import CommissionTotals
from printshop_engines.profit import ProfitTotals


class ExpenseStatus(str, Enum):
    """Only approved expenses reduce net profit."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AccountType(str, Enum):
    """Where an opening balance is held."""
    CASH = "cash"
    BANK = "bank"


@dataclass(frozen=True)
class Expense:
    id: UUID
    description: str
    amount: Decimal
    status: ExpenseStatus
    expense_date: date
    category: str | None = None


@dataclass(frozen=True)
class BeginningBalance:
    id: UUID
    account_type: AccountType
    amount: Decimal
    as_of: date
    notes: str | None = None


@dataclass(frozen=True)
class DebtInvoiceRow:
    """One unpaid invoice in a customer's debt listing."""
    invoice_id: UUID
    number: str | None
    total_amount: Decimal
    amount_paid: Decimal
    outstanding: Decimal
    activated_at: datetime | None = None


@dataclass(frozen=True)
class CustomerDebt:
    """
    Outstanding balance owed by one customer.

    ``invoices`` is sorted by outstanding balance, largest first.
    """
    customer_id: UUID
    customer_name: str
    total_billed: Decimal
    total_paid: Decimal
    outstanding: Decimal
    invoices: tuple[DebtInvoiceRow, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FinancialSummary:
    """Shop-wide totals over non-draft invoices."""
    invoice_count: int
    revenue: Decimal
    collected: Decimal
    outstanding: Decimal
    profit: ProfitTotals
    commissions: CommissionTotals
    approved_expenses: Decimal
    beginning_balance: Decimal
    net_profit: Decimal
