"""
Reporting Module.

Profit recognition over live invoices, the financial summary, customer
debts, and the expense and opening-balance inputs they draw on.
"""

from printshop_modules.reporting.models import (
    AccountType,
    BeginningBalance,
    CustomerDebt,
    DebtInvoiceRow,
    Expense,
    ExpenseStatus,
    FinancialSummary,
)

__all__ = [
    "AccountType",
    "BeginningBalance",
    "CustomerDebt",
    "DebtInvoiceRow",
    "Expense",
    "ExpenseStatus",
    "FinancialSummary",
]
