"""
Module: printshop_modules.reporting.selectors
Responsibility: Read-only reporting queries -- per-invoice and aggregate
    profit recognition, the shop-wide financial summary and the customer
    debt listing.

Invariants enforced:
    - Figures are recomputed from invoice, item, commission and expense
      rows on every call.  Nothing is stored or cached.
    - Draft invoices never contribute to revenue, collections, outstanding
      balances, profit totals or debts.
    - Balances at or below ``ShopConfig.outstanding_tolerance`` are not
      reported as debt.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from printshop_config import ShopConfig, get_active_config
from printshop_engines.commission import partition_commissions
from printshop_engines.profit import (
    ProfitRecognition,
    ProfitRecognitionCalculator,
    ProfitTotals,
)
from printshop_kernel.db.types import ZERO
from printshop_kernel.exceptions import InvoiceNotFoundError
from printshop_kernel.logging_config import get_logger
from printshop_kernel.selectors.base import BaseSelector
from printshop_modules.commissions.orm import CommissionModel
from printshop_modules.invoicing.orm import CustomerModel, InvoiceModel
from printshop_modules.reporting.models import (
    CustomerDebt,
    DebtInvoiceRow,
    ExpenseStatus,
    FinancialSummary,
)
from printshop_modules.reporting.orm import BeginningBalanceModel, ExpenseModel

logger = get_logger("modules.reporting.selectors")


class ReportingSelector(BaseSelector):
    """Owner-facing figures over the live tables."""

    def __init__(self, session, config: ShopConfig | None = None):
        super().__init__(session)
        self._config = config or get_active_config()
        self._profit = ProfitRecognitionCalculator(self._config.money_decimal_places)

    # -------------------------------------------------------------------------
    # Profit
    # -------------------------------------------------------------------------

    def invoice_profit(self, invoice_id: UUID) -> ProfitRecognition:
        """Recognized vs pending profit for one invoice, at current collections."""
        invoice = self.session.get(InvoiceModel, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(str(invoice_id))
        return self._recognize(invoice)

    def profit_totals(self) -> ProfitTotals:
        return self._profit.aggregate(self._recognize(inv) for inv in self._active_invoices())

    def _recognize(self, invoice: InvoiceModel) -> ProfitRecognition:
        return self._profit.recognize(
            invoice_id=invoice.id,
            line_profits=[item.line_profit for item in invoice.items],
            amount_paid=invoice.amount_paid,
            total_amount=invoice.total_amount,
        )

    def _active_invoices(self) -> list[InvoiceModel]:
        return list(
            self.session.execute(
                select(InvoiceModel)
                .where(InvoiceModel.is_draft.is_(False))
                .order_by(InvoiceModel.created_at)
            ).scalars().all()
        )

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def financial_summary(self) -> FinancialSummary:
        """
        Revenue, collections and profit over active invoices.

        ``net_profit = beginning_balance + collected - approved_expenses``.
        Over-collected invoices count as zero outstanding.
        """
        invoices = self._active_invoices()
        revenue = sum((inv.total_amount for inv in invoices), ZERO)
        collected = sum((inv.amount_paid for inv in invoices), ZERO)
        outstanding = sum(
            (max(ZERO, inv.total_amount - inv.amount_paid) for inv in invoices), ZERO,
        )
        profit = self._profit.aggregate(self._recognize(inv) for inv in invoices)

        commissions = partition_commissions(
            self.session.execute(
                select(CommissionModel.commission_amount, CommissionModel.paid_status)
            ).all()
        )

        approved_expenses = sum(
            self.session.execute(
                select(ExpenseModel.amount)
                .where(ExpenseModel.status == ExpenseStatus.APPROVED.value)
            ).scalars().all(),
            ZERO,
        )
        beginning = self._beginning_balance()

        summary = FinancialSummary(
            invoice_count=len(invoices),
            revenue=revenue,
            collected=collected,
            outstanding=outstanding,
            profit=profit,
            commissions=commissions,
            approved_expenses=approved_expenses,
            beginning_balance=beginning,
            net_profit=beginning + collected - approved_expenses,
        )
        logger.debug(
            "financial_summary_computed",
            extra={
                "invoice_count": summary.invoice_count,
                "revenue": str(revenue),
                "collected": str(collected),
            },
        )
        return summary

    def _beginning_balance(self) -> Decimal:
        """Latest opening balance of each account, summed across accounts."""
        rows = self.session.execute(
            select(BeginningBalanceModel.account_type, BeginningBalanceModel.amount)
            .order_by(BeginningBalanceModel.as_of.desc(), BeginningBalanceModel.created_at.desc())
        ).all()
        latest: dict[str, Decimal] = {}
        for account_type, amount in rows:
            latest.setdefault(account_type, amount)
        return sum(latest.values(), ZERO)

    # -------------------------------------------------------------------------
    # Debts
    # -------------------------------------------------------------------------

    def outstanding_debts(self) -> list[CustomerDebt]:
        """Customers owing more than the tolerance, largest debt first."""
        tolerance = self._config.outstanding_tolerance
        by_customer: dict[UUID, list[DebtInvoiceRow]] = defaultdict(list)

        for invoice in self._active_invoices():
            balance = invoice.total_amount - invoice.amount_paid
            if balance <= tolerance:
                continue
            by_customer[invoice.customer_id].append(
                DebtInvoiceRow(
                    invoice_id=invoice.id,
                    number=invoice.number,
                    total_amount=invoice.total_amount,
                    amount_paid=invoice.amount_paid,
                    outstanding=balance,
                    activated_at=invoice.activated_at,
                )
            )

        if not by_customer:
            return []

        names = dict(
            self.session.execute(
                select(CustomerModel.id, CustomerModel.name)
                .where(CustomerModel.id.in_(list(by_customer)))
            ).all()
        )

        debts = []
        for customer_id, rows in by_customer.items():
            rows.sort(key=lambda r: r.outstanding, reverse=True)
            debts.append(
                CustomerDebt(
                    customer_id=customer_id,
                    customer_name=names.get(customer_id, ""),
                    total_billed=sum((r.total_amount for r in rows), ZERO),
                    total_paid=sum((r.amount_paid for r in rows), ZERO),
                    outstanding=sum((r.outstanding for r in rows), ZERO),
                    invoices=tuple(rows),
                )
            )
        debts.sort(key=lambda d: d.outstanding, reverse=True)
        return debts
