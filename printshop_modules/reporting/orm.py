"""
Reporting ORM Models (``printshop_modules.reporting.orm``).

Architecture position
---------------------
**Modules layer** -- persistence for expenses and opening balances.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from printshop_kernel.db.base import TrackedBase


class ExpenseModel(TrackedBase):
    """ORM model for shop expenses."""

    __tablename__ = "expenses"

    __table_args__ = (
        Index("idx_expenses_status", "status"),
        Index("idx_expenses_date", "expense_date"),
    )

    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from printshop_modules.reporting.models import Expense, ExpenseStatus

        return Expense(
            id=self.id,
            description=self.description,
            amount=self.amount,
            status=ExpenseStatus(self.status),
            expense_date=self.expense_date,
            category=self.category,
        )

    def __repr__(self) -> str:
        return f"<ExpenseModel {self.description} {self.amount}: {self.status}>"


class BeginningBalanceModel(TrackedBase):
    """Opening balance of one account.  Per account the latest ``as_of`` applies."""

    __tablename__ = "beginning_balances"

    __table_args__ = (
        Index("idx_beginning_balances_account", "account_type", "as_of"),
    )

    account_type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    as_of: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def to_dto(self):
        from printshop_modules.reporting.models import AccountType, BeginningBalance

        return BeginningBalance(
            id=self.id,
            account_type=AccountType(self.account_type),
            amount=self.amount,
            as_of=self.as_of,
            notes=self.notes,
        )
