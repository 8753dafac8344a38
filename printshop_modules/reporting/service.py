"""
Reporting Module Service - expenses and the opening balance.

Expenses are recorded as ``pending`` and decided once: approved or
rejected.  Only approved expenses count against net profit.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from printshop_kernel.db.types import ZERO, to_decimal
from printshop_kernel.domain.clock import Clock, SystemClock
from printshop_kernel.exceptions import (
    ExpenseNotFoundError,
    InvalidAmountError,
    InvalidTransitionError,
    MissingFieldError,
    ValidationError,
)
from printshop_kernel.logging_config import get_logger
from printshop_kernel.services.base import TransactionalService
from printshop_modules.reporting.models import (
    AccountType,
    BeginningBalance,
    Expense,
    ExpenseStatus,
)
from printshop_modules.reporting.orm import BeginningBalanceModel, ExpenseModel

logger = get_logger("modules.reporting.service")


class ExpenseService(TransactionalService):

    def __init__(self, session: Session, clock: Clock | None = None, auto_commit: bool = True):
        super().__init__(session, auto_commit=auto_commit)
        self._clock = clock or SystemClock()

    def record_expense(
        self,
        description: str,
        amount: Decimal,
        actor_id: UUID,
        category: str | None = None,
        expense_date: date | None = None,
    ) -> Expense:
        if not description or not description.strip():
            raise MissingFieldError("description")
        amount = to_decimal(amount)
        if amount <= ZERO:
            raise InvalidAmountError("amount", amount, "must be positive")

        with self.unit_of_work("record_expense"):
            expense = ExpenseModel(
                id=uuid4(),
                description=description.strip(),
                amount=amount,
                category=category,
                status=ExpenseStatus.PENDING.value,
                expense_date=expense_date or self._clock.now().date(),
                created_by_id=actor_id,
            )
            self.session.add(expense)
            self.session.flush()

        logger.info(
            "expense_recorded",
            extra={"expense_id": str(expense.id), "amount": str(amount)},
        )
        return expense.to_dto()

    def approve_expense(self, expense_id: UUID, actor_id: UUID) -> Expense:
        return self._decide(expense_id, ExpenseStatus.APPROVED, actor_id)

    def reject_expense(self, expense_id: UUID, actor_id: UUID) -> Expense:
        return self._decide(expense_id, ExpenseStatus.REJECTED, actor_id)

    def _decide(self, expense_id: UUID, decision: ExpenseStatus, actor_id: UUID) -> Expense:
        with self.unit_of_work(f"{decision.value}_expense"):
            expense = self.session.execute(
                select(ExpenseModel)
                .where(ExpenseModel.id == expense_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if expense is None:
                raise ExpenseNotFoundError(str(expense_id))
            if expense.status != ExpenseStatus.PENDING.value:
                raise InvalidTransitionError(expense.status, decision.value, "expense already decided")
            expense.status = decision.value
            expense.updated_by_id = actor_id
            self.session.flush()

        logger.info(
            "expense_decided",
            extra={"expense_id": str(expense_id), "status": decision.value},
        )
        return expense.to_dto()

    def set_beginning_balance(
        self,
        amount: Decimal,
        actor_id: UUID,
        account_type: AccountType | str = AccountType.CASH,
        as_of: date | None = None,
        notes: str | None = None,
    ) -> BeginningBalance:
        """
        Record the opening balance of a cash or bank account.

        Each account keeps its own history; a later ``as_of`` supersedes
        earlier rows of the same account only.

        Raises:
            InvalidAmountError: amount below zero.
            ValidationError: account_type is not cash or bank.
        """
        amount = to_decimal(amount)
        if amount < ZERO:
            raise InvalidAmountError("amount", amount, "cannot be negative")
        try:
            account = AccountType(account_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown account type: {account_type}") from exc

        with self.unit_of_work("set_beginning_balance"):
            balance = BeginningBalanceModel(
                id=uuid4(),
                account_type=account.value,
                amount=amount,
                as_of=as_of or self._clock.now().date(),
                notes=notes,
                created_by_id=actor_id,
            )
            self.session.add(balance)
            self.session.flush()

        logger.info(
            "beginning_balance_set",
            extra={
                "account_type": account.value,
                "amount": str(amount),
                "as_of": balance.as_of.isoformat(),
            },
        )
        return balance.to_dto()
