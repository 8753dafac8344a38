"""
BaseService -- abstract base for all services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every service.  ``BaseService`` only flushes; ``TransactionalService``
    adds the commit-or-rollback boundary that command-level module services
    (payments, invoicing, commissions, fulfillment) own.

Invariants enforced:
    - A command either commits every write it made or none of them.
    - When ``auto_commit=False`` the service only flushes and the caller
      owns commit/rollback, so several services can share one transaction.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.orm import Session

from printshop_kernel.logging_config import get_logger

logger = get_logger("services.base")


class BaseService(ABC):
    """
    Abstract base class for all services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and uses
        ``session.flush()`` to persist changes within the active
        transaction.
    """

    def __init__(self, session: Session):
        self.session = session


class TransactionalService(BaseService):
    """
    Service that owns the transaction boundary of each command.

    Contract:
        Wrap every state-changing command in ``self.unit_of_work(name)``.
        Validation runs first, writes second; any exception inside the block
        rolls back everything the command wrote.
    """

    def __init__(self, session: Session, auto_commit: bool = True):
        super().__init__(session)
        self._auto_commit = auto_commit

    @contextmanager
    def unit_of_work(self, command: str) -> Generator[Session, None, None]:
        try:
            yield self.session
            if self._auto_commit:
                self.session.commit()
            else:
                self.session.flush()
        except Exception:
            if self._auto_commit:
                self.session.rollback()
                logger.warning(
                    "command_rolled_back",
                    extra={"command": command},
                    exc_info=True,
                )
            raise
