"""Service base classes (imperative shell)."""

from printshop_kernel.services.base import BaseService, TransactionalService

__all__ = ["BaseService", "TransactionalService"]
