"""
Commission Domain Models (``printshop_modules.commissions.models``).

Invariants enforced
-------------------
* ``paid_status`` moves unpaid -> paid exactly once.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from printshop_engines.commission import CommissionType, PaidStatus


@dataclass(frozen=True)
class Commission:
    id: UUID
    user_id: UUID
    commission_type: CommissionType
    commission_percentage: Decimal
    base_amount: Decimal
    commission_amount: Decimal
    paid_status: PaidStatus
    order_id: UUID | None = None
    invoice_id: UUID | None = None
    paid_at: datetime | None = None
    paid_by: UUID | None = None


@dataclass(frozen=True)
class CommissionSettlement:
    """Result of ``mark_paid``."""
    commission_id: UUID
    paid_status: PaidStatus
    paid_at: datetime
    paid_by: UUID
