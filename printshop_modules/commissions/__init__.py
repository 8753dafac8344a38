"""
Commissions Module.

Commission rows keyed to an order or invoice, accrued by external
order-progression triggers and settled unpaid -> paid exactly once.
"""

from printshop_modules.commissions.models import Commission, CommissionSettlement

__all__ = [
    "Commission",
    "CommissionSettlement",
]
