"""
Module: printshop_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    printshop_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import printshop_kernel (exceptions, db.types, logging).
    MUST NOT import printshop_modules.

Invariants enforced:
    - Purity: engines never read the clock or the database.  Callers pass
      every figure in explicitly.
    - Decimal-only arithmetic: floats never reach a money field.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine invocations are traced via ``@traced_engine`` (see
    ``printshop_engines.tracer``), emitting ENGINE_TRACE log records.

Usage:
    from printshop_engines.discount import DiscountCalculator, Discount
    from printshop_engines.pricing import price_item, invoice_totals
    from printshop_engines.profit import ProfitRecognitionCalculator
    from printshop_engines.commission import commission_amount
"""

from printshop_kernel.logging_config import get_logger

logger = get_logger("engines")

from printshop_engines.commission import (
    CommissionTotals,
    CommissionType,
    PaidStatus,
    commission_amount,
    partition_commissions,
)
from printshop_engines.discount import (
    Discount,
    DiscountCalculator,
    DiscountOutcome,
    DiscountType,
)
from printshop_engines.pricing import (
    InvoiceTotals,
    LineInput,
    PricedLine,
    SaleType,
    invoice_totals,
    price_item,
)
from printshop_engines.profit import (
    ProfitRecognition,
    ProfitRecognitionCalculator,
    ProfitTotals,
    payment_ratio,
)
from printshop_engines.tracer import traced_engine

__all__ = [
    # Commission
    "CommissionTotals",
    "CommissionType",
    "PaidStatus",
    "commission_amount",
    "partition_commissions",
    # Discount
    "Discount",
    "DiscountCalculator",
    "DiscountOutcome",
    "DiscountType",
    # Pricing
    "InvoiceTotals",
    "LineInput",
    "PricedLine",
    "SaleType",
    "invoice_totals",
    "price_item",
    # Profit
    "ProfitRecognition",
    "ProfitRecognitionCalculator",
    "ProfitTotals",
    "payment_ratio",
    # Tracing
    "traced_engine",
]
