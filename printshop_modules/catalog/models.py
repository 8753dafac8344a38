"""
Catalog Domain Models (``printshop_modules.catalog.models``).

Responsibility
--------------
Frozen value objects for products and stock levels, plus the
``StockLookup`` protocol the invoicing module depends on.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class Product:
    """A catalog item that may be referenced by invoice items."""
    id: UUID
    name: str
    sku: str | None
    stock_quantity: Decimal
    unit_price: Decimal
    cost_per_unit: Decimal


@dataclass(frozen=True)
class StockLevel:
    """What the stock lookup returns for one product."""
    product_id: UUID
    stock_quantity: Decimal


class StockLookup(Protocol):
    """Read-only stock source.  Never decrements stock."""

    def stock_for(self, product_id: UUID) -> StockLevel | None:
        """Current stock for ``product_id``, or None if it is unknown."""
        ...
