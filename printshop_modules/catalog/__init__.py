"""
Catalog Module.

Products sold by the shop and the read-only stock lookup consulted when
an invoice is activated or an active invoice's items are replaced.
"""

from printshop_modules.catalog.models import Product, StockLevel, StockLookup

__all__ = [
    "Product",
    "StockLevel",
    "StockLookup",
]
