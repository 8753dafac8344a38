"""
Catalog selectors (``printshop_modules.catalog.selectors``).

``CatalogStockLookup`` is the default ``StockLookup``: it reads the
``products`` table inside the caller's session and never writes.
"""

from uuid import UUID

from printshop_kernel.selectors.base import BaseSelector
from printshop_modules.catalog.models import Product, StockLevel
from printshop_modules.catalog.orm import ProductModel


class CatalogStockLookup(BaseSelector):
    """Stock levels straight from the catalog table."""

    def stock_for(self, product_id: UUID) -> StockLevel | None:
        product = self.session.get(ProductModel, product_id)
        if product is None:
            return None
        return StockLevel(product_id=product.id, stock_quantity=product.stock_quantity)

    def get_product(self, product_id: UUID) -> Product | None:
        product = self.session.get(ProductModel, product_id)
        return product.to_dto() if product is not None else None
