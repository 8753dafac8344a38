"""
Module: printshop_engines.pricing
Responsibility:
    Line-item and invoice-total arithmetic for print jobs sold either per
    unit or per square metre.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - unit sale:  ``amount = quantity x unit_price``
    - area sale:  ``area_m2 = width_m x height_m`` and
                  ``amount = area_m2 x quantity x unit_price``
    - ``line_cost = consumed x cost_per_unit`` where ``consumed`` is the
      quantity for unit sales and the total area (``area_m2 x quantity``)
      for area sales.
    - ``line_profit = amount - line_cost``
    - ``total_amount = subtotal + tax_amount`` with ``subtotal = sum(amount)``

Failure modes:
    - InvalidItemError for non-positive quantity, negative price or cost,
      and area items with missing or non-positive dimensions.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from printshop_engines.tracer import traced_engine
from printshop_kernel.db.types import HUNDRED, ZERO, round_money, to_decimal
from printshop_kernel.exceptions import InvalidItemError


class SaleType(str, Enum):
    """How an invoice line is priced."""

    UNIT = "unit"
    AREA = "area"


@dataclass(frozen=True)
class LineInput:
    """Raw pricing inputs for one invoice line."""

    quantity: Decimal
    unit_price: Decimal
    sale_type: SaleType = SaleType.UNIT
    width_m: Decimal | None = None
    height_m: Decimal | None = None
    cost_per_unit: Decimal = ZERO


@dataclass(frozen=True)
class PricedLine:
    """A line with every derived figure computed."""

    quantity: Decimal
    unit_price: Decimal
    sale_type: SaleType
    width_m: Decimal | None
    height_m: Decimal | None
    area_m2: Decimal | None
    amount: Decimal
    cost_per_unit: Decimal
    line_cost: Decimal
    line_profit: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def price_item(line: LineInput, line_number: int = 1, decimal_places: int = 2) -> PricedLine:
    """
    Apply the unit/area formulas to one line.

    Args:
        line: Pricing inputs.
        line_number: 1-based position, reported in InvalidItemError.
        decimal_places: Money rounding for amount and line_cost.
    """
    quantity = to_decimal(line.quantity)
    unit_price = to_decimal(line.unit_price)
    cost_per_unit = to_decimal(line.cost_per_unit)

    if quantity <= ZERO:
        raise InvalidItemError(line_number, "quantity must be positive")
    if unit_price < ZERO:
        raise InvalidItemError(line_number, "unit_price cannot be negative")
    if cost_per_unit < ZERO:
        raise InvalidItemError(line_number, "cost_per_unit cannot be negative")

    sale_type = SaleType(line.sale_type)
    width = height = area = None

    if sale_type == SaleType.AREA:
        if line.width_m is None or line.height_m is None:
            raise InvalidItemError(line_number, "area items need width_m and height_m")
        width = to_decimal(line.width_m)
        height = to_decimal(line.height_m)
        if width <= ZERO or height <= ZERO:
            raise InvalidItemError(line_number, "dimensions must be positive")
        area = width * height
        consumed = area * quantity
        amount = round_money(consumed * unit_price, decimal_places)
    else:
        consumed = quantity
        amount = round_money(quantity * unit_price, decimal_places)

    line_cost = round_money(consumed * cost_per_unit, decimal_places)

    return PricedLine(
        quantity=quantity,
        unit_price=unit_price,
        sale_type=sale_type,
        width_m=width,
        height_m=height,
        area_m2=area,
        amount=amount,
        cost_per_unit=cost_per_unit,
        line_cost=line_cost,
        line_profit=amount - line_cost,
    )


@traced_engine("pricing", "1.0", fingerprint_fields=("amounts", "vat_percentage"))
def invoice_totals(
    *,
    amounts: Iterable[Decimal],
    vat_percentage: Decimal | None = None,
    decimal_places: int = 2,
) -> InvoiceTotals:
    """
    Sum line amounts and apply VAT.

    Args:
        amounts: Line amounts.
        vat_percentage: VAT rate in percent, or None when VAT is disabled.
    """
    subtotal = sum((to_decimal(a) for a in amounts), ZERO)
    tax = ZERO
    if vat_percentage is not None:
        tax = round_money(subtotal * to_decimal(vat_percentage) / HUNDRED, decimal_places)
    return InvoiceTotals(
        subtotal=subtotal,
        tax_amount=tax,
        total_amount=subtotal + tax,
    )
