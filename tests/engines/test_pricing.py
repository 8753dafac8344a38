"""
Tests for line-item pricing and invoice totals.
"""

from decimal import Decimal

import pytest

from printshop_engines.pricing import (
    LineInput,
    SaleType,
    invoice_totals,
    price_item,
)
from printshop_kernel.exceptions import InvalidItemError


class TestUnitPricing:

    def test_amount_is_quantity_times_price(self):
        line = price_item(LineInput(quantity=Decimal("250"), unit_price=Decimal("0.40")))

        assert line.amount == Decimal("100.00")
        assert line.area_m2 is None

    def test_cost_and_profit(self):
        line = price_item(
            LineInput(quantity=Decimal("10"), unit_price=Decimal("12"), cost_per_unit=Decimal("7.5"))
        )

        assert line.line_cost == Decimal("75.00")
        assert line.line_profit == Decimal("45.00")

    def test_amount_rounded_to_money(self):
        line = price_item(LineInput(quantity=Decimal("3"), unit_price=Decimal("0.335")))

        # 1.005 -> 1.01
        assert line.amount == Decimal("1.01")


class TestAreaPricing:

    def test_banner_area_times_quantity_times_rate(self):
        line = price_item(
            LineInput(
                quantity=Decimal("3"),
                unit_price=Decimal("10"),
                sale_type=SaleType.AREA,
                width_m=Decimal("2"),
                height_m=Decimal("1.5"),
            )
        )

        assert line.area_m2 == Decimal("3")
        assert line.amount == Decimal("90")

    def test_area_cost_uses_consumed_area(self):
        line = price_item(
            LineInput(
                quantity=Decimal("2"),
                unit_price=Decimal("10"),
                sale_type=SaleType.AREA,
                width_m=Decimal("1"),
                height_m=Decimal("2"),
                cost_per_unit=Decimal("4"),
            )
        )

        # consumed = 2 m2 x 2 = 4 m2
        assert line.amount == Decimal("40.00")
        assert line.line_cost == Decimal("16.00")
        assert line.line_profit == Decimal("24.00")

    def test_sale_type_accepts_string(self):
        line = price_item(
            LineInput(
                quantity=Decimal("1"),
                unit_price=Decimal("5"),
                sale_type="area",
                width_m=Decimal("0.5"),
                height_m=Decimal("0.5"),
            )
        )

        assert line.sale_type is SaleType.AREA
        assert line.amount == Decimal("1.25")


class TestInvalidItems:

    @pytest.mark.parametrize(
        "line",
        [
            LineInput(quantity=Decimal("0"), unit_price=Decimal("1")),
            LineInput(quantity=Decimal("-1"), unit_price=Decimal("1")),
            LineInput(quantity=Decimal("1"), unit_price=Decimal("-1")),
            LineInput(quantity=Decimal("1"), unit_price=Decimal("1"), cost_per_unit=Decimal("-2")),
            LineInput(quantity=Decimal("1"), unit_price=Decimal("1"), sale_type=SaleType.AREA),
            LineInput(
                quantity=Decimal("1"), unit_price=Decimal("1"), sale_type=SaleType.AREA,
                width_m=Decimal("0"), height_m=Decimal("1"),
            ),
        ],
    )
    def test_rejected(self, line):
        with pytest.raises(InvalidItemError):
            price_item(line)

    def test_error_carries_line_number(self):
        with pytest.raises(InvalidItemError) as exc_info:
            price_item(LineInput(quantity=Decimal("0"), unit_price=Decimal("1")), line_number=4)

        assert exc_info.value.line_number == 4
        assert exc_info.value.code == "INVALID_ITEM"


class TestInvoiceTotals:

    def test_no_vat(self):
        totals = invoice_totals(amounts=[Decimal("90"), Decimal("10.50")])

        assert totals.subtotal == Decimal("100.50")
        assert totals.tax_amount == Decimal("0")
        assert totals.total_amount == Decimal("100.50")

    def test_vat_applied_and_rounded(self):
        totals = invoice_totals(amounts=[Decimal("99.99")], vat_percentage=Decimal("16"))

        # 15.9984 -> 16.00
        assert totals.tax_amount == Decimal("16.00")
        assert totals.total_amount == Decimal("115.99")

    def test_empty_invoice(self):
        totals = invoice_totals(amounts=[], vat_percentage=Decimal("16"))

        assert totals.total_amount == Decimal("0")

    def test_emits_engine_trace(self, captured_logs):
        invoice_totals(amounts=[Decimal("1")])

        traces = [r for r in captured_logs() if r["message"] == "ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "pricing"
        assert len(traces[-1]["input_fingerprint"]) == 16
