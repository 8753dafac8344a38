"""
Tests for the Money & Discount Calculator.

Covers:
- Fixed and percentage discounts
- Clamping to the outstanding balance
- Rejection of negative values and percentages above 100
- Coercion of loosely-typed discount input
"""

from decimal import Decimal

import pytest

from printshop_engines.discount import (
    Discount,
    DiscountCalculator,
    DiscountOutcome,
    DiscountType,
)


class TestFixedDiscount:

    def setup_method(self):
        self.calculator = DiscountCalculator()

    def test_fixed_discount_reduces_payable(self):
        outcome = self.calculator.evaluate(
            balance=Decimal("100"),
            discount=Discount(DiscountType.FIXED, Decimal("10")),
        )

        assert outcome.is_valid
        assert outcome.discount_amount == Decimal("10")
        assert outcome.payable_after_discount == Decimal("90")

    def test_fixed_discount_clamped_to_balance(self):
        """A discount larger than the balance wipes the balance, no more."""
        outcome = self.calculator.evaluate(
            balance=Decimal("25"),
            discount=Discount(DiscountType.FIXED, Decimal("40")),
        )

        assert outcome.discount_amount == Decimal("25")
        assert outcome.payable_after_discount == Decimal("0")

    def test_zero_discount(self):
        outcome = self.calculator.evaluate(
            balance=Decimal("80"),
            discount=Discount.none(),
        )

        assert outcome.discount_amount == Decimal("0")
        assert outcome.payable_after_discount == Decimal("80")

    def test_negative_balance_treated_as_zero(self):
        outcome = self.calculator.evaluate(
            balance=Decimal("-5"),
            discount=Discount(DiscountType.FIXED, Decimal("3")),
        )

        assert outcome.balance == Decimal("0")
        assert outcome.discount_amount == Decimal("0")
        assert outcome.payable_after_discount == Decimal("0")


class TestPercentageDiscount:

    def setup_method(self):
        self.calculator = DiscountCalculator()

    def test_percentage_of_balance(self):
        outcome = self.calculator.evaluate(
            balance=Decimal("200"),
            discount=Discount(DiscountType.PERCENTAGE, Decimal("15")),
        )

        assert outcome.discount_amount == Decimal("30.00")
        assert outcome.payable_after_discount == Decimal("170.00")

    def test_percentage_rounded_half_up(self):
        outcome = self.calculator.evaluate(
            balance=Decimal("33.33"),
            discount=Discount(DiscountType.PERCENTAGE, Decimal("50")),
        )

        # 16.665 -> 16.67
        assert outcome.discount_amount == Decimal("16.67")
        assert outcome.payable_after_discount == Decimal("16.66")

    def test_hundred_percent_clears_balance(self):
        outcome = self.calculator.evaluate(
            balance=Decimal("47.50"),
            discount=Discount(DiscountType.PERCENTAGE, Decimal("100")),
        )

        assert outcome.discount_amount == Decimal("47.50")
        assert outcome.payable_after_discount == Decimal("0")

    def test_zero_decimal_places(self):
        calculator = DiscountCalculator(decimal_places=0)
        outcome = calculator.evaluate(
            balance=Decimal("1001"),
            discount=Discount(DiscountType.PERCENTAGE, Decimal("5")),
        )

        assert outcome.discount_amount == Decimal("50")


class TestRejectedDiscounts:

    def setup_method(self):
        self.calculator = DiscountCalculator()

    @pytest.mark.parametrize(
        "discount, reason",
        [
            (Discount(DiscountType.FIXED, Decimal("-1")), "negative"),
            (Discount(DiscountType.PERCENTAGE, Decimal("-0.5")), "negative"),
            (Discount(DiscountType.PERCENTAGE, Decimal("100.01")), "exceed 100"),
        ],
    )
    def test_out_of_range_rejected(self, discount, reason):
        outcome = self.calculator.evaluate(balance=Decimal("100"), discount=discount)

        assert not outcome.is_valid
        assert reason in outcome.failure
        assert outcome.discount_amount == Decimal("0")
        assert outcome.payable_after_discount == Decimal("100")

    def test_large_fixed_value_is_not_a_failure(self):
        """Only percentages have an upper bound; fixed values are clamped."""
        assert self.calculator.validate(Discount(DiscountType.FIXED, Decimal("1000"))) is None


class TestDiscountCoercion:

    def test_of_accepts_strings(self):
        discount = Discount.of("percentage", "12.5", reason="loyal customer")

        assert discount.type is DiscountType.PERCENTAGE
        assert discount.value == Decimal("12.5")
        assert discount.reason == "loyal customer"

    def test_constructor_coerces_int_value(self):
        discount = Discount("fixed", 10)

        assert discount.type is DiscountType.FIXED
        assert discount.value == Decimal("10")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            Discount.of("bogus", "1")

    def test_outcome_is_frozen(self):
        outcome = DiscountCalculator().evaluate(balance=Decimal("1"), discount=Discount.none())

        assert isinstance(outcome, DiscountOutcome)
        with pytest.raises(AttributeError):
            outcome.discount_amount = Decimal("5")
