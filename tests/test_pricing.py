"""
Tests for payment amount computation.
"""

from decimal import Decimal

import pytest

from slotwindow.domain import pricing
from slotwindow.domain.pricing import CartItem


class TestConversions:

    def test_to_paise(self):
        assert pricing.to_paise(499) == 49900
        assert pricing.to_paise(12.345) == 1235
        assert pricing.to_paise(Decimal("0.5")) == 50

    def test_to_rupees(self):
        assert pricing.to_rupees(49900) == Decimal("499")
        assert pricing.to_rupees(150) == Decimal("1.5")

    @pytest.mark.parametrize("value", [None, "abc", float("nan"), True])
    def test_invalid_input_converts_to_zero(self, value):
        assert pricing.to_paise(value) == 0
        assert pricing.to_rupees(value) == 0


class TestTaxAndTotal:

    def test_default_tax_rate(self):
        assert pricing.calculate_tax(1000) == Decimal("180")
        assert pricing.calculate_total(1000) == Decimal("1180")

    def test_tax_rounds_half_up(self):
        # 18% of 1250 = 225; 18% of 1275 = 229.5 -> 230
        assert pricing.calculate_tax(1250) == Decimal("225")
        assert pricing.calculate_tax(1275) == Decimal("230")

    def test_custom_tax_rate(self):
        assert pricing.calculate_total(200, tax_rate=5) == Decimal("210")

    def test_invalid_subtotal(self):
        assert pricing.calculate_tax("n/a") == 0

    def test_quote(self):
        result = pricing.quote(1499, tax_rate=18)

        assert result.subtotal == Decimal("1499")
        assert result.tax == Decimal("270")
        assert result.total == Decimal("1769")
        assert result.total_paise == 176900


class TestValidateAmount:

    def test_valid_amount_is_rounded(self):
        result = pricing.validate_amount(999.6)

        assert result.is_valid
        assert result.amount == Decimal("1000")

    def test_not_a_number(self):
        result = pricing.validate_amount("free")

        assert not result.is_valid
        assert result.error == "Amount must be a valid number"

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive(self, amount):
        result = pricing.validate_amount(amount)

        assert not result.is_valid
        assert result.error == "Amount must be greater than zero"

    def test_upper_limit(self):
        assert pricing.validate_amount(1000000).is_valid

        result = pricing.validate_amount(1000000.01)

        assert not result.is_valid
        assert result.error == "Amount cannot exceed ₹10,00,000"


class TestFormatting:

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "₹0"),
            (999, "₹999"),
            (1000, "₹1,000"),
            (123456.5, "₹1,23,456.5"),
            (10000000, "₹1,00,00,000"),
            (Decimal("1499.99"), "₹1,499.99"),
            (-2500, "-₹2,500"),
        ],
    )
    def test_format_amount(self, amount, expected):
        assert pricing.format_amount(amount) == expected

    def test_format_amount_other_currency(self):
        assert pricing.format_amount(1500, "USD") == "$1,500"

    def test_format_amount_invalid(self):
        assert pricing.format_amount(None) == "₹0"

    @pytest.mark.parametrize(
        "minutes,expected",
        [(45, "45 min"), (60, "1 hr"), (90, "1 hr 30 min"), (180, "3 hr"), ("x", "0 min")],
    )
    def test_format_duration(self, minutes, expected):
        assert pricing.format_duration(minutes) == expected

    def test_mask_sensitive(self):
        assert pricing.mask_sensitive("pay_1234567890ABCD") == "pay_**********ABCD"
        assert pricing.mask_sensitive("short") == "short"
        assert pricing.mask_sensitive(None) is None


class TestCart:

    @pytest.fixture
    def items(self):
        return [
            CartItem(name="Bridal Makeup", price=Decimal("8000"), quantity=1, duration_minutes=120),
            CartItem(name="Manicure", price=Decimal("600"), quantity=2, duration_minutes=45),
            CartItem(name="Threading", price=Decimal("100"), quantity=1, duration_minutes=None),
        ]

    def test_subtotal(self, items):
        assert pricing.cart_subtotal(items) == Decimal("9300")
        assert pricing.cart_subtotal([]) == 0

    def test_total_service_duration(self, items):
        # 120 + 2 * 45 + 60 (default)
        assert pricing.total_service_duration(items) == 270

    def test_order_summary(self, items):
        assert pricing.order_summary([]) == "No services selected"
        assert pricing.order_summary(items[:1]) == "Bridal Makeup"
        assert pricing.order_summary(items[:2]) == "Bridal Makeup and Manicure"
        assert pricing.order_summary(items) == "Bridal Makeup and 2 other services"
