"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from servicebay.domain.exceptions import InvalidAmountError, ValidationError
from servicebay.domain.model.value_objects import Money, Quantity, to_decimal


# ── to_decimal ───────────────────────────────────────────────────────────────


class TestToDecimal:

    def test_string_and_int(self):
        assert to_decimal("12.50") == Decimal("12.50")
        assert to_decimal(7) == Decimal("7")

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_garbage_rejected(self):
        with pytest.raises(InvalidAmountError, match="Invalid amount"):
            to_decimal("twelve")

    def test_bool_rejected(self):
        with pytest.raises(InvalidAmountError):
            to_decimal(True)

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-inf"])
    def test_non_finite_rejected(self, raw):
        with pytest.raises(InvalidAmountError):
            to_decimal(raw)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidAmountError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_invalid_amount_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            Money.of("-0.01")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(InvalidAmountError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_keeps_full_precision(self):
        result = Money.of("33.333") * Decimal("1.5")
        assert result.amount == Decimal("49.9995")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("10") * 1.5

    def test_rounded_is_half_up(self):
        assert Money.of("2.345").rounded() == Money.of("2.35")
        assert Money.of("2.344").rounded() == Money.of("2.34")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "₹15.00"
        assert str(Money.of("1234.5")) == "₹1,234.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") >= Money.of("10")

    def test_zero(self):
        assert Money.zero().is_zero
        assert not Money.of("0.01").is_zero


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_fractional_quantity(self):
        assert Quantity.of("2.5").value == Decimal("2.5")

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity.of("0")

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(Decimal("-3"))

    def test_unparseable_rejected(self):
        with pytest.raises(ValidationError, match="Invalid quantity"):
            Quantity.of("lots")

    def test_str_is_normalized(self):
        assert str(Quantity(Decimal("2.50"))) == "2.5"
        assert str(Quantity(Decimal("10"))) == "10"
