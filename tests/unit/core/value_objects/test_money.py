"""
Tests unitaires pour l'objet valeur Money.

Verifie l'arrondi a deux decimales, le refus des montants negatifs et
l'interdiction de melanger les devises.
"""

from decimal import Decimal

import pytest

from orderflow.core.errors import CurrencyMismatchError, ValidationError
from orderflow.core.value_objects.money import Money


class TestMoneyConstruction:
    """Tests de construction."""

    def test_amount_is_quantized_to_cents(self) -> None:
        assert Money("10.005", "USD").amount == Decimal("10.01")
        assert Money(3, "USD").amount == Decimal("3.00")

    def test_float_goes_through_str(self) -> None:
        """0.1 + 0.2 n'introduit pas d'erreur binaire."""
        assert Money(0.1, "USD").add(Money(0.2, "USD")).amount == Decimal("0.30")

    def test_currency_is_uppercased(self) -> None:
        assert Money("1", "eur").currency == "EUR"

    def test_negative_amount_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Money("-0.01", "USD")

    @pytest.mark.parametrize("currency", ["", "US", "EURO"])
    def test_invalid_currency_is_rejected(self, currency: str) -> None:
        with pytest.raises(ValidationError):
            Money("1", currency)

    def test_non_numeric_amount_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Money("abc", "USD")

    def test_infinite_amount_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Money(Decimal("Infinity"), "USD")


class TestMoneyArithmetic:
    """Tests des operations."""

    def test_add_same_currency(self) -> None:
        assert Money("100", "USD") + Money("0.50", "USD") == Money("100.50", "USD")

    def test_add_different_currency_raises(self) -> None:
        with pytest.raises(CurrencyMismatchError) as exc_info:
            Money("1", "USD").add(Money("1", "EUR"))
        assert exc_info.value.code == "CurrencyMismatch"

    def test_subtract_cannot_go_negative(self) -> None:
        with pytest.raises(ValidationError):
            Money("1", "USD").subtract(Money("2", "USD"))

    def test_multiply_by_quantity(self) -> None:
        assert Money("19.99", "USD").multiply(3) == Money("59.97", "USD")

    def test_multiply_by_negative_factor_raises(self) -> None:
        with pytest.raises(ValidationError):
            Money("1", "USD").multiply(-1)

    def test_zero_and_comparison(self) -> None:
        zero = Money.zero("USD")
        assert zero.is_zero()
        assert zero < Money("0.01", "USD")
        assert Money("5", "USD") <= Money("5", "USD")

    def test_comparison_across_currencies_raises(self) -> None:
        with pytest.raises(CurrencyMismatchError):
            _ = Money("1", "USD") < Money("1", "EUR")

    def test_str(self) -> None:
        assert str(Money("200", "USD")) == "200.00 USD"
