"""
Objet valeur monétaire.

Les montants sont des Decimal quantifiés à deux décimales pour éviter les
erreurs d'arrondi des flottants. Toute opération entre deux devises
différentes est refusée.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from orderflow.core.errors import CurrencyMismatchError, ValidationError

_CENT = Decimal("0.01")

Number = Union[Decimal, int, str, float]


def _to_decimal(value: Number) -> Decimal:
    """Convertit une valeur numérique en Decimal (les float passent par str)."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Montant invalide: {value!r}") from exc


@dataclass(frozen=True)
class Money:
    """
    Montant positif ou nul dans une devise donnée.

    Attributs :
        amount : Montant (Decimal, 2 décimales)
        currency : Code ISO 4217 de la devise (ex: "USD", "EUR")
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        amount = _to_decimal(self.amount)
        if not amount.is_finite():
            raise ValidationError("Le montant doit etre un nombre fini")
        if amount < 0:
            raise ValidationError("Le montant ne peut pas etre negatif")
        if not self.currency or len(self.currency) != 3:
            raise ValidationError(f"Devise invalide: {self.currency!r}")
        object.__setattr__(self, "amount", amount.quantize(_CENT, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def zero(cls, currency: str) -> "Money":
        """Montant nul dans la devise donnée."""
        return cls(Decimal("0"), currency)

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        """Additionne deux montants de même devise."""
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        """Soustrait un montant ; le résultat ne peut pas être négatif."""
        self._assert_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, factor: Number) -> "Money":
        """Multiplie par un facteur positif ou nul (ex: une quantité)."""
        factor = _to_decimal(factor)
        if factor < 0:
            raise ValidationError("Le multiplicateur ne peut pas etre negatif")
        return Money(self.amount * factor, self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __lt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
