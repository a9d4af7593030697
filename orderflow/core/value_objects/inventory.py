"""
Objet valeur de stock.

Invariant : 0 <= reserved <= quantity. Chaque opération retourne une
nouvelle instance, l'invariant est vérifié à la construction.
"""

from dataclasses import dataclass

from orderflow.core.errors import InsufficientStockError, ValidationError


@dataclass(frozen=True)
class Inventory:
    """
    Quantité physique et quantité réservée d'un produit.

    Attributs :
        quantity : Unités physiquement présentes
        reserved : Unités réservées par des commandes en cours

    Propriétés :
        available : Unités réservables (quantity - reserved)
    """

    quantity: int
    reserved: int = 0

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError("La quantite ne peut pas etre negative")
        if self.reserved < 0 or self.reserved > self.quantity:
            raise ValidationError(
                f"Reservation incoherente: {self.reserved} reserve(s) "
                f"pour {self.quantity} en stock"
            )

    @property
    def available(self) -> int:
        return self.quantity - self.reserved

    def reserve(self, count: int, product_id: str = "") -> "Inventory":
        """
        Réserve des unités disponibles.

        Raises:
            ValidationError: Si count <= 0
            InsufficientStockError: Si count > available
        """
        _check_positive(count)
        if count > self.available:
            raise InsufficientStockError(product_id, count, self.available)
        return Inventory(self.quantity, self.reserved + count)

    def release(self, count: int) -> "Inventory":
        """Libère des unités réservées (annulation de réservation)."""
        _check_positive(count)
        if count > self.reserved:
            raise ValidationError(
                f"Impossible de liberer {count} unite(s), seulement {self.reserved} reservee(s)"
            )
        return Inventory(self.quantity, self.reserved - count)

    def consume(self, count: int) -> "Inventory":
        """Consomme des unités réservées (sortie confirmée du stock)."""
        _check_positive(count)
        if count > self.reserved:
            raise ValidationError(
                f"Impossible de consommer {count} unite(s), seulement {self.reserved} reservee(s)"
            )
        return Inventory(self.quantity - count, self.reserved - count)

    def restock(self, count: int) -> "Inventory":
        """Ajoute des unités au stock physique."""
        _check_positive(count)
        return Inventory(self.quantity + count, self.reserved)


def _check_positive(count: int) -> None:
    if count <= 0:
        raise ValidationError("La quantite doit etre strictement positive")
