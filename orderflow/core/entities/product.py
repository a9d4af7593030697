"""
Entités produit et mouvements de stock.

Le stock local d'un produit n'est modifie que par InventoryService ;
chaque modification ajoute un StockMovement (journal d'audit, en ajout seul).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from orderflow.core.errors import InsufficientStockError, ValidationError
from orderflow.core.value_objects.money import Money
from orderflow.utils.helpers import new_id, utcnow


class AdjustmentDirection(Enum):
    """Sens d'un ajustement de stock."""

    INCREASE = "increase"
    DECREASE = "decrease"


class MovementKind(Enum):
    """Origine d'un mouvement de stock."""

    ADJUSTMENT = "adjustment"
    STOCK_TAKING = "stock_taking"


@dataclass
class Product:
    """
    Produit du catalogue avec son stock local.

    Attributs :
        sku : Reference unique
        name : Libelle
        price : Prix unitaire
        stock : Unites en stock
        low_stock_threshold : Seuil d'alerte de stock bas
        id : Identifiant UUID
        created_at / updated_at : Horodatages
        version : Compteur de concurrence optimiste (0 = jamais persiste)
    """

    sku: str
    name: str
    price: Money
    stock: int = 0
    low_stock_threshold: int = 10
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock negatif pour {self.sku}")

    def compute_adjusted_stock(self, quantity: int, direction: AdjustmentDirection) -> int:
        """
        Calcule le stock apres ajustement, sans modifier le produit.

        Raises:
            InsufficientStockError: Si une diminution rendrait le stock negatif
        """
        if direction == AdjustmentDirection.INCREASE:
            return self.stock + quantity
        if quantity > self.stock:
            raise InsufficientStockError(self.id, quantity, self.stock)
        return self.stock - quantity

    def set_stock(self, stock: int) -> None:
        if stock < 0:
            raise ValidationError(f"Stock negatif pour {self.sku}")
        self.stock = stock
        self.updated_at = utcnow()

    def is_below_threshold(self) -> bool:
        return self.stock < self.low_stock_threshold


@dataclass
class StockMovement:
    """
    Entree du journal d'audit du stock.

    Attributs :
        product_id : Produit concerne
        kind : Ajustement manuel ou ecart d'inventaire
        delta : Variation signee
        stock_before / stock_after : Stock avant et apres
        reason : Motif saisi
        id : Identifiant UUID
        created_at : Date du mouvement
    """

    product_id: str
    kind: MovementKind
    delta: int
    stock_before: int
    stock_after: int
    reason: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
