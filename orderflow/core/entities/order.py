"""
Entités commande.

Une commande passe par les statuts definis dans la machine a etats ;
toute transition est verifiee avant modification.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from orderflow.core.errors import OrderCannotCancelError, ValidationError
from orderflow.core.state_machine import OrderStatus, ensure_transition, is_cancellable
from orderflow.core.value_objects.money import Money
from orderflow.utils.helpers import new_id, utcnow


@dataclass(frozen=True)
class OrderItem:
    """
    Ligne de commande.

    Attributs :
        product_id : Identifiant du produit
        quantity : Quantite commandee (> 0)
        unit_price : Prix unitaire
    """

    product_id: str
    quantity: int
    unit_price: Money

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValidationError(f"Quantite invalide pour {self.product_id}: {self.quantity}")

    @property
    def subtotal(self) -> Money:
        return self.unit_price.multiply(self.quantity)


@dataclass
class Order:
    """
    Commande client.

    Attributs :
        user_id : Client
        items : Lignes de commande
        total : Montant total (somme des sous-totaux)
        shipping_address : Adresse de livraison
        payment_method : Moyen de paiement
        id : Identifiant UUID
        status : Statut courant
        payment_transaction_id : Transaction chez le processeur de paiement
        reservation_ids : Reservations de stock detenues par la commande
        cancellation_reason : Motif d'annulation
        created_at / updated_at : Horodatages
        version : Compteur de concurrence optimiste (0 = jamais persistee)
    """

    user_id: str
    items: list[OrderItem]
    total: Money
    shipping_address: str
    payment_method: str
    id: str = field(default_factory=new_id)
    status: OrderStatus = OrderStatus.PENDING
    payment_transaction_id: Optional[str] = None
    reservation_ids: list[str] = field(default_factory=list)
    cancellation_reason: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    @property
    def currency(self) -> str:
        return self.total.currency

    def transition_to(self, target: OrderStatus) -> None:
        """
        Change le statut apres verification par la machine a etats.

        Raises:
            InvalidStatusTransitionError: Si la transition est interdite
        """
        ensure_transition(self.status, target)
        self.status = target
        self.updated_at = utcnow()

    def cancel(self, reason: Optional[str] = None) -> None:
        """
        Annule la commande.

        Raises:
            OrderCannotCancelError: Si le statut courant n'autorise pas l'annulation
        """
        if not is_cancellable(self.status):
            raise OrderCannotCancelError(
                f"La commande {self.id} ne peut pas etre annulee (statut {self.status.value})"
            )
        self.transition_to(OrderStatus.CANCELLED)
        self.cancellation_reason = reason


def compute_total(items: list[OrderItem], currency: str) -> Money:
    """Somme des sous-totaux ; toutes les lignes doivent etre dans la devise donnee."""
    total = Money.zero(currency)
    for item in items:
        total = total.add(item.subtotal)
    return total
