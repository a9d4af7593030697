"""
Machine a etats des commandes.

Les statuts d'une commande ne progressent que selon la table ORDER_TRANSITIONS.
Delivered et Cancelled sont terminaux. L'annulation reste possible tant que
la commande n'a pas ete expediee.
"""

from enum import Enum

from orderflow.core.errors import InvalidStatusTransitionError


class OrderStatus(Enum):
    """Statut d'une commande."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(source: OrderStatus, target: OrderStatus) -> bool:
    """Indique si la transition source -> target est autorisee."""
    return target in ORDER_TRANSITIONS.get(source, frozenset())


def ensure_transition(source: OrderStatus, target: OrderStatus) -> None:
    """
    Verifie une transition avant toute ecriture.

    Raises:
        InvalidStatusTransitionError: Si la table interdit la transition
    """
    if not can_transition(source, target):
        raise InvalidStatusTransitionError(
            f"Transition interdite: {source.value} -> {target.value}"
        )


def is_terminal(status: OrderStatus) -> bool:
    return not ORDER_TRANSITIONS[status]


def is_cancellable(status: OrderStatus) -> bool:
    """Une commande est annulable tant qu'elle n'est ni expediee ni terminale."""
    return can_transition(status, OrderStatus.CANCELLED)
