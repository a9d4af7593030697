"""
Interfaces ports pour les passerelles externes.

Interfaces abstraites (ports) définissant les contrats pour les systèmes
externes : processeur de paiement, gestionnaire de stock et canal de
notification. Seules des structures de données simples traversent ces
frontières ; aucun type propre à un fournisseur ne remonte dans les services.

Les passerelles sont supposées idempotentes par clé : un appel rejoué avec
la même idempotency_key ne s'applique pas deux fois.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class PaymentStatus(Enum):
    """Statut normalisé d'une transaction de paiement."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class PaymentResult:
    """
    Résultat d'un paiement.

    Attributs :
        success : True si le paiement est accepté
        transaction_id : Identifiant de transaction chez le processeur
        error_message : Motif du refus
    """

    success: bool
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class RefundResult:
    """Résultat d'un remboursement."""

    success: bool
    refund_id: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class StockLevel:
    """Niveau de stock vu par le gestionnaire externe."""

    available: int
    reserved: int


@dataclass
class Reservation:
    """
    Réservation de stock.

    Attributs :
        reservation_id : Identifiant de la réservation
        product_id : Produit réservé
        quantity : Quantité réservée
        expires_at : Expiration de la réservation si non confirmée
    """

    reservation_id: str
    product_id: str
    quantity: int
    expires_at: Optional[datetime] = None


@dataclass
class NotificationResult:
    """Résultat d'un envoi de notification."""

    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None


class IPaymentGateway(ABC):
    """Interface du processeur de paiement."""

    @abstractmethod
    async def health(self) -> bool:
        """Indique si le service répond."""
        ...

    @abstractmethod
    async def process_payment(
        self,
        amount: Decimal,
        currency: str,
        method: str,
        idempotency_key: Optional[str] = None,
    ) -> PaymentResult:
        """Débite un montant. Un refus est un PaymentResult(success=False)."""
        ...

    @abstractmethod
    async def refund_payment(self, transaction_id: str, amount: Decimal) -> RefundResult:
        """Rembourse tout ou partie d'une transaction."""
        ...

    @abstractmethod
    async def get_transaction_status(self, transaction_id: str) -> PaymentStatus:
        """Retourne le statut normalisé d'une transaction."""
        ...


class IInventoryGateway(ABC):
    """Interface du gestionnaire de stock externe (réservations)."""

    @abstractmethod
    async def health(self) -> bool:
        ...

    @abstractmethod
    async def check_stock(self, product_id: str) -> StockLevel:
        """Retourne les quantités disponible et réservée."""
        ...

    @abstractmethod
    async def reserve_stock(
        self,
        product_id: str,
        quantity: int,
        idempotency_key: Optional[str] = None,
    ) -> Reservation:
        """
        Réserve des unités.

        Raises:
            InsufficientStockError: Si le stock disponible est insuffisant
        """
        ...

    @abstractmethod
    async def release_reservation(self, reservation_id: str) -> None:
        """Libère une réservation (compensation ou annulation)."""
        ...

    @abstractmethod
    async def confirm_usage(self, reservation_id: str) -> None:
        """Confirme la consommation des unités réservées (expédition)."""
        ...


class INotificationGateway(ABC):
    """
    Interface du canal de notification.

    Envoi « fire-and-report » : les échecs sont rapportés dans le résultat
    et journalisés par l'appelant, ils ne bloquent jamais un workflow.
    """

    @abstractmethod
    async def health(self) -> bool:
        ...

    @abstractmethod
    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> NotificationResult:
        ...

    @abstractmethod
    async def send_sms(self, phone: str, message: str) -> NotificationResult:
        ...

    @abstractmethod
    async def send_push(
        self,
        user_id: str,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
    ) -> NotificationResult:
        ...
