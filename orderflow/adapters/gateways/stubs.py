"""
Passerelles simulees en memoire.

Utilisees en developpement (gateway_mode="stub") et dans les tests. Chaque
stub enregistre ses appels et permet d'injecter des pannes :

- should_fail : l'appel suivant leve GatewayError (service injoignable)
- delay : latence simulee en secondes (pour tester les timeouts)

Les appels rejoues avec la meme idempotency_key retournent le premier
resultat sans nouvel effet.
"""

import asyncio
from datetime import timedelta
from decimal import Decimal
from typing import Any, Optional

from loguru import logger

from orderflow.core.errors import GatewayError, NotFoundError, ValidationError
from orderflow.core.ports.gateways import (
    IInventoryGateway,
    INotificationGateway,
    IPaymentGateway,
    NotificationResult,
    PaymentResult,
    PaymentStatus,
    RefundResult,
    Reservation,
    StockLevel,
)
from orderflow.core.value_objects.inventory import Inventory
from orderflow.utils.helpers import new_id, utcnow

RESERVATION_TTL = timedelta(minutes=15)


class _StubBase:
    """Comportements communs : latence, panne injectee, journal des appels."""

    name = "stub"

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.should_fail = False
        self.calls: list[tuple[str, tuple]] = []

    async def _enter(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.should_fail:
            raise GatewayError(self.name, f"{operation}: service indisponible (simule)")

    def call_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def health(self) -> bool:
        return not self.should_fail


class StubPaymentGateway(_StubBase, IPaymentGateway):
    """
    Processeur de paiement simule.

    Attributes:
        decline_next: Si True, le prochain paiement est refuse (PaymentResult.success=False)
        transactions: transaction_id -> (montant, statut)
        refunds: Liste des (transaction_id, montant) rembourses
    """

    name = "payment"

    def __init__(self, delay: float = 0.0) -> None:
        super().__init__(delay)
        self.decline_next = False
        self.transactions: dict[str, tuple[Decimal, PaymentStatus]] = {}
        self.refunds: list[tuple[str, Decimal]] = []
        self._by_key: dict[str, PaymentResult] = {}

    async def process_payment(
        self,
        amount: Decimal,
        currency: str,
        method: str,
        idempotency_key: Optional[str] = None,
    ) -> PaymentResult:
        await self._enter("process_payment", amount, currency, method)
        if idempotency_key and idempotency_key in self._by_key:
            return self._by_key[idempotency_key]

        if self.decline_next:
            self.decline_next = False
            result = PaymentResult(success=False, error_message="Carte refusee (simule)")
        else:
            transaction_id = f"txn_{new_id()}"
            self.transactions[transaction_id] = (amount, PaymentStatus.COMPLETED)
            result = PaymentResult(success=True, transaction_id=transaction_id)

        if idempotency_key:
            self._by_key[idempotency_key] = result
        return result

    async def refund_payment(self, transaction_id: str, amount: Decimal) -> RefundResult:
        await self._enter("refund_payment", transaction_id, amount)
        if transaction_id not in self.transactions:
            return RefundResult(success=False, error_message="Transaction inconnue")
        charged, _ = self.transactions[transaction_id]
        self.transactions[transaction_id] = (charged, PaymentStatus.CANCELLED)
        self.refunds.append((transaction_id, amount))
        return RefundResult(success=True, refund_id=f"rfd_{new_id()}")

    async def get_transaction_status(self, transaction_id: str) -> PaymentStatus:
        await self._enter("get_transaction_status", transaction_id)
        if transaction_id not in self.transactions:
            raise NotFoundError("Transaction", transaction_id)
        return self.transactions[transaction_id][1]


class StubInventoryGateway(_StubBase, IInventoryGateway):
    """
    Gestionnaire de stock simule, un objet Inventory par produit.

    Example:
        gateway = StubInventoryGateway()
        gateway.set_stock("p1", 5)
        reservation = await gateway.reserve_stock("p1", 2)
    """

    name = "inventory"

    def __init__(self, delay: float = 0.0) -> None:
        super().__init__(delay)
        self.inventories: dict[str, Inventory] = {}
        self.reservations: dict[str, Reservation] = {}
        self._by_key: dict[str, Reservation] = {}

    def set_stock(self, product_id: str, quantity: int) -> None:
        """
        Fixe le stock physique d'un produit.

        Les reservations en cours sont conservees dans la limite du nouveau
        stock ; l'excedent est ramene au stock et journalise.
        """
        reserved = self.inventories.get(product_id, Inventory(0)).reserved
        if reserved > quantity:
            logger.warning(
                f"Stock ramene a {quantity} sous {reserved} reserve(s), reservations plafonnees",
                product_id=product_id,
            )
            reserved = quantity
        self.inventories[product_id] = Inventory(quantity, reserved)

    def _inventory(self, product_id: str) -> Inventory:
        if product_id not in self.inventories:
            raise NotFoundError("Product", product_id)
        return self.inventories[product_id]

    async def check_stock(self, product_id: str) -> StockLevel:
        await self._enter("check_stock", product_id)
        inventory = self._inventory(product_id)
        return StockLevel(available=inventory.available, reserved=inventory.reserved)

    async def reserve_stock(
        self,
        product_id: str,
        quantity: int,
        idempotency_key: Optional[str] = None,
    ) -> Reservation:
        await self._enter("reserve_stock", product_id, quantity)
        if idempotency_key and idempotency_key in self._by_key:
            return self._by_key[idempotency_key]

        self.inventories[product_id] = self._inventory(product_id).reserve(quantity, product_id)
        reservation = Reservation(
            reservation_id=f"res_{new_id()}",
            product_id=product_id,
            quantity=quantity,
            expires_at=utcnow() + RESERVATION_TTL,
        )
        self.reservations[reservation.reservation_id] = reservation
        if idempotency_key:
            self._by_key[idempotency_key] = reservation
        return reservation

    async def release_reservation(self, reservation_id: str) -> None:
        await self._enter("release_reservation", reservation_id)
        reservation = self.reservations.pop(reservation_id, None)
        if reservation is None:
            # Deja liberee ou confirmee
            logger.debug("Reservation absente, rien a liberer", reservation_id=reservation_id)
            return
        inventory = self._inventory(reservation.product_id)
        self.inventories[reservation.product_id] = inventory.release(reservation.quantity)

    async def confirm_usage(self, reservation_id: str) -> None:
        await self._enter("confirm_usage", reservation_id)
        reservation = self.reservations.pop(reservation_id, None)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        inventory = self._inventory(reservation.product_id)
        try:
            self.inventories[reservation.product_id] = inventory.consume(reservation.quantity)
        except ValidationError as exc:
            raise GatewayError(self.name, exc.message) from exc


class StubNotificationGateway(_StubBase, INotificationGateway):
    """
    Canal de notification simule.

    Les messages envoyes sont conserves dans sent (canal, destinataire, sujet).
    Une panne injectee est rapportee dans le resultat, jamais levee.
    """

    name = "notification"

    def __init__(self, delay: float = 0.0) -> None:
        super().__init__(delay)
        self.sent: list[dict[str, Any]] = []

    async def _deliver(self, channel: str, recipient: str, subject: str, **extra: Any) -> NotificationResult:
        try:
            await self._enter(f"send_{channel}", recipient, subject)
        except GatewayError as exc:
            return NotificationResult(success=False, error_message=exc.message)
        message_id = f"msg_{new_id()}"
        # Sans canal reel, le contenu (jetons compris) n'est visible que dans les logs
        logger.info(
            f"[{channel}] {recipient} - {subject}: {extra.get('body', '')}",
            message_id=message_id,
        )
        self.sent.append(
            {"id": message_id, "channel": channel, "to": recipient, "subject": subject, **extra}
        )
        return NotificationResult(success=True, message_id=message_id)

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> NotificationResult:
        return await self._deliver("email", to, subject, body=body, metadata=metadata or {})

    async def send_sms(self, phone: str, message: str) -> NotificationResult:
        return await self._deliver("sms", phone, message)

    async def send_push(
        self,
        user_id: str,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
    ) -> NotificationResult:
        return await self._deliver("push", user_id, title, body=body, data=data or {})
