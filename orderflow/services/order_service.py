"""
Service de gestion des commandes.

create_order est une saga : chaque etape reussie enregistre sa compensation,
rejouee en ordre inverse si une etape suivante echoue.

    1. Validation des entrees             (aucun effet de bord)
    2. Reservation du stock par article   -> liberation des reservations
    3. Calcul du total
    4. Enregistrement de la commande      -> rollback du Unit of Work
    5. Paiement                           -> remboursement
    6. Notification de confirmation       (best-effort)

Le paiement est effectue dans la portee transactionnelle de l'etape 4 : un
refus ou une panne annule l'ecriture de la commande, et un echec du commit
declenche le remboursement.

Une reservation ou un paiement reste sans reponse (delai depasse, panne
reseau) : l'effet a pu etre applique. La compensation rejoue alors l'appel
avec la meme cle d'idempotence pour retrouver l'identifiant, puis libere ou
rembourse.
"""

from collections.abc import Mapping, Sequence
from functools import partial
from typing import Any, Optional

from loguru import logger

from orderflow.config import Settings
from orderflow.core.entities.order import Order, compute_total
from orderflow.core.entities.user import User
from orderflow.core.errors import (
    BusinessError,
    GatewayError,
    InsufficientStockError,
    NotFoundError,
    PaymentDeclinedError,
)
from orderflow.core.ports.gateways import (
    IInventoryGateway,
    INotificationGateway,
    IPaymentGateway,
)
from orderflow.core.ports.repositories import IOrderRepository, IUserRepository
from orderflow.core.ports.unit_of_work import IUnitOfWork
from orderflow.core.result import OperationResult
from orderflow.core.state_machine import OrderStatus
from orderflow.logging_config import COMPENSATION_CONDITION
from orderflow.services.boundary import service_operation
from orderflow.services.dto import order_to_dict
from orderflow.services.saga import CompensationStack, bounded
from orderflow.services.validators import validate_order_input, validate_order_status


class OrderService:
    """
    Service applicatif des commandes.

    Utilisation typique:
        service = OrderService(uow, orders, users, payment, inventory, notifications, settings)
        result = await service.create_order(user_id, [{"product_id": "p1", "quantity": 2, "unit_price": "100"}],
                                            "1 rue de la Paix", "credit_card")
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        orders: IOrderRepository,
        users: IUserRepository,
        payment: IPaymentGateway,
        inventory: IInventoryGateway,
        notifications: INotificationGateway,
        settings: Settings,
    ) -> None:
        self._uow = uow
        self._orders = orders
        self._users = users
        self._payment = payment
        self._inventory = inventory
        self._notifications = notifications
        self._settings = settings
        self._log = logger.bind(service="OrderService")

    # ------------------------------------------------------------------
    # Acces aux passerelles (bornes dans le temps)
    # ------------------------------------------------------------------

    async def _call(self, gateway: str, call):
        return await bounded(gateway, call, self._settings.gateway_timeout_seconds)

    async def _release(self, reservation_id: str) -> None:
        await self._call("inventory", self._inventory.release_reservation(reservation_id))

    async def _refund(self, transaction_id: str, order: Order) -> None:
        result = await self._call(
            "payment", self._payment.refund_payment(transaction_id, order.total.amount)
        )
        if not result.success:
            raise BusinessError(f"Remboursement refuse: {result.error_message}")

    async def _recover_reservation(self, product_id: str, quantity: int, key: str) -> None:
        """
        Compense une reservation restee sans reponse.

        Le gestionnaire de stock est idempotent par cle : rejouer la demande
        retourne la reservation eventuellement effectuee, qui est alors liberee.
        """
        try:
            reservation = await self._call(
                "inventory", self._inventory.reserve_stock(product_id, quantity, key)
            )
        except InsufficientStockError:
            # Rien n'a ete reserve sous cette cle
            return
        await self._release(reservation.reservation_id)

    async def _recover_payment(
        self, order: Order, currency: str, payment_method: str, key: str
    ) -> None:
        """Rejoue un paiement sans reponse (meme cle) et rembourse s'il a abouti."""
        payment = await self._call(
            "payment",
            self._payment.process_payment(order.total.amount, currency, payment_method, key),
        )
        if payment.success and payment.transaction_id:
            await self._refund(payment.transaction_id, order)

    async def _best_effort(
        self, label: str, order: Order, action, reconcile: bool = False
    ) -> bool:
        """
        Execute une action dont l'echec est journalise sans interrompre le workflow.

        Avec reconcile=True, l'echec part dans le journal de reconciliation.
        """
        try:
            await action()
        except Exception as exc:
            if reconcile:
                self._log.bind(condition=COMPENSATION_CONDITION).error(
                    f"{label} en echec: {exc}", order_id=order.id
                )
            else:
                self._log.warning(f"{label} en echec: {exc}", order_id=order.id)
            return False
        return True

    async def _notify(self, order: Order, subject: str, body: str) -> None:
        user = self._users.find_by_id(order.user_id)
        if user is None:
            return

        async def send() -> None:
            result = await self._call(
                "notification",
                self._notifications.send_email(
                    user.email, subject, body, metadata={"order_id": order.id}
                ),
            )
            if not result.success:
                raise BusinessError(result.error_message or "notification refusee")

        await self._best_effort(f"Notification '{subject}'", order, send)

    def _get(self, order_id: str) -> Order:
        order = self._orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def _customer(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if not user.can_place_order():
            raise BusinessError(f"L'utilisateur {user_id} ne peut pas passer commande")
        return user

    # ------------------------------------------------------------------
    # Saga de creation
    # ------------------------------------------------------------------

    @service_operation("create_order")
    async def create_order(
        self,
        user_id: str,
        items: Sequence[Mapping[str, Any]],
        shipping_address: str,
        payment_method: str,
        currency: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> OperationResult[dict[str, Any]]:
        """
        Cree une commande : reservation, enregistrement, paiement, confirmation.

        Returns:
            OperationResult avec {"order_id", "total"} (total en Decimal)
        """
        currency = (currency or self._settings.default_currency).upper()
        lines = validate_order_input(
            user_id,
            items,
            shipping_address,
            payment_method,
            self._settings.supported_payment_methods,
            currency,
        )
        self._customer(user_id)

        order = Order(
            user_id=user_id,
            items=lines,
            total=compute_total(lines, currency),
            shipping_address=shipping_address.strip(),
            payment_method=payment_method,
        )
        key = idempotency_key or order.id
        saga = CompensationStack("create_order", order_id=order.id)

        try:
            for index, item in enumerate(order.items, start=1):
                reserve_key = f"{key}:reserve:{index}"
                try:
                    reservation = await self._call(
                        "inventory",
                        self._inventory.reserve_stock(item.product_id, item.quantity, reserve_key),
                    )
                except GatewayError:
                    # Sans reponse, la reservation a pu aboutir cote gestionnaire
                    saga.push(
                        f"recover_reservation:{reserve_key}",
                        partial(
                            self._recover_reservation, item.product_id, item.quantity, reserve_key
                        ),
                    )
                    raise
                order.reservation_ids.append(reservation.reservation_id)
                saga.push(
                    f"release_reservation:{reservation.reservation_id}",
                    partial(self._release, reservation.reservation_id),
                )

            async def persist_and_charge() -> None:
                self._orders.save(order)
                payment_key = f"{key}:payment"
                try:
                    payment = await self._call(
                        "payment",
                        self._payment.process_payment(
                            order.total.amount, currency, payment_method, payment_key
                        ),
                    )
                except GatewayError:
                    saga.push(
                        f"recover_payment:{payment_key}",
                        partial(
                            self._recover_payment, order, currency, payment_method, payment_key
                        ),
                    )
                    raise
                if not payment.success:
                    raise PaymentDeclinedError(
                        f"Paiement refuse: {payment.error_message or 'motif inconnu'}"
                    )
                saga.push(
                    f"refund_payment:{payment.transaction_id}",
                    partial(self._refund, payment.transaction_id, order),
                )
                order.payment_transaction_id = payment.transaction_id
                self._orders.save(order)

            await self._uow.execute_in_transaction(persist_and_charge)
        except Exception as exc:
            await saga.unwind(exc)
            raise

        self._log.info(
            f"Commande creee: {order.total}",
            order_id=order.id,
            user_id=user_id,
            items=len(order.items),
        )
        await self._notify(
            order,
            "Confirmation de commande",
            f"Votre commande {order.id} d'un montant de {order.total} est enregistree.",
        )
        return OperationResult.ok({"order_id": order.id, "total": order.total.amount})

    # ------------------------------------------------------------------
    # Annulation et cycle de vie
    # ------------------------------------------------------------------

    async def _cancel(self, order: Order, reason: Optional[str]) -> dict[str, Any]:
        """
        Annule une commande deja chargee.

        Le changement de statut fait foi : il est enregistre en premier, puis
        les reservations sont liberees et le paiement rembourse en best-effort.
        """
        order.cancel(reason)

        async def persist() -> Order:
            return self._orders.save(order)

        await self._uow.execute_in_transaction(persist)

        released = 0
        for reservation_id in order.reservation_ids:
            if await self._best_effort(
                f"Liberation de {reservation_id}",
                order,
                partial(self._release, reservation_id),
                reconcile=True,
            ):
                released += 1

        refunded = False
        if order.payment_transaction_id:
            refunded = await self._best_effort(
                "Remboursement",
                order,
                partial(self._refund, order.payment_transaction_id, order),
                reconcile=True,
            )

        self._log.info(
            "Commande annulee",
            order_id=order.id,
            reservations_released=released,
            refunded=refunded,
        )
        await self._notify(
            order,
            "Annulation de commande",
            f"Votre commande {order.id} a ete annulee.",
        )
        return {
            "order_id": order.id,
            "status": order.status.value,
            "reservations_released": released,
            "refunded": refunded,
        }

    @service_operation("cancel_order")
    async def cancel_order(
        self, order_id: str, reason: Optional[str] = None
    ) -> OperationResult[dict[str, Any]]:
        return OperationResult.ok(await self._cancel(self._get(order_id), reason))

    @service_operation("update_order_status")
    async def update_order_status(
        self, order_id: str, new_status: OrderStatus | str
    ) -> OperationResult[dict[str, Any]]:
        """
        Fait progresser une commande dans la machine a etats.

        Le passage a "shipped" confirme la consommation des reservations
        aupres du gestionnaire de stock (best-effort).
        """
        target = validate_order_status(new_status)
        order = self._get(order_id)
        if target == OrderStatus.CANCELLED:
            return OperationResult.ok(await self._cancel(order, None))

        previous = order.status
        order.transition_to(target)

        async def persist() -> Order:
            return self._orders.save(order)

        await self._uow.execute_in_transaction(persist)

        if target == OrderStatus.SHIPPED:
            for reservation_id in order.reservation_ids:
                await self._best_effort(
                    f"Confirmation de {reservation_id}",
                    order,
                    partial(
                        self._call,
                        "inventory",
                        self._inventory.confirm_usage(reservation_id),
                    ),
                )

        self._log.info(
            f"Commande {previous.value} -> {target.value}", order_id=order.id
        )
        await self._notify(
            order,
            "Suivi de commande",
            f"Votre commande {order.id} est maintenant: {target.value}.",
        )
        return OperationResult.ok({"order_id": order.id, "status": target.value})

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    @service_operation("get_order")
    async def get_order(self, order_id: str) -> OperationResult[dict[str, Any]]:
        return OperationResult.ok(order_to_dict(self._get(order_id)))

    @service_operation("list_user_orders")
    async def list_user_orders(self, user_id: str) -> OperationResult[list[dict[str, Any]]]:
        return OperationResult.ok([order_to_dict(o) for o in self._orders.find_by_user(user_id)])

    @service_operation("list_orders_by_status")
    async def list_orders_by_status(
        self, status: OrderStatus | str
    ) -> OperationResult[list[dict[str, Any]]]:
        target = validate_order_status(status)
        return OperationResult.ok([order_to_dict(o) for o in self._orders.find_by_status(target)])
