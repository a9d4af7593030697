"""
Service de gestion du stock local des produits.

Chaque modification de stock est une ecriture versionnee du produit suivie
d'un mouvement dans le journal d'audit, dans un meme Unit of Work. Deux
ajustements concurrents sur le meme produit ne peuvent pas aboutir tous les
deux : le second echoue en ConcurrentModification et doit etre rejoue.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any, Optional

from loguru import logger

from orderflow.config import Settings
from orderflow.core.entities.product import (
    AdjustmentDirection,
    MovementKind,
    Product,
    StockMovement,
)
from orderflow.core.errors import ConflictError, NotFoundError
from orderflow.core.ports.gateways import INotificationGateway
from orderflow.core.ports.repositories import IProductRepository, IStockMovementRepository
from orderflow.core.ports.unit_of_work import IUnitOfWork
from orderflow.core.result import OperationResult
from orderflow.services.boundary import service_operation
from orderflow.services.dto import movement_to_dict, product_to_dict
from orderflow.services.saga import bounded
from orderflow.services.validators import (
    validate_adjustment,
    validate_product,
    validate_stock_entries,
)


class InventoryService:
    """
    Service applicatif du stock.

    Utilisation typique:
        service = InventoryService(uow, products, movements, notifications, settings)
        result = await service.adjust_inventory(product_id, 6, "casse", "decrease")
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        products: IProductRepository,
        movements: IStockMovementRepository,
        notifications: INotificationGateway,
        settings: Settings,
    ) -> None:
        self._uow = uow
        self._products = products
        self._movements = movements
        self._notifications = notifications
        self._settings = settings
        self._log = logger.bind(service="InventoryService")

    def _get(self, product_id: str) -> Product:
        product = self._products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    async def _check_stock_alert(self, product: Product) -> None:
        """Alerte best-effort quand le stock passe sous le seuil du produit."""
        if not product.is_below_threshold():
            return
        self._log.warning(
            f"Stock bas pour {product.sku}: {product.stock} < {product.low_stock_threshold}",
            product_id=product.id,
        )
        try:
            result = await bounded(
                "notification",
                self._notifications.send_email(
                    self._settings.stock_alert_email,
                    f"Alerte stock: {product.sku}",
                    f"{product.name} ({product.sku}) : {product.stock} unite(s) restante(s), "
                    f"seuil {product.low_stock_threshold}.",
                    metadata={"product_id": product.id, "stock": product.stock},
                ),
                self._settings.gateway_timeout_seconds,
            )
        except Exception as exc:
            self._log.warning(f"Alerte stock non envoyee: {exc}", product_id=product.id)
            return
        if not result.success:
            self._log.warning(
                f"Alerte stock non envoyee: {result.error_message}", product_id=product.id
            )

    @service_operation("register_product")
    async def register_product(
        self,
        sku: str,
        name: str,
        price: Decimal | str,
        currency: Optional[str] = None,
        initial_stock: int = 0,
        low_stock_threshold: Optional[int] = None,
    ) -> OperationResult[dict[str, Any]]:
        currency = (currency or self._settings.default_currency).upper()
        if low_stock_threshold is None:
            low_stock_threshold = self._settings.low_stock_threshold
        money = validate_product(sku, name, price, currency, initial_stock, low_stock_threshold)
        if self._products.find_by_sku(sku) is not None:
            raise ConflictError(f"Reference deja utilisee: {sku}")

        product = Product(
            sku=sku.strip(),
            name=name.strip(),
            price=money,
            stock=initial_stock,
            low_stock_threshold=low_stock_threshold,
        )

        async def persist() -> Product:
            self._products.save(product)
            if initial_stock:
                self._movements.append(
                    StockMovement(
                        product_id=product.id,
                        kind=MovementKind.ADJUSTMENT,
                        delta=initial_stock,
                        stock_before=0,
                        stock_after=initial_stock,
                        reason="Stock initial",
                    )
                )
            return product

        await self._uow.execute_in_transaction(persist)
        self._log.info(f"Produit enregistre: {product.sku}", product_id=product.id)
        return OperationResult.ok(product_to_dict(product))

    @service_operation("adjust_inventory")
    async def adjust_inventory(
        self,
        product_id: str,
        quantity: int,
        reason: str,
        direction: AdjustmentDirection | str,
    ) -> OperationResult[dict[str, Any]]:
        """
        Ajuste le stock d'un produit (entree ou sortie).

        Returns:
            OperationResult avec {"product_id", "stock_before", "stock_after"}
        """
        parsed = validate_adjustment(product_id, quantity, reason, direction)

        async def adjust() -> tuple[Product, int]:
            product = self._get(product_id)
            before = product.stock
            product.set_stock(product.compute_adjusted_stock(quantity, parsed))
            self._products.save(product)
            self._movements.append(
                StockMovement(
                    product_id=product.id,
                    kind=MovementKind.ADJUSTMENT,
                    delta=product.stock - before,
                    stock_before=before,
                    stock_after=product.stock,
                    reason=reason,
                )
            )
            return product, before

        product, before = await self._uow.execute_in_transaction(adjust)
        self._log.info(
            f"Stock ajuste: {product.sku} {before} -> {product.stock}",
            product_id=product.id,
            direction=parsed.value,
        )
        await self._check_stock_alert(product)
        return OperationResult.ok(
            {"product_id": product.id, "stock_before": before, "stock_after": product.stock}
        )

    @service_operation("stock_taking")
    async def stock_taking(
        self, entries: Sequence[Mapping[str, Any]]
    ) -> OperationResult[dict[str, Any]]:
        """
        Inventaire physique : aligne le stock enregistre sur le stock compte.

        Chaque ecart ecrase le stock et ajoute un mouvement STOCK_TAKING. Un
        seul Unit of Work pour tout l'inventaire : un produit inconnu annule
        l'ensemble.

        Returns:
            OperationResult avec {"counted", "discrepancies": [...]}
        """
        counts = validate_stock_entries(entries)

        async def reconcile() -> list[dict[str, Any]]:
            discrepancies = []
            for product_id, actual in counts:
                product = self._get(product_id)
                difference = actual - product.stock
                if difference == 0:
                    continue
                before = product.stock
                product.set_stock(actual)
                self._products.save(product)
                self._movements.append(
                    StockMovement(
                        product_id=product.id,
                        kind=MovementKind.STOCK_TAKING,
                        delta=difference,
                        stock_before=before,
                        stock_after=actual,
                        reason="Ecart d'inventaire",
                    )
                )
                discrepancies.append(
                    {
                        "product_id": product.id,
                        "recorded": before,
                        "actual": actual,
                        "difference": difference,
                    }
                )
            return discrepancies

        discrepancies = await self._uow.execute_in_transaction(reconcile)
        self._log.info(
            f"Inventaire termine: {len(counts)} ligne(s), {len(discrepancies)} ecart(s)"
        )
        return OperationResult.ok({"counted": len(counts), "discrepancies": discrepancies})

    @service_operation("get_stock")
    async def get_stock(self, product_id: str) -> OperationResult[dict[str, Any]]:
        return OperationResult.ok(product_to_dict(self._get(product_id)))

    @service_operation("list_movements")
    async def list_movements(self, product_id: str) -> OperationResult[list[dict[str, Any]]]:
        self._get(product_id)
        return OperationResult.ok(
            [movement_to_dict(m) for m in self._movements.list_for_product(product_id)]
        )
