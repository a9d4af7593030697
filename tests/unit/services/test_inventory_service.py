"""
Tests du service de stock : catalogue, ajustements, inventaire physique
et concurrence optimiste entre deux ajustements simultanes.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import pytest
from sqlmodel import Session

from orderflow.adapters.gateways import StubNotificationGateway
from orderflow.container import build_inventory_service
from orderflow.core.entities.product import Product
from orderflow.core.result import OperationResult
from orderflow.infrastructure.persistence.repositories import (
    SQLModelProductRepository,
    SQLModelStockMovementRepository,
)
from orderflow.infrastructure.persistence.unit_of_work import SQLModelUnitOfWork
from orderflow.services.inventory_service import InventoryService


class InterleavingProductRepository(SQLModelProductRepository):
    """Execute une action concurrente juste apres la premiere lecture d'un produit."""

    def __init__(self, session: Session, interleave: Callable[[], None]) -> None:
        super().__init__(session)
        self._interleave: Optional[Callable[[], None]] = interleave

    def find_by_id(self, entity_id: str) -> Optional[Product]:
        product = super().find_by_id(entity_id)
        if self._interleave is not None:
            action, self._interleave = self._interleave, None
            action()
        return product


class TestRegisterProduct:
    @pytest.mark.asyncio
    async def test_register_with_initial_stock(self, inventory_service: InventoryService) -> None:
        result = await inventory_service.register_product("SKU-1", "Lampe", "19.90", initial_stock=8)

        assert result.success, result.error_message
        assert result.data["stock"] == 8
        assert result.data["price"] == "19.90"
        assert result.data["currency"] == "USD"
        movements = await inventory_service.list_movements(result.data["id"])
        assert [m["delta"] for m in movements.data] == [8]

    @pytest.mark.asyncio
    async def test_duplicate_sku_is_a_conflict(self, inventory_service: InventoryService) -> None:
        await inventory_service.register_product("SKU-1", "Lampe", "19.90")
        result = await inventory_service.register_product("SKU-1", "Autre", "5")
        assert result.error_code == "Conflict"

    @pytest.mark.asyncio
    async def test_invalid_product(self, inventory_service: InventoryService) -> None:
        result = await inventory_service.register_product("", "Lampe", "gratuit")
        assert result.error_code == "ValidationError"


class TestAdjustInventory:
    @pytest.mark.asyncio
    async def test_increase_and_decrease(
        self, inventory_service: InventoryService, widget: Product
    ) -> None:
        up = await inventory_service.adjust_inventory(widget.id, 10, "reception", "increase")
        down = await inventory_service.adjust_inventory(widget.id, 4, "casse", "decrease")

        assert up.data == {"product_id": widget.id, "stock_before": 5, "stock_after": 15}
        assert down.data == {"product_id": widget.id, "stock_before": 15, "stock_after": 11}
        movements = await inventory_service.list_movements(widget.id)
        assert [m["delta"] for m in movements.data] == [10, -4]

    @pytest.mark.asyncio
    async def test_decrease_below_zero_is_refused(
        self, inventory_service: InventoryService, widget: Product
    ) -> None:
        result = await inventory_service.adjust_inventory(widget.id, 6, "casse", "decrease")

        assert result.error_code == "InsufficientStock"
        assert (await inventory_service.get_stock(widget.id)).data["stock"] == 5

    @pytest.mark.asyncio
    async def test_low_stock_sends_alert(
        self,
        inventory_service: InventoryService,
        widget: Product,
        notification_gateway: StubNotificationGateway,
        test_settings,
    ) -> None:
        await inventory_service.adjust_inventory(widget.id, 1, "casse", "decrease")

        alert = notification_gateway.sent[-1]
        assert alert["to"] == test_settings.stock_alert_email
        assert widget.sku in alert["subject"]

    @pytest.mark.asyncio
    async def test_unknown_product(self, inventory_service: InventoryService) -> None:
        result = await inventory_service.adjust_inventory("nope", 1, "test", "increase")
        assert result.error_code == "NotFound"

    @pytest.mark.asyncio
    async def test_concurrent_adjustments_one_must_retry(
        self,
        engine,
        test_settings,
        notification_gateway: StubNotificationGateway,
        inventory_service: InventoryService,
    ) -> None:
        """Deux sorties de 6 sur un stock de 10 : une seule aboutit."""
        created = await inventory_service.register_product("SKU-C", "Caisse", "3", initial_stock=10)
        product_id = created.data["id"]
        concurrent_results: list[OperationResult] = []

        def run_other_writer() -> OperationResult:
            with Session(engine) as other_session:
                other = build_inventory_service(other_session, test_settings, notification_gateway)
                return asyncio.run(other.adjust_inventory(product_id, 6, "casse B", "decrease"))

        def interleave() -> None:
            with ThreadPoolExecutor(max_workers=1) as pool:
                concurrent_results.append(pool.submit(run_other_writer).result())

        with Session(engine) as session_a:
            service_a = InventoryService(
                uow=SQLModelUnitOfWork(session_a),
                products=InterleavingProductRepository(session_a, interleave),
                movements=SQLModelStockMovementRepository(session_a),
                notifications=notification_gateway,
                settings=test_settings,
            )
            result_a = await service_a.adjust_inventory(product_id, 6, "casse A", "decrease")

        assert concurrent_results[0].success, concurrent_results[0].error_message
        assert result_a.error_code == "ConcurrentModification"
        with Session(engine) as check:
            stored = SQLModelProductRepository(check).find_by_id(product_id)
            movements = SQLModelStockMovementRepository(check).list_for_product(product_id)
        assert stored.stock == 4
        assert [m.reason for m in movements] == ["Stock initial", "casse B"]


class TestStockTaking:
    @pytest.mark.asyncio
    async def test_reports_discrepancies(
        self, inventory_service: InventoryService, widget: Product
    ) -> None:
        other = await inventory_service.register_product("SKU-2", "Vis", "0.10", initial_stock=50)

        result = await inventory_service.stock_taking(
            [
                {"product_id": widget.id, "actual_quantity": 3},
                {"product_id": other.data["id"], "actual_quantity": 50},
            ]
        )

        assert result.data == {
            "counted": 2,
            "discrepancies": [
                {"product_id": widget.id, "recorded": 5, "actual": 3, "difference": -2}
            ],
        }
        assert (await inventory_service.get_stock(widget.id)).data["stock"] == 3

    @pytest.mark.asyncio
    async def test_unknown_product_aborts_everything(
        self, inventory_service: InventoryService, widget: Product
    ) -> None:
        result = await inventory_service.stock_taking(
            [
                {"product_id": widget.id, "actual_quantity": 1},
                {"product_id": "ghost", "actual_quantity": 1},
            ]
        )

        assert result.error_code == "NotFound"
        assert (await inventory_service.get_stock(widget.id)).data["stock"] == 5
