"""
Client HTTP du gestionnaire de stock externe (reservations).

Implemente IInventoryGateway. Un 409 sur la reservation signifie un stock
insuffisant ; le corps porte la quantite encore disponible.
"""

from datetime import datetime
from typing import Optional

import httpx

from orderflow.adapters.gateways.http_base import HTTPGatewayClient, unexpected_status
from orderflow.core.errors import InsufficientStockError, NotFoundError
from orderflow.core.ports.gateways import IInventoryGateway, Reservation, StockLevel


class HTTPInventoryGateway(HTTPGatewayClient, IInventoryGateway):
    """Passerelle de stock HTTP."""

    name = "inventory"

    async def check_stock(self, product_id: str) -> StockLevel:
        try:
            response = await self._send("GET", f"/stock/{product_id}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise NotFoundError("Product", product_id) from exc
            raise unexpected_status(self.name, exc) from exc
        data = response.json()
        return StockLevel(available=int(data["available"]), reserved=int(data["reserved"]))

    async def reserve_stock(
        self,
        product_id: str,
        quantity: int,
        idempotency_key: Optional[str] = None,
    ) -> Reservation:
        try:
            response = await self._send(
                "POST",
                "/reservations",
                idempotency_key=idempotency_key,
                json={"product_id": product_id, "quantity": quantity},
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 409:
                available = exc.response.json().get("available", 0)
                raise InsufficientStockError(product_id, quantity, int(available)) from exc
            if exc.response.status_code == 404:
                raise NotFoundError("Product", product_id) from exc
            raise unexpected_status(self.name, exc) from exc

        data = response.json()
        expires_at = data.get("expires_at")
        return Reservation(
            reservation_id=data["id"],
            product_id=data.get("product_id", product_id),
            quantity=int(data.get("quantity", quantity)),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
        )

    async def release_reservation(self, reservation_id: str) -> None:
        try:
            await self._send(
                "DELETE",
                f"/reservations/{reservation_id}",
                idempotency_key=f"{reservation_id}:release",
            )
        except httpx.HTTPStatusError as exc:
            # Deja liberee ou expiree : l'effet attendu est atteint
            if exc.response.status_code != 404:
                raise unexpected_status(self.name, exc) from exc

    async def confirm_usage(self, reservation_id: str) -> None:
        try:
            await self._send(
                "POST",
                f"/reservations/{reservation_id}/confirm",
                idempotency_key=f"{reservation_id}:confirm",
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise NotFoundError("Reservation", reservation_id) from exc
            raise unexpected_status(self.name, exc) from exc
