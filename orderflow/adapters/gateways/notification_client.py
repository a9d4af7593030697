"""
Client HTTP du canal de notification.

Envoi « fire-and-report » : toute erreur (HTTP ou transport) est rapportee
dans NotificationResult, jamais levee.
"""

from typing import Any, Optional

import httpx
from loguru import logger

from orderflow.adapters.gateways.http_base import HTTPGatewayClient
from orderflow.core.errors import GatewayError
from orderflow.core.ports.gateways import INotificationGateway, NotificationResult


class HTTPNotificationGateway(HTTPGatewayClient, INotificationGateway):
    """Passerelle de notification HTTP (email, SMS, push)."""

    name = "notification"

    async def _deliver(self, path: str, payload: dict[str, Any]) -> NotificationResult:
        try:
            response = await self._send("POST", path, json=payload)
        except (GatewayError, httpx.HTTPStatusError) as exc:
            logger.warning("Notification non envoyee", channel=path, error=str(exc))
            return NotificationResult(success=False, error_message=str(exc))
        return NotificationResult(success=True, message_id=response.json().get("id"))

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> NotificationResult:
        return await self._deliver(
            "/email",
            {"to": to, "subject": subject, "body": body, "metadata": metadata or {}},
        )

    async def send_sms(self, phone: str, message: str) -> NotificationResult:
        return await self._deliver("/sms", {"to": phone, "message": message})

    async def send_push(
        self,
        user_id: str,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
    ) -> NotificationResult:
        return await self._deliver(
            "/push",
            {"user_id": user_id, "title": title, "body": body, "data": data or {}},
        )
