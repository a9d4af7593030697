"""
Adaptateurs des passerelles externes.

- payment_client / inventory_client / notification_client : clients HTTP
  (httpx + retry tenacity, en-tete d'idempotence)
- stubs : implementations en memoire avec injection de pannes
"""

from orderflow.adapters.gateways.inventory_client import HTTPInventoryGateway
from orderflow.adapters.gateways.notification_client import HTTPNotificationGateway
from orderflow.adapters.gateways.payment_client import HTTPPaymentGateway
from orderflow.adapters.gateways.stubs import (
    StubInventoryGateway,
    StubNotificationGateway,
    StubPaymentGateway,
)

__all__ = [
    "HTTPPaymentGateway",
    "HTTPInventoryGateway",
    "HTTPNotificationGateway",
    "StubPaymentGateway",
    "StubInventoryGateway",
    "StubNotificationGateway",
]
