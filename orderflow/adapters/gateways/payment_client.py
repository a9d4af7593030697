"""
Client HTTP du processeur de paiement.

Implemente IPaymentGateway. Les montants transitent en centimes ; les statuts
du fournisseur sont normalises vers PaymentStatus.

Usage:
    client = HTTPPaymentGateway(base_url="https://pay.example.com", api_key="xxx")
    result = await client.process_payment(Decimal("200.00"), "USD", "credit_card", "order-1:payment")
    await client.close()
"""

from decimal import Decimal
from typing import Optional

import httpx

from orderflow.adapters.gateways.http_base import HTTPGatewayClient, unexpected_status
from orderflow.core.ports.gateways import (
    IPaymentGateway,
    PaymentResult,
    PaymentStatus,
    RefundResult,
)

# Statuts du fournisseur -> statut normalise
PROVIDER_STATUS_MAPPING: dict[str, PaymentStatus] = {
    "created": PaymentStatus.PENDING,
    "pending": PaymentStatus.PENDING,
    "processing": PaymentStatus.PROCESSING,
    "succeeded": PaymentStatus.COMPLETED,
    "failed": PaymentStatus.FAILED,
    "cancelled": PaymentStatus.CANCELLED,
    "refunded": PaymentStatus.CANCELLED,
}

# Codes HTTP signifiant un refus metier (et non une panne)
DECLINE_STATUS_CODES = frozenset({400, 402, 422})


def to_minor_units(amount: Decimal) -> int:
    """Convertit un montant en centimes."""
    return int((amount * 100).to_integral_value())


def map_provider_status(raw: Optional[str]) -> PaymentStatus:
    """Normalise un statut fournisseur ; inconnu ou absent -> pending."""
    return PROVIDER_STATUS_MAPPING.get(raw or "", PaymentStatus.PENDING)


class HTTPPaymentGateway(HTTPGatewayClient, IPaymentGateway):
    """
    Passerelle de paiement HTTP.

    Un refus du processeur (4xx metier ou statut failed) est retourne comme
    PaymentResult(success=False) ; une panne leve GatewayError.
    """

    name = "payment"

    async def process_payment(
        self,
        amount: Decimal,
        currency: str,
        method: str,
        idempotency_key: Optional[str] = None,
    ) -> PaymentResult:
        payload = {
            "amount": to_minor_units(amount),
            "currency": currency,
            "payment_method": method,
        }
        try:
            response = await self._send(
                "POST", "/payments", idempotency_key=idempotency_key, json=payload
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code in DECLINE_STATUS_CODES:
                return PaymentResult(success=False, error_message=_message(exc.response))
            raise unexpected_status(self.name, exc) from exc

        data = response.json()
        status = map_provider_status(data.get("status"))
        if status in (PaymentStatus.FAILED, PaymentStatus.CANCELLED):
            return PaymentResult(
                success=False,
                transaction_id=data.get("id"),
                error_message=data.get("message") or "Paiement refuse",
            )
        return PaymentResult(success=True, transaction_id=data.get("id"))

    async def refund_payment(self, transaction_id: str, amount: Decimal) -> RefundResult:
        try:
            response = await self._send(
                "POST",
                f"/payments/{transaction_id}/refund",
                idempotency_key=f"{transaction_id}:refund",
                json={"amount": to_minor_units(amount)},
            )
        except httpx.HTTPStatusError as exc:
            return RefundResult(success=False, error_message=_message(exc.response))
        return RefundResult(success=True, refund_id=response.json().get("id"))

    async def get_transaction_status(self, transaction_id: str) -> PaymentStatus:
        try:
            response = await self._send("GET", f"/payments/{transaction_id}")
        except httpx.HTTPStatusError as exc:
            raise unexpected_status(self.name, exc) from exc
        return map_provider_status(response.json().get("status"))


def _message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or f"HTTP {response.status_code}"
    except ValueError:
        return f"HTTP {response.status_code}"
