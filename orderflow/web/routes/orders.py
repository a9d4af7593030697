"""
Routes des commandes clients.

La création exécute la saga complète (réservation, paiement, confirmation) ;
le corps de requête est validé par le service, pas par le schéma.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel
from sqlmodel import Session

from ..deps import get_container, get_session, to_response

router = APIRouter(prefix="/orders", tags=["orders"])


class CreateOrderRequest(BaseModel):
    user_id: str
    items: list[dict[str, Any]]
    shipping_address: str
    payment_method: str
    currency: Optional[str] = None


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class StatusRequest(BaseModel):
    status: str


def _service(container, session: Session):
    return container.order_service(session=session)


@router.post("")
async def create_order(
    body: CreateOrderRequest,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).create_order(
        body.user_id,
        body.items,
        body.shipping_address,
        body.payment_method,
        currency=body.currency,
        idempotency_key=idempotency_key,
    )
    return to_response(result, success_status=201)


@router.get("")
async def list_orders(
    user_id: Optional[str] = None,
    status: Optional[str] = None,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    """Liste les commandes d'un client, ou celles d'un statut donné."""
    service = _service(container, session)
    if user_id:
        return to_response(await service.list_user_orders(user_id))
    return to_response(await service.list_orders_by_status(status or "pending"))


@router.get("/{order_id}")
async def get_order(
    order_id: str, container=Depends(get_container), session: Session = Depends(get_session)
):
    return to_response(await _service(container, session).get_order(order_id))


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: Optional[CancelRequest] = None,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    reason = body.reason if body else None
    return to_response(await _service(container, session).cancel_order(order_id, reason))


@router.post("/{order_id}/status")
async def update_status(
    order_id: str,
    body: StatusRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).update_order_status(order_id, body.status)
    return to_response(result)
