"""
Routes du stock local : catalogue, ajustements et inventaire physique.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from ...container import seed_stub_inventory
from ...infrastructure.persistence.repositories import SQLModelProductRepository
from ..deps import get_container, get_session, to_response

router = APIRouter(prefix="/products", tags=["inventory"])


class ProductRequest(BaseModel):
    sku: str
    name: str
    price: str
    currency: Optional[str] = None
    initial_stock: int = 0
    low_stock_threshold: Optional[int] = None


class AdjustmentRequest(BaseModel):
    quantity: Any
    reason: str
    direction: str


class StockTakingRequest(BaseModel):
    entries: list[dict[str, Any]]


def _service(container, session: Session):
    return container.inventory_service(session=session)


def _sync_stub_stock(container, session: Session, result) -> None:
    """Le gestionnaire simule suit le stock local apres chaque modification reussie."""
    if result.success:
        seed_stub_inventory(container.inventory_gateway(), SQLModelProductRepository(session))


@router.post("")
async def register_product(
    body: ProductRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).register_product(
        body.sku,
        body.name,
        body.price,
        currency=body.currency,
        initial_stock=body.initial_stock,
        low_stock_threshold=body.low_stock_threshold,
    )
    _sync_stub_stock(container, session, result)
    return to_response(result, success_status=201)


@router.post("/stock-taking")
async def stock_taking(
    body: StockTakingRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).stock_taking(body.entries)
    _sync_stub_stock(container, session, result)
    return to_response(result)


@router.get("/{product_id}")
async def get_stock(
    product_id: str, container=Depends(get_container), session: Session = Depends(get_session)
):
    return to_response(await _service(container, session).get_stock(product_id))


@router.get("/{product_id}/movements")
async def list_movements(
    product_id: str, container=Depends(get_container), session: Session = Depends(get_session)
):
    return to_response(await _service(container, session).list_movements(product_id))


@router.post("/{product_id}/adjustments")
async def adjust_inventory(
    product_id: str,
    body: AdjustmentRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).adjust_inventory(
        product_id, body.quantity, body.reason, body.direction
    )
    _sync_stub_stock(container, session, result)
    return to_response(result)
