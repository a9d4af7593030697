"""
Implementations SQLModel des repositories Product et StockMovement.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from orderflow.core.entities.product import Product, StockMovement
from orderflow.core.errors import ConflictError
from orderflow.core.ports.repositories import IProductRepository, IStockMovementRepository
from orderflow.infrastructure.persistence.mappers import (
    ProductRecordMapper,
    StockMovementRecordMapper,
)
from orderflow.infrastructure.persistence.models import ProductModel, StockMovementModel
from orderflow.infrastructure.persistence.repositories.base import (
    VersionedSQLModelRepository,
)


class SQLModelProductRepository(
    VersionedSQLModelRepository[Product, ProductModel], IProductRepository
):
    """Repository SQLModel pour les produits et leur stock local."""

    model_cls = ProductModel
    entity_name = "Product"
    mapper = ProductRecordMapper()

    def find_by_sku(self, sku: str) -> Optional[Product]:
        statement = select(ProductModel).where(ProductModel.sku == sku)
        record = self._session.exec(statement).first()
        if record:
            return self.mapper.map_to_left(record)
        return None


class SQLModelStockMovementRepository(IStockMovementRepository):
    """
    Journal SQLModel des mouvements de stock.

    Ajout seul : aucune mise a jour ni suppression n'est exposee.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._mapper = StockMovementRecordMapper()

    def append(self, movement: StockMovement) -> StockMovement:
        """Ajoute un mouvement au journal (flush sans commit)."""
        self._session.add(self._mapper.map_to_right(movement))
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Mouvement {movement.id} deja enregistre") from exc
        return movement

    def list_for_product(self, product_id: str) -> list[StockMovement]:
        statement = (
            select(StockMovementModel)
            .where(StockMovementModel.product_id == product_id)
            .order_by(StockMovementModel.created_at)
        )
        return self._mapper.map_many_to_left(self._session.exec(statement).all())
