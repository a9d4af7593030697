"""
Implementation SQLModel du repository Order.

Les lignes de commande sont stockees en JSON dans la table orders ;
la conversion est assuree par OrderRecordMapper.
"""

from datetime import datetime

from sqlmodel import select

from orderflow.core.entities.order import Order
from orderflow.core.ports.repositories import IOrderRepository
from orderflow.core.state_machine import OrderStatus
from orderflow.infrastructure.persistence.mappers import OrderRecordMapper
from orderflow.infrastructure.persistence.models import OrderModel
from orderflow.infrastructure.persistence.repositories.base import (
    VersionedSQLModelRepository,
)


class SQLModelOrderRepository(VersionedSQLModelRepository[Order, OrderModel], IOrderRepository):
    """Repository SQLModel pour les commandes."""

    model_cls = OrderModel
    entity_name = "Order"
    mapper = OrderRecordMapper()

    def find_by_user(self, user_id: str) -> list[Order]:
        """Liste les commandes d'un utilisateur, plus recentes d'abord."""
        statement = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc())
        )
        return self.mapper.map_many_to_left(self._session.exec(statement).all())

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        statement = (
            select(OrderModel)
            .where(OrderModel.status == status.value)
            .order_by(OrderModel.created_at)
        )
        return self.mapper.map_many_to_left(self._session.exec(statement).all())

    def find_by_date_range(self, start: datetime, end: datetime) -> list[Order]:
        """Liste les commandes creees entre start et end (bornes incluses)."""
        statement = (
            select(OrderModel)
            .where(OrderModel.created_at >= start)
            .where(OrderModel.created_at <= end)
            .order_by(OrderModel.created_at)
        )
        return self.mapper.map_many_to_left(self._session.exec(statement).all())
