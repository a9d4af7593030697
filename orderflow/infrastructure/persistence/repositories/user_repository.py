"""
Implementation SQLModel du repository User.

Implemente l'interface IUserRepository pour la persistance des comptes
utilisateurs via SQLModel.
"""

from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from orderflow.core.entities.user import User, UserStatus
from orderflow.core.ports.repositories import IUserRepository
from orderflow.infrastructure.persistence.mappers import UserRecordMapper
from orderflow.infrastructure.persistence.models import UserModel
from orderflow.infrastructure.persistence.repositories.base import (
    VersionedSQLModelRepository,
)


class SQLModelUserRepository(VersionedSQLModelRepository[User, UserModel], IUserRepository):
    """Repository SQLModel pour les utilisateurs."""

    model_cls = UserModel
    entity_name = "User"
    mapper = UserRecordMapper()

    def find_by_email(self, email: str) -> Optional[User]:
        """Recupere un utilisateur par email, sans tenir compte de la casse."""
        statement = select(UserModel).where(func.lower(UserModel.email) == email.lower())
        record = self._session.exec(statement).first()
        if record:
            return self.mapper.map_to_left(record)
        return None

    def find_by_username(self, username: str) -> Optional[User]:
        statement = select(UserModel).where(UserModel.username == username)
        record = self._session.exec(statement).first()
        if record:
            return self.mapper.map_to_left(record)
        return None

    def find_by_status(self, status: UserStatus) -> list[User]:
        statement = (
            select(UserModel)
            .where(UserModel.status == status.value)
            .order_by(UserModel.created_at)
        )
        return self.mapper.map_many_to_left(self._session.exec(statement).all())
