"""
Base commune des repositories SQLModel versionnes.

Les repositories ne commitent jamais : save() et delete() se contentent de
flush(), la transaction appartient au Unit of Work qui partage la session.

Concurrence optimiste : une mise a jour n'est appliquee que si la version
stockee est celle lue au chargement (UPDATE ... WHERE version = :attendue).
Aucune ligne touchee signifie qu'un autre ecrivain est passe entre-temps.
"""

from typing import Generic, Optional, TypeVar

from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from orderflow.core.errors import ConcurrentModificationError, ConflictError, NotFoundError
from orderflow.core.mapper import BidirectionalMapper

E = TypeVar("E")
M = TypeVar("M", bound=SQLModel)

_IMMUTABLE_COLUMNS = ("id", "version", "created_at")


class VersionedSQLModelRepository(Generic[E, M]):
    """
    Operations CRUD generiques pour une entite versionnee.

    Les sous-classes definissent model_cls, entity_name et mapper.
    """

    model_cls: type[M]
    entity_name: str
    mapper: BidirectionalMapper[E, M]

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active, partagee avec le Unit of Work
        """
        self._session = session

    def find_by_id(self, entity_id: str) -> Optional[E]:
        """Recupere une entite par son ID."""
        statement = select(self.model_cls).where(self.model_cls.id == entity_id)
        record = self._session.exec(statement).first()
        if record:
            return self.mapper.map_to_left(record)
        return None

    def find_all(self) -> list[E]:
        """Liste toutes les entites, par ordre de creation."""
        statement = select(self.model_cls).order_by(self.model_cls.created_at)
        return self.mapper.map_many_to_left(self._session.exec(statement).all())

    def exists(self, entity_id: str) -> bool:
        return self._session.get(self.model_cls, entity_id) is not None

    def delete(self, entity_id: str) -> bool:
        """Supprime une entite. Retourne False si elle n'existait pas."""
        record = self._session.get(self.model_cls, entity_id)
        if record is None:
            return False
        self._session.delete(record)
        self._session.flush()
        return True

    def save(self, entity: E) -> E:
        """
        Insere (version 0) ou met a jour l'entite, puis retourne sa nouvelle version.

        Raises:
            ConcurrentModificationError: Si la version stockee a change
            NotFoundError: Si l'entite versionnee n'existe plus
            ConflictError: Si une contrainte d'unicite est violee
        """
        record = self.mapper.map_to_right(entity)
        expected = entity.version
        try:
            if expected == 0:
                self._insert(record)
            else:
                self._update(record, expected)
        except IntegrityError as exc:
            logger.warning(
                "Contrainte violee a l'ecriture",
                entity=self.entity_name,
                entity_id=entity.id,
            )
            raise ConflictError(
                f"{self.entity_name} {entity.id}: contrainte d'unicite violee"
            ) from exc
        entity.version = expected + 1
        return entity

    def _insert(self, record: M) -> None:
        record.version = 1
        self._session.add(record)
        self._session.flush()

    def _update(self, record: M, expected: int) -> None:
        columns = self.model_cls.__table__.columns.keys()
        values = {
            name: getattr(record, name) for name in columns if name not in _IMMUTABLE_COLUMNS
        }
        statement = (
            update(self.model_cls)
            .where(self.model_cls.id == record.id)
            .where(self.model_cls.version == expected)
            .values(**values, version=expected + 1)
        )
        result = self._session.execute(statement)
        if result.rowcount == 1:
            return
        if not self._row_exists(record.id):
            raise NotFoundError(self.entity_name, record.id)
        logger.info(
            "Conflit de version detecte",
            entity=self.entity_name,
            entity_id=record.id,
            expected_version=expected,
        )
        raise ConcurrentModificationError(self.entity_name, record.id, expected)

    def _row_exists(self, entity_id: str) -> bool:
        statement = select(self.model_cls.id).where(self.model_cls.id == entity_id)
        return self._session.exec(statement).first() is not None
