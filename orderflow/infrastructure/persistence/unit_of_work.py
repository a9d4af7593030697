"""
Unit of Work SQLModel.

Delimite une transaction sur la session SQLModel partagee par les
repositories d'une meme requete. Les repositories n'appellent jamais
commit() eux-memes : ils se contentent de flush(), la decision de
commit/rollback appartient au Unit of Work.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger
from sqlmodel import Session

from orderflow.core.ports.unit_of_work import IUnitOfWork

T = TypeVar("T")


class SQLModelUnitOfWork(IUnitOfWork):
    """
    Unit of Work adosse a une session SQLModel.

    Les appels imbriques reutilisent la transaction englobante : un compteur
    de profondeur garantit que seul l'appel le plus externe commit ou rollback.

    Example:
        uow = SQLModelUnitOfWork(session)
        order = await uow.execute_in_transaction(lambda: persist(order))
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le Unit of Work.

        Args:
            session: Session SQLModel partagee avec les repositories
        """
        self._session = session
        self._depth = 0

    @property
    def session(self) -> Session:
        return self._session

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    async def execute_in_transaction(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Execute fn ; commit si elle aboutit, rollback et re-leve sinon."""
        outermost = self._depth == 0
        self._depth += 1
        try:
            result = await fn()
            if outermost:
                self._session.commit()
            return result
        except BaseException:
            if outermost:
                logger.debug("Rollback de la transaction locale")
                self._session.rollback()
            raise
        finally:
            self._depth -= 1
