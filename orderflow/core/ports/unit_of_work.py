"""
Interface port du Unit of Work.

Le Unit of Work delimite une transaction sur le store local. Il ne couvre
pas les appels aux passerelles externes : ceux-ci sont compenses
explicitement par les sagas des services.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


class IUnitOfWork(ABC):
    """Portee transactionnelle du store local."""

    @abstractmethod
    async def execute_in_transaction(self, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Execute fn dans une transaction.

        Commit si fn retourne normalement, rollback puis re-leve l'exception
        sinon. Un appel imbrique reutilise la transaction englobante : seul
        l'appel le plus externe commit ou rollback.
        """
        ...

    @property
    @abstractmethod
    def in_transaction(self) -> bool:
        """Indique si une transaction est en cours."""
        ...
