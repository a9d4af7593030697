"""
Interface port du stockage de donnees temporaires de session.

Stockage cle-valeur type, cloisonne par identifiant de session, avec une
duree de vie par entree. Remplace les « sacs de proprietes » dynamiques :
chaque acces est explicite (get / set / pop / clear).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class ISessionStore(ABC):
    """Stockage cle-valeur avec TTL, cloisonne par session."""

    @abstractmethod
    async def get(self, session_id: str, key: str) -> Optional[Any]:
        """Retourne la valeur ou None si absente ou expiree."""
        ...

    @abstractmethod
    async def set(self, session_id: str, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Stocke une valeur (ttl en secondes, defaut du store si None)."""
        ...

    @abstractmethod
    async def pop(self, session_id: str, key: str) -> Optional[Any]:
        """Retourne et supprime une valeur (usage unique, ex: jeton)."""
        ...

    @abstractmethod
    async def clear(self, session_id: str) -> int:
        """Supprime toutes les entrees d'une session. Retourne le nombre supprime."""
        ...
