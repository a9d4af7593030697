"""
Store de session persistant avec TTL.

Utilise diskcache pour la persistence sur disque et run_in_executor pour
ne pas bloquer la boucle asyncio. Les cles sont cloisonnees par session :
"{session_id}:{key}". Chaque session est aussi un tag diskcache, ce qui
permet de purger toutes ses entrees d'un coup.
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Optional

from diskcache import Cache

from orderflow.core.ports.session_store import ISessionStore


class DiskCacheSessionStore(ISessionStore):
    """
    Store de session asynchrone adosse a diskcache.

    Example:
        store = DiskCacheSessionStore(".cache/sessions", default_ttl=3600)
        await store.set("user-42", "email_token", "abc", ttl=86400)
        token = await store.pop("user-42", "email_token")
    """

    def __init__(self, cache_dir: str | Path = ".cache/sessions", default_ttl: int = 3600) -> None:
        """
        Initialise le store.

        Args:
            cache_dir: Repertoire du cache (cree si inexistant)
            default_ttl: Duree de vie par defaut des entrees en secondes
        """
        self._cache = Cache(str(cache_dir))
        self._default_ttl = default_ttl

    @staticmethod
    def _key(session_id: str, key: str) -> str:
        return f"{session_id}:{key}"

    async def _run(self, fn, *args, **kwargs) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(fn, *args, **kwargs))

    async def get(self, session_id: str, key: str) -> Optional[Any]:
        return await self._run(self._cache.get, self._key(session_id, key))

    async def set(self, session_id: str, key: str, value: Any, ttl: Optional[int] = None) -> None:
        await self._run(
            self._cache.set,
            self._key(session_id, key),
            value,
            expire=ttl or self._default_ttl,
            tag=session_id,
        )

    async def pop(self, session_id: str, key: str) -> Optional[Any]:
        return await self._run(self._cache.pop, self._key(session_id, key))

    async def clear(self, session_id: str) -> int:
        """Supprime toutes les entrees de la session ; retourne leur nombre."""
        return await self._run(self._cache.evict, session_id)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
