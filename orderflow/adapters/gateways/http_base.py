"""
Base commune des clients HTTP des passerelles externes.

Fournit le client httpx paresseux, l'en-tete d'idempotence, le retry et la
conversion des erreurs de transport en GatewayError.
"""

from typing import Any, Optional

import httpx
from loguru import logger

from orderflow.adapters.gateways.retry import RetryableStatusError, request_with_retry
from orderflow.core.errors import GatewayError

IDEMPOTENCY_HEADER = "X-Idempotency-Key"


class HTTPGatewayClient:
    """
    Client HTTP generique pour un service externe.

    Attributes:
        name: Nom de la passerelle, repris dans les GatewayError et les logs
    """

    name = "gateway"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff: float = 1.0,
    ) -> None:
        """
        Initialise le client.

        Args:
            base_url: URL de base du service
            api_key: Jeton Bearer optionnel
            timeout: Timeout httpx par requete en secondes
            max_attempts: Nombre de tentatives sur erreur transitoire
            backoff: Multiplicateur du delai entre tentatives
        """
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._backoff = backoff
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
            )
        return self._client

    async def _send(
        self,
        method: str,
        path: str,
        idempotency_key: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Envoie une requete avec retry.

        Raises:
            GatewayError: Service injoignable ou en erreur apres les tentatives
            httpx.HTTPStatusError: Erreur 4xx non transitoire (a interpreter par l'appelant)
        """
        headers = dict(kwargs.pop("headers", None) or {})
        if idempotency_key:
            headers[IDEMPOTENCY_HEADER] = idempotency_key
        try:
            return await request_with_retry(
                self._get_client(),
                method,
                path,
                max_attempts=self._max_attempts,
                backoff=self._backoff,
                headers=headers,
                **kwargs,
            )
        except (RetryableStatusError, httpx.TransportError) as exc:
            logger.warning(
                "Passerelle indisponible",
                gateway=self.name,
                method=method,
                path=path,
                error=str(exc),
            )
            raise GatewayError(self.name, str(exc)) from exc

    async def health(self) -> bool:
        """Verifie que le service repond sur /health."""
        try:
            response = await self._get_client().get("/health")
        except httpx.HTTPError:
            return False
        return response.status_code == 200

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()


def unexpected_status(gateway: str, exc: httpx.HTTPStatusError) -> GatewayError:
    """Convertit une reponse 4xx non geree en GatewayError."""
    return GatewayError(gateway, f"HTTP {exc.response.status_code} inattendu")
