"""
Mecanisme de retry avec backoff exponentiel pour les passerelles HTTP.

Relance automatiquement les requetes sur les erreurs transitoires :
- 429 (rate limiting) et 408 (timeout cote serveur)
- 5xx (passerelle indisponible)
- erreurs de transport (connexion refusee, timeout reseau)

Les autres erreurs HTTP (4xx metier) sont propagees immediatement.

Usage:
    response = await request_with_retry(client, "POST", "/payments", json=payload)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class RetryableStatusError(Exception):
    """
    Reponse HTTP transitoire qui merite une nouvelle tentative.

    Attributes:
        status_code: Code HTTP recu
        retry_after: Secondes a attendre (header Retry-After), ou None
    """

    def __init__(self, status_code: int, retry_after: Optional[int] = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(f"HTTP {status_code} (retry after: {retry_after}s)")


class RateLimitError(RetryableStatusError):
    """Exception levee quand l'API retourne 429 Too Many Requests."""

    def __init__(self, retry_after: Optional[int] = None) -> None:
        super().__init__(429, retry_after)


def with_retry(max_attempts: int = 3, max_wait: int = 30, backoff: float = 1.0):
    """
    Decorateur pour relancer sur erreur transitoire avec backoff exponentiel.

    Utilise wait_random_exponential pour ajouter du jitter et eviter
    que plusieurs clients relancent en meme temps.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 30)
        backoff: Multiplicateur du delai (0 desactive l'attente, utile en test)
    """
    return retry(
        retry=retry_if_exception_type((RetryableStatusError, httpx.TransportError)),
        wait=wait_random_exponential(multiplier=backoff, min=backoff, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


def _retry_after(response: httpx.Response) -> Optional[int]:
    header = response.headers.get("Retry-After")
    if header and header.isdigit():
        return int(header)
    return None


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    backoff: float = 1.0,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur erreur transitoire.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler (relative a base_url du client)
        max_attempts: Nombre maximum de tentatives
        backoff: Multiplicateur du delai entre tentatives
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        RetryableStatusError: Si l'erreur transitoire persiste apres epuisement
        httpx.TransportError: Si le service reste injoignable
        httpx.HTTPStatusError: Pour les autres erreurs HTTP (sans retry)
    """

    @with_retry(max_attempts=max_attempts, backoff=backoff)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_retry_after(response))
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise RetryableStatusError(response.status_code, _retry_after(response))
        response.raise_for_status()
        return response

    return await _do_request()
