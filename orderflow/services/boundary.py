"""
Frontiere des services : conversion des erreurs en OperationResult.

Les methodes publiques des services sont decorees par service_operation :
- OrderFlowError (erreur attendue) -> OperationResult.failure(message, code),
  journalisee en WARNING
- toute autre exception -> echec generique "InternalError", journalise avec
  la trace complete ; le texte de l'exception n'est expose que si
  settings.debug est actif

Le service decore doit exposer self._settings et self._log.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from orderflow.core.errors import OrderFlowError
from orderflow.core.result import OperationResult

T = TypeVar("T")

INTERNAL_ERROR_CODE = "InternalError"
INTERNAL_ERROR_MESSAGE = "Erreur interne, operation non effectuee"


def service_operation(
    name: str,
) -> Callable[[Callable[..., Awaitable[OperationResult[T]]]], Callable[..., Awaitable[OperationResult[T]]]]:
    """
    Decorateur de methode de service asynchrone.

    Args:
        name: Nom de l'operation, repris dans les logs
    """

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(self, *args: Any, **kwargs: Any) -> OperationResult[T]:
            log = self._log.bind(operation=name)
            try:
                return await fn(self, *args, **kwargs)
            except OrderFlowError as exc:
                log.warning(f"{name} refuse: {exc.message}", error_code=exc.code)
                return OperationResult.from_error(exc)
            except Exception as exc:
                log.exception(f"{name} en erreur inattendue")
                message = INTERNAL_ERROR_MESSAGE
                if self._settings.debug:
                    message = f"{message}: {type(exc).__name__}: {exc}"
                return OperationResult.failure(message, INTERNAL_ERROR_CODE)

        return wrapper

    return decorator
