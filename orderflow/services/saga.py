"""
Outils d'orchestration des sagas.

- CompensationStack : enregistre une compensation par etape reussie et les
  rejoue en ordre inverse quand une etape ulterieure echoue.
- bounded : borne un appel de passerelle dans le temps ; un depassement
  devient une GatewayError, donc un echec a compenser.

Une compensation qui echoue n'interrompt pas les suivantes. Elle est
journalisee en ERROR avec condition="CompensationFailure" (sink de
reconciliation, voir logging_config) ; l'erreur d'origine reste celle
remontee a l'appelant.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger

from orderflow.core.errors import CompensationFailure, GatewayError
from orderflow.logging_config import COMPENSATION_CONDITION

T = TypeVar("T")

Compensation = Callable[[], Awaitable[Any]]


async def bounded(gateway: str, call: Awaitable[T], timeout: float) -> T:
    """
    Attend un appel de passerelle au plus timeout secondes.

    Raises:
        GatewayError: Si le delai est depasse
    """
    try:
        async with asyncio.timeout(timeout):
            return await call
    except TimeoutError as exc:
        raise GatewayError(gateway, f"delai depasse ({timeout}s)") from exc


class CompensationStack:
    """
    Pile de compensations d'une saga.

    Example:
        saga = CompensationStack("create_order", order_id=order.id)
        reservation = await reserve(...)
        saga.push("release_reservation", lambda: release(reservation.reservation_id))
        ...
        except Exception as exc:
            await saga.unwind(exc)
            raise
    """

    def __init__(self, workflow: str, **context: Any) -> None:
        self._workflow = workflow
        self._log = logger.bind(workflow=workflow, **context)
        self._steps: list[tuple[str, Compensation]] = []

    def __len__(self) -> int:
        return len(self._steps)

    def push(self, step: str, compensation: Compensation) -> None:
        """Enregistre la compensation d'une etape qui vient de reussir."""
        self._steps.append((step, compensation))

    async def unwind(self, cause: BaseException) -> tuple[int, int]:
        """
        Execute les compensations en ordre inverse.

        Args:
            cause: Erreur ayant interrompu la saga (journalisee pour contexte)

        Returns:
            (compensations executees, compensations en echec)
        """
        run = 0
        failed = 0
        for step, compensation in reversed(self._steps):
            try:
                await compensation()
                run += 1
            except Exception as exc:
                failed += 1
                failure = CompensationFailure(step, exc)
                self._log.bind(condition=COMPENSATION_CONDITION).error(
                    failure.message, step=step, cause=str(cause)
                )
        self._steps.clear()

        if run or failed:
            self._log.info(
                f"Saga {self._workflow} compensee: {run} ok, {failed} en echec",
                compensations_run=run,
                compensations_failed=failed,
            )
        if failed:
            self._log.bind(condition=COMPENSATION_CONDITION).error(
                f"{failed} compensation(s) a reconcilier manuellement",
                compensations_failed=failed,
                cause=str(cause),
            )
        return run, failed
