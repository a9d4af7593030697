"""
Dépendances partagées de l'API web.

Une session SQLModel par requête, fermée en fin de requête ; les services
sont construits par le container sur cette session. Les OperationResult
sont convertis en réponses JSON avec un code HTTP dérivé du code d'erreur.
"""

from collections.abc import Iterator
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlmodel import Session

from ..container import Container
from ..core.result import OperationResult
from ..services.boundary import INTERNAL_ERROR_CODE

# Code d'erreur -> statut HTTP (défaut : 422 pour les règles métier)
_STATUS_BY_CODE = {
    "ValidationError": 400,
    "MappingError": 400,
    "NotFound": 404,
    "Conflict": 409,
    "ConcurrentModification": 409,
    "DuplicateUser": 409,
    "Unauthorized": 401,
    "AccountLocked": 403,
    "EmailNotVerified": 403,
    "GatewayError": 502,
    INTERNAL_ERROR_CODE: 500,
}


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_session(request: Request) -> Iterator[Session]:
    """Fournit une session liée à l'engine du container, fermée après la requête."""
    with get_container(request).session() as session:
        yield session


def status_for(error_code: str | None) -> int:
    return _STATUS_BY_CODE.get(error_code or "", 422)


def to_response(result: OperationResult[Any], success_status: int = 200) -> JSONResponse:
    """Convertit un OperationResult en réponse JSON."""
    status = success_status if result.success else status_for(result.error_code)
    return JSONResponse(jsonable_encoder(result.to_dict()), status_code=status)
