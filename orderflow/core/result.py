"""
Contrat de retour uniforme des services.

Toutes les methodes publiques des services retournent un OperationResult :
les echecs attendus (validation, regle metier) sont des valeurs, jamais
des exceptions.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from orderflow.core.errors import OrderFlowError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Resultat d'une operation de service.

    Attributs :
        success : True si l'operation a abouti
        data : Donnees retournees en cas de succes
        error_code : Code d'erreur stable (ex: "InsufficientStock")
        error_message : Message lisible
    """

    success: bool
    data: Optional[T] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "OperationResult[T]":
        """Construit un resultat en succes."""
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, message: str, code: Optional[str] = None) -> "OperationResult[T]":
        """Construit un resultat en echec."""
        return cls(success=False, error_code=code, error_message=message)

    @classmethod
    def from_error(cls, error: OrderFlowError) -> "OperationResult[T]":
        """Convertit une erreur applicative en resultat d'echec."""
        return cls.failure(error.message, error.code)

    def to_dict(self) -> dict[str, Any]:
        """Representation serialisable (CLI, API JSON)."""
        payload: dict[str, Any] = {"success": self.success}
        if self.success:
            payload["data"] = self.data
        else:
            payload["error_code"] = self.error_code
            payload["error_message"] = self.error_message
        return payload
