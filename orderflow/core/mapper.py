"""
Contrat des mappers bidirectionnels.

Un mapper traduit entre un type « gauche » (entite du domaine) et un type
« droit » (enregistrement persiste ou DTO). Invariant d'aller-retour :
map_to_left(map_to_right(x)) est egal a x sur chaque champ expose, hors
champs volontairement omis a une frontiere (ex: hash de mot de passe
absent du DTO public).

Un enregistrement mal forme fait echouer le mapping (MappingError) ;
seuls les champs optionnels acceptent None, traduit en « non renseigne ».
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from orderflow.core.errors import MappingError

L = TypeVar("L")
R = TypeVar("R")
E = TypeVar("E", bound=Enum)


class BidirectionalMapper(ABC, Generic[L, R]):
    """Mapper entre un type domaine (gauche) et un type externe (droit)."""

    @abstractmethod
    def map_to_right(self, left: L) -> R:
        ...

    @abstractmethod
    def map_to_left(self, right: R) -> L:
        ...

    def map_many_to_left(self, items: Iterable[R]) -> list[L]:
        return [self.map_to_left(item) for item in items]

    def map_many_to_right(self, items: Iterable[L]) -> list[R]:
        return [self.map_to_right(item) for item in items]


def require(value: Optional[Any], field_name: str) -> Any:
    """Retourne value, ou leve MappingError si le champ obligatoire est absent."""
    if value is None:
        raise MappingError(f"Champ obligatoire manquant: {field_name}")
    return value


def parse_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    """Convertit une valeur brute en membre d'enum, sans valeur par defaut."""
    try:
        return enum_cls(require(value, field_name))
    except ValueError as exc:
        raise MappingError(f"Valeur invalide pour {field_name}: {value!r}") from exc
