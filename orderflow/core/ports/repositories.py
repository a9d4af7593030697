"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fournissent les mécanismes de stockage concrets
(SQLite via SQLModel, etc.).

Contrat commun de save() : insertion si l'entité n'a jamais été persistée
(version 0), sinon mise à jour conditionnée à la version lue au chargement.
L'entité retournée porte la nouvelle version.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, Optional, TypeVar

from orderflow.core.entities.order import Order
from orderflow.core.entities.product import Product, StockMovement
from orderflow.core.entities.user import User, UserStatus
from orderflow.core.state_machine import OrderStatus

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """
    Interface générique de repository.

    Définit les opérations de base communes à toutes les entités versionnées.
    """

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Récupère une entité par son ID."""
        ...

    @abstractmethod
    def find_all(self) -> list[T]:
        """Liste toutes les entités."""
        ...

    @abstractmethod
    def save(self, entity: T) -> T:
        """
        Sauvegarde une entité (insertion ou mise à jour versionnée).

        Raises:
            ConcurrentModificationError: Si la version stockée a changé
            ConflictError: Si une contrainte d'unicité est violée
        """
        ...

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Supprime une entité par ID. Retourne True si supprimée."""
        ...

    @abstractmethod
    def exists(self, entity_id: str) -> bool:
        """Indique si une entité existe."""
        ...


class IUserRepository(IRepository[User]):
    """Interface de stockage des utilisateurs."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Récupère un utilisateur par email (insensible à la casse)."""
        ...

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[User]:
        """Récupère un utilisateur par nom d'utilisateur."""
        ...

    @abstractmethod
    def find_by_status(self, status: UserStatus) -> list[User]:
        """Liste les utilisateurs ayant un statut donné."""
        ...


class IOrderRepository(IRepository[Order]):
    """Interface de stockage des commandes."""

    @abstractmethod
    def find_by_user(self, user_id: str) -> list[Order]:
        """Liste les commandes d'un utilisateur, plus récentes d'abord."""
        ...

    @abstractmethod
    def find_by_status(self, status: OrderStatus) -> list[Order]:
        """Liste les commandes ayant un statut donné."""
        ...

    @abstractmethod
    def find_by_date_range(self, start: datetime, end: datetime) -> list[Order]:
        """Liste les commandes créées dans l'intervalle [start, end]."""
        ...


class IProductRepository(IRepository[Product]):
    """Interface de stockage des produits."""

    @abstractmethod
    def find_by_sku(self, sku: str) -> Optional[Product]:
        """Récupère un produit par sa référence."""
        ...


class IStockMovementRepository(ABC):
    """
    Interface du journal des mouvements de stock.

    Journal en ajout seul : pas de mise à jour ni de suppression.
    """

    @abstractmethod
    def append(self, movement: StockMovement) -> StockMovement:
        """Ajoute un mouvement au journal."""
        ...

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[StockMovement]:
        """Liste les mouvements d'un produit par ordre chronologique."""
        ...
