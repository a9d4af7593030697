"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans orderflow/core/ports/repositories.py, utilisant SQLModel.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit la session SQLModel du Unit of Work via injection de dependances
- Convertit entre entites de domaine et modeles DB via les mappers
"""

from orderflow.infrastructure.persistence.repositories.user_repository import (
    SQLModelUserRepository,
)
from orderflow.infrastructure.persistence.repositories.order_repository import (
    SQLModelOrderRepository,
)
from orderflow.infrastructure.persistence.repositories.product_repository import (
    SQLModelProductRepository,
    SQLModelStockMovementRepository,
)

__all__ = [
    "SQLModelUserRepository",
    "SQLModelOrderRepository",
    "SQLModelProductRepository",
    "SQLModelStockMovementRepository",
]
