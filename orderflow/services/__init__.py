"""
Couche application (cas d'utilisation).

Les services orchestrent les workflows multi-ressources : ils coordonnent
entites, repositories (via le Unit of Work) et passerelles externes, et
retournent toujours un OperationResult.

Cette couche contient :
- les services utilisateurs, commandes et stock
- la pile de compensations des sagas
- la frontiere de conversion des erreurs
- la validation des entrees

Les services dependent des ports definis dans core/, jamais des
implementations concretes d'adapters/.
"""

from .inventory_service import InventoryService
from .order_service import OrderService
from .user_service import UserService

__all__ = ["InventoryService", "OrderService", "UserService"]
