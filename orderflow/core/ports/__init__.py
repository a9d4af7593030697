"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IRepository : Contrat générique (find_by_id, find_all, save, delete, exists)
- IUserRepository, IOrderRepository, IProductRepository
- IStockMovementRepository : Journal d'audit du stock

Ports passerelle : Contrats pour les systèmes externes
- IPaymentGateway, IInventoryGateway, INotificationGateway

Ports transverses
- IUnitOfWork : Portée transactionnelle du store local
- ISessionStore : Données temporaires de session avec TTL
"""

from orderflow.core.ports.repositories import (
    IRepository,
    IUserRepository,
    IOrderRepository,
    IProductRepository,
    IStockMovementRepository,
)
from orderflow.core.ports.gateways import (
    IPaymentGateway,
    IInventoryGateway,
    INotificationGateway,
    NotificationResult,
    PaymentResult,
    PaymentStatus,
    RefundResult,
    Reservation,
    StockLevel,
)
from orderflow.core.ports.unit_of_work import IUnitOfWork
from orderflow.core.ports.session_store import ISessionStore

__all__ = [
    # Repositories
    "IRepository",
    "IUserRepository",
    "IOrderRepository",
    "IProductRepository",
    "IStockMovementRepository",
    # Passerelles
    "IPaymentGateway",
    "IInventoryGateway",
    "INotificationGateway",
    "NotificationResult",
    "PaymentResult",
    "PaymentStatus",
    "RefundResult",
    "Reservation",
    "StockLevel",
    # Transverses
    "IUnitOfWork",
    "ISessionStore",
]
