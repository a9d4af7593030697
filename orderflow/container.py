"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Les passerelles sont choisies selon settings.gateway_mode ("stub" ou "http").

Les services partagent une session SQLModel avec leur Unit of Work et leurs
repositories : chaque appel de provider de service cree une session fraiche,
sauf si l'appelant fournit la sienne (session=...), ce que fait l'API web
pour fermer la session en fin de requete.
"""

from dependency_injector import containers, providers
from sqlmodel import Session

from .adapters.gateways import (
    HTTPInventoryGateway,
    HTTPNotificationGateway,
    HTTPPaymentGateway,
    StubInventoryGateway,
    StubNotificationGateway,
    StubPaymentGateway,
)
from .adapters.gateways.http_base import HTTPGatewayClient
from .adapters.session import DiskCacheSessionStore
from .config import Settings
from .core.ports.gateways import IInventoryGateway, INotificationGateway, IPaymentGateway
from .core.ports.repositories import IProductRepository
from .core.ports.session_store import ISessionStore
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.repositories import (
    SQLModelOrderRepository,
    SQLModelProductRepository,
    SQLModelStockMovementRepository,
    SQLModelUserRepository,
)
from .infrastructure.persistence.unit_of_work import SQLModelUnitOfWork
from .services.inventory_service import InventoryService
from .services.order_service import OrderService
from .services.user_service import UserService


def build_user_service(
    session: Session,
    settings: Settings,
    notifications: INotificationGateway,
    sessions: ISessionStore,
) -> UserService:
    return UserService(
        uow=SQLModelUnitOfWork(session),
        users=SQLModelUserRepository(session),
        notifications=notifications,
        sessions=sessions,
        settings=settings,
    )


def build_order_service(
    session: Session,
    settings: Settings,
    payment: IPaymentGateway,
    inventory: IInventoryGateway,
    notifications: INotificationGateway,
) -> OrderService:
    return OrderService(
        uow=SQLModelUnitOfWork(session),
        orders=SQLModelOrderRepository(session),
        users=SQLModelUserRepository(session),
        payment=payment,
        inventory=inventory,
        notifications=notifications,
        settings=settings,
    )


def build_inventory_service(
    session: Session,
    settings: Settings,
    notifications: INotificationGateway,
) -> InventoryService:
    return InventoryService(
        uow=SQLModelUnitOfWork(session),
        products=SQLModelProductRepository(session),
        movements=SQLModelStockMovementRepository(session),
        notifications=notifications,
        settings=settings,
    )


def seed_stub_inventory(gateway: IInventoryGateway, products: IProductRepository) -> int:
    """
    Aligne le gestionnaire de stock simule sur le stock local des produits.

    Sans effet pour une passerelle HTTP. Retourne le nombre de produits charges.
    """
    if not isinstance(gateway, StubInventoryGateway):
        return 0
    count = 0
    for product in products.find_all():
        gateway.set_stock(product.id, product.stock)
        count += 1
    return count


async def close_gateways(container: "Container") -> int:
    """
    Ferme les clients HTTP des passerelles du container.

    Les stubs n'ont rien a fermer. Retourne le nombre de clients fermes.
    """
    closed = 0
    for provider in (
        container.payment_gateway,
        container.inventory_gateway,
        container.notification_gateway,
    ):
        gateway = provider()
        if isinstance(gateway, HTTPGatewayClient):
            await gateway.close()
            closed += 1
    return closed


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        with container.session() as session:
            service = container.order_service(session=session)
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - engine unique, tables creees via Resource
    engine = providers.Singleton(create_db_engine, database_url=config.provided.database_url)
    database = providers.Resource(init_db, engine=engine)

    # Session - nouvelle session a chaque appel
    session = providers.Factory(Session, engine)

    # Passerelles - selection par gateway_mode
    payment_gateway = providers.Selector(
        config.provided.gateway_mode,
        stub=providers.Singleton(StubPaymentGateway),
        http=providers.Singleton(
            HTTPPaymentGateway,
            base_url=config.provided.payment_api_url,
            api_key=config.provided.payment_api_key,
            timeout=config.provided.gateway_timeout_seconds,
            max_attempts=config.provided.gateway_max_attempts,
        ),
    )
    inventory_gateway = providers.Selector(
        config.provided.gateway_mode,
        stub=providers.Singleton(StubInventoryGateway),
        http=providers.Singleton(
            HTTPInventoryGateway,
            base_url=config.provided.inventory_api_url,
            timeout=config.provided.gateway_timeout_seconds,
            max_attempts=config.provided.gateway_max_attempts,
        ),
    )
    notification_gateway = providers.Selector(
        config.provided.gateway_mode,
        stub=providers.Singleton(StubNotificationGateway),
        http=providers.Singleton(
            HTTPNotificationGateway,
            base_url=config.provided.notification_api_url,
            timeout=config.provided.gateway_timeout_seconds,
            max_attempts=config.provided.gateway_max_attempts,
        ),
    )

    # Store de session - Singleton partage (jetons email / reinitialisation)
    session_store = providers.Singleton(
        DiskCacheSessionStore,
        cache_dir=config.provided.session_store_dir,
        default_ttl=config.provided.session_ttl_seconds,
    )

    # Services - Factory : session, Unit of Work et repositories partages par appel
    user_service = providers.Factory(
        build_user_service,
        session=session,
        settings=config,
        notifications=notification_gateway,
        sessions=session_store,
    )
    order_service = providers.Factory(
        build_order_service,
        session=session,
        settings=config,
        payment=payment_gateway,
        inventory=inventory_gateway,
        notifications=notification_gateway,
    )
    inventory_service = providers.Factory(
        build_inventory_service,
        session=session,
        settings=config,
        notifications=notification_gateway,
    )
