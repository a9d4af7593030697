"""
Fixtures pytest partagees pour les tests OrderFlow.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires (base SQLite, store de session)
- Engine et session SQLModel sur une base fichier isolee
- Passerelles simulees (paiement, stock, notification)
- Services construits comme dans le Container
"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from orderflow.adapters.gateways import (
    StubInventoryGateway,
    StubNotificationGateway,
    StubPaymentGateway,
)
from orderflow.adapters.session import DiskCacheSessionStore
from orderflow.config import Settings
from orderflow.container import (
    build_inventory_service,
    build_order_service,
    build_user_service,
)
from orderflow.core.entities.product import Product
from orderflow.core.entities.user import User, UserProfile
from orderflow.core.value_objects.money import Money
from orderflow.infrastructure.persistence.database import create_db_engine, init_db
from orderflow.infrastructure.persistence.repositories import (
    SQLModelProductRepository,
    SQLModelUserRepository,
)
from orderflow.services.inventory_service import InventoryService
from orderflow.services.order_service import OrderService
from orderflow.services.passwords import hash_password
from orderflow.services.user_service import UserService

TEST_PASSWORD = "secret123"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler base, store de session et logs.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path}/test.db",
        session_store_dir=tmp_path / "sessions",
        log_file=tmp_path / "test.log",
        gateway_timeout_seconds=2.0,
    )


@pytest.fixture
def engine(test_settings: Settings) -> Iterator[Engine]:
    engine = init_db(create_db_engine(test_settings.database_url))
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def payment_gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def inventory_gateway() -> StubInventoryGateway:
    return StubInventoryGateway()


@pytest.fixture
def notification_gateway() -> StubNotificationGateway:
    return StubNotificationGateway()


@pytest.fixture
def session_store(tmp_path: Path) -> Iterator[DiskCacheSessionStore]:
    store = DiskCacheSessionStore(tmp_path / "sessions")
    yield store
    store.close()


@pytest.fixture
def user_service(
    session: Session,
    test_settings: Settings,
    notification_gateway: StubNotificationGateway,
    session_store: DiskCacheSessionStore,
) -> UserService:
    return build_user_service(session, test_settings, notification_gateway, session_store)


@pytest.fixture
def order_service(
    session: Session,
    test_settings: Settings,
    payment_gateway: StubPaymentGateway,
    inventory_gateway: StubInventoryGateway,
    notification_gateway: StubNotificationGateway,
) -> OrderService:
    return build_order_service(
        session, test_settings, payment_gateway, inventory_gateway, notification_gateway
    )


@pytest.fixture
def inventory_service(
    session: Session,
    test_settings: Settings,
    notification_gateway: StubNotificationGateway,
) -> InventoryService:
    return build_inventory_service(session, test_settings, notification_gateway)


@pytest.fixture
def verified_user(session: Session) -> User:
    """Utilisateur actif, email verifie : autorise a passer commande."""
    user = User(
        username="alice",
        email="alice@example.com",
        profile=UserProfile("Alice", "Martin"),
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
        email_verified=True,
    )
    SQLModelUserRepository(session).save(user)
    session.commit()
    return user


@pytest.fixture
def widget(session: Session) -> Product:
    """Produit a 100.00 USD avec 5 unites en stock local."""
    product = Product(sku="WIDGET-1", name="Widget", price=Money("100", "USD"), stock=5)
    SQLModelProductRepository(session).save(product)
    session.commit()
    return product
