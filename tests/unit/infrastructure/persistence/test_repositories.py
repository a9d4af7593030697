"""
Tests des repositories SQLModel et du Unit of Work.

Utilise une base SQLite fichier isolee par test (fixture engine).
"""

from datetime import datetime, timedelta

import pytest
from sqlmodel import Session

from orderflow.core.entities.order import Order, OrderItem, compute_total
from orderflow.core.entities.product import MovementKind, Product, StockMovement
from orderflow.core.entities.user import User, UserProfile, UserStatus
from orderflow.core.errors import (
    ConcurrentModificationError,
    ConflictError,
    NotFoundError,
)
from orderflow.core.state_machine import OrderStatus
from orderflow.core.value_objects.money import Money
from orderflow.infrastructure.persistence.database import create_db_engine, init_db
from orderflow.infrastructure.persistence.repositories import (
    SQLModelOrderRepository,
    SQLModelProductRepository,
    SQLModelStockMovementRepository,
    SQLModelUserRepository,
)
from orderflow.infrastructure.persistence.unit_of_work import SQLModelUnitOfWork


def _user(username: str = "dave", email: str = "dave@example.com") -> User:
    return User(
        username=username,
        email=email,
        profile=UserProfile("Dave", "Morel"),
        password_hash="$2b$04$hash",
    )


def _order(user_id: str, created_at: datetime) -> Order:
    items = [OrderItem("p1", 1, Money("10", "USD"))]
    return Order(
        user_id=user_id,
        items=items,
        total=compute_total(items, "USD"),
        shipping_address="3 rue Haute",
        payment_method="credit_card",
        created_at=created_at,
    )


class TestVersionedSave:
    """Insertion, mise a jour versionnee et conflits."""

    def test_insert_sets_version_one(self, session: Session) -> None:
        repo = SQLModelUserRepository(session)
        user = repo.save(_user())
        session.commit()
        assert user.version == 1
        assert repo.find_by_id(user.id).version == 1

    def test_update_increments_version(self, session: Session) -> None:
        repo = SQLModelUserRepository(session)
        user = repo.save(_user())
        user.verify_email()
        repo.save(user)
        session.commit()
        stored = repo.find_by_id(user.id)
        assert stored.version == 2
        assert stored.email_verified

    def test_stale_version_raises_concurrent_modification(self, engine) -> None:
        with Session(engine) as setup:
            user = SQLModelUserRepository(setup).save(_user())
            setup.commit()

        with Session(engine) as first, Session(engine) as second:
            copy_a = SQLModelUserRepository(first).find_by_id(user.id)
            copy_b = SQLModelUserRepository(second).find_by_id(user.id)

            copy_a.verify_email()
            SQLModelUserRepository(first).save(copy_a)
            first.commit()

            copy_b.suspend()
            with pytest.raises(ConcurrentModificationError) as exc_info:
                SQLModelUserRepository(second).save(copy_b)
            second.rollback()
        assert exc_info.value.expected_version == 1

        with Session(engine) as check:
            stored = SQLModelUserRepository(check).find_by_id(user.id)
        assert stored.email_verified
        assert stored.status == UserStatus.ACTIVE
        assert stored.version == 2

    def test_update_of_deleted_entity_raises_not_found(self, session: Session) -> None:
        repo = SQLModelUserRepository(session)
        user = repo.save(_user())
        assert repo.delete(user.id)
        user.verify_email()
        with pytest.raises(NotFoundError):
            repo.save(user)

    def test_unique_constraint_raises_conflict(self, session: Session) -> None:
        repo = SQLModelUserRepository(session)
        repo.save(_user())
        with pytest.raises(ConflictError):
            repo.save(_user(username="other", email="dave@example.com"))


class TestFinders:
    def test_user_lookup_by_email_is_case_insensitive(self, session: Session) -> None:
        repo = SQLModelUserRepository(session)
        user = repo.save(_user())
        assert repo.find_by_email("DAVE@Example.com").id == user.id
        assert repo.find_by_username("dave").id == user.id
        assert repo.find_by_username("nobody") is None

    def test_find_by_status(self, session: Session) -> None:
        repo = SQLModelUserRepository(session)
        active = repo.save(_user())
        suspended = _user("erin", "erin@example.com")
        suspended.suspend()
        repo.save(suspended)
        assert [u.id for u in repo.find_by_status(UserStatus.ACTIVE)] == [active.id]
        assert [u.id for u in repo.find_by_status(UserStatus.SUSPENDED)] == [suspended.id]

    def test_orders_by_user_newest_first(self, session: Session) -> None:
        repo = SQLModelOrderRepository(session)
        older = repo.save(_order("u1", datetime(2024, 1, 1)))
        newer = repo.save(_order("u1", datetime(2024, 2, 1)))
        repo.save(_order("u2", datetime(2024, 3, 1)))
        assert [o.id for o in repo.find_by_user("u1")] == [newer.id, older.id]

    def test_orders_by_status_and_date_range(self, session: Session) -> None:
        repo = SQLModelOrderRepository(session)
        january = repo.save(_order("u1", datetime(2024, 1, 15)))
        march = _order("u1", datetime(2024, 3, 15))
        march.transition_to(OrderStatus.CONFIRMED)
        repo.save(march)

        assert [o.id for o in repo.find_by_status(OrderStatus.CONFIRMED)] == [march.id]
        in_range = repo.find_by_date_range(datetime(2024, 1, 15), datetime(2024, 2, 1))
        assert [o.id for o in in_range] == [january.id]

    def test_product_by_sku_and_movements(self, session: Session) -> None:
        products = SQLModelProductRepository(session)
        movements = SQLModelStockMovementRepository(session)
        product = products.save(Product(sku="LAMP", name="Lampe", price=Money("20", "USD")))
        first = StockMovement(product.id, MovementKind.ADJUSTMENT, 5, 0, 5, "reception")
        second = StockMovement(
            product.id,
            MovementKind.STOCK_TAKING,
            -1,
            5,
            4,
            "ecart",
            created_at=first.created_at + timedelta(seconds=1),
        )
        movements.append(first)
        movements.append(second)

        assert products.find_by_sku("LAMP").id == product.id
        assert [m.id for m in movements.list_for_product(product.id)] == [first.id, second.id]


class TestUnitOfWork:
    @pytest.mark.asyncio
    async def test_commit_on_success(self, engine) -> None:
        with Session(engine) as session:
            uow = SQLModelUnitOfWork(session)
            repo = SQLModelUserRepository(session)

            async def work() -> User:
                return repo.save(_user())

            user = await uow.execute_in_transaction(work)
            assert not uow.in_transaction

        with Session(engine) as check:
            assert SQLModelUserRepository(check).exists(user.id)

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, engine) -> None:
        user = _user()
        with Session(engine) as session:
            uow = SQLModelUnitOfWork(session)
            repo = SQLModelUserRepository(session)

            async def work() -> None:
                repo.save(user)
                raise RuntimeError("boom")

            with pytest.raises(RuntimeError):
                await uow.execute_in_transaction(work)

        with Session(engine) as check:
            assert not SQLModelUserRepository(check).exists(user.id)

    @pytest.mark.asyncio
    async def test_nested_calls_join_outer_transaction(self, engine) -> None:
        inner_user = _user()
        with Session(engine) as session:
            uow = SQLModelUnitOfWork(session)
            repo = SQLModelUserRepository(session)

            async def inner() -> None:
                assert uow.in_transaction
                repo.save(inner_user)

            async def outer() -> None:
                await uow.execute_in_transaction(inner)
                raise RuntimeError("echec apres l'appel imbrique")

            with pytest.raises(RuntimeError):
                await uow.execute_in_transaction(outer)

        with Session(engine) as check:
            assert not SQLModelUserRepository(check).exists(inner_user.id)


class TestDatabase:
    def test_in_memory_engine_shares_one_connection(self) -> None:
        engine = init_db(create_db_engine("sqlite://"))
        with Session(engine) as first:
            SQLModelUserRepository(first).save(_user())
            first.commit()
        with Session(engine) as second:
            assert SQLModelUserRepository(second).find_by_username("dave") is not None
