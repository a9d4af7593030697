"""
Tests des mappers bidirectionnels (enregistrements persistes et DTO).

Verifie l'aller-retour champ par champ et le rejet des enregistrements
mal formes.
"""

import json
from datetime import datetime

import pytest

from orderflow.core.entities.order import Order, OrderItem, compute_total
from orderflow.core.entities.product import MovementKind, Product, StockMovement
from orderflow.core.entities.user import User, UserProfile, UserRole
from orderflow.core.errors import MappingError
from orderflow.core.state_machine import OrderStatus
from orderflow.core.value_objects.money import Money
from orderflow.infrastructure.persistence.mappers import (
    OrderRecordMapper,
    ProductRecordMapper,
    StockMovementRecordMapper,
    UserRecordMapper,
)
from orderflow.services.dto import UserDTOMapper


@pytest.fixture
def user() -> User:
    return User(
        username="carol",
        email="carol@example.com",
        profile=UserProfile("Carol", "Petit", phone="+33600000000"),
        password_hash="$2b$04$hash",
        role=UserRole.MANAGER,
        email_verified=True,
        last_login_at=datetime(2024, 5, 1, 8, 30),
        failed_login_attempts=1,
        version=3,
    )


@pytest.fixture
def order() -> Order:
    items = [OrderItem("p1", 2, Money("100", "EUR")), OrderItem("p2", 1, Money("9.99", "EUR"))]
    return Order(
        user_id="u1",
        items=items,
        total=compute_total(items, "EUR"),
        shipping_address="2 avenue Foch",
        payment_method="alipay",
        status=OrderStatus.CONFIRMED,
        payment_transaction_id="txn_1",
        reservation_ids=["res_1", "res_2"],
        version=2,
    )


class TestUserRecordMapper:
    def test_round_trip(self, user: User) -> None:
        mapper = UserRecordMapper()
        assert mapper.map_to_left(mapper.map_to_right(user)) == user

    def test_user_without_hash_cannot_be_persisted(self, user: User) -> None:
        user.password_hash = None
        with pytest.raises(MappingError):
            UserRecordMapper().map_to_right(user)

    def test_unknown_status_is_rejected(self, user: User) -> None:
        record = UserRecordMapper().map_to_right(user)
        record.status = "banned"
        with pytest.raises(MappingError):
            UserRecordMapper().map_to_left(record)

    def test_missing_mandatory_field_is_rejected(self, user: User) -> None:
        record = UserRecordMapper().map_to_right(user)
        record.first_name = None
        with pytest.raises(MappingError):
            UserRecordMapper().map_to_left(record)


class TestUserDTOMapper:
    def test_round_trip_excludes_password_hash(self, user: User) -> None:
        mapper = UserDTOMapper()
        dto = mapper.map_to_right(user)
        assert not hasattr(dto, "password_hash")
        back = mapper.map_to_left(dto)
        assert back.password_hash is None
        user.password_hash = None
        assert back == user

    def test_to_dict_serializes_dates(self, user: User) -> None:
        data = UserDTOMapper().map_to_right(user).to_dict()
        assert data["last_login_at"] == "2024-05-01T08:30:00"
        assert data["locked_until"] is None
        assert "password_hash" not in data


class TestOrderRecordMapper:
    def test_round_trip(self, order: Order) -> None:
        mapper = OrderRecordMapper()
        assert mapper.map_to_left(mapper.map_to_right(order)) == order

    def test_items_are_serialized_as_json(self, order: Order) -> None:
        record = OrderRecordMapper().map_to_right(order)
        assert json.loads(record.items_json)[0] == {
            "product_id": "p1",
            "quantity": 2,
            "unit_price": "100.00",
        }
        assert record.total_amount == "209.99"

    def test_malformed_items_json_is_rejected(self, order: Order) -> None:
        record = OrderRecordMapper().map_to_right(order)
        record.items_json = "{not json"
        with pytest.raises(MappingError):
            OrderRecordMapper().map_to_left(record)

    def test_invalid_amount_is_rejected(self, order: Order) -> None:
        record = OrderRecordMapper().map_to_right(order)
        record.total_amount = "deux cents"
        with pytest.raises(MappingError):
            OrderRecordMapper().map_to_left(record)


class TestProductMappers:
    def test_product_round_trip(self) -> None:
        product = Product(sku="SKU", name="Lampe", price=Money("49.90", "USD"), stock=7)
        mapper = ProductRecordMapper()
        assert mapper.map_to_left(mapper.map_to_right(product)) == product

    def test_movement_round_trip(self) -> None:
        movement = StockMovement(
            product_id="p1",
            kind=MovementKind.STOCK_TAKING,
            delta=-2,
            stock_before=5,
            stock_after=3,
            reason="Ecart",
        )
        mapper = StockMovementRecordMapper()
        assert mapper.map_to_left(mapper.map_to_right(movement)) == movement
