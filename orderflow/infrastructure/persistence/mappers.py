"""
Mappers entre entites de domaine et modeles SQLModel.

Chaque mapper reconstruit l'entite via son constructeur complet (tous les
champs persistes en parametres) : aucun champ n'est positionne en dehors
du controle du type proprietaire.
"""

import json
from decimal import Decimal, InvalidOperation

from orderflow.core.entities.order import Order, OrderItem
from orderflow.core.entities.product import MovementKind, Product, StockMovement
from orderflow.core.entities.user import User, UserProfile, UserRole, UserStatus
from orderflow.core.errors import MappingError, ValidationError
from orderflow.core.mapper import BidirectionalMapper, parse_enum, require
from orderflow.core.state_machine import OrderStatus
from orderflow.core.value_objects.money import Money
from orderflow.infrastructure.persistence.models import (
    OrderModel,
    ProductModel,
    StockMovementModel,
    UserModel,
)


def _parse_amount(raw: str, field_name: str) -> Decimal:
    try:
        return Decimal(require(raw, field_name))
    except InvalidOperation as exc:
        raise MappingError(f"Montant invalide pour {field_name}: {raw!r}") from exc


def _parse_json_list(raw: str, field_name: str) -> list:
    try:
        value = json.loads(require(raw, field_name))
    except json.JSONDecodeError as exc:
        raise MappingError(f"JSON invalide pour {field_name}") from exc
    if not isinstance(value, list):
        raise MappingError(f"Liste attendue pour {field_name}")
    return value


class UserRecordMapper(BidirectionalMapper[User, UserModel]):
    """User (domaine) <-> UserModel (table users)."""

    def map_to_right(self, user: User) -> UserModel:
        if user.password_hash is None:
            raise MappingError("Un utilisateur sans hash de mot de passe ne peut pas etre persiste")
        return UserModel(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            first_name=user.profile.first_name,
            last_name=user.profile.last_name,
            phone=user.profile.phone,
            avatar=user.profile.avatar,
            status=user.status.value,
            role=user.role.value,
            email_verified=user.email_verified,
            last_login_at=user.last_login_at,
            failed_login_attempts=user.failed_login_attempts,
            locked_until=user.locked_until,
            created_at=user.created_at,
            updated_at=user.updated_at,
            version=user.version,
        )

    def map_to_left(self, record: UserModel) -> User:
        try:
            profile = UserProfile(
                first_name=require(record.first_name, "first_name"),
                last_name=require(record.last_name, "last_name"),
                phone=record.phone,
                avatar=record.avatar,
            )
        except ValidationError as exc:
            raise MappingError(exc.errors) from exc
        return User(
            id=require(record.id, "id"),
            username=require(record.username, "username"),
            email=require(record.email, "email"),
            password_hash=require(record.password_hash, "password_hash"),
            profile=profile,
            status=parse_enum(UserStatus, record.status, "status"),
            role=parse_enum(UserRole, record.role, "role"),
            email_verified=bool(record.email_verified),
            last_login_at=record.last_login_at,
            failed_login_attempts=require(record.failed_login_attempts, "failed_login_attempts"),
            locked_until=record.locked_until,
            created_at=require(record.created_at, "created_at"),
            updated_at=require(record.updated_at, "updated_at"),
            version=require(record.version, "version"),
        )


class OrderRecordMapper(BidirectionalMapper[Order, OrderModel]):
    """Order (domaine) <-> OrderModel (table orders, lignes en JSON)."""

    def map_to_right(self, order: Order) -> OrderModel:
        items = [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "unit_price": str(item.unit_price.amount),
            }
            for item in order.items
        ]
        return OrderModel(
            id=order.id,
            user_id=order.user_id,
            status=order.status.value,
            total_amount=str(order.total.amount),
            currency=order.total.currency,
            items_json=json.dumps(items),
            shipping_address=order.shipping_address,
            payment_method=order.payment_method,
            payment_transaction_id=order.payment_transaction_id,
            reservation_ids_json=json.dumps(list(order.reservation_ids)),
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            updated_at=order.updated_at,
            version=order.version,
        )

    def map_to_left(self, record: OrderModel) -> Order:
        currency = require(record.currency, "currency")
        try:
            items = [
                OrderItem(
                    product_id=require(raw.get("product_id"), "items.product_id"),
                    quantity=require(raw.get("quantity"), "items.quantity"),
                    unit_price=Money(
                        _parse_amount(raw.get("unit_price"), "items.unit_price"), currency
                    ),
                )
                for raw in _parse_json_list(record.items_json, "items_json")
            ]
            total = Money(_parse_amount(record.total_amount, "total_amount"), currency)
        except MappingError:
            raise
        except (ValidationError, AttributeError) as exc:
            raise MappingError(f"Commande {record.id} mal formee: {exc}") from exc
        return Order(
            id=require(record.id, "id"),
            user_id=require(record.user_id, "user_id"),
            items=items,
            total=total,
            shipping_address=require(record.shipping_address, "shipping_address"),
            payment_method=require(record.payment_method, "payment_method"),
            status=parse_enum(OrderStatus, record.status, "status"),
            payment_transaction_id=record.payment_transaction_id,
            reservation_ids=[
                str(r) for r in _parse_json_list(record.reservation_ids_json, "reservation_ids_json")
            ],
            cancellation_reason=record.cancellation_reason,
            created_at=require(record.created_at, "created_at"),
            updated_at=require(record.updated_at, "updated_at"),
            version=require(record.version, "version"),
        )


class ProductRecordMapper(BidirectionalMapper[Product, ProductModel]):
    """Product (domaine) <-> ProductModel (table products)."""

    def map_to_right(self, product: Product) -> ProductModel:
        return ProductModel(
            id=product.id,
            sku=product.sku,
            name=product.name,
            price_amount=str(product.price.amount),
            currency=product.price.currency,
            stock=product.stock,
            low_stock_threshold=product.low_stock_threshold,
            created_at=product.created_at,
            updated_at=product.updated_at,
            version=product.version,
        )

    def map_to_left(self, record: ProductModel) -> Product:
        try:
            price = Money(
                _parse_amount(record.price_amount, "price_amount"),
                require(record.currency, "currency"),
            )
        except MappingError:
            raise
        except ValidationError as exc:
            raise MappingError(exc.errors) from exc
        return Product(
            id=require(record.id, "id"),
            sku=require(record.sku, "sku"),
            name=require(record.name, "name"),
            price=price,
            stock=require(record.stock, "stock"),
            low_stock_threshold=require(record.low_stock_threshold, "low_stock_threshold"),
            created_at=require(record.created_at, "created_at"),
            updated_at=require(record.updated_at, "updated_at"),
            version=require(record.version, "version"),
        )


class StockMovementRecordMapper(BidirectionalMapper[StockMovement, StockMovementModel]):
    """StockMovement (domaine) <-> StockMovementModel (table stock_movements)."""

    def map_to_right(self, movement: StockMovement) -> StockMovementModel:
        return StockMovementModel(
            id=movement.id,
            product_id=movement.product_id,
            kind=movement.kind.value,
            delta=movement.delta,
            stock_before=movement.stock_before,
            stock_after=movement.stock_after,
            reason=movement.reason,
            created_at=movement.created_at,
        )

    def map_to_left(self, record: StockMovementModel) -> StockMovement:
        return StockMovement(
            id=require(record.id, "id"),
            product_id=require(record.product_id, "product_id"),
            kind=parse_enum(MovementKind, record.kind, "kind"),
            delta=require(record.delta, "delta"),
            stock_before=require(record.stock_before, "stock_before"),
            stock_after=require(record.stock_after, "stock_after"),
            reason=record.reason,
            created_at=require(record.created_at, "created_at"),
        )
