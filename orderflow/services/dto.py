"""
Objets de transfert exposes par les services.

Projection publique des entites : le hash du mot de passe n'apparait jamais
dans un DTO. Les dictionnaires produits par to_dict() sont directement
serialisables (CLI, API JSON).
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

from orderflow.core.entities.order import Order
from orderflow.core.entities.product import Product, StockMovement
from orderflow.core.entities.user import User, UserProfile, UserRole, UserStatus
from orderflow.core.errors import MappingError, ValidationError
from orderflow.core.mapper import BidirectionalMapper, parse_enum, require


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class UserDTO:
    """Vue publique d'un utilisateur (sans hash de mot de passe)."""

    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str]
    avatar: Optional[str]
    status: str
    role: str
    email_verified: bool
    last_login_at: Optional[datetime]
    failed_login_attempts: int
    locked_until: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    version: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("last_login_at", "locked_until", "created_at", "updated_at"):
            data[key] = _iso(data[key])
        return data


class UserDTOMapper(BidirectionalMapper[User, UserDTO]):
    """
    User <-> UserDTO.

    L'aller-retour conserve tous les champs exposes ; password_hash revient
    a None, c'est le seul champ volontairement omis.
    """

    def map_to_right(self, user: User) -> UserDTO:
        return UserDTO(
            id=user.id,
            username=user.username,
            email=user.email,
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

    def map_to_left(self, dto: UserDTO) -> User:
        try:
            profile = UserProfile(
                first_name=require(dto.first_name, "first_name"),
                last_name=require(dto.last_name, "last_name"),
                phone=dto.phone,
                avatar=dto.avatar,
            )
        except ValidationError as exc:
            if isinstance(exc, MappingError):
                raise
            raise MappingError(exc.errors) from exc
        return User(
            id=require(dto.id, "id"),
            username=require(dto.username, "username"),
            email=require(dto.email, "email"),
            profile=profile,
            password_hash=None,
            status=parse_enum(UserStatus, dto.status, "status"),
            role=parse_enum(UserRole, dto.role, "role"),
            email_verified=dto.email_verified,
            last_login_at=dto.last_login_at,
            failed_login_attempts=dto.failed_login_attempts,
            locked_until=dto.locked_until,
            created_at=require(dto.created_at, "created_at"),
            updated_at=require(dto.updated_at, "updated_at"),
            version=dto.version,
        )


def order_to_dict(order: Order) -> dict[str, Any]:
    """Vue publique d'une commande."""
    return {
        "id": order.id,
        "user_id": order.user_id,
        "status": order.status.value,
        "items": [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "unit_price": str(item.unit_price.amount),
                "subtotal": str(item.subtotal.amount),
            }
            for item in order.items
        ],
        "total": str(order.total.amount),
        "currency": order.currency,
        "shipping_address": order.shipping_address,
        "payment_method": order.payment_method,
        "payment_transaction_id": order.payment_transaction_id,
        "cancellation_reason": order.cancellation_reason,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
        "version": order.version,
    }


def product_to_dict(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "sku": product.sku,
        "name": product.name,
        "price": str(product.price.amount),
        "currency": product.price.currency,
        "stock": product.stock,
        "low_stock_threshold": product.low_stock_threshold,
        "low_stock": product.is_below_threshold(),
        "version": product.version,
    }


def movement_to_dict(movement: StockMovement) -> dict[str, Any]:
    return {
        "id": movement.id,
        "product_id": movement.product_id,
        "kind": movement.kind.value,
        "delta": movement.delta,
        "stock_before": movement.stock_before,
        "stock_after": movement.stock_after,
        "reason": movement.reason,
        "created_at": _iso(movement.created_at),
    }
