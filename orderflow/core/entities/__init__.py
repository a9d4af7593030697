"""
Business entities representing core domain concepts.

Entities are mutable objects with identity that persist over time.
They encapsulate business rules and behavior.

Exports:
- User, UserProfile, UserStatus, UserRole: Customer accounts
- Order, OrderItem, OrderStatus: Customer orders and their lifecycle
- Product, StockMovement: Catalog items and the stock audit trail
"""

from orderflow.core.entities.user import User, UserProfile, UserRole, UserStatus
from orderflow.core.entities.order import Order, OrderItem, compute_total
from orderflow.core.entities.product import (
    AdjustmentDirection,
    MovementKind,
    Product,
    StockMovement,
)
from orderflow.core.state_machine import OrderStatus

__all__ = [
    "User",
    "UserProfile",
    "UserRole",
    "UserStatus",
    "Order",
    "OrderItem",
    "OrderStatus",
    "compute_total",
    "Product",
    "StockMovement",
    "AdjustmentDirection",
    "MovementKind",
]
