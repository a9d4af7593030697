"""Sous-package CLI commands - re-exporte les commandes publiques."""

from orderflow.adapters.cli.commands.inventory_commands import (
    add_product,
    adjust_stock,
    show_stock,
    stock_take,
)
from orderflow.adapters.cli.commands.order_commands import (
    cancel_order,
    create_order,
    order_status,
    show_order,
)
from orderflow.adapters.cli.commands.user_commands import (
    register_user,
    verify_email,
)

__all__ = [
    # utilisateurs
    "register_user",
    "verify_email",
    # commandes
    "create_order",
    "cancel_order",
    "order_status",
    "show_order",
    # stock
    "add_product",
    "adjust_stock",
    "stock_take",
    "show_stock",
]
