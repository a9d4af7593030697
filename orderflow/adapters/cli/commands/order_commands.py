"""
Commandes CLI des commandes clients (creation, annulation, suivi).

Les articles sont saisis par reference produit (SKU:QTE) ; le prix unitaire
est celui du catalogue local au moment de la commande.
"""

from typing import Annotated, Optional

import typer
from sqlmodel import Session

from orderflow.adapters.cli.helpers import (
    async_command,
    console,
    print_result,
    with_container,
)
from orderflow.container import seed_stub_inventory
from orderflow.infrastructure.persistence.repositories import SQLModelProductRepository


def parse_item_specs(specs: list[str], session: Session) -> list[dict]:
    """
    Convertit des specifications "SKU:QTE" en lignes de commande.

    Raises:
        typer.BadParameter: format invalide ou produit inconnu
    """
    products = SQLModelProductRepository(session)
    items = []
    for spec in specs:
        sku, sep, raw_quantity = spec.rpartition(":")
        if not sep or not sku:
            raise typer.BadParameter(f"Article invalide '{spec}', attendu SKU:QTE")
        try:
            quantity = int(raw_quantity)
        except ValueError:
            raise typer.BadParameter(f"Quantite invalide dans '{spec}'") from None
        product = products.find_by_sku(sku)
        if product is None:
            raise typer.BadParameter(f"Produit inconnu: {sku}")
        items.append(
            {"product_id": product.id, "quantity": quantity, "unit_price": product.price.amount}
        )
    return items


@async_command
@with_container()
async def create_order(
    container,
    user_id: Annotated[str, typer.Argument(help="Identifiant du client")],
    item: Annotated[list[str], typer.Option("--item", "-i", help="Article SKU:QTE (repetable)")],
    address: Annotated[str, typer.Option("--address", "-a", help="Adresse de livraison")],
    payment_method: Annotated[
        str, typer.Option("--payment-method", "-p", help="Moyen de paiement")
    ] = "credit_card",
    currency: Annotated[Optional[str], typer.Option(help="Devise (ISO 4217)")] = None,
) -> None:
    """Passe une commande pour un client."""
    with container.session() as session:
        seed_stub_inventory(container.inventory_gateway(), SQLModelProductRepository(session))
        items = parse_item_specs(item, session)
        service = container.order_service(session=session)
        result = await service.create_order(
            user_id, items, address, payment_method, currency=currency
        )
    print_result(result, "Commande creee")


@async_command
@with_container()
async def cancel_order(
    container,
    order_id: Annotated[str, typer.Argument(help="Identifiant de la commande")],
    reason: Annotated[Optional[str], typer.Option("--reason", "-r", help="Motif")] = None,
) -> None:
    """Annule une commande (liberation du stock et remboursement)."""
    with container.session() as session:
        result = await container.order_service(session=session).cancel_order(order_id, reason)
    print_result(result, "Commande annulee")


@async_command
@with_container()
async def order_status(
    container,
    order_id: Annotated[str, typer.Argument(help="Identifiant de la commande")],
    status: Annotated[str, typer.Argument(help="Nouveau statut (confirmed, shipped, ...)")],
) -> None:
    """Fait progresser le statut d'une commande."""
    with container.session() as session:
        result = await container.order_service(session=session).update_order_status(
            order_id, status
        )
    print_result(result, "Statut mis a jour")


@async_command
@with_container()
async def show_order(
    container,
    order_id: Annotated[str, typer.Argument(help="Identifiant de la commande")],
) -> None:
    """Affiche le detail d'une commande."""
    with container.session() as session:
        result = await container.order_service(session=session).get_order(order_id)
    if result.success:
        items = result.data.pop("items", [])
        print_result(result, f"Commande {order_id}")
        for line in items:
            console.print(
                f"  - {line['product_id']} x{line['quantity']} @ {line['unit_price']}"
            )
        return
    print_result(result, "")
