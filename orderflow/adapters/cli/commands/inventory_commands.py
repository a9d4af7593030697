"""
Commandes CLI du stock local (catalogue, ajustements, inventaire physique).
"""

from typing import Annotated, Optional

import typer
from sqlmodel import Session

from orderflow.adapters.cli.helpers import async_command, console, print_result, with_container
from orderflow.core.entities.product import AdjustmentDirection, Product
from orderflow.infrastructure.persistence.repositories import SQLModelProductRepository


def _product_by_sku(session: Session, sku: str) -> Product:
    product = SQLModelProductRepository(session).find_by_sku(sku)
    if product is None:
        console.print(f"[red]Produit inconnu:[/red] {sku}")
        raise typer.Exit(code=1)
    return product


@async_command
@with_container()
async def add_product(
    container,
    sku: Annotated[str, typer.Argument(help="Reference unique")],
    name: Annotated[str, typer.Argument(help="Libelle")],
    price: Annotated[str, typer.Argument(help="Prix unitaire (ex: 19.90)")],
    stock: Annotated[int, typer.Option("--stock", "-s", help="Stock initial")] = 0,
    threshold: Annotated[
        Optional[int], typer.Option("--threshold", help="Seuil d'alerte de stock bas")
    ] = None,
    currency: Annotated[Optional[str], typer.Option(help="Devise (ISO 4217)")] = None,
) -> None:
    """Ajoute un produit au catalogue."""
    with container.session() as session:
        result = await container.inventory_service(session=session).register_product(
            sku, name, price, currency=currency, initial_stock=stock, low_stock_threshold=threshold
        )
    print_result(result, "Produit ajoute")


@async_command
@with_container()
async def adjust_stock(
    container,
    sku: Annotated[str, typer.Argument(help="Reference du produit")],
    quantity: Annotated[int, typer.Argument(help="Quantite (> 0)")],
    reason: Annotated[str, typer.Option("--reason", "-r", help="Motif de l'ajustement")],
    direction: Annotated[
        AdjustmentDirection, typer.Option("--direction", "-d", help="Sens de l'ajustement")
    ] = AdjustmentDirection.INCREASE,
) -> None:
    """Ajuste le stock d'un produit (entree ou sortie)."""
    with container.session() as session:
        product = _product_by_sku(session, sku)
        result = await container.inventory_service(session=session).adjust_inventory(
            product.id, quantity, reason, direction
        )
    print_result(result, f"Stock ajuste pour {sku}")


@async_command
@with_container()
async def stock_take(
    container,
    counts: Annotated[list[str], typer.Argument(help="Comptages SKU=QTE")],
) -> None:
    """Enregistre un inventaire physique et affiche les ecarts."""
    with container.session() as session:
        entries = []
        for count in counts:
            sku, sep, raw = count.partition("=")
            if not sep or not raw.strip().lstrip("-").isdigit():
                raise typer.BadParameter(f"Comptage invalide '{count}', attendu SKU=QTE")
            product = _product_by_sku(session, sku.strip())
            entries.append({"product_id": product.id, "actual_quantity": int(raw)})
        result = await container.inventory_service(session=session).stock_taking(entries)
    if result.success:
        discrepancies = result.data["discrepancies"]
        console.print(f"[green]Inventaire termine[/green] ({result.data['counted']} ligne(s))")
        if not discrepancies:
            console.print("Aucun ecart")
        for entry in discrepancies:
            console.print(
                f"  - {entry['product_id']}: {entry['recorded']} -> {entry['actual']} "
                f"({entry['difference']:+d})"
            )
        return
    print_result(result, "")


@async_command
@with_container()
async def show_stock(
    container,
    sku: Annotated[str, typer.Argument(help="Reference du produit")],
) -> None:
    """Affiche le stock d'un produit."""
    with container.session() as session:
        product = _product_by_sku(session, sku)
        result = await container.inventory_service(session=session).get_stock(product.id)
    print_result(result, f"Produit {sku}")
