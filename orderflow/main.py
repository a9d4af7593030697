"""
Point d'entrée CLI d'OrderFlow.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import asyncio
from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    add_product,
    adjust_stock,
    cancel_order,
    create_order,
    order_status,
    register_user,
    show_order,
    show_stock,
    stock_take,
    verify_email,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="orderflow",
    help="Gestion des commandes, du stock et des comptes clients",
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}


def _apply_verbosity(settings: Settings) -> None:
    level = settings.log_level
    if state["quiet"]:
        level = "ERROR"
    elif state["verbose"]:
        level = "DEBUG"
    configure_logging(
        log_level=level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Augmenter la verbosite (DEBUG)"),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """OrderFlow - commandes clients, stock et comptes."""
    if quiet:
        state["quiet"] = True
    else:
        state["verbose"] = verbose
    if quiet or verbose:
        _apply_verbosity(get_config())


# Comptes utilisateurs
app.command(name="register-user")(register_user)
app.command(name="verify-email")(verify_email)

# Commandes clients
app.command(name="create-order")(create_order)
app.command(name="cancel-order")(cancel_order)
app.command(name="order-status")(order_status)
app.command(name="show-order")(show_order)

# Stock local
app.command(name="add-product")(add_product)
app.command(name="adjust-stock")(adjust_stock)
app.command(name="stock-take")(stock_take)
app.command(name="show-stock")(show_stock)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


async def _gateway_health() -> dict[str, bool]:
    gateways = {
        "paiement": container.payment_gateway(),
        "stock": container.inventory_gateway(),
        "notification": container.notification_gateway(),
    }
    results = await asyncio.gather(
        *(gateway.health() for gateway in gateways.values()), return_exceptions=True
    )
    return {name: result is True for name, result in zip(gateways, results)}


@app.command()
def info() -> None:
    """Affiche la configuration actuelle et l'etat des passerelles."""
    config = get_config()
    logger.info("Configuration OrderFlow")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Devise par défaut : {config.default_currency}")
    typer.echo(f"Moyens de paiement : {', '.join(config.supported_payment_methods)}")
    typer.echo(f"Passerelles : {config.gateway_mode}")
    for name, healthy in asyncio.run(_gateway_health()).items():
        typer.echo(f"  {name} : {'disponible' if healthy else 'indisponible'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command(name="init-db")
def init_db() -> None:
    """Crée les tables de la base de données si nécessaire."""
    container.database.init()
    typer.echo(f"Base initialisée : {get_config().database_url}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"OrderFlow v{__version__}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance l'API web OrderFlow."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("orderflow.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    _apply_verbosity(container.config())

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.info("Démarrage d'OrderFlow", version=__version__)

    app()


if __name__ == "__main__":
    main()
