"""
Utilitaires partages pour les commandes CLI d'OrderFlow.

Ce module fournit :
- console : instance Rich Console partagee
- with_container : decorateur injectant un container initialise
- async_command : decorateur transformant une fonction async en commande sync
- print_result : affichage d'un OperationResult (sortie en code 1 si echec)
"""

import asyncio
import inspect
from functools import wraps
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from orderflow.container import Container, close_gateways
from orderflow.core.result import OperationResult

console = Console()


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), cree les tables si necessaire.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await close_gateways(container)

        # Typer ne doit voir que les parametres CLI, pas le container injecte
        signature = inspect.signature(func)
        wrapper.__signature__ = signature.replace(
            parameters=list(signature.parameters.values())[1:]
        )
        return wrapper

    return decorator


def async_command(func):
    """
    Transforme une fonction async en fonction sync via asyncio.run().

    Preserve la signature pour que Typer interprete options et arguments.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        return asyncio.run(func(*args, **kwargs))

    wrapper.__signature__ = inspect.signature(func)
    wrapper.__annotations__ = func.__annotations__
    return wrapper


def _render(data: Any) -> None:
    if isinstance(data, dict):
        table = Table(show_header=False, box=None)
        table.add_column(style="cyan")
        table.add_column()
        for key, value in data.items():
            table.add_row(str(key), str(value))
        console.print(table)
    elif isinstance(data, list):
        for entry in data:
            _render(entry)
            console.print()
    elif data is not None:
        console.print(str(data))


def print_result(result: OperationResult, success_message: str) -> None:
    """
    Affiche le resultat d'une operation de service.

    Raises:
        typer.Exit: code 1 si l'operation a echoue
    """
    if not result.success:
        console.print(f"[red]Echec ({result.error_code}):[/red] {result.error_message}")
        raise typer.Exit(code=1)
    console.print(f"[green]{success_message}[/green]")
    _render(result.data)
