"""
Commandes CLI des comptes utilisateurs (inscription, verification d'email).
"""

from typing import Annotated, Optional

import typer

from orderflow.adapters.cli.helpers import async_command, print_result, with_container


@async_command
@with_container()
async def register_user(
    container,
    username: Annotated[str, typer.Argument(help="Nom d'utilisateur (3 a 20 caracteres)")],
    email: Annotated[str, typer.Argument(help="Adresse email")],
    first_name: Annotated[str, typer.Option("--first-name", help="Prenom")],
    last_name: Annotated[str, typer.Option("--last-name", help="Nom")],
    password: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, confirmation_prompt=True, help="Mot de passe"),
    ],
    phone: Annotated[Optional[str], typer.Option(help="Telephone")] = None,
) -> None:
    """Inscrit un nouvel utilisateur."""
    with container.session() as session:
        service = container.user_service(session=session)
        result = await service.register_user(
            username, email, password, first_name, last_name, phone=phone
        )
    print_result(result, "Utilisateur inscrit")


@async_command
@with_container()
async def verify_email(
    container,
    user_id: Annotated[str, typer.Argument(help="Identifiant de l'utilisateur")],
    token: Annotated[str, typer.Argument(help="Jeton recu par email")],
) -> None:
    """Confirme l'adresse email d'un utilisateur."""
    with container.session() as session:
        result = await container.user_service(session=session).verify_email(user_id, token)
    print_result(result, "Email verifie")
