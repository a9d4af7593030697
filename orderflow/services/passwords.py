"""
Hachage des mots de passe (bcrypt, facteur de cout 12).

Les regles de robustesse sont verifiees par validators.validate_password,
avant tout appel a hash_password.

bcrypt est volontairement lent : les services async passent par
hash_password_async / verify_password_async, executees dans le pool de
threads via run_in_executor pour ne pas bloquer la boucle d'evenements.
"""

import asyncio
from functools import partial

import bcrypt

BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Retourne le hash bcrypt du mot de passe, sous forme de chaine."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verifie un mot de passe contre son hash ; un hash mal forme ne correspond jamais."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


async def hash_password_async(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(hash_password, password, rounds))


async def verify_password_async(password: str, password_hash: str) -> bool:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(verify_password, password, password_hash))
