"""
Fonctions utilitaires partagees dans le projet OrderFlow.

- new_id : identifiant UUID sous forme de chaine
- utcnow : horodatage UTC naif (compatible SQLite)
"""

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Genere un identifiant unique (UUID4) pour une entite."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """
    Retourne l'heure UTC courante sans tzinfo.

    SQLite ne conserve pas le fuseau horaire : on manipule des datetimes
    naifs en UTC partout pour que l'aller-retour en base soit exact.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
