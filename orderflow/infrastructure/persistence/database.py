"""
Configuration de la base de donnees pour OrderFlow.

Ce module fournit :
- Creation de l'engine a partir de l'URL configuree
- Initialisation des tables

L'engine est construit une seule fois au demarrage par le Container et
injecte ; aucun etat global n'est conserve dans ce module.
La base est configuree via ORDERFLOW_DATABASE_URL (defaut: sqlite:///orderflow.db).
"""

from pathlib import Path

from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Cree l'engine SQLAlchemy.

    Pour un fichier SQLite, le repertoire parent est cree si necessaire.
    Une base SQLite en memoire utilise un pool statique pour que toutes les
    sessions partagent la meme connexion (sinon chaque session verrait une
    base vide).
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo)

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    db_path = Path(database_url.replace("sqlite:///", ""))
    db_path.parent.mkdir(exist_ok=True, parents=True)
    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> Engine:
    """
    Initialise la base de donnees en creant toutes les tables.

    Importe les modeles pour enregistrer leurs metadonnees dans
    SQLModel.metadata, puis cree les tables manquantes.
    Doit etre appelee une fois au demarrage de l'application.
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from orderflow.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    return engine
