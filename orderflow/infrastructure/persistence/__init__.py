"""
Module de persistance pour OrderFlow.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy) :

- database.py : Creation de l'engine et initialisation des tables
- models.py : Modeles SQLModel representant les tables
- mappers.py : Conversion entites de domaine <-> modeles
- unit_of_work.py : Portee transactionnelle partagee par les repositories

Usage:
    from orderflow.infrastructure.persistence import create_db_engine, init_db

    engine = init_db(create_db_engine("sqlite:///orderflow.db"))
    with Session(engine) as session:
        uow = SQLModelUnitOfWork(session)
"""

from orderflow.infrastructure.persistence.database import create_db_engine, init_db
from orderflow.infrastructure.persistence.models import (
    OrderModel,
    ProductModel,
    StockMovementModel,
    UserModel,
)
from orderflow.infrastructure.persistence.unit_of_work import SQLModelUnitOfWork

__all__ = [
    "create_db_engine",
    "init_db",
    "SQLModelUnitOfWork",
    "UserModel",
    "OrderModel",
    "ProductModel",
    "StockMovementModel",
]
