"""
Modeles SQLModel pour la base de donnees OrderFlow.

Ces modeles representent les tables de la base de donnees.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale ; la conversion se fait dans mappers.py.

Tables:
- users: Comptes utilisateurs
- orders: Commandes (lignes serialisees en JSON)
- products: Produits et stock local
- stock_movements: Journal d'audit du stock (ajout seul)

Chaque table est cle par un UUID (chaine) et porte une colonne version
utilisee pour la concurrence optimiste. Les montants sont stockes en texte
pour conserver la precision Decimal.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel


class UserModel(SQLModel, table=True):
    """Modele representant un utilisateur dans la base de donnees."""

    __tablename__ = "users"

    id: str = Field(primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    first_name: str
    last_name: str
    phone: str | None = None
    avatar: str | None = None
    status: str = Field(index=True)
    role: str
    email_verified: bool = False
    last_login_at: datetime | None = None
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    created_at: datetime
    updated_at: datetime
    version: int = Field(default=1)


class OrderModel(SQLModel, table=True):
    """
    Modele representant une commande dans la base de donnees.

    Les champs *_json stockent des listes serialisees en JSON.
    """

    __tablename__ = "orders"

    id: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    status: str = Field(index=True)
    total_amount: str  # Decimal serialise: "200.00"
    currency: str
    items_json: str  # JSON: [{"product_id": "p1", "quantity": 2, "unit_price": "100.00"}]
    shipping_address: str
    payment_method: str
    payment_transaction_id: str | None = None
    reservation_ids_json: str = "[]"  # JSON: ["res-1", "res-2"]
    cancellation_reason: str | None = None
    created_at: datetime = Field(index=True)
    updated_at: datetime
    version: int = Field(default=1)


class ProductModel(SQLModel, table=True):
    """Modele representant un produit et son stock local."""

    __tablename__ = "products"

    id: str = Field(primary_key=True)
    sku: str = Field(index=True, unique=True)
    name: str
    price_amount: str
    currency: str
    stock: int = 0
    low_stock_threshold: int = 10
    created_at: datetime
    updated_at: datetime
    version: int = Field(default=1)


class StockMovementModel(SQLModel, table=True):
    """Modele representant un mouvement de stock (journal d'audit)."""

    __tablename__ = "stock_movements"

    id: str = Field(primary_key=True)
    product_id: str = Field(index=True)
    kind: str
    delta: int
    stock_before: int
    stock_after: int
    reason: str | None = None
    created_at: datetime = Field(index=True)
    version: int = Field(default=1)
