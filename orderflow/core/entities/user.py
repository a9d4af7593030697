"""
Entité utilisateur.

Un User porte son état d'authentification (tentatives échouées, verrouillage)
et son profil. Les règles de verrouillage sont paramétrées par le service
(seuil et durée viennent de la configuration).
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from orderflow.core.errors import BusinessError, ValidationError
from orderflow.utils.helpers import new_id, utcnow


class UserStatus(Enum):
    """Statut du compte utilisateur."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class UserRole(Enum):
    """Rôle de l'utilisateur."""

    CUSTOMER = "customer"
    MANAGER = "manager"
    ADMIN = "admin"


@dataclass(frozen=True)
class UserProfile:
    """
    Profil d'un utilisateur (objet valeur).

    Attributs :
        first_name : Prénom
        last_name : Nom
        phone : Téléphone (optionnel)
        avatar : URL de l'avatar (optionnel)
    """

    first_name: str
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.first_name or not self.first_name.strip():
            raise ValidationError("Le prenom est obligatoire")
        if not self.last_name or not self.last_name.strip():
            raise ValidationError("Le nom est obligatoire")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def with_updates(self, **changes: Optional[str]) -> "UserProfile":
        """Retourne un nouveau profil, les valeurs None sont ignorées."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass
class User:
    """
    Représente un compte utilisateur.

    Le constructeur prend tous les champs persistés : c'est lui qui sert à
    reconstruire un utilisateur depuis la base (voir les mappers).

    Attributs :
        username : Nom d'utilisateur unique
        email : Email unique
        profile : Profil (nom, prénom, téléphone)
        password_hash : Hash bcrypt, None si non chargé (projection publique)
        id : Identifiant UUID
        status : Statut du compte
        role : Rôle
        email_verified : Email confirmé par l'utilisateur
        last_login_at : Date de dernière connexion réussie
        failed_login_attempts : Échecs consécutifs de connexion
        locked_until : Fin du verrouillage, None si non verrouillé
        created_at / updated_at : Horodatages
        version : Compteur de concurrence optimiste (0 = jamais persisté)
    """

    username: str
    email: str
    profile: UserProfile
    password_hash: Optional[str] = None
    id: str = field(default_factory=new_id)
    status: UserStatus = UserStatus.ACTIVE
    role: UserRole = UserRole.CUSTOMER
    email_verified: bool = False
    last_login_at: Optional[datetime] = None
    failed_login_attempts: int = 0
    locked_until: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.locked_until is not None and self.locked_until > now

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.status == UserStatus.ACTIVE and not self.is_locked(now)

    def record_failed_login(
        self, max_attempts: int, lockout: timedelta, now: Optional[datetime] = None
    ) -> None:
        """
        Enregistre un échec de connexion.

        Au-delà de max_attempts échecs consécutifs, le compte est verrouillé
        jusqu'à now + lockout.
        """
        now = now or utcnow()
        if self.locked_until is not None and self.locked_until <= now:
            # Verrouillage expire : nouveau cycle de tentatives
            self.failed_login_attempts = 0
            self.locked_until = None
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= max_attempts:
            self.locked_until = now + lockout
        self.updated_at = now

    def record_successful_login(self, now: Optional[datetime] = None) -> None:
        now = now or utcnow()
        self.last_login_at = now
        self.failed_login_attempts = 0
        self.locked_until = None
        self.updated_at = now

    def unlock(self) -> None:
        """Remet a zero le compteur d'echecs et leve le verrouillage."""
        self.failed_login_attempts = 0
        self.locked_until = None
        self.updated_at = utcnow()

    def verify_email(self) -> None:
        self.email_verified = True
        self.updated_at = utcnow()

    def change_password_hash(self, password_hash: str) -> None:
        self.password_hash = password_hash
        self.updated_at = utcnow()

    def update_profile(self, **changes: Optional[str]) -> None:
        self.profile = self.profile.with_updates(**changes)
        self.updated_at = utcnow()

    def activate(self) -> None:
        if self.status == UserStatus.DELETED:
            raise BusinessError("Un utilisateur supprime ne peut pas etre reactive")
        self.status = UserStatus.ACTIVE
        self.failed_login_attempts = 0
        self.locked_until = None
        self.updated_at = utcnow()

    def deactivate(self) -> None:
        self.status = UserStatus.INACTIVE
        self.updated_at = utcnow()

    def suspend(self) -> None:
        self.status = UserStatus.SUSPENDED
        self.updated_at = utcnow()

    def can_place_order(self) -> bool:
        return self.is_active() and self.email_verified
