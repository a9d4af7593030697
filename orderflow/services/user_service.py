"""
Service de gestion des utilisateurs.

Inscription, authentification avec verrouillage apres echecs repetes,
verification d'email et reinitialisation de mot de passe. Les jetons
temporaires sont conserves dans le store de session avec une duree de vie.
"""

import secrets
from datetime import timedelta
from typing import Any, Optional

from loguru import logger

from orderflow.config import Settings
from orderflow.core.entities.user import User, UserProfile, UserStatus
from orderflow.core.errors import (
    AccountLockedError,
    DuplicateUserError,
    EmailNotVerifiedError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from orderflow.core.ports.gateways import INotificationGateway
from orderflow.core.ports.repositories import IUserRepository
from orderflow.core.ports.session_store import ISessionStore
from orderflow.core.ports.unit_of_work import IUnitOfWork
from orderflow.core.result import OperationResult
from orderflow.services.boundary import service_operation
from orderflow.services.dto import UserDTOMapper
from orderflow.services.passwords import hash_password_async, verify_password_async
from orderflow.services.saga import bounded
from orderflow.services.validators import (
    validate_email,
    validate_password,
    validate_registration,
)
from orderflow.utils.constants import EMAIL_TOKEN_TTL, RESET_TOKEN_TTL

EMAIL_TOKEN_KEY = "email_verification"
RESET_SESSION_PREFIX = "password_reset"

# Message identique pour utilisateur inconnu et mauvais mot de passe
INVALID_CREDENTIALS = "Identifiants invalides"


class UserService:
    """
    Service applicatif des comptes utilisateurs.

    Utilisation typique:
        service = UserService(uow, users, notifications, sessions, settings)
        result = await service.register_user("alice", "alice@example.com", "secret123", "Alice", "Martin")
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        users: IUserRepository,
        notifications: INotificationGateway,
        sessions: ISessionStore,
        settings: Settings,
    ) -> None:
        self._uow = uow
        self._users = users
        self._notifications = notifications
        self._sessions = sessions
        self._settings = settings
        self._mapper = UserDTOMapper()
        self._log = logger.bind(service="UserService")

    def _get(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def _save(self, user: User) -> User:
        async def persist() -> User:
            return self._users.save(user)

        return await self._uow.execute_in_transaction(persist)

    async def _notify(self, to: str, subject: str, body: str) -> None:
        """Envoi best-effort : un echec est journalise, jamais propage."""
        try:
            result = await bounded(
                "notification",
                self._notifications.send_email(to, subject, body),
                self._settings.gateway_timeout_seconds,
            )
        except Exception as exc:
            self._log.warning(f"Email '{subject}' non envoye a {to}: {exc}")
            return
        if not result.success:
            self._log.warning(f"Email '{subject}' non envoye a {to}: {result.error_message}")

    @service_operation("register_user")
    async def register_user(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
    ) -> OperationResult[dict[str, str]]:
        """
        Inscrit un nouvel utilisateur.

        Returns:
            OperationResult avec {"user_id", "username"}
        """
        validate_registration(username, email, password, first_name, last_name)
        email = email.strip().lower()

        if self._users.find_by_username(username) is not None:
            raise DuplicateUserError(f"Nom d'utilisateur deja utilise: {username}")
        if self._users.find_by_email(email) is not None:
            raise DuplicateUserError(f"Email deja utilise: {email}")

        user = User(
            username=username,
            email=email,
            profile=UserProfile(first_name.strip(), last_name.strip(), phone=phone),
            password_hash=await hash_password_async(password),
        )
        await self._save(user)

        token = secrets.token_urlsafe(32)
        await self._sessions.set(user.id, EMAIL_TOKEN_KEY, token, ttl=EMAIL_TOKEN_TTL)
        await self._notify(
            user.email,
            "Bienvenue sur OrderFlow",
            f"Bonjour {user.profile.first_name}, votre code de verification : {token}",
        )

        self._log.info(f"Utilisateur inscrit: {user.username}", user_id=user.id)
        return OperationResult.ok({"user_id": user.id, "username": user.username})

    @service_operation("authenticate")
    async def authenticate(self, login: str, password: str) -> OperationResult[dict[str, Any]]:
        """
        Authentifie par nom d'utilisateur ou email.

        Chaque echec incremente le compteur ; au seuil configure le compte est
        verrouille pour lockout_minutes.
        """
        if not login or not password:
            raise ValidationError("Identifiant et mot de passe obligatoires")

        user = self._users.find_by_username(login)
        if user is None and "@" in login:
            user = self._users.find_by_email(login)
        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if user.is_locked():
            raise AccountLockedError(
                f"Compte verrouille jusqu'a {user.locked_until:%Y-%m-%d %H:%M} UTC"
            )

        if not user.password_hash or not await verify_password_async(
            password, user.password_hash
        ):
            user.record_failed_login(
                self._settings.max_failed_logins,
                timedelta(minutes=self._settings.lockout_minutes),
            )
            await self._save(user)
            if user.is_locked():
                self._log.warning(
                    f"Compte verrouille apres {user.failed_login_attempts} echecs",
                    user_id=user.id,
                )
                raise AccountLockedError(
                    f"Trop d'echecs de connexion, compte verrouille "
                    f"{self._settings.lockout_minutes} minutes"
                )
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if user.status != UserStatus.ACTIVE:
            raise UnauthorizedError(f"Compte {user.status.value}")
        if not user.email_verified:
            raise EmailNotVerifiedError("Email non verifie")

        user.record_successful_login()
        await self._save(user)
        self._log.info(f"Connexion reussie: {user.username}", user_id=user.id)
        return OperationResult.ok(self._mapper.map_to_right(user).to_dict())

    @service_operation("verify_email")
    async def verify_email(self, user_id: str, token: str) -> OperationResult[None]:
        user = self._get(user_id)
        if user.email_verified:
            return OperationResult.ok()
        expected = await self._sessions.get(user.id, EMAIL_TOKEN_KEY)
        if expected is None or not secrets.compare_digest(str(expected), token or ""):
            raise ValidationError("Jeton de verification invalide ou expire")

        user.verify_email()
        await self._save(user)
        await self._sessions.pop(user.id, EMAIL_TOKEN_KEY)
        self._log.info("Email verifie", user_id=user.id)
        return OperationResult.ok()

    @service_operation("request_password_reset")
    async def request_password_reset(self, email: str) -> OperationResult[None]:
        """
        Demande de reinitialisation.

        Reussit toujours, que l'email existe ou non, pour ne pas reveler
        l'existence d'un compte.
        """
        email = validate_email(email)
        user = self._users.find_by_email(email)
        if user is None:
            self._log.info("Reinitialisation demandee pour un email inconnu")
            return OperationResult.ok()

        token = secrets.token_urlsafe(32)
        await self._sessions.set(RESET_SESSION_PREFIX, token, user.id, ttl=RESET_TOKEN_TTL)
        await self._notify(
            user.email,
            "Reinitialisation du mot de passe",
            f"Votre jeton de reinitialisation (valable 1 heure) : {token}",
        )
        return OperationResult.ok()

    @service_operation("reset_password")
    async def reset_password(self, token: str, new_password: str) -> OperationResult[None]:
        validate_password(new_password)
        user_id = await self._sessions.pop(RESET_SESSION_PREFIX, token or "")
        if user_id is None:
            raise ValidationError("Jeton de reinitialisation invalide ou expire")

        user = self._get(user_id)
        user.change_password_hash(await hash_password_async(new_password))
        user.unlock()
        await self._save(user)
        self._log.info("Mot de passe reinitialise", user_id=user.id)
        return OperationResult.ok()

    @service_operation("change_password")
    async def change_password(
        self, user_id: str, old_password: str, new_password: str
    ) -> OperationResult[None]:
        validate_password(new_password)
        user = self._get(user_id)
        if not user.password_hash or not await verify_password_async(
            old_password, user.password_hash
        ):
            raise UnauthorizedError("Mot de passe actuel incorrect")
        if old_password == new_password:
            raise ValidationError("Le nouveau mot de passe doit etre different de l'ancien")

        user.change_password_hash(await hash_password_async(new_password))
        await self._save(user)
        self._log.info("Mot de passe modifie", user_id=user.id)
        return OperationResult.ok()

    @service_operation("update_profile")
    async def update_profile(
        self,
        user_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> OperationResult[dict[str, Any]]:
        user = self._get(user_id)
        user.update_profile(
            first_name=first_name, last_name=last_name, phone=phone, avatar=avatar
        )
        await self._save(user)
        return OperationResult.ok(self._mapper.map_to_right(user).to_dict())

    @service_operation("deactivate_user")
    async def deactivate_user(self, user_id: str) -> OperationResult[None]:
        user = self._get(user_id)
        user.deactivate()
        await self._save(user)
        await self._sessions.clear(user.id)
        self._log.info("Utilisateur desactive", user_id=user.id)
        return OperationResult.ok()

    @service_operation("get_user")
    async def get_user(self, user_id: str) -> OperationResult[dict[str, Any]]:
        return OperationResult.ok(self._mapper.map_to_right(self._get(user_id)).to_dict())

    @service_operation("get_user_statistics")
    async def get_user_statistics(self) -> OperationResult[dict[str, int]]:
        """Nombre d'utilisateurs par statut, plus le total."""
        stats = {status.value: len(self._users.find_by_status(status)) for status in UserStatus}
        stats["total"] = sum(stats.values())
        return OperationResult.ok(stats)
