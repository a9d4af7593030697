"""
Taxonomie des erreurs du domaine et de la couche application.

Chaque erreur porte un code stable (``code``) qui est recopie tel quel dans
``OperationResult.error_code`` a la frontiere des services. Les erreurs
attendues (validation, regles metier, introuvable, conflit, non autorise)
ne traversent jamais l'API des services : elles sont converties en resultat.
"""

from typing import Optional


class OrderFlowError(Exception):
    """Erreur de base de l'application, convertible en OperationResult."""

    code = "OrderFlowError"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(OrderFlowError):
    """
    Entree mal formee ou manquante.

    Levee avant tout effet de bord : aucun systeme externe n'a ete touche.

    Attributes:
        errors: Liste des messages de validation individuels
    """

    code = "ValidationError"

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("Validation echouee: " + ", ".join(self.errors))


class MappingError(ValidationError):
    """Enregistrement persiste ou DTO mal forme lors d'un mapping."""

    code = "MappingError"


class BusinessError(OrderFlowError):
    """Violation d'une regle metier."""

    code = "BusinessError"


class CurrencyMismatchError(BusinessError):
    """Operation arithmetique entre deux devises differentes."""

    code = "CurrencyMismatch"

    def __init__(self, left: str, right: str) -> None:
        super().__init__(f"Devises incompatibles: {left} vs {right}")
        self.left = left
        self.right = right


class InsufficientStockError(BusinessError):
    """Stock disponible insuffisant pour une reservation ou une sortie."""

    code = "InsufficientStock"

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Stock insuffisant pour {product_id}: "
            f"demande {requested}, disponible {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidStatusTransitionError(BusinessError):
    """Transition de statut interdite par la machine a etats."""

    code = "InvalidStatusTransition"


class OrderCannotCancelError(BusinessError):
    """La commande est dans un statut qui n'autorise plus l'annulation."""

    code = "OrderCannotCancel"


class DuplicateUserError(BusinessError):
    """Nom d'utilisateur ou email deja utilise."""

    code = "DuplicateUser"


class PaymentDeclinedError(BusinessError):
    """Le processeur de paiement a refuse la transaction."""

    code = "PaymentDeclined"


class NotFoundError(OrderFlowError):
    """Entite introuvable."""

    code = "NotFound"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} introuvable: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(OrderFlowError):
    """Conflit d'ecriture dans le store local (contrainte d'unicite, version)."""

    code = "Conflict"


class ConcurrentModificationError(ConflictError):
    """
    La version attendue ne correspond plus a la version stockee.

    L'appelant doit rejouer toute l'etape du workflow (relecture comprise),
    pas seulement l'ecriture.
    """

    code = "ConcurrentModification"

    def __init__(self, entity: str, entity_id: str, expected_version: int) -> None:
        super().__init__(
            f"{entity} {entity_id} modifie de maniere concurrente "
            f"(version attendue {expected_version})"
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version


class UnauthorizedError(OrderFlowError):
    """Authentification refusee."""

    code = "Unauthorized"


class AccountLockedError(UnauthorizedError):
    """Compte verrouille apres trop d'echecs de connexion."""

    code = "AccountLocked"


class EmailNotVerifiedError(UnauthorizedError):
    """Email non verifie."""

    code = "EmailNotVerified"


class GatewayError(OrderFlowError):
    """Passerelle externe injoignable, en erreur ou hors delai."""

    code = "GatewayError"

    def __init__(self, gateway: str, message: str) -> None:
        super().__init__(f"{gateway}: {message}")
        self.gateway = gateway


class CompensationFailure(OrderFlowError):
    """
    Une compensation a elle-meme echoue.

    Journalisee pour reconciliation manuelle, jamais retournee seule :
    l'erreur d'origine reste celle remontee a l'appelant.
    """

    code = "CompensationFailure"

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(f"Compensation '{step}' en echec: {cause}")
        self.step = step
        self.cause = cause
