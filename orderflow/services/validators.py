"""
Fonctions de validation des entrees des services.

Chaque fonction collecte toutes les erreurs de son entree puis leve une
seule ValidationError ; elle s'execute avant tout effet de bord (aucune
ecriture locale, aucun appel de passerelle).
"""

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from orderflow.core.entities.order import OrderItem
from orderflow.core.entities.product import AdjustmentDirection
from orderflow.core.errors import ValidationError
from orderflow.core.state_machine import OrderStatus
from orderflow.core.value_objects.money import Money
from orderflow.utils.constants import EMAIL_PATTERN, PASSWORD_PATTERN, USERNAME_PATTERN


def _raise_if(errors: list[str]) -> None:
    if errors:
        raise ValidationError(errors)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Convertit une valeur en Decimal fini, ou None si impossible."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def password_errors(password: Optional[str]) -> list[str]:
    """Regles de robustesse : 8 caracteres minimum, au moins une lettre et un chiffre."""
    if not password or not PASSWORD_PATTERN.match(password):
        return ["Le mot de passe doit contenir au moins 8 caracteres dont une lettre et un chiffre"]
    return []


def validate_password(password: Optional[str]) -> None:
    _raise_if(password_errors(password))


def validate_email(email: Optional[str]) -> str:
    """Retourne l'email normalise (minuscules, sans espaces)."""
    if _blank(email) or not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Format d'email invalide")
    return email.strip().lower()


def validate_registration(
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    first_name: Optional[str],
    last_name: Optional[str],
) -> None:
    errors: list[str] = []
    if not username or not USERNAME_PATTERN.match(username):
        errors.append(
            "Le nom d'utilisateur doit contenir 3 a 20 caracteres (lettres, chiffres, _)"
        )
    if _blank(email) or not EMAIL_PATTERN.match(email.strip()):
        errors.append("Format d'email invalide")
    errors.extend(password_errors(password))
    if _blank(first_name):
        errors.append("Le prenom est obligatoire")
    if _blank(last_name):
        errors.append("Le nom est obligatoire")
    _raise_if(errors)


def validate_order_input(
    user_id: Optional[str],
    items: Optional[Sequence[Mapping[str, Any]]],
    shipping_address: Optional[str],
    payment_method: Optional[str],
    supported_methods: Iterable[str],
    currency: str,
) -> list[OrderItem]:
    """
    Valide une demande de commande et construit ses lignes.

    Chaque ligne est un mapping {product_id, quantity, unit_price}.

    Returns:
        Les lignes de commande, prix exprimes dans currency
    """
    errors: list[str] = []
    if _blank(user_id):
        errors.append("L'identifiant utilisateur est obligatoire")
    if not items:
        errors.append("La commande doit contenir au moins un article")
    if _blank(shipping_address):
        errors.append("L'adresse de livraison est obligatoire")
    supported = tuple(supported_methods)
    if payment_method not in supported:
        errors.append(
            f"Moyen de paiement non supporte: {payment_method!r} "
            f"(acceptes: {', '.join(supported)})"
        )

    lines: list[tuple[str, int, Decimal]] = []
    for index, raw in enumerate(items or [], start=1):
        product_id = raw.get("product_id")
        quantity = raw.get("quantity")
        price = parse_decimal(raw.get("unit_price"))
        if _blank(product_id):
            errors.append(f"Article {index}: produit manquant")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            errors.append(f"Article {index}: la quantite doit etre un entier positif")
        if price is None or price < 0:
            errors.append(f"Article {index}: prix unitaire invalide")
        lines.append((product_id, quantity, price))

    _raise_if(errors)
    return [
        OrderItem(product_id=product_id, quantity=quantity, unit_price=Money(price, currency))
        for product_id, quantity, price in lines
    ]


def validate_order_status(value: Any) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).lower())
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Statut inconnu: {value!r} (acceptes: {allowed})") from None


def validate_adjustment(
    product_id: Optional[str],
    quantity: Any,
    reason: Optional[str],
    direction: Any,
) -> AdjustmentDirection:
    """Valide un ajustement de stock ; la quantite doit etre strictement positive."""
    errors: list[str] = []
    if _blank(product_id):
        errors.append("Le produit est obligatoire")
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        errors.append("La quantite doit etre un entier strictement positif")
    if _blank(reason):
        errors.append("Le motif de l'ajustement est obligatoire")
    parsed: Optional[AdjustmentDirection] = None
    if isinstance(direction, AdjustmentDirection):
        parsed = direction
    else:
        try:
            parsed = AdjustmentDirection(str(direction).lower())
        except ValueError:
            errors.append(f"Sens d'ajustement invalide: {direction!r}")
    _raise_if(errors)
    return parsed


def validate_stock_entries(entries: Optional[Sequence[Mapping[str, Any]]]) -> list[tuple[str, int]]:
    """
    Valide un inventaire physique : [{product_id, actual_quantity}, ...].

    Returns:
        Liste de (product_id, quantite comptee)
    """
    if not entries:
        raise ValidationError("L'inventaire doit contenir au moins une ligne")
    errors: list[str] = []
    parsed: list[tuple[str, int]] = []
    seen: set[str] = set()
    for index, raw in enumerate(entries, start=1):
        product_id = raw.get("product_id")
        actual = raw.get("actual_quantity")
        if _blank(product_id):
            errors.append(f"Ligne {index}: produit manquant")
        elif product_id in seen:
            errors.append(f"Ligne {index}: produit {product_id} compte deux fois")
        else:
            seen.add(product_id)
        if not isinstance(actual, int) or isinstance(actual, bool) or actual < 0:
            errors.append(f"Ligne {index}: quantite comptee invalide")
        parsed.append((product_id, actual))
    _raise_if(errors)
    return parsed


def validate_product(
    sku: Optional[str],
    name: Optional[str],
    price: Any,
    currency: str,
    initial_stock: Any,
    low_stock_threshold: Any,
) -> Money:
    """Valide la creation d'un produit ; retourne son prix."""
    errors: list[str] = []
    if _blank(sku):
        errors.append("La reference (sku) est obligatoire")
    if _blank(name):
        errors.append("Le libelle est obligatoire")
    amount = parse_decimal(price)
    if amount is None or amount < 0:
        errors.append("Prix invalide")
    if not isinstance(initial_stock, int) or initial_stock < 0:
        errors.append("Le stock initial doit etre un entier positif ou nul")
    if not isinstance(low_stock_threshold, int) or low_stock_threshold < 0:
        errors.append("Le seuil d'alerte doit etre un entier positif ou nul")
    _raise_if(errors)
    return Money(amount, currency)
