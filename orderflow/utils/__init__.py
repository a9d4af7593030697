"""
Utilitaires et constantes pour OrderFlow.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from orderflow.utils.constants import (
    DEFAULT_PAYMENT_METHODS,
    PASSWORD_PATTERN,
    USERNAME_PATTERN,
)
from orderflow.utils.helpers import new_id, utcnow

__all__ = [
    "DEFAULT_PAYMENT_METHODS",
    "PASSWORD_PATTERN",
    "USERNAME_PATTERN",
    "new_id",
    "utcnow",
]
