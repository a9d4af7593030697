"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ORDERFLOW_,
et peut optionnellement être fournie via un fichier .env.

Les URLs des passerelles HTTP ne sont utilisées qu'en mode gateway_mode="http" ;
en mode "stub" (défaut) les passerelles sont simulées en mémoire.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderflow.utils.constants import DEFAULT_PAYMENT_METHODS

# Trouver le fichier .env à la racine du projet (parent de orderflow/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ORDERFLOW_.
    Exemple : ORDERFLOW_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDERFLOW_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///orderflow.db")

    # Commandes
    default_currency: str = Field(default="USD", min_length=3, max_length=3)
    supported_payment_methods: tuple[str, ...] = Field(default=DEFAULT_PAYMENT_METHODS)

    # Authentification (3 échecs -> verrouillage 30 minutes)
    max_failed_logins: int = Field(default=3, ge=1)
    lockout_minutes: int = Field(default=30, ge=1)

    # Stock
    low_stock_threshold: int = Field(default=10, ge=0)
    stock_alert_email: str = Field(default="stock@orderflow.local")

    # Passerelles externes
    gateway_mode: Literal["stub", "http"] = Field(default="stub")
    gateway_timeout_seconds: float = Field(default=10.0, gt=0)
    gateway_max_attempts: int = Field(default=3, ge=1)
    payment_api_url: str = Field(default="http://localhost:8081")
    payment_api_key: Optional[str] = Field(default=None)
    inventory_api_url: str = Field(default="http://localhost:8082")
    notification_api_url: str = Field(default="http://localhost:8083")

    # Données de session (jetons de vérification et de réinitialisation)
    session_store_dir: Path = Field(default=Path(".cache/sessions"))
    session_ttl_seconds: int = Field(default=3600, ge=1)

    # Expose le détail des erreurs inattendues dans les résultats
    debug: bool = Field(default=False)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/orderflow.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("session_store_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("default_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        """Normalise le code devise en majuscules."""
        return v.upper()

    @property
    def payment_enabled(self) -> bool:
        """Vérifie si la passerelle de paiement HTTP est configurée."""
        return self.payment_api_key is not None
