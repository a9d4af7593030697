"""
Configuration du logging de l'application via loguru.

Trois sorties :
- Console : lisible, colorée, avec le contexte structuré (extra)
- Fichier applicatif : JSON, avec rotation, pour l'analyse historique
- Fichier de réconciliation : uniquement les échecs de compensation des sagas,
  à traiter manuellement (aucune file de reprise durable n'existe)
"""

import sys
from pathlib import Path

from loguru import logger

COMPENSATION_CONDITION = "CompensationFailure"


def _is_compensation_failure(record: dict) -> bool:
    return record["extra"].get("condition") == COMPENSATION_CONDITION


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/orderflow.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log applicatif
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB", "1 GB")
        retention_count : Nombre de fichiers rotatifs à conserver

    Le fichier de réconciliation est écrit à côté du fichier applicatif
    (même nom, suffixe ".reconciliation.log").
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level> <dim>{extra}</dim>"
        ),
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,  # Thread-safe
    )

    reconciliation_file = log_file.with_suffix(".reconciliation.log")
    logger.add(
        reconciliation_file,
        level="ERROR",
        format="{message}",
        serialize=True,
        filter=_is_compensation_failure,
        enqueue=True,
    )

    logger.debug(
        "Logging configure",
        log_file=str(log_file),
        reconciliation_file=str(reconciliation_file),
    )
