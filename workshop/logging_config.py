"""
Configuration du logging de l'atelier via loguru.

Deux sorties :
- console : lisible, colorée, suffixée par le contexte métier de la ligne
  (article, mouvement, devis, ordre de service, rôle)
- fichier : JSON sérialisé avec rotation ; chaque enregistrement garde tout
  le contexte structuré, ce qui sert de journal d'audit des mouvements de
  stock et des changements de statut
"""

import sys
from pathlib import Path

from loguru import logger

# Cles de contexte passees par les services (logger.info(..., stock_id=...))
CONTEXT_KEYS = (
    "service_order_id",
    "budget_id",
    "stock_id",
    "movement_id",
    "aggregate_id",
    "role",
    "code",
)

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def _escape(value: object) -> str:
    """Neutralise les accolades et balises de couleur loguru."""
    return str(value).replace("{", "{{").replace("}", "}}").replace("<", r"\<")


def format_context(extra: dict) -> str:
    """
    Rend le contexte metier d'un enregistrement, ex: "stock_id=s-1 code=NOT_FOUND".

    Seules les cles de CONTEXT_KEYS presentes sont retenues, dans cet ordre.
    """
    return " ".join(f"{key}={extra[key]}" for key in CONTEXT_KEYS if extra.get(key) is not None)


def _console_format(record: dict) -> str:
    context = format_context(record["extra"])
    suffix = f" <dim>[{_escape(context)}]</dim>" if context else ""
    return _CONSOLE_FORMAT + suffix + "\n{exception}"


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/workshop.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'atelier.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du journal JSON
        rotation_size : Taille maximale avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conserves
    """
    logger.remove()

    logger.add(sys.stderr, level=log_level, format=_console_format, colorize=True)

    # Journal d'audit : tout le contexte structure est serialise
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
