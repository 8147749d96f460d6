"""
Utilitaires partages pour les commandes CLI de l'atelier.

Ce module fournit :
- console : instance Rich Console partagee
- with_container : decorateur injectant un container initialise
- domain_errors : context manager traduisant les erreurs metier en sortie CLI
- format_datetime : affichage court d'une date
"""

from contextlib import contextmanager
from datetime import datetime
from functools import wraps
from typing import Optional

import typer
from rich.console import Console

from workshop.container import Container
from workshop.core.exceptions import DomainError

# Console globale pour tous les affichages
console = Console()


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), cree les tables si necessaire.

    Usage:
        @with_container()
        def _my_command(container, ...):
            ledger = container.stock_ledger_service()
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            return func(container, *args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def domain_errors():
    """
    Affiche une erreur metier en rouge et termine avec le code 1.

    Usage:
        with domain_errors():
            ledger.record_movement(...)
    """
    try:
        yield
    except DomainError as e:
        console.print(f"[red]Erreur ({e.code}):[/red] {e}")
        raise typer.Exit(code=1)


def format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")
