"""
Point d'entrée CLI du noyau atelier.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from .adapters.cli.commands import expire_budgets, stock_move, stock_report
from .config import Settings
from .container import Container
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="workshop",
    help="Noyau de gestion d'atelier de reparation automobile",
)
container = Container()

app.command(name="expire-budgets")(expire_budgets)
app.command(name="stock-report")(stock_report)
app.command(name="stock-move")(stock_move)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration atelier")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Validité des devis : {config.default_budget_validity_days} jours")
    typer.echo(f"Niveau de log : {config.log_level}")
    typer.echo(f"Fichier de log : {config.log_file}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Workshop v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de l'atelier", version=__version__)

    app()


if __name__ == "__main__":
    main()
