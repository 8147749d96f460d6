"""
Commandes CLI des devis (expire-budgets).
"""

from rich.table import Table

from workshop.adapters.cli.helpers import console, format_datetime, with_container


def expire_budgets() -> None:
    """
    Passe a EXPIRED les devis ouverts dont la validite est depassee.

    A lancer periodiquement (cron, timer systemd).

    Exemple:
      workshop expire-budgets
    """
    _expire_budgets()


@with_container()
def _expire_budgets(container) -> None:
    budgets = container.budget_service()
    expired = budgets.expire_overdue()

    if not expired:
        console.print("[green]Aucun devis a expirer.[/green]")
        return

    table = Table(title=f"{len(expired)} devis expire(s)")
    table.add_column("Devis", style="cyan")
    table.add_column("Ordre de service")
    table.add_column("Genere le")
    table.add_column("Expire le")
    table.add_column("Montant", justify="right")
    for budget in expired:
        table.add_row(
            budget.id,
            budget.service_order_id,
            format_datetime(budget.generation_date),
            format_datetime(budget.get_expiration_date()),
            budget.total_amount.formatted(),
        )
    console.print(table)
