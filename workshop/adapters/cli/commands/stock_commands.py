"""
Commandes CLI du stock (stock-report, stock-move).
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from workshop.adapters.cli.helpers import console, domain_errors, with_container
from workshop.core.value_objects import StockMovementType


def stock_report(
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Lister tous les articles, pas seulement les alertes"),
    ] = False,
) -> None:
    """
    Affiche les articles sous leur seuil d'alerte.

    Exemples:
      workshop stock-report          # Articles a reapprovisionner
      workshop stock-report --all    # Tout le stock
    """
    _stock_report(show_all)


@with_container()
def _stock_report(container, show_all: bool) -> None:
    ledger = container.stock_ledger_service()
    items = ledger.list_stock_items() if show_all else ledger.list_below_minimum()

    if not items:
        console.print("[green]Aucun article sous le seuil d'alerte.[/green]")
        return

    table = Table(title="Stock" if show_all else "Articles a reapprovisionner")
    table.add_column("SKU", style="cyan")
    table.add_column("Nom")
    table.add_column("Stock", justify="right")
    table.add_column("Minimum", justify="right")
    table.add_column("Deficit", justify="right", style="red")
    table.add_column("Prix de vente", justify="right")
    for item in items:
        deficit = item.get_stock_deficit()
        table.add_row(
            item.sku,
            item.name,
            str(item.current_stock),
            str(item.min_stock_level),
            str(deficit) if deficit else "-",
            item.unit_sale_price.formatted(),
        )
    console.print(table)


def stock_move(
    sku: Annotated[str, typer.Argument(help="Reference de l'article")],
    movement_type: Annotated[
        StockMovementType,
        typer.Argument(help="Type de mouvement", case_sensitive=False),
    ],
    quantity: Annotated[
        int,
        typer.Argument(help="Quantite (niveau cible pour ADJUSTMENT)", min=0),
    ],
    reason: Annotated[
        Optional[str],
        typer.Option("--reason", "-r", help="Motif du mouvement"),
    ] = None,
) -> None:
    """
    Enregistre un mouvement de stock.

    Exemples:
      workshop stock-move FLT-001 IN 10 --reason "Livraison fournisseur"
      workshop stock-move FLT-001 OUT 2
      workshop stock-move FLT-001 ADJUSTMENT 15 -r "Inventaire"
    """
    _stock_move(sku, movement_type, quantity, reason)


@with_container()
def _stock_move(
    container,
    sku: str,
    movement_type: StockMovementType,
    quantity: int,
    reason: Optional[str],
) -> None:
    ledger = container.stock_ledger_service()
    with domain_errors():
        item = ledger.get_stock_item_by_sku(sku)
        movement = ledger.record_movement(item.id, movement_type, quantity, reason=reason)
        updated = ledger.get_stock_item(item.id)

    console.print(
        f"[green]{movement.type.value}[/green] {movement.quantity} x {updated.sku} "
        f"-> stock: [bold]{updated.current_stock}[/bold]"
    )
    if updated.is_below_minimum_stock():
        console.print(
            f"[yellow]Attention:[/yellow] {updated.sku} sous le seuil d'alerte "
            f"({updated.current_stock}/{updated.min_stock_level})"
        )
