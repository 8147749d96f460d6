"""Sous-package CLI commands - re-exporte les commandes publiques."""

from workshop.adapters.cli.commands.budget_commands import expire_budgets
from workshop.adapters.cli.commands.stock_commands import stock_move, stock_report

__all__ = [
    "expire_budgets",
    "stock_move",
    "stock_report",
]
