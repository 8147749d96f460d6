"""
Couche services applicatifs (cas d'usage).

Les services orchestrent la logique du domaine : ils chargent les agrégats
via l'unité de travail, appliquent les politiques d'autorisation, délèguent
les règles aux entités et publient les événements après validation.

- ServiceOrderService : Cycle de vie des ordres de service
- BudgetService : Cycle de vie des devis et balayage d'expiration
- StockLedgerService : Registre de stock (mouvements et corrections)
- BudgetEventHandler : Avancement des ordres sur événement de devis
"""

from workshop.services.budgets import BudgetService
from workshop.services.event_handlers import BudgetEventHandler
from workshop.services.service_orders import ServiceOrderService
from workshop.services.stock_ledger import StockLedgerService

__all__ = [
    "BudgetService",
    "BudgetEventHandler",
    "ServiceOrderService",
    "StockLedgerService",
]
