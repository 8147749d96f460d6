"""
Reactions aux evenements de devis.

Le BudgetEventHandler fait avancer l'ordre de service associe :
- BudgetSent -> AWAITING_APPROVAL
- BudgetApproved -> APPROVED
- BudgetRejected -> REJECTED

Il agit au nom du systeme (aucun controle de role). Un echec est journalise
et n'est jamais propage a l'emetteur.
"""

from typing import Any

from loguru import logger

from workshop.core.exceptions import DomainError
from workshop.core.ports.events import BUDGET_APPROVED, BUDGET_REJECTED, BUDGET_SENT
from workshop.core.value_objects import ServiceOrderStatus
from workshop.infrastructure.events import InMemoryEventBus
from workshop.services.service_orders import ServiceOrderService

ORDER_STATUS_BY_EVENT = {
    BUDGET_SENT: ServiceOrderStatus.AWAITING_APPROVAL,
    BUDGET_APPROVED: ServiceOrderStatus.APPROVED,
    BUDGET_REJECTED: ServiceOrderStatus.REJECTED,
}


class BudgetEventHandler:
    def __init__(self, service_orders: ServiceOrderService) -> None:
        self._service_orders = service_orders

    def register(self, bus: InMemoryEventBus) -> None:
        """Abonne le handler aux trois evenements de devis."""
        bus.subscribe(BUDGET_SENT, self.on_budget_sent)
        bus.subscribe(BUDGET_APPROVED, self.on_budget_approved)
        bus.subscribe(BUDGET_REJECTED, self.on_budget_rejected)

    def on_budget_sent(self, budget_id: str, payload: dict[str, Any]) -> None:
        self._advance(BUDGET_SENT, budget_id, payload)

    def on_budget_approved(self, budget_id: str, payload: dict[str, Any]) -> None:
        self._advance(BUDGET_APPROVED, budget_id, payload)

    def on_budget_rejected(self, budget_id: str, payload: dict[str, Any]) -> None:
        self._advance(BUDGET_REJECTED, budget_id, payload)

    def _advance(self, event_type: str, budget_id: str, payload: dict[str, Any]) -> None:
        order_id = payload.get("service_order_id")
        if not order_id:
            logger.error(f"{event_type} sans ordre de service", budget_id=budget_id)
            return
        target = ORDER_STATUS_BY_EVENT[event_type]
        try:
            self._service_orders.apply_system_transition(order_id, target)
        except DomainError as e:
            logger.error(
                f"Ordre {order_id} non mis a jour apres {event_type}: {e}",
                budget_id=budget_id,
            )
