"""
Bus d'evenements en memoire.

Implementation synchrone du port IEventPublisher : chaque abonne est appele
dans l'ordre d'abonnement. Une erreur d'abonne est journalisee et n'interrompt
ni les autres abonnes ni l'emetteur.
"""

from collections import defaultdict
from typing import Any, Callable

from loguru import logger

from workshop.core.ports.events import IEventPublisher

# (aggregate_id, payload) -> None
EventHandler = Callable[[str, dict[str, Any]], None]


class InMemoryEventBus(IEventPublisher):
    """
    Bus d'evenements types.

    Usage :
        bus = InMemoryEventBus()
        bus.subscribe("BudgetApproved", handler.on_budget_approved)
        bus.emit_event("BudgetApproved", budget.id, {"service_order_id": "..."})
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def handlers_for(self, event_type: str) -> list[EventHandler]:
        return list(self._handlers.get(event_type, []))

    def emit_event(
        self, event_type: str, aggregate_id: str, payload: dict[str, Any]
    ) -> None:
        logger.debug(f"Evenement emis: {event_type}", aggregate_id=aggregate_id)
        for handler in self.handlers_for(event_type):
            try:
                handler(aggregate_id, payload)
            except Exception as e:
                logger.error(
                    f"Echec du traitement de l'evenement {event_type}: {e}",
                    aggregate_id=aggregate_id,
                )
