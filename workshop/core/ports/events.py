"""
Port de publication d'événements métier.

Les services émettent les événements APRÈS validation de la transaction.
L'émission est sans retour : un abonné en échec n'annule rien.
"""

from abc import ABC, abstractmethod
from typing import Any

BUDGET_SENT = "BudgetSent"
BUDGET_APPROVED = "BudgetApproved"
BUDGET_REJECTED = "BudgetRejected"


class IEventPublisher(ABC):
    """Diffuse un événement typé concernant un agrégat."""

    @abstractmethod
    def emit_event(
        self, event_type: str, aggregate_id: str, payload: dict[str, Any]
    ) -> None:
        ...
