"""
Entités métier de l'atelier.

Les entités sont des objets mutables dotés d'une identité. Elles portent
les règles métier et ne changent d'état que par leurs méthodes publiques.

Exports :
- ServiceOrder : Ordre de service d'un véhicule
- Budget : Devis rattaché à un ordre de service
- BudgetItem : Ligne de devis (prestation ou pièce)
- StockItem : Article de stock
- StockMovement : Mouvement de stock enregistré
- StockMovementPatch : Correctif partiel d'un mouvement
"""

from workshop.core.entities.budget import Budget, BudgetItem
from workshop.core.entities.service_order import (
    ALLOWED_TRANSITIONS,
    FINAL_STATES,
    ServiceOrder,
    allowed_transitions,
)
from workshop.core.entities.stock import (
    StockItem,
    StockMovement,
    StockMovementPatch,
    apply_movement,
    check_movement_quantity,
    reverse_movement,
)

__all__ = [
    "ServiceOrder",
    "ALLOWED_TRANSITIONS",
    "FINAL_STATES",
    "allowed_transitions",
    "Budget",
    "BudgetItem",
    "StockItem",
    "StockMovement",
    "StockMovementPatch",
    "apply_movement",
    "check_movement_quantity",
    "reverse_movement",
]
