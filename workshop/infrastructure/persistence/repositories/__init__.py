"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans workshop/core/ports/repositories.py, utilisant SQLModel pour
la persistance.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via l'unite de travail
- Convertit entre entites de domaine et modeles DB (SQLModel)
- Flushe ses ecritures sans jamais valider la transaction
"""

from workshop.infrastructure.persistence.repositories.budget_repository import (
    SQLModelBudgetItemRepository,
    SQLModelBudgetRepository,
)
from workshop.infrastructure.persistence.repositories.service_order_repository import (
    SQLModelServiceOrderRepository,
)
from workshop.infrastructure.persistence.repositories.stock_repository import (
    SQLModelStockItemRepository,
    SQLModelStockMovementRepository,
)

__all__ = [
    "SQLModelServiceOrderRepository",
    "SQLModelBudgetRepository",
    "SQLModelBudgetItemRepository",
    "SQLModelStockItemRepository",
    "SQLModelStockMovementRepository",
]
