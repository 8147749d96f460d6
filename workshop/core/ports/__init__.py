"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance
- IServiceOrderRepository, IBudgetRepository, IBudgetItemRepository
- IStockItemRepository, IStockMovementRepository

Ports transverses :
- IUnitOfWork / ITransactionContext : Bornes transactionnelles
- IClock : Source de l'instant courant
- IEventPublisher : Diffusion des événements métier
"""

from workshop.core.ports.clock import IClock, utcnow
from workshop.core.ports.events import (
    BUDGET_APPROVED,
    BUDGET_REJECTED,
    BUDGET_SENT,
    IEventPublisher,
)
from workshop.core.ports.repositories import (
    IBudgetItemRepository,
    IBudgetRepository,
    IServiceOrderRepository,
    IStockItemRepository,
    IStockMovementRepository,
)
from workshop.core.ports.unit_of_work import ITransactionContext, IUnitOfWork

__all__ = [
    # Repositories
    "IServiceOrderRepository",
    "IBudgetRepository",
    "IBudgetItemRepository",
    "IStockItemRepository",
    "IStockMovementRepository",
    # Transactions
    "IUnitOfWork",
    "ITransactionContext",
    # Horloge
    "IClock",
    "utcnow",
    # Evenements
    "IEventPublisher",
    "BUDGET_SENT",
    "BUDGET_APPROVED",
    "BUDGET_REJECTED",
]
