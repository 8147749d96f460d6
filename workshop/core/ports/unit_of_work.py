"""
Port unité de travail.

Une unité de travail borne une transaction : toutes les lectures et écritures
faites via les repositories du contexte sont validées ensemble à la sortie
du bloc, ou annulées si une exception le traverse.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Callable, TypeVar

from workshop.core.ports.repositories import (
    IBudgetItemRepository,
    IBudgetRepository,
    IServiceOrderRepository,
    IStockItemRepository,
    IStockMovementRepository,
)

T = TypeVar("T")


class ITransactionContext(ABC):
    """Repositories liés à une transaction ouverte."""

    service_orders: IServiceOrderRepository
    budgets: IBudgetRepository
    budget_items: IBudgetItemRepository
    stock_items: IStockItemRepository
    stock_movements: IStockMovementRepository


class IUnitOfWork(ABC):
    """Fabrique de transactions."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[ITransactionContext]:
        """
        Ouvre une transaction.

        Usage :
            with uow.transaction() as tx:
                item = tx.stock_items.get_for_update(stock_id)
                ...
        """
        ...

    def with_transaction(self, fn: Callable[[ITransactionContext], T]) -> T:
        """Exécute `fn` dans une transaction et retourne son résultat."""
        with self.transaction() as tx:
            return fn(tx)
