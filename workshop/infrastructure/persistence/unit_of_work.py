"""
Unite de travail SQLModel.

Chaque appel a transaction() ouvre une Session dediee et une transaction
explicite. Le bloc est valide a la sortie normale, annule si une exception
le traverse. Les repositories du contexte partagent cette session.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import Session

from workshop.core.ports.unit_of_work import ITransactionContext, IUnitOfWork
from workshop.infrastructure.persistence.repositories import (
    SQLModelBudgetItemRepository,
    SQLModelBudgetRepository,
    SQLModelServiceOrderRepository,
    SQLModelStockItemRepository,
    SQLModelStockMovementRepository,
)


class SQLModelTransactionContext(ITransactionContext):
    """Repositories SQLModel lies a une meme session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.service_orders = SQLModelServiceOrderRepository(session)
        self.budgets = SQLModelBudgetRepository(session)
        self.budget_items = SQLModelBudgetItemRepository(session)
        self.stock_items = SQLModelStockItemRepository(session)
        self.stock_movements = SQLModelStockMovementRepository(session)


class SQLModelUnitOfWork(IUnitOfWork):
    """
    Unite de travail adossee a un engine SQLAlchemy.

    Usage :
        uow = SQLModelUnitOfWork(engine)
        with uow.transaction() as tx:
            tx.stock_items.save(item)
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def transaction(self) -> Iterator[SQLModelTransactionContext]:
        with Session(self._engine, expire_on_commit=False) as session:
            try:
                with session.begin():
                    yield SQLModelTransactionContext(session)
            except Exception as e:
                logger.debug("Transaction annulee", error=type(e).__name__)
                raise
