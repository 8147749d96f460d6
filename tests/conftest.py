"""
Fixtures pytest partagees pour les tests de l'atelier.

Ce module contient les fixtures communes utilisees dans les tests:
- Engine SQLite en memoire et unite de travail
- Horloge figee (FixedClock) pilotable depuis les tests
- Services applicatifs branches sur la base de test
"""

from datetime import datetime, timedelta
from typing import Iterator, Optional

import pytest
from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool

from workshop.core.clock import utcnow
from workshop.core.ports.clock import IClock
from workshop.infrastructure.events import InMemoryEventBus
from workshop.infrastructure.persistence.database import create_engine_for, init_db
from workshop.infrastructure.persistence.unit_of_work import SQLModelUnitOfWork
from workshop.services.budgets import BudgetService
from workshop.services.event_handlers import BudgetEventHandler
from workshop.services.service_orders import ServiceOrderService
from workshop.services.stock_ledger import StockLedgerService


class FixedClock(IClock):
    """Horloge figee, avancee explicitement par les tests."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self._now = now or utcnow()

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def engine() -> Iterator[Engine]:
    """
    Engine SQLite en memoire partage par toutes les sessions du test.

    StaticPool conserve une connexion unique : sans elle chaque session
    verrait une base vide.
    """
    engine = create_engine_for("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow(engine: Engine) -> SQLModelUnitOfWork:
    return SQLModelUnitOfWork(engine)


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def order_service(uow: SQLModelUnitOfWork, clock: FixedClock) -> ServiceOrderService:
    return ServiceOrderService(uow=uow, clock=clock)


@pytest.fixture
def budget_service(
    uow: SQLModelUnitOfWork, clock: FixedClock, event_bus: InMemoryEventBus
) -> BudgetService:
    return BudgetService(uow=uow, clock=clock, events=event_bus, default_validity_days=7)


@pytest.fixture
def ledger(uow: SQLModelUnitOfWork, clock: FixedClock) -> StockLedgerService:
    return StockLedgerService(uow=uow, clock=clock)


@pytest.fixture
def wired_event_bus(
    event_bus: InMemoryEventBus, order_service: ServiceOrderService
) -> InMemoryEventBus:
    """Bus avec le BudgetEventHandler abonne, comme dans le container."""
    BudgetEventHandler(order_service).register(event_bus)
    return event_bus
