"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI :
engine, unite de travail, horloge, bus d'evenements et services.
"""

from dependency_injector import containers, providers

from .config import Settings
from .infrastructure.clock import SystemClock
from .infrastructure.events import InMemoryEventBus
from .infrastructure.persistence.database import create_engine_for, init_db
from .infrastructure.persistence.unit_of_work import SQLModelUnitOfWork
from .services.budgets import BudgetService
from .services.event_handlers import BudgetEventHandler
from .services.service_orders import ServiceOrderService
from .services.stock_ledger import StockLedgerService


def _wire_budget_events(bus: InMemoryEventBus, handler: BudgetEventHandler) -> InMemoryEventBus:
    handler.register(bus)
    return bus


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        ledger = container.stock_ledger_service()
        budgets = container.budget_service()

    Les services partagent un unique bus d'evenements ; le handler de devis
    y est abonne a la premiere resolution de `event_bus`.
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Engine - singleton construit depuis l'URL configuree
    engine = providers.Singleton(
        create_engine_for,
        database_url=config.provided.database_url,
    )

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db, engine=engine)

    unit_of_work = providers.Singleton(SQLModelUnitOfWork, engine=engine)
    clock = providers.Singleton(SystemClock)

    # Services de cycle de vie
    service_order_service = providers.Factory(
        ServiceOrderService,
        uow=unit_of_work,
        clock=clock,
    )

    budget_event_handler = providers.Singleton(
        BudgetEventHandler,
        service_orders=service_order_service,
    )

    event_bus = providers.Singleton(
        _wire_budget_events,
        bus=providers.Singleton(InMemoryEventBus),
        handler=budget_event_handler,
    )

    budget_service = providers.Factory(
        BudgetService,
        uow=unit_of_work,
        clock=clock,
        events=event_bus,
        default_validity_days=config.provided.default_budget_validity_days,
    )

    stock_ledger_service = providers.Factory(
        StockLedgerService,
        uow=unit_of_work,
        clock=clock,
    )
