"""
Module de persistance pour le noyau atelier.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Configuration de l'engine, session factory, initialisation
- models.py : Modeles SQLModel representant les tables
- repositories/ : Implementations des ports repository
- unit_of_work.py : Bornes transactionnelles (SQLModelUnitOfWork)

Usage:
    from workshop.infrastructure.persistence import create_engine_for, init_db
    from workshop.infrastructure.persistence import SQLModelUnitOfWork

    engine = create_engine_for("sqlite:///data/workshop.db")
    init_db(engine)
    uow = SQLModelUnitOfWork(engine)
"""

from workshop.infrastructure.persistence.database import (
    create_engine_for,
    init_db,
)
from workshop.infrastructure.persistence.unit_of_work import (
    SQLModelTransactionContext,
    SQLModelUnitOfWork,
)

__all__ = [
    "create_engine_for",
    "init_db",
    "SQLModelUnitOfWork",
    "SQLModelTransactionContext",
]
