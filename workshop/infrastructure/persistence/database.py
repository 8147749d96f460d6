"""
Configuration de la base de donnees pour le noyau atelier.

Ce module fournit :
- Engine configure (SQLite par defaut, verrou d'ecriture des le BEGIN)
- Fonction d'initialisation des tables

La base de donnees est configuree via WORKSHOP_DATABASE_URL
(defaut: sqlite:///data/workshop.db).

Pour SQLite, chaque transaction demarre par BEGIN IMMEDIATE : deux
transactions du registre de stock sur le meme fichier sont serialisees
au lieu de lire toutes deux un solde perime.
"""

from pathlib import Path
from typing import Any

from sqlalchemy import Engine, event
from sqlmodel import SQLModel, create_engine


def _enable_immediate_transactions(engine: Engine) -> None:
    """
    Remplace la gestion transactionnelle implicite de pysqlite.

    Le driver ouvre sinon ses transactions en mode DEFERRED, sans verrou
    avant la premiere ecriture.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_for(database_url: str, **kwargs: Any) -> Engine:
    """
    Cree un engine pour l'URL donnee.

    Args :
        database_url : URL SQLAlchemy de la base
        **kwargs : Arguments supplementaires transmis a create_engine

    Retourne :
        L'engine configure
    """
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        # Creer le repertoire parent si l'URL est un fichier SQLite
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            db_path = Path(database_url.replace("sqlite:///", ""))
            db_path.parent.mkdir(exist_ok=True, parents=True)
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args

    engine = create_engine(database_url, echo=False, **kwargs)
    if is_sqlite:
        _enable_immediate_transactions(engine)
    return engine


def init_db(engine: Engine) -> None:
    """
    Initialise la base de donnees en creant toutes les tables.

    Les modeles sont importes ici pour enregistrer leurs metadonnees
    dans SQLModel.metadata sans import circulaire.
    """
    from workshop.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
