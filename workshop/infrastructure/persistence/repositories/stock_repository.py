"""
Implementation SQLModel des repositories StockItem et StockMovement.

get_for_update emet un SELECT ... FOR UPDATE sur les bases qui le
supportent. Sous SQLite la clause est ignoree : la serialisation vient
du BEGIN IMMEDIATE pose par database.create_engine_for.
"""

from typing import Optional

from sqlmodel import Session, select

from workshop.core.entities.stock import StockItem, StockMovement
from workshop.core.exceptions import StockMovementNotFound
from workshop.core.ports.repositories import (
    IStockItemRepository,
    IStockMovementRepository,
)
from workshop.core.value_objects import Money, StockMovementType
from workshop.infrastructure.persistence.models import StockItemModel, StockMovementModel


class SQLModelStockItemRepository(IStockItemRepository):
    """
    Repository SQLModel pour les articles de stock.

    Implemente IStockItemRepository avec conversion bidirectionnelle
    entre l'entite StockItem (domaine) et StockItemModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: StockItemModel) -> StockItem:
        return StockItem(
            id=model.id,
            name=model.name,
            sku=model.sku,
            current_stock=model.current_stock,
            min_stock_level=model.min_stock_level,
            unit_cost=Money(model.unit_cost_cents),
            unit_sale_price=Money(model.unit_sale_price_cents),
            description=model.description,
            supplier=model.supplier,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def get_by_id(self, stock_id: str) -> Optional[StockItem]:
        """Recupere un article par son ID."""
        model = self._session.get(StockItemModel, stock_id)
        if model:
            return self._to_entity(model)
        return None

    def get_for_update(self, stock_id: str) -> Optional[StockItem]:
        """Recupere un article en verrouillant sa ligne jusqu'a la fin de la transaction."""
        statement = (
            select(StockItemModel)
            .where(StockItemModel.id == stock_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def get_by_sku(self, sku: str) -> Optional[StockItem]:
        """Recupere un article par sa reference (insensible a la casse)."""
        statement = select(StockItemModel).where(
            StockItemModel.sku == sku.strip().upper()
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def save(self, item: StockItem) -> StockItem:
        """Sauvegarde un article (insertion ou mise a jour)."""
        model = self._session.get(StockItemModel, item.id)
        if model is None:
            model = StockItemModel(id=item.id, name=item.name, sku=item.sku)
        model.name = item.name
        model.sku = item.sku
        model.description = item.description
        model.current_stock = item.current_stock
        model.min_stock_level = item.min_stock_level
        model.unit_cost_cents = item.unit_cost.cents
        model.unit_sale_price_cents = item.unit_sale_price.cents
        model.supplier = item.supplier
        model.created_at = item.created_at
        model.updated_at = item.updated_at
        self._session.add(model)
        self._session.flush()
        return self._to_entity(model)

    def list_all(self) -> list[StockItem]:
        statement = select(StockItemModel).order_by(StockItemModel.sku)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def list_below_minimum(self) -> list[StockItem]:
        """Liste les articles dont le solde est strictement sous le seuil."""
        statement = (
            select(StockItemModel)
            .where(StockItemModel.current_stock < StockItemModel.min_stock_level)
            .order_by(StockItemModel.sku)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]


class SQLModelStockMovementRepository(IStockMovementRepository):
    """Repository SQLModel pour les mouvements de stock."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: StockMovementModel) -> StockMovement:
        return StockMovement(
            id=model.id,
            type=StockMovementType(model.type),
            quantity=model.quantity,
            movement_date=model.movement_date,
            stock_id=model.stock_id,
            reason=model.reason,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply(self, model: StockMovementModel, entity: StockMovement) -> None:
        model.type = entity.type.value
        model.quantity = entity.quantity
        model.movement_date = entity.movement_date
        model.reason = entity.reason
        model.notes = entity.notes
        model.stock_id = entity.stock_id
        model.created_at = entity.created_at
        model.updated_at = entity.updated_at

    def get_by_id(self, movement_id: str) -> Optional[StockMovement]:
        model = self._session.get(StockMovementModel, movement_id)
        if model:
            return self._to_entity(model)
        return None

    def add(self, movement: StockMovement) -> StockMovement:
        """Enregistre un nouveau mouvement."""
        model = StockMovementModel(
            id=movement.id,
            type=movement.type.value,
            quantity=movement.quantity,
            movement_date=movement.movement_date,
            stock_id=movement.stock_id,
        )
        self._apply(model, movement)
        self._session.add(model)
        self._session.flush()
        return self._to_entity(model)

    def update(self, movement: StockMovement) -> StockMovement:
        """Met a jour un mouvement existant."""
        model = self._session.get(StockMovementModel, movement.id)
        if model is None:
            raise StockMovementNotFound(movement.id)
        self._apply(model, movement)
        self._session.add(model)
        self._session.flush()
        return self._to_entity(model)

    def list_by_stock(self, stock_id: str) -> list[StockMovement]:
        """Liste les mouvements d'un article par date effective croissante."""
        statement = (
            select(StockMovementModel)
            .where(StockMovementModel.stock_id == stock_id)
            .order_by(StockMovementModel.movement_date, StockMovementModel.created_at)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]
