"""
Implementation SQLModel des repositories Budget et BudgetItem.

Les montants sont convertis entre Money (domaine) et centimes entiers (DB).
"""

from typing import Optional

from sqlmodel import Session, select

from workshop.core.entities.budget import Budget, BudgetItem
from workshop.core.ports.repositories import IBudgetItemRepository, IBudgetRepository
from workshop.core.value_objects import (
    BudgetItemType,
    BudgetStatus,
    DeliveryMethod,
    Money,
)
from workshop.infrastructure.persistence.models import BudgetItemModel, BudgetModel


class SQLModelBudgetRepository(IBudgetRepository):
    """Repository SQLModel pour les devis."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: BudgetModel) -> Budget:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele BudgetModel depuis la DB

        Retourne :
            L'entite Budget correspondante
        """
        return Budget(
            id=model.id,
            status=BudgetStatus(model.status),
            total_amount=Money(model.total_amount_cents),
            validity_period=model.validity_period,
            generation_date=model.generation_date,
            service_order_id=model.service_order_id,
            client_id=model.client_id,
            sent_date=model.sent_date,
            approval_date=model.approval_date,
            rejection_date=model.rejection_date,
            delivery_method=(
                DeliveryMethod(model.delivery_method) if model.delivery_method else None
            ),
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply(self, model: BudgetModel, entity: Budget) -> None:
        model.status = entity.status.value
        model.total_amount_cents = entity.total_amount.cents
        model.validity_period = entity.validity_period
        model.generation_date = entity.generation_date
        model.sent_date = entity.sent_date
        model.approval_date = entity.approval_date
        model.rejection_date = entity.rejection_date
        model.delivery_method = (
            entity.delivery_method.value if entity.delivery_method else None
        )
        model.notes = entity.notes
        model.service_order_id = entity.service_order_id
        model.client_id = entity.client_id
        model.created_at = entity.created_at
        model.updated_at = entity.updated_at

    def get_by_id(self, budget_id: str) -> Optional[Budget]:
        """Recupere un devis par son ID."""
        model = self._session.get(BudgetModel, budget_id)
        if model:
            return self._to_entity(model)
        return None

    def save(self, budget: Budget) -> Budget:
        """Sauvegarde un devis (insertion ou mise a jour)."""
        model = self._session.get(BudgetModel, budget.id)
        if model is None:
            model = BudgetModel(
                id=budget.id,
                status=budget.status.value,
                validity_period=budget.validity_period,
                generation_date=budget.generation_date,
                service_order_id=budget.service_order_id,
                client_id=budget.client_id,
            )
        self._apply(model, budget)
        self._session.add(model)
        self._session.flush()
        return self._to_entity(model)

    def list_by_service_order(self, service_order_id: str) -> list[Budget]:
        """Liste les devis d'un ordre de service."""
        statement = (
            select(BudgetModel)
            .where(BudgetModel.service_order_id == service_order_id)
            .order_by(BudgetModel.generation_date)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def list_by_status(self, statuses: list[BudgetStatus]) -> list[Budget]:
        """Liste les devis dont le statut figure dans la liste."""
        if not statuses:
            return []
        statement = select(BudgetModel).where(
            BudgetModel.status.in_([status.value for status in statuses])
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]


class SQLModelBudgetItemRepository(IBudgetItemRepository):
    """Repository SQLModel pour les lignes de devis."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: BudgetItemModel) -> BudgetItem:
        return BudgetItem(
            id=model.id,
            budget_id=model.budget_id,
            type=BudgetItemType(model.type),
            description=model.description,
            quantity=model.quantity,
            unit_price=Money(model.unit_price_cents),
            stock_item_id=model.stock_item_id,
            service_id=model.service_id,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def get_by_id(self, item_id: str) -> Optional[BudgetItem]:
        model = self._session.get(BudgetItemModel, item_id)
        if model:
            return self._to_entity(model)
        return None

    def save(self, item: BudgetItem) -> BudgetItem:
        """Sauvegarde une ligne de devis (insertion ou mise a jour)."""
        model = self._session.get(BudgetItemModel, item.id)
        if model is None:
            model = BudgetItemModel(
                id=item.id,
                budget_id=item.budget_id,
                type=item.type.value,
                description=item.description,
                quantity=item.quantity,
                unit_price_cents=item.unit_price.cents,
            )
        model.budget_id = item.budget_id
        model.type = item.type.value
        model.description = item.description
        model.quantity = item.quantity
        model.unit_price_cents = item.unit_price.cents
        model.stock_item_id = item.stock_item_id
        model.service_id = item.service_id
        model.notes = item.notes
        model.created_at = item.created_at
        model.updated_at = item.updated_at
        self._session.add(model)
        self._session.flush()
        return self._to_entity(model)

    def delete(self, item_id: str) -> bool:
        """Supprime une ligne par ID. Retourne True si supprimee."""
        model = self._session.get(BudgetItemModel, item_id)
        if model is None:
            return False
        self._session.delete(model)
        self._session.flush()
        return True

    def list_by_budget(self, budget_id: str) -> list[BudgetItem]:
        """Liste les lignes d'un devis."""
        statement = (
            select(BudgetItemModel)
            .where(BudgetItemModel.budget_id == budget_id)
            .order_by(BudgetItemModel.created_at)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]
