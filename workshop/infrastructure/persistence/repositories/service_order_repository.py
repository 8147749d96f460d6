"""
Implementation SQLModel du repository ServiceOrder.

Implemente l'interface IServiceOrderRepository pour la persistance des
ordres de service. Les ecritures sont flushees mais jamais validees :
la transaction appartient a l'unite de travail.
"""

from typing import Optional

from sqlmodel import Session, select

from workshop.core.entities.service_order import ServiceOrder
from workshop.core.ports.repositories import IServiceOrderRepository
from workshop.core.value_objects import ServiceOrderStatus
from workshop.infrastructure.persistence.models import ServiceOrderModel


class SQLModelServiceOrderRepository(IServiceOrderRepository):
    """
    Repository SQLModel pour les ordres de service.

    Conversion bidirectionnelle entre l'entite ServiceOrder (domaine)
    et ServiceOrderModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: ServiceOrderModel) -> ServiceOrder:
        return ServiceOrder(
            id=model.id,
            status=ServiceOrderStatus(model.status),
            request_date=model.request_date,
            client_id=model.client_id,
            vehicle_id=model.vehicle_id,
            delivery_date=model.delivery_date,
            cancellation_reason=model.cancellation_reason,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply(self, model: ServiceOrderModel, entity: ServiceOrder) -> None:
        """Copie l'etat de l'entite dans le modele."""
        model.status = entity.status.value
        model.request_date = entity.request_date
        model.delivery_date = entity.delivery_date
        model.cancellation_reason = entity.cancellation_reason
        model.notes = entity.notes
        model.client_id = entity.client_id
        model.vehicle_id = entity.vehicle_id
        model.created_at = entity.created_at
        model.updated_at = entity.updated_at

    def get_by_id(self, order_id: str) -> Optional[ServiceOrder]:
        """Recupere un ordre de service par son ID."""
        model = self._session.get(ServiceOrderModel, order_id)
        if model:
            return self._to_entity(model)
        return None

    def save(self, order: ServiceOrder) -> ServiceOrder:
        """Sauvegarde un ordre de service (insertion ou mise a jour)."""
        model = self._session.get(ServiceOrderModel, order.id)
        if model is None:
            model = ServiceOrderModel(
                id=order.id,
                status=order.status.value,
                request_date=order.request_date,
                client_id=order.client_id,
                vehicle_id=order.vehicle_id,
            )
        self._apply(model, order)
        self._session.add(model)
        self._session.flush()
        return self._to_entity(model)

    def list_by_client(self, client_id: str) -> list[ServiceOrder]:
        """Liste les ordres de service d'un client, du plus ancien au plus recent."""
        statement = (
            select(ServiceOrderModel)
            .where(ServiceOrderModel.client_id == client_id)
            .order_by(ServiceOrderModel.request_date)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]
