"""
Service applicatif des ordres de service.

Orchestre l'ouverture et les changements de statut des ordres :
- le role de l'appelant est verifie AVANT toute mutation
- la validite de la transition est verifiee par l'agregat
- chaque operation tient dans une transaction
"""

from typing import Optional

from loguru import logger

from workshop.core.authorization import ensure_can_change_order_status
from workshop.core.entities.service_order import ServiceOrder
from workshop.core.exceptions import (
    DomainError,
    DomainValidationError,
    ServiceOrderNotFound,
)
from workshop.core.ports.clock import IClock
from workshop.core.ports.unit_of_work import ITransactionContext, IUnitOfWork
from workshop.core.value_objects import ServiceOrderStatus, UserRole


class ServiceOrderService:
    """
    Cycle de vie des ordres de service.

    Example:
        orders = ServiceOrderService(uow=uow, clock=SystemClock())
        order = orders.open_order("client-1", "vehicle-1", UserRole.EMPLOYEE)
        orders.change_status(order.id, ServiceOrderStatus.IN_DIAGNOSIS, UserRole.EMPLOYEE)
    """

    def __init__(self, uow: IUnitOfWork, clock: IClock) -> None:
        self._uow = uow
        self._clock = clock

    def open_order(
        self,
        client_id: str,
        vehicle_id: str,
        role: UserRole,
        notes: Optional[str] = None,
    ) -> ServiceOrder:
        """
        Ouvre un ordre de service.

        Un client cree une demande (REQUESTED) ; un employe ou un
        administrateur saisit directement un vehicule recu (RECEIVED).
        """
        now = self._clock.now()
        if role is UserRole.CLIENT:
            order = ServiceOrder.create(client_id, vehicle_id, notes=notes, now=now)
        else:
            order = ServiceOrder.create_received(client_id, vehicle_id, notes=notes, now=now)

        saved = self._uow.with_transaction(lambda tx: tx.service_orders.save(order))
        logger.info(
            f"Ordre de service ouvert: {saved.id}",
            status=saved.status.value,
            role=role.value,
        )
        return saved

    def get(self, order_id: str) -> ServiceOrder:
        """Retourne l'ordre ou leve ServiceOrderNotFound."""
        return self._uow.with_transaction(lambda tx: self._load(tx, order_id))

    def list_for_client(self, client_id: str) -> list[ServiceOrder]:
        return self._uow.with_transaction(
            lambda tx: tx.service_orders.list_by_client(client_id)
        )

    def change_status(
        self, order_id: str, target: ServiceOrderStatus, role: UserRole
    ) -> ServiceOrder:
        """
        Change le statut d'un ordre au nom d'un utilisateur.

        L'annulation passe par cancel(), qui exige un motif.

        Raises:
            ServiceOrderNotFound: Si l'ordre n'existe pas
            UnauthorizedStatusChange: Si le role n'a pas la permission
            InvalidStatusTransition: Si la transition n'est pas autorisee
        """
        now = self._clock.now()

        def _change(tx: ITransactionContext) -> ServiceOrder:
            order = self._load(tx, order_id)
            ensure_can_change_order_status(order.id, order.status, target, role)
            if target is ServiceOrderStatus.CANCELLED:
                raise DomainValidationError(
                    "cancellation_reason", "is required, use cancel() to cancel an order"
                )
            previous = order.status
            order.update_status(target, now)
            saved = tx.service_orders.save(order)
            logger.info(
                f"Ordre {order_id}: {previous.value} -> {target.value}",
                role=role.value,
            )
            return saved

        return self._run(_change, order_id)

    def cancel(self, order_id: str, reason: str, role: UserRole) -> ServiceOrder:
        """Annule un ordre (ADMIN uniquement) en enregistrant le motif."""
        now = self._clock.now()

        def _cancel(tx: ITransactionContext) -> ServiceOrder:
            order = self._load(tx, order_id)
            ensure_can_change_order_status(
                order.id, order.status, ServiceOrderStatus.CANCELLED, role
            )
            order.cancel(reason, now)
            saved = tx.service_orders.save(order)
            logger.info(f"Ordre {order_id} annule", reason=saved.cancellation_reason)
            return saved

        return self._run(_cancel, order_id)

    def apply_system_transition(
        self, order_id: str, target: ServiceOrderStatus
    ) -> ServiceOrder:
        """
        Transition declenchee par le systeme (evenements de devis).

        Aucun role n'est verifie ; la table des transitions s'applique.
        """
        now = self._clock.now()

        def _apply(tx: ITransactionContext) -> ServiceOrder:
            order = self._load(tx, order_id)
            order.update_status(target, now)
            return tx.service_orders.save(order)

        saved = self._run(_apply, order_id)
        logger.info(f"Ordre {order_id} -> {target.value} (systeme)")
        return saved

    @staticmethod
    def _load(tx: ITransactionContext, order_id: str) -> ServiceOrder:
        order = tx.service_orders.get_by_id(order_id)
        if order is None:
            raise ServiceOrderNotFound(order_id)
        return order

    def _run(self, fn, order_id: str) -> ServiceOrder:
        try:
            return self._uow.with_transaction(fn)
        except DomainError as e:
            logger.warning(
                f"Changement de statut refuse pour l'ordre {order_id}: {e}", code=e.code
            )
            raise
