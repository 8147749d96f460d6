"""
Entité ordre de service.

L'ordre de service est l'agrégat racine du suivi d'un véhicule dans l'atelier.
Son statut évolue uniquement via les méthodes de cycle de vie, qui valident
chaque transition contre la table ALLOWED_TRANSITIONS.
"""

import uuid
from datetime import datetime
from typing import Optional

from workshop.core.exceptions import DomainValidationError, InvalidStatusTransition
from workshop.core.clock import utcnow
from workshop.core.value_objects import ServiceOrderStatus

_S = ServiceOrderStatus

# Statut courant -> statuts atteignables (ordre conserve pour les messages d'erreur)
ALLOWED_TRANSITIONS: dict[ServiceOrderStatus, tuple[ServiceOrderStatus, ...]] = {
    _S.REQUESTED: (_S.RECEIVED, _S.CANCELLED, _S.REJECTED),
    _S.RECEIVED: (_S.IN_DIAGNOSIS, _S.CANCELLED, _S.REJECTED),
    _S.IN_DIAGNOSIS: (_S.AWAITING_APPROVAL, _S.CANCELLED, _S.REJECTED),
    _S.AWAITING_APPROVAL: (_S.APPROVED, _S.REJECTED, _S.CANCELLED),
    _S.APPROVED: (_S.IN_EXECUTION, _S.CANCELLED, _S.REJECTED),
    _S.SCHEDULED: (_S.IN_EXECUTION, _S.CANCELLED, _S.REJECTED),
    _S.IN_EXECUTION: (_S.FINISHED, _S.CANCELLED, _S.REJECTED),
    _S.FINISHED: (_S.DELIVERED, _S.CANCELLED, _S.REJECTED),
    # DELIVERED -> REJECTED et REJECTED -> CANCELLED restent ouverts
    # (litige / garantie), a confirmer cote produit
    _S.DELIVERED: (_S.CANCELLED, _S.REJECTED),
    _S.REJECTED: (_S.CANCELLED,),
    _S.CANCELLED: (),
}

FINAL_STATES = frozenset({_S.DELIVERED, _S.CANCELLED, _S.REJECTED})


def allowed_transitions(status: ServiceOrderStatus) -> tuple[ServiceOrderStatus, ...]:
    """Statuts atteignables depuis `status`."""
    return ALLOWED_TRANSITIONS[status]


class ServiceOrder:
    """
    Ordre de service d'un véhicule client.

    Le statut, la date de livraison, le motif d'annulation et les notes sont
    exposés en lecture seule ; seules les méthodes publiques les modifient.

    Attributs :
        id : Identifiant unique
        status : Statut courant (voir ALLOWED_TRANSITIONS)
        request_date : Date de la demande
        delivery_date : Date de livraison (optionnelle)
        cancellation_reason : Motif, renseigné uniquement par cancel()
        notes : Notes libres
        client_id : Client propriétaire
        vehicle_id : Véhicule concerné
        created_at / updated_at : Horodatage
    """

    def __init__(
        self,
        id: str,
        status: ServiceOrderStatus,
        request_date: datetime,
        client_id: str,
        vehicle_id: str,
        delivery_date: Optional[datetime] = None,
        cancellation_reason: Optional[str] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        now = utcnow()
        self.id = id
        self._status = status
        self._request_date = request_date
        self._delivery_date = delivery_date
        self._cancellation_reason = cancellation_reason
        self._notes = notes
        self._client_id = client_id
        self._vehicle_id = vehicle_id
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    def __repr__(self) -> str:
        return f"ServiceOrder(id={self.id!r}, status={self._status.value})"

    # ------------------------------------------------------------------
    # Fabriques
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        client_id: str,
        vehicle_id: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "ServiceOrder":
        """Nouvel ordre demande par un client (statut REQUESTED)."""
        return cls._new(_S.REQUESTED, client_id, vehicle_id, notes, now)

    @classmethod
    def create_received(
        cls,
        client_id: str,
        vehicle_id: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "ServiceOrder":
        """Nouvel ordre saisi par un employe (statut RECEIVED)."""
        return cls._new(_S.RECEIVED, client_id, vehicle_id, notes, now)

    @classmethod
    def _new(
        cls,
        status: ServiceOrderStatus,
        client_id: str,
        vehicle_id: str,
        notes: Optional[str],
        now: Optional[datetime],
    ) -> "ServiceOrder":
        now = now or utcnow()
        return cls(
            id=str(uuid.uuid4()),
            status=status,
            request_date=now,
            client_id=client_id,
            vehicle_id=vehicle_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    @property
    def status(self) -> ServiceOrderStatus:
        return self._status

    @property
    def request_date(self) -> datetime:
        return self._request_date

    @property
    def delivery_date(self) -> Optional[datetime]:
        return self._delivery_date

    @property
    def cancellation_reason(self) -> Optional[str]:
        return self._cancellation_reason

    @property
    def notes(self) -> Optional[str]:
        return self._notes

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def vehicle_id(self) -> str:
        return self._vehicle_id

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _validate_status_transition(self, new_status: ServiceOrderStatus) -> None:
        allowed = ALLOWED_TRANSITIONS[self._status]
        if new_status not in allowed:
            raise InvalidStatusTransition(self._status, new_status, allowed)

    def update_status(
        self, new_status: ServiceOrderStatus, now: Optional[datetime] = None
    ) -> None:
        """
        Applique une transition de statut.

        Raises:
            InvalidStatusTransition: Si la transition n'est pas dans la table
        """
        self._validate_status_transition(new_status)
        self._status = new_status
        self.updated_at = now or utcnow()

    def cancel(self, reason: str, now: Optional[datetime] = None) -> None:
        """
        Annule l'ordre en enregistrant le motif.

        Le motif est valide avant la transition : un motif vide ne modifie rien.
        """
        if not reason or not reason.strip():
            raise DomainValidationError("cancellation_reason", "is required")
        self._validate_status_transition(_S.CANCELLED)
        self._status = _S.CANCELLED
        self._cancellation_reason = reason.strip()
        self.updated_at = now or utcnow()

    def mark_received(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.RECEIVED, now)

    def mark_in_diagnosis(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.IN_DIAGNOSIS, now)

    def mark_awaiting_approval(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.AWAITING_APPROVAL, now)

    def mark_approved(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.APPROVED, now)

    def mark_rejected(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.REJECTED, now)

    def mark_in_execution(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.IN_EXECUTION, now)

    def mark_finished(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.FINISHED, now)

    def mark_delivered(self, now: Optional[datetime] = None) -> None:
        self.update_status(_S.DELIVERED, now)

    # ------------------------------------------------------------------
    # Setters sans invariant
    # ------------------------------------------------------------------

    def update_delivery_date(
        self, delivery_date: datetime, now: Optional[datetime] = None
    ) -> None:
        self._delivery_date = delivery_date
        self.updated_at = now or utcnow()

    def update_notes(self, notes: Optional[str], now: Optional[datetime] = None) -> None:
        self._notes = notes
        self.updated_at = now or utcnow()

    # ------------------------------------------------------------------
    # Predicats
    # ------------------------------------------------------------------

    def can_add_budget_items(self) -> bool:
        return self._status is _S.IN_DIAGNOSIS

    def can_be_approved_or_rejected(self) -> bool:
        return self._status is _S.AWAITING_APPROVAL

    def is_in_final_state(self) -> bool:
        return self._status in FINAL_STATES
