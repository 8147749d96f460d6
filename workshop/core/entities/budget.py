"""
Entités devis et ligne de devis.

Le devis (Budget) suit un cycle de vie GENERATED -> SENT -> APPROVED / REJECTED,
avec une fenêtre de validité exprimée en jours à partir de la génération.
Contrairement à l'ordre de service, il n'y a pas de table centrale :
chaque méthode porte ses propres préconditions.

Les montants sont des Money (centimes entiers) : aucun calcul flottant.
"""

import uuid
from datetime import datetime, timedelta
from typing import Iterable, Optional, Protocol, Union

from workshop.core.exceptions import (
    BudgetAlreadyApproved,
    BudgetAlreadyRejected,
    BudgetExpired,
    DomainValidationError,
    InvalidBudgetStatus,
)
from workshop.core.clock import utcnow
from workshop.core.value_objects import (
    BudgetItemType,
    BudgetStatus,
    DeliveryMethod,
    Money,
)


class HasTotalPrice(Protocol):
    """Tout objet exposant un total de ligne (BudgetItem ou equivalent)."""

    @property
    def total_price(self) -> Money: ...


class BudgetItem:
    """
    Ligne d'un devis : une prestation ou une pièce du stock.

    Le total de ligne est toujours recalculé (prix unitaire x quantité).

    Attributs :
        id : Identifiant unique
        budget_id : Devis parent
        type : SERVICE ou STOCK_ITEM
        description : Libellé de la ligne
        quantity : Quantité (> 0)
        unit_price : Prix unitaire
        total_price : Prix unitaire x quantité (lecture seule)
        stock_item_id : Article de stock référencé (lignes STOCK_ITEM)
        service_id : Prestation référencée (lignes SERVICE)
        notes : Notes libres
    """

    def __init__(
        self,
        id: str,
        budget_id: str,
        type: BudgetItemType,
        description: str,
        quantity: int,
        unit_price: Money,
        stock_item_id: Optional[str] = None,
        service_id: Optional[str] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise DomainValidationError("quantity", "must be a positive integer")
        now = utcnow()
        self.id = id
        self.budget_id = budget_id
        self.type = type
        self.description = description
        self._quantity = quantity
        self._unit_price = unit_price
        self.stock_item_id = stock_item_id
        self.service_id = service_id
        self.notes = notes
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    @classmethod
    def create(
        cls,
        budget_id: str,
        type: BudgetItemType,
        description: str,
        quantity: int,
        unit_price: Union[Money, int, str],
        stock_item_id: Optional[str] = None,
        service_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "BudgetItem":
        return cls(
            id=str(uuid.uuid4()),
            budget_id=budget_id,
            type=type,
            description=description,
            quantity=quantity,
            unit_price=Money.of(unit_price),
            stock_item_id=stock_item_id,
            service_id=service_id,
            notes=notes,
        )

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def unit_price(self) -> Money:
        return self._unit_price

    @property
    def total_price(self) -> Money:
        return self._unit_price.multiply(self._quantity)

    def update_quantity(self, quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise DomainValidationError("quantity", "must be a positive integer")
        self._quantity = quantity
        self.updated_at = utcnow()

    def update_unit_price(self, unit_price: Union[Money, int, str]) -> None:
        self._unit_price = Money.of(unit_price)
        self.updated_at = utcnow()


class Budget:
    """
    Devis associé à un ordre de service.

    Invariant : date d'expiration = date de génération + validity_period jours ;
    approve/reject exigent le statut SENT et un devis non expiré.

    Les méthodes temporelles acceptent un paramètre `now` optionnel ;
    la couche application y passe l'instant de son IClock.
    """

    def __init__(
        self,
        id: str,
        status: BudgetStatus,
        total_amount: Money,
        validity_period: int,
        generation_date: datetime,
        service_order_id: str,
        client_id: str,
        sent_date: Optional[datetime] = None,
        approval_date: Optional[datetime] = None,
        rejection_date: Optional[datetime] = None,
        delivery_method: Optional[DeliveryMethod] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        now = utcnow()
        self.id = id
        self._status = status
        self._total_amount = total_amount
        self._validity_period = validity_period
        self._generation_date = generation_date
        self._service_order_id = service_order_id
        self._client_id = client_id
        self._sent_date = sent_date
        self._approval_date = approval_date
        self._rejection_date = rejection_date
        self._delivery_method = delivery_method
        self._notes = notes
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    def __repr__(self) -> str:
        return (
            f"Budget(id={self.id!r}, status={self._status.value}, "
            f"total={self._total_amount.cents})"
        )

    @classmethod
    def create(
        cls,
        service_order_id: str,
        client_id: str,
        validity_period: int,
        delivery_method: Optional[DeliveryMethod] = None,
        notes: Optional[str] = None,
        total_amount: Union[Money, int, str, None] = None,
        now: Optional[datetime] = None,
    ) -> "Budget":
        """Nouveau devis au statut GENERATED."""
        if isinstance(validity_period, bool) or not isinstance(validity_period, int) or validity_period < 0:
            raise DomainValidationError("validity_period", "must be a non-negative integer")
        now = now or utcnow()
        return cls(
            id=str(uuid.uuid4()),
            status=BudgetStatus.GENERATED,
            total_amount=Money.of(total_amount) if total_amount is not None else Money.zero(),
            validity_period=validity_period,
            generation_date=now,
            service_order_id=service_order_id,
            client_id=client_id,
            delivery_method=delivery_method,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    @property
    def status(self) -> BudgetStatus:
        return self._status

    @property
    def total_amount(self) -> Money:
        return self._total_amount

    @property
    def validity_period(self) -> int:
        return self._validity_period

    @property
    def generation_date(self) -> datetime:
        return self._generation_date

    @property
    def service_order_id(self) -> str:
        return self._service_order_id

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def sent_date(self) -> Optional[datetime]:
        return self._sent_date

    @property
    def approval_date(self) -> Optional[datetime]:
        return self._approval_date

    @property
    def rejection_date(self) -> Optional[datetime]:
        return self._rejection_date

    @property
    def delivery_method(self) -> Optional[DeliveryMethod]:
        return self._delivery_method

    @property
    def notes(self) -> Optional[str]:
        return self._notes

    # ------------------------------------------------------------------
    # Expiration
    # ------------------------------------------------------------------

    def get_expiration_date(self) -> datetime:
        return self._generation_date + timedelta(days=self._validity_period)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Vrai strictement apres la date d'expiration."""
        return (now or utcnow()) > self.get_expiration_date()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def send(self, now: Optional[datetime] = None) -> None:
        """GENERATED -> SENT, horodate l'envoi."""
        if self._status is not BudgetStatus.GENERATED:
            raise InvalidBudgetStatus(self.id, self._status, BudgetStatus.SENT)
        now = now or utcnow()
        self._status = BudgetStatus.SENT
        self._sent_date = now
        self.updated_at = now

    def mark_as_received(self, now: Optional[datetime] = None) -> None:
        """SENT -> RECEIVED (le client a accuse reception)."""
        if self._status is not BudgetStatus.SENT:
            raise InvalidBudgetStatus(self.id, self._status, BudgetStatus.RECEIVED)
        self._status = BudgetStatus.RECEIVED
        self.updated_at = now or utcnow()

    def ensure_can_approve(self, now: Optional[datetime] = None) -> None:
        """
        Verifie que le devis peut etre approuve, sans le modifier.

        Raises:
            BudgetAlreadyApproved: Si le devis est deja approuve
            InvalidBudgetStatus: Si le devis n'est pas au statut SENT
            BudgetExpired: Si la fenetre de validite est depassee
        """
        if self._status is BudgetStatus.APPROVED:
            raise BudgetAlreadyApproved(self.id)
        self._ensure_open_for_decision(BudgetStatus.APPROVED, now or utcnow())

    def ensure_can_reject(self, now: Optional[datetime] = None) -> None:
        """Pendant de ensure_can_approve pour le rejet (BudgetAlreadyRejected)."""
        if self._status is BudgetStatus.REJECTED:
            raise BudgetAlreadyRejected(self.id)
        self._ensure_open_for_decision(BudgetStatus.REJECTED, now or utcnow())

    def approve(self, now: Optional[datetime] = None) -> None:
        """SENT -> APPROVED, horodate l'approbation (voir ensure_can_approve)."""
        now = now or utcnow()
        self.ensure_can_approve(now)
        self._status = BudgetStatus.APPROVED
        self._approval_date = now
        self.updated_at = now

    def reject(self, now: Optional[datetime] = None) -> None:
        """SENT -> REJECTED, horodate le rejet (voir ensure_can_reject)."""
        now = now or utcnow()
        self.ensure_can_reject(now)
        self._status = BudgetStatus.REJECTED
        self._rejection_date = now
        self.updated_at = now

    def _ensure_open_for_decision(self, target: BudgetStatus, now: datetime) -> None:
        if self._status is not BudgetStatus.SENT:
            raise InvalidBudgetStatus(self.id, self._status, target)
        if self.is_expired(now):
            raise BudgetExpired(self.id, self.get_expiration_date())

    def mark_as_expired(self, now: Optional[datetime] = None) -> None:
        """Passage inconditionnel a EXPIRED (declenche par le balayage periodique)."""
        self._status = BudgetStatus.EXPIRED
        self.updated_at = now or utcnow()

    # ------------------------------------------------------------------
    # Montants
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_total_amount(items: Iterable[HasTotalPrice]) -> Money:
        """Somme des totaux de ligne, en centimes entiers."""
        return Money.sum(item.total_price for item in items)

    def recalculate_total_amount(
        self, items: Iterable[HasTotalPrice], now: Optional[datetime] = None
    ) -> "Budget":
        """Remplace le total par la somme des lignes ; ne touche aucun autre champ."""
        self._total_amount = Budget.calculate_total_amount(items)
        self.updated_at = now or utcnow()
        return self

    # ------------------------------------------------------------------
    # Setters sans controle de statut
    # ------------------------------------------------------------------

    def update_total_amount(self, total_amount: Union[Money, int, str]) -> None:
        self._total_amount = Money.of(total_amount)
        self.updated_at = utcnow()

    def update_validity_period(self, validity_period: int) -> None:
        self._validity_period = validity_period
        self.updated_at = utcnow()

    def update_delivery_method(self, delivery_method: Optional[DeliveryMethod]) -> None:
        self._delivery_method = delivery_method
        self.updated_at = utcnow()

    def update_notes(self, notes: Optional[str]) -> None:
        self._notes = notes
        self.updated_at = utcnow()

    def update_sent_date(self, sent_date: Optional[datetime]) -> None:
        self._sent_date = sent_date
        self.updated_at = utcnow()

    def update_approval_date(self, approval_date: Optional[datetime]) -> None:
        self._approval_date = approval_date
        self.updated_at = utcnow()

    def update_rejection_date(self, rejection_date: Optional[datetime]) -> None:
        self._rejection_date = rejection_date
        self.updated_at = utcnow()
