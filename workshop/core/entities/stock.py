"""
Entités de stock : article et mouvement.

StockItem.current_stock est le solde courant persisté de tous les mouvements
appliqués. Il n'est jamais recalculé depuis l'historique : le registre
(StockLedgerService) le met à jour de façon incrémentale dans une transaction.

Les fonctions apply_movement / reverse_movement portent l'arithmétique du
registre ; elles sont pures et ne lèvent pas d'erreur sur un résultat négatif,
c'est à l'appelant de le refuser.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from workshop.core.exceptions import (
    DomainValidationError,
    InvalidPriceMargin,
    InvalidStockAdjustment,
)
from workshop.core.clock import utcnow
from workshop.core.validators import (
    is_non_negative_int,
    is_valid_description,
    is_valid_name,
    is_valid_notes,
    is_valid_reason,
    is_valid_supplier,
    validate_movement_fields,
    validate_stock_item_fields,
)
from workshop.core.value_objects import Money, StockMovementType


def apply_movement(level: int, movement_type: StockMovementType, quantity: int) -> int:
    """
    Niveau de stock apres application d'un mouvement.

    IN ajoute, OUT retire, ADJUSTMENT fixe le niveau absolu.
    """
    if movement_type is StockMovementType.IN:
        return level + quantity
    if movement_type is StockMovementType.OUT:
        return level - quantity
    return quantity


def reverse_movement(level: int, movement_type: StockMovementType, quantity: int) -> int:
    """
    Niveau de stock sans l'effet d'un mouvement deja applique.

    Un ADJUSTMENT n'enregistre pas le niveau qu'il a remplace :
    son annulation laisse le niveau courant inchange.
    """
    if movement_type is StockMovementType.IN:
        return level - quantity
    if movement_type is StockMovementType.OUT:
        return level + quantity
    return level


class StockItem:
    """
    Article de stock (pièce, consommable).

    Invariants :
    - current_stock >= 0
    - unit_sale_price >= unit_cost (contrôlé à la création et à chaque mise à jour de prix)

    Attributs :
        id : Identifiant unique
        name : Nom (2 à 100 caractères)
        sku : Référence unique (format A-Z, 0-9, tiret, 3 à 20 caractères)
        current_stock : Solde courant
        min_stock_level : Seuil d'alerte
        unit_cost : Coût unitaire
        unit_sale_price : Prix de vente unitaire
        description : Description (optionnelle, 500 caractères max)
        supplier : Fournisseur (optionnel)
    """

    def __init__(
        self,
        id: str,
        name: str,
        sku: str,
        current_stock: int,
        min_stock_level: int,
        unit_cost: Money,
        unit_sale_price: Money,
        description: Optional[str] = None,
        supplier: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        validate_stock_item_fields(
            name=name,
            sku=sku,
            current_stock=current_stock,
            min_stock_level=min_stock_level,
            description=description,
            supplier=supplier,
        )
        if unit_sale_price.cents < unit_cost.cents:
            raise InvalidPriceMargin(unit_cost.cents, unit_sale_price.cents)

        now = utcnow()
        self.id = id
        self._name = name
        self._sku = sku.strip().upper()
        self._current_stock = current_stock
        self._min_stock_level = min_stock_level
        self._unit_cost = unit_cost
        self._unit_sale_price = unit_sale_price
        self._description = description
        self._supplier = supplier
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    def __repr__(self) -> str:
        return f"StockItem(id={self.id!r}, sku={self._sku!r}, stock={self._current_stock})"

    @classmethod
    def create(
        cls,
        name: str,
        sku: str,
        current_stock: int,
        min_stock_level: int,
        unit_cost: Union[Money, int, str],
        unit_sale_price: Union[Money, int, str],
        description: Optional[str] = None,
        supplier: Optional[str] = None,
    ) -> "StockItem":
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            sku=sku,
            current_stock=current_stock,
            min_stock_level=min_stock_level,
            unit_cost=Money.of(unit_cost),
            unit_sale_price=Money.of(unit_sale_price),
            description=description,
            supplier=supplier,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def sku(self) -> str:
        return self._sku

    @property
    def current_stock(self) -> int:
        return self._current_stock

    @property
    def min_stock_level(self) -> int:
        return self._min_stock_level

    @property
    def unit_cost(self) -> Money:
        return self._unit_cost

    @property
    def unit_sale_price(self) -> Money:
        return self._unit_sale_price

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def supplier(self) -> Optional[str]:
        return self._supplier

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update_name(self, name: str) -> None:
        if not is_valid_name(name):
            raise DomainValidationError("name", "must be between 2 and 100 characters")
        self._name = name
        self.updated_at = utcnow()

    def update_description(self, description: Optional[str]) -> None:
        if not is_valid_description(description):
            raise DomainValidationError("description", "must not exceed 500 characters")
        self._description = description
        self.updated_at = utcnow()

    def update_supplier(self, supplier: Optional[str]) -> None:
        if not is_valid_supplier(supplier):
            raise DomainValidationError("supplier", "must be between 2 and 100 characters")
        self._supplier = supplier
        self.updated_at = utcnow()

    def update_min_stock_level(self, min_stock_level: int) -> None:
        if not is_non_negative_int(min_stock_level):
            raise DomainValidationError("min_stock_level", "must be a non-negative integer")
        self._min_stock_level = min_stock_level
        self.updated_at = utcnow()

    def update_unit_cost(self, unit_cost: Union[Money, int, str]) -> None:
        cost = Money.of(unit_cost)
        if self._unit_sale_price.cents < cost.cents:
            raise InvalidPriceMargin(cost.cents, self._unit_sale_price.cents)
        self._unit_cost = cost
        self.updated_at = utcnow()

    def update_unit_sale_price(self, unit_sale_price: Union[Money, int, str]) -> None:
        price = Money.of(unit_sale_price)
        if price.cents < self._unit_cost.cents:
            raise InvalidPriceMargin(self._unit_cost.cents, price.cents)
        self._unit_sale_price = price
        self.updated_at = utcnow()

    def update_prices(
        self,
        unit_cost: Union[Money, int, str, None] = None,
        unit_sale_price: Union[Money, int, str, None] = None,
    ) -> None:
        """Met a jour les deux prix ensemble ; la marge est verifiee sur le resultat."""
        cost = Money.of(unit_cost) if unit_cost is not None else self._unit_cost
        price = (
            Money.of(unit_sale_price) if unit_sale_price is not None else self._unit_sale_price
        )
        if price.cents < cost.cents:
            raise InvalidPriceMargin(cost.cents, price.cents)
        self._unit_cost = cost
        self._unit_sale_price = price
        self.updated_at = utcnow()

    def adjust_stock(self, delta: int) -> None:
        """Ajoute un delta (positif ou negatif) au solde."""
        new_level = self._current_stock + delta
        if new_level < 0:
            raise InvalidStockAdjustment(self._current_stock, delta)
        self._current_stock = new_level
        self.updated_at = utcnow()

    def set_current_stock(self, level: int, now: Optional[datetime] = None) -> None:
        """Fixe le solde (utilise par le registre apres calcul du niveau final)."""
        if not is_non_negative_int(level):
            raise InvalidStockAdjustment(self._current_stock, level - self._current_stock)
        self._current_stock = level
        self.updated_at = now or utcnow()

    # ------------------------------------------------------------------
    # Regles
    # ------------------------------------------------------------------

    def has_stock(self, quantity: int) -> bool:
        return self._current_stock >= quantity

    def is_below_minimum_stock(self) -> bool:
        return self._current_stock < self._min_stock_level

    def get_stock_deficit(self) -> int:
        return max(0, self._min_stock_level - self._current_stock)

    def get_profit_per_unit(self) -> Money:
        return self._unit_sale_price - self._unit_cost

    def get_profit_margin_percentage(self) -> float:
        if self._unit_cost.cents == 0:
            return 0.0
        profit = self._unit_sale_price.cents - self._unit_cost.cents
        return profit / self._unit_cost.cents * 100


class StockMovement:
    """
    Mouvement de stock enregistré.

    Attributs :
        id : Identifiant unique
        type : IN, OUT ou ADJUSTMENT
        quantity : Delta pour IN/OUT (> 0), niveau cible pour ADJUSTMENT (>= 0)
        movement_date : Date effective du mouvement
        stock_id : Article concerné
        reason : Motif (200 caractères max)
        notes : Notes (500 caractères max)
    """

    def __init__(
        self,
        id: str,
        type: StockMovementType,
        quantity: int,
        movement_date: datetime,
        stock_id: str,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        validate_movement_fields(quantity, stock_id, reason, notes)
        check_movement_quantity(type, quantity)
        now = utcnow()
        self.id = id
        self._type = type
        self._quantity = quantity
        self._movement_date = movement_date
        self._stock_id = stock_id
        self._reason = reason
        self._notes = notes
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    def __repr__(self) -> str:
        return (
            f"StockMovement(id={self.id!r}, type={self._type.value}, "
            f"quantity={self._quantity}, stock_id={self._stock_id!r})"
        )

    @classmethod
    def create(
        cls,
        type: StockMovementType,
        quantity: int,
        stock_id: str,
        movement_date: Optional[datetime] = None,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "StockMovement":
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            type=type,
            quantity=quantity,
            movement_date=movement_date or now,
            stock_id=stock_id,
            reason=reason,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    @property
    def type(self) -> StockMovementType:
        return self._type

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def movement_date(self) -> datetime:
        return self._movement_date

    @property
    def stock_id(self) -> str:
        return self._stock_id

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    @property
    def notes(self) -> Optional[str]:
        return self._notes

    def is_in_movement(self) -> bool:
        return self._type is StockMovementType.IN

    def is_out_movement(self) -> bool:
        return self._type is StockMovementType.OUT

    def is_adjustment_movement(self) -> bool:
        return self._type is StockMovementType.ADJUSTMENT

    def get_effective_quantity(self) -> int:
        """Delta signe pour IN/OUT, niveau cible pour ADJUSTMENT."""
        if self._type is StockMovementType.OUT:
            return -self._quantity
        return self._quantity

    def apply_patch(self, patch: "StockMovementPatch", now: Optional[datetime] = None) -> None:
        """Applique les champs renseignes d'un correctif."""
        new_type = patch.type or self._type
        new_quantity = patch.quantity if patch.quantity is not None else self._quantity
        check_movement_quantity(new_type, new_quantity)
        if patch.reason is not None and not is_valid_reason(patch.reason):
            raise DomainValidationError("reason", "must not exceed 200 characters")
        if patch.notes is not None and not is_valid_notes(patch.notes):
            raise DomainValidationError("notes", "must not exceed 500 characters")

        self._type = new_type
        self._quantity = new_quantity
        if patch.movement_date is not None:
            self._movement_date = patch.movement_date
        if patch.reason is not None:
            self._reason = patch.reason
        if patch.notes is not None:
            self._notes = patch.notes
        self.updated_at = now or utcnow()


@dataclass(frozen=True)
class StockMovementPatch:
    """
    Correctif partiel d'un mouvement existant.

    Les champs a None conservent la valeur enregistree. L'article (stock_id)
    d'un mouvement ne peut pas etre modifie.
    """

    type: Optional[StockMovementType] = None
    quantity: Optional[int] = None
    movement_date: Optional[datetime] = None
    reason: Optional[str] = None
    notes: Optional[str] = None

    @property
    def affects_stock(self) -> bool:
        """Vrai si le correctif change le type ou la quantite."""
        return self.type is not None or self.quantity is not None


def check_movement_quantity(movement_type: StockMovementType, quantity: int) -> None:
    """Quantite > 0 pour IN/OUT, >= 0 pour ADJUSTMENT (niveau cible)."""
    if not is_non_negative_int(quantity):
        raise DomainValidationError("quantity", "must be a non-negative integer")
    if movement_type is not StockMovementType.ADJUSTMENT and quantity == 0:
        raise DomainValidationError("quantity", "must be positive for IN/OUT movements")
