"""
Exceptions métier du noyau atelier.

Toutes les erreurs levées par le domaine dérivent de DomainError. Elles représentent
des violations de règles métier, pas des défaillances transitoires : elles ne sont
jamais relancées automatiquement. La couche appelante (CLI, HTTP) les traduit
en code de sortie ou statut HTTP.

Chaque exception porte les champs structurés nécessaires à cette traduction.
"""

from datetime import datetime
from typing import Any, Iterable, Optional


def _label(value: Any) -> str:
    """Libelle lisible d'un statut/role (valeur de l'enum si disponible)."""
    return str(getattr(value, "value", value))


class DomainError(Exception):
    """Base de toutes les erreurs métier."""

    code = "DOMAIN_ERROR"


class DomainValidationError(DomainError, ValueError):
    """Champ invalide (longueur, format, valeur hors limites)."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class InvalidMoneyValue(DomainValidationError):
    """Montant non representable en centimes positifs."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__("amount", f"invalid monetary value {value!r}")


# ---------------------------------------------------------------------------
# Entites introuvables
# ---------------------------------------------------------------------------


class EntityNotFound(DomainError):
    """
    Agregat reference introuvable.

    Attributes:
        entity: Nom de l'entite recherchee
        entity_id: Identifiant demande
    """

    code = "NOT_FOUND"
    entity = "Entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} with ID {entity_id} not found")


class ServiceOrderNotFound(EntityNotFound):
    entity = "Service order"


class BudgetNotFound(EntityNotFound):
    entity = "Budget"


class StockItemNotFound(EntityNotFound):
    entity = "Stock item"


class StockMovementNotFound(EntityNotFound):
    entity = "Stock movement"


# ---------------------------------------------------------------------------
# Ordres de service
# ---------------------------------------------------------------------------


class InvalidStatusTransition(DomainError):
    """
    Transition absente de la table des transitions autorisees.

    Attributes:
        current: Statut courant
        attempted: Statut demande
        allowed: Statuts atteignables depuis le statut courant
    """

    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current: Any, attempted: Any, allowed: Iterable[Any]) -> None:
        self.current = current
        self.attempted = attempted
        self.allowed = tuple(allowed)
        allowed_label = ", ".join(_label(s) for s in self.allowed) or "none"
        super().__init__(
            f"Invalid status transition from {_label(current)} to {_label(attempted)}. "
            f"Allowed transitions: {allowed_label}"
        )


class UnauthorizedStatusChange(DomainError):
    """
    Transition valide en principe mais interdite pour le role de l'appelant.

    Attributes:
        order_id: Identifiant de l'ordre de service
        current: Statut courant
        target: Statut demande
        role: Role de l'appelant
    """

    code = "UNAUTHORIZED_STATUS_CHANGE"

    def __init__(self, order_id: str, current: Any, target: Any, role: Any) -> None:
        self.order_id = order_id
        self.current = current
        self.target = target
        self.role = role
        super().__init__(
            f"User with role {_label(role)} cannot change service order {order_id} "
            f"status from {_label(current)} to {_label(target)}"
        )


# ---------------------------------------------------------------------------
# Devis
# ---------------------------------------------------------------------------


class InvalidBudgetStatus(DomainError):
    """Operation de devis incompatible avec son statut courant."""

    code = "INVALID_BUDGET_STATUS"

    def __init__(self, budget_id: str, current: Any, target: Any) -> None:
        self.budget_id = budget_id
        self.current = current
        self.target = target
        super().__init__(
            f"Budget {budget_id} cannot change status from {_label(current)} "
            f"to {_label(target)}"
        )


class UnauthorizedBudgetStatusChange(DomainError):
    """Changement de statut de devis interdit pour le role de l'appelant."""

    code = "UNAUTHORIZED_STATUS_CHANGE"

    def __init__(self, budget_id: str, current: Any, target: Any, role: Any) -> None:
        self.budget_id = budget_id
        self.current = current
        self.target = target
        self.role = role
        super().__init__(
            f"User with role {_label(role)} cannot change budget {budget_id} "
            f"status from {_label(current)} to {_label(target)}"
        )


class BudgetExpired(DomainError):
    """Approbation ou rejet tente apres la fenetre de validite."""

    code = "BUDGET_EXPIRED"

    def __init__(self, budget_id: str, expiration_date: datetime) -> None:
        self.budget_id = budget_id
        self.expiration_date = expiration_date
        super().__init__(
            f"Budget {budget_id} expired on {expiration_date.isoformat()}"
        )


class BudgetAlreadyApproved(DomainError):
    code = "BUDGET_ALREADY_APPROVED"

    def __init__(self, budget_id: str) -> None:
        self.budget_id = budget_id
        super().__init__(f"Budget {budget_id} is already approved")


class BudgetAlreadyRejected(DomainError):
    code = "BUDGET_ALREADY_REJECTED"

    def __init__(self, budget_id: str) -> None:
        self.budget_id = budget_id
        super().__init__(f"Budget {budget_id} is already rejected")


class BudgetInsufficientStock(DomainError):
    """Une ligne piece du devis depasse le stock disponible."""

    code = "BUDGET_INSUFFICIENT_STOCK"

    def __init__(
        self, budget_id: str, stock_item_id: str, requested: int, available: int
    ) -> None:
        self.budget_id = budget_id
        self.stock_item_id = stock_item_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Budget {budget_id} requires {requested} units of stock item "
            f"{stock_item_id}, only {available} available"
        )


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------


class InsufficientStock(DomainError):
    """
    Mouvement qui rendrait le stock negatif.

    Attributes:
        requested: Quantite demandee
        available: Quantite disponible au moment du calcul
        stock_id: Article concerne (optionnel)
    """

    code = "INSUFFICIENT_STOCK"

    def __init__(
        self, requested: int, available: int, stock_id: Optional[str] = None
    ) -> None:
        self.requested = requested
        self.available = available
        self.stock_id = stock_id
        target = f" for stock item {stock_id}" if stock_id else ""
        super().__init__(
            f"Insufficient stock{target}: requested {requested}, available {available}"
        )


class InvalidStockAdjustment(DomainError):
    """Mutation directe du stock qui violerait l'invariant de non-negativite."""

    code = "INVALID_STOCK_ADJUSTMENT"

    def __init__(self, current: int, delta: int) -> None:
        self.current = current
        self.delta = delta
        super().__init__(
            f"Invalid stock adjustment: {current} {delta:+d} would be negative"
        )


class InvalidPriceMargin(DomainError):
    """Prix de vente inferieur au cout unitaire."""

    code = "INVALID_PRICE_MARGIN"

    def __init__(self, unit_cost: int, unit_sale_price: int) -> None:
        self.unit_cost = unit_cost
        self.unit_sale_price = unit_sale_price
        super().__init__(
            f"Invalid price margin: sale price {unit_sale_price} must be greater "
            f"than or equal to cost {unit_cost}"
        )


class InvalidSkuFormat(DomainValidationError):
    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__("sku", f"invalid SKU format {sku!r}")


class DuplicateSku(DomainError):
    code = "DUPLICATE_SKU"

    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"Stock item with SKU {sku} already exists")
