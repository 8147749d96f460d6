"""
Politiques d'autorisation des changements de statut.

Fonctions pures (statut courant, statut cible, role) -> bool, une paire par
cycle de vie. Les fonctions ensure_* levent l'erreur correspondante et sont
appelees par la couche application AVANT toute mutation de l'agregat.

Le statut courant fait partie de la signature meme si les regles actuelles
ne dependent que de la cible et du role.
"""

from workshop.core.exceptions import (
    UnauthorizedBudgetStatusChange,
    UnauthorizedStatusChange,
)
from workshop.core.value_objects import BudgetStatus, ServiceOrderStatus, UserRole

# Cible -> roles autorises. Une cible absente n'est pas restreinte.
ORDER_STATUS_PERMISSIONS: dict[ServiceOrderStatus, frozenset[UserRole]] = {
    ServiceOrderStatus.CANCELLED: frozenset({UserRole.ADMIN}),
    ServiceOrderStatus.APPROVED: frozenset({UserRole.CLIENT, UserRole.EMPLOYEE}),
    ServiceOrderStatus.REJECTED: frozenset({UserRole.CLIENT, UserRole.EMPLOYEE}),
    ServiceOrderStatus.IN_DIAGNOSIS: frozenset({UserRole.EMPLOYEE}),
    ServiceOrderStatus.IN_EXECUTION: frozenset({UserRole.EMPLOYEE}),
    ServiceOrderStatus.FINISHED: frozenset({UserRole.EMPLOYEE}),
    ServiceOrderStatus.DELIVERED: frozenset({UserRole.EMPLOYEE}),
}

BUDGET_STATUS_PERMISSIONS: dict[BudgetStatus, frozenset[UserRole]] = {
    BudgetStatus.SENT: frozenset({UserRole.EMPLOYEE, UserRole.ADMIN}),
    BudgetStatus.RECEIVED: frozenset({UserRole.EMPLOYEE, UserRole.ADMIN}),
    BudgetStatus.APPROVED: frozenset({UserRole.CLIENT, UserRole.EMPLOYEE, UserRole.ADMIN}),
    BudgetStatus.REJECTED: frozenset({UserRole.CLIENT, UserRole.EMPLOYEE, UserRole.ADMIN}),
    BudgetStatus.EXPIRED: frozenset({UserRole.ADMIN}),
}


def can_change_order_status(
    current: ServiceOrderStatus,
    target: ServiceOrderStatus,
    role: UserRole,
) -> bool:
    """
    Indique si le role peut demander la transition d'un ordre de service.

    Regles :
    - CANCELLED : ADMIN uniquement
    - APPROVED / REJECTED : CLIENT ou EMPLOYEE
    - IN_DIAGNOSIS, IN_EXECUTION, FINISHED, DELIVERED : EMPLOYEE
    - autres cibles : sans restriction

    La validite de la transition elle-meme est verifiee par l'agregat.
    """
    allowed_roles = ORDER_STATUS_PERMISSIONS.get(target)
    if allowed_roles is None:
        return True
    return role in allowed_roles


def ensure_can_change_order_status(
    order_id: str,
    current: ServiceOrderStatus,
    target: ServiceOrderStatus,
    role: UserRole,
) -> None:
    """Leve UnauthorizedStatusChange si le role n'a pas la permission."""
    if not can_change_order_status(current, target, role):
        raise UnauthorizedStatusChange(order_id, current, target, role)


def can_change_budget_status(
    current: BudgetStatus,
    target: BudgetStatus,
    role: UserRole,
) -> bool:
    """
    Indique si le role peut demander la transition d'un devis.

    Envoi et reception sont reserves au personnel de l'atelier, le client
    peut approuver ou rejeter, l'expiration manuelle est reservee a l'ADMIN.
    """
    allowed_roles = BUDGET_STATUS_PERMISSIONS.get(target)
    if allowed_roles is None:
        return True
    return role in allowed_roles


def ensure_can_change_budget_status(
    budget_id: str,
    current: BudgetStatus,
    target: BudgetStatus,
    role: UserRole,
) -> None:
    """Leve UnauthorizedBudgetStatusChange si le role n'a pas la permission."""
    if not can_change_budget_status(current, target, role):
        raise UnauthorizedBudgetStatusChange(budget_id, current, target, role)
