"""
Objets valeur immutables representant des concepts du domaine sans identite.

Les objets valeur sont definis par leurs attributs plutot que par une identite.
Ils sont immutables et peuvent etre librement partages et compares par valeur.

Exports :
- Money : Montant en centimes entiers
- ServiceOrderStatus : Statuts d'un ordre de service
- BudgetStatus : Statuts d'un devis
- BudgetItemType : Nature d'une ligne de devis (service, piece)
- DeliveryMethod : Canal d'envoi d'un devis
- StockMovementType : Type de mouvement de stock (IN, OUT, ADJUSTMENT)
- UserRole : Role de l'appelant
"""

from workshop.core.value_objects.money import Money
from workshop.core.value_objects.statuses import (
    BudgetItemType,
    BudgetStatus,
    DeliveryMethod,
    ServiceOrderStatus,
    StockMovementType,
    UserRole,
)

__all__ = [
    "Money",
    "ServiceOrderStatus",
    "BudgetStatus",
    "BudgetItemType",
    "DeliveryMethod",
    "StockMovementType",
    "UserRole",
]
