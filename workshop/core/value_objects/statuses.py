"""
Énumérations du domaine atelier.

Statuts des ordres de service et des devis, types de mouvement de stock,
rôles utilisateur et modes d'envoi des devis.
"""

from enum import Enum


class ServiceOrderStatus(Enum):
    """Statut d'un ordre de service."""

    REQUESTED = "REQUESTED"
    RECEIVED = "RECEIVED"
    IN_DIAGNOSIS = "IN_DIAGNOSIS"
    AWAITING_APPROVAL = "AWAITING_APPROVAL"
    APPROVED = "APPROVED"
    SCHEDULED = "SCHEDULED"
    IN_EXECUTION = "IN_EXECUTION"
    FINISHED = "FINISHED"
    DELIVERED = "DELIVERED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class BudgetStatus(Enum):
    """Statut d'un devis."""

    GENERATED = "GENERATED"
    SENT = "SENT"
    RECEIVED = "RECEIVED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class DeliveryMethod(Enum):
    """Canal d'envoi d'un devis au client."""

    EMAIL = "EMAIL"
    WHATSAPP = "WHATSAPP"
    IN_PERSON = "IN_PERSON"
    PHONE = "PHONE"


class BudgetItemType(Enum):
    """Nature d'une ligne de devis."""

    SERVICE = "SERVICE"
    STOCK_ITEM = "STOCK_ITEM"


class StockMovementType(Enum):
    """
    Type de mouvement de stock.

    IN et OUT sont des deltas, ADJUSTMENT fixe le niveau absolu.
    """

    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class UserRole(Enum):
    """Rôle de l'appelant, utilisé par les politiques d'autorisation."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"
    CLIENT = "CLIENT"
