"""
Modeles SQLModel pour la base de donnees de l'atelier.

Ces modeles representent les tables de la base de donnees.
Ils sont distincts des entites de domaine (core/entities/)
selon l'architecture hexagonale.

Tables:
- service_orders: Ordres de service
- budgets: Devis
- budget_items: Lignes de devis
- stock_items: Articles de stock (solde courant persiste)
- stock_movements: Historique des mouvements de stock

Les montants sont stockes en centimes (colonnes *_cents), les statuts
et types par la valeur texte de leur enum.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel

from workshop.core.clock import utcnow


class ServiceOrderModel(SQLModel, table=True):
    """Modele representant un ordre de service."""

    __tablename__ = "service_orders"

    id: str = Field(primary_key=True)
    status: str = Field(index=True)
    request_date: datetime
    delivery_date: datetime | None = None
    cancellation_reason: str | None = None
    notes: str | None = None
    client_id: str = Field(index=True)
    vehicle_id: str = Field(index=True)
    created_at: datetime | None = Field(default_factory=utcnow)
    updated_at: datetime | None = Field(default_factory=utcnow)


class BudgetModel(SQLModel, table=True):
    """Modele representant un devis."""

    __tablename__ = "budgets"

    id: str = Field(primary_key=True)
    status: str = Field(index=True)
    total_amount_cents: int = Field(default=0)
    validity_period: int
    generation_date: datetime
    sent_date: datetime | None = None
    approval_date: datetime | None = None
    rejection_date: datetime | None = None
    delivery_method: str | None = None  # EMAIL, WHATSAPP, IN_PERSON, PHONE
    notes: str | None = None
    service_order_id: str = Field(foreign_key="service_orders.id", index=True)
    client_id: str = Field(index=True)
    created_at: datetime | None = Field(default_factory=utcnow)
    updated_at: datetime | None = Field(default_factory=utcnow)


class BudgetItemModel(SQLModel, table=True):
    """Modele representant une ligne de devis."""

    __tablename__ = "budget_items"

    id: str = Field(primary_key=True)
    budget_id: str = Field(foreign_key="budgets.id", index=True)
    type: str  # SERVICE ou STOCK_ITEM
    description: str
    quantity: int
    unit_price_cents: int
    stock_item_id: str | None = Field(default=None, foreign_key="stock_items.id")
    service_id: str | None = None
    notes: str | None = None
    created_at: datetime | None = Field(default_factory=utcnow)
    updated_at: datetime | None = Field(default_factory=utcnow)


class StockItemModel(SQLModel, table=True):
    """
    Modele representant un article de stock.

    current_stock est le solde courant : il est mis a jour par le registre
    dans la meme transaction que le mouvement correspondant.
    """

    __tablename__ = "stock_items"

    id: str = Field(primary_key=True)
    name: str
    sku: str = Field(unique=True, index=True)
    description: str | None = None
    current_stock: int = Field(default=0)
    min_stock_level: int = Field(default=0)
    unit_cost_cents: int = Field(default=0)
    unit_sale_price_cents: int = Field(default=0)
    supplier: str | None = None
    created_at: datetime | None = Field(default_factory=utcnow)
    updated_at: datetime | None = Field(default_factory=utcnow)


class StockMovementModel(SQLModel, table=True):
    """Modele representant un mouvement de stock."""

    __tablename__ = "stock_movements"

    id: str = Field(primary_key=True)
    type: str = Field(index=True)  # IN, OUT, ADJUSTMENT
    quantity: int
    movement_date: datetime = Field(index=True)
    reason: str | None = None
    notes: str | None = None
    stock_id: str = Field(foreign_key="stock_items.id", index=True)
    created_at: datetime | None = Field(default_factory=utcnow)
    updated_at: datetime | None = Field(default_factory=utcnow)
