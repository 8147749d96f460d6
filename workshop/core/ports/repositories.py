"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats de persistance des
agrégats de l'atelier. Les implémentations (adaptateurs) fournissent le
stockage concret (SQLite via SQLModel, en mémoire pour les tests).

Aucun repository ne valide de transaction : c'est l'unité de travail
(IUnitOfWork) qui borne et valide les écritures.
"""

from abc import ABC, abstractmethod
from typing import Optional

from workshop.core.entities.budget import Budget, BudgetItem
from workshop.core.entities.service_order import ServiceOrder
from workshop.core.entities.stock import StockItem, StockMovement
from workshop.core.value_objects import BudgetStatus


class IServiceOrderRepository(ABC):
    """Interface de stockage des ordres de service."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Optional[ServiceOrder]:
        """Récupère un ordre de service par son ID."""
        ...

    @abstractmethod
    def save(self, order: ServiceOrder) -> ServiceOrder:
        """Sauvegarde un ordre de service (insertion ou mise à jour)."""
        ...

    @abstractmethod
    def list_by_client(self, client_id: str) -> list[ServiceOrder]:
        """Liste les ordres de service d'un client."""
        ...


class IBudgetRepository(ABC):
    """Interface de stockage des devis."""

    @abstractmethod
    def get_by_id(self, budget_id: str) -> Optional[Budget]:
        """Récupère un devis par son ID."""
        ...

    @abstractmethod
    def save(self, budget: Budget) -> Budget:
        """Sauvegarde un devis (insertion ou mise à jour)."""
        ...

    @abstractmethod
    def list_by_service_order(self, service_order_id: str) -> list[Budget]:
        """Liste les devis d'un ordre de service."""
        ...

    @abstractmethod
    def list_by_status(self, statuses: list[BudgetStatus]) -> list[Budget]:
        """Liste les devis dont le statut figure dans `statuses`."""
        ...


class IBudgetItemRepository(ABC):
    """Interface de stockage des lignes de devis."""

    @abstractmethod
    def get_by_id(self, item_id: str) -> Optional[BudgetItem]:
        ...

    @abstractmethod
    def save(self, item: BudgetItem) -> BudgetItem:
        ...

    @abstractmethod
    def delete(self, item_id: str) -> bool:
        """Supprime une ligne par ID. Retourne True si supprimée."""
        ...

    @abstractmethod
    def list_by_budget(self, budget_id: str) -> list[BudgetItem]:
        """Liste les lignes d'un devis."""
        ...


class IStockItemRepository(ABC):
    """
    Interface de stockage des articles de stock.

    get_for_update verrouille la ligne jusqu'à la fin de la transaction
    courante : c'est la lecture utilisée par le registre avant toute
    écriture du solde.
    """

    @abstractmethod
    def get_by_id(self, stock_id: str) -> Optional[StockItem]:
        """Récupère un article par son ID (lecture simple)."""
        ...

    @abstractmethod
    def get_for_update(self, stock_id: str) -> Optional[StockItem]:
        """Récupère un article en verrouillant sa ligne."""
        ...

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[StockItem]:
        """Récupère un article par sa référence."""
        ...

    @abstractmethod
    def save(self, item: StockItem) -> StockItem:
        """Sauvegarde un article (insertion ou mise à jour)."""
        ...

    @abstractmethod
    def list_all(self) -> list[StockItem]:
        ...

    @abstractmethod
    def list_below_minimum(self) -> list[StockItem]:
        """Liste les articles dont le solde est sous le seuil d'alerte."""
        ...


class IStockMovementRepository(ABC):
    """Interface de stockage des mouvements de stock."""

    @abstractmethod
    def get_by_id(self, movement_id: str) -> Optional[StockMovement]:
        ...

    @abstractmethod
    def add(self, movement: StockMovement) -> StockMovement:
        """Enregistre un nouveau mouvement."""
        ...

    @abstractmethod
    def update(self, movement: StockMovement) -> StockMovement:
        """Met à jour un mouvement existant."""
        ...

    @abstractmethod
    def list_by_stock(self, stock_id: str) -> list[StockMovement]:
        """Liste les mouvements d'un article, du plus ancien au plus récent."""
        ...
