"""
Registre de stock.

Le StockLedgerService est le seul point d'ecriture du solde des articles.
Chaque operation tient dans une transaction unique :
- lecture verrouillee de l'article (get_for_update)
- calcul du nouveau niveau
- ecriture du niveau et du mouvement ensemble

Toute erreur annule les deux ecritures.
"""

from datetime import datetime
from typing import Optional, Union

from loguru import logger

from workshop.core.entities.stock import (
    StockItem,
    StockMovement,
    StockMovementPatch,
    apply_movement,
    check_movement_quantity,
    reverse_movement,
)
from workshop.core.exceptions import (
    DomainError,
    DomainValidationError,
    DuplicateSku,
    InsufficientStock,
    InvalidStockAdjustment,
    StockItemNotFound,
    StockMovementNotFound,
)
from workshop.core.ports.clock import IClock
from workshop.core.ports.unit_of_work import ITransactionContext, IUnitOfWork
from workshop.core.validators import is_valid_movement_date
from workshop.core.value_objects import Money, StockMovementType


def next_stock_level(
    item: StockItem, movement_type: StockMovementType, quantity: int
) -> int:
    """
    Niveau resultant d'un mouvement sur un article.

    Raises:
        InsufficientStock: Si une sortie depasse le solde
        InvalidStockAdjustment: Si un ajustement vise un niveau negatif
    """
    level = apply_movement(item.current_stock, movement_type, quantity)
    if level < 0:
        if movement_type is StockMovementType.ADJUSTMENT:
            raise InvalidStockAdjustment(item.current_stock, level - item.current_stock)
        raise InsufficientStock(quantity, item.current_stock, item.id)
    return level


class StockLedgerService:
    """
    Service du registre de stock.

    Example:
        ledger = StockLedgerService(uow=SQLModelUnitOfWork(engine), clock=SystemClock())
        item = ledger.create_stock_item("Filtre a huile", "FLT-001", 10, 2, 1500, 2500)
        ledger.record_movement(item.id, StockMovementType.OUT, 3, reason="OS 42")
    """

    def __init__(self, uow: IUnitOfWork, clock: IClock) -> None:
        """
        Initialise le registre.

        Args:
            uow: Unite de travail bornant chaque operation
            clock: Source de l'instant courant
        """
        self._uow = uow
        self._clock = clock

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    def create_stock_item(
        self,
        name: str,
        sku: str,
        current_stock: int,
        min_stock_level: int,
        unit_cost: Union[Money, int, str],
        unit_sale_price: Union[Money, int, str],
        description: Optional[str] = None,
        supplier: Optional[str] = None,
    ) -> StockItem:
        """
        Cree un article de stock.

        Raises:
            DuplicateSku: Si un article porte deja cette reference
            InvalidPriceMargin: Si le prix de vente est inferieur au cout
        """
        item = StockItem.create(
            name=name,
            sku=sku,
            current_stock=current_stock,
            min_stock_level=min_stock_level,
            unit_cost=unit_cost,
            unit_sale_price=unit_sale_price,
            description=description,
            supplier=supplier,
        )

        def _create(tx: ITransactionContext) -> StockItem:
            if tx.stock_items.get_by_sku(item.sku) is not None:
                raise DuplicateSku(item.sku)
            return tx.stock_items.save(item)

        saved = self._run(_create, "creation d'article", sku=item.sku)
        logger.info(f"Article cree: {saved.sku}", stock_id=saved.id)
        return saved

    def get_stock_item(self, stock_id: str) -> StockItem:
        def _get(tx: ITransactionContext) -> StockItem:
            return self._load_item(tx, stock_id, lock=False)

        return self._uow.with_transaction(_get)

    def get_stock_item_by_sku(self, sku: str) -> StockItem:
        item = self._uow.with_transaction(lambda tx: tx.stock_items.get_by_sku(sku))
        if item is None:
            raise StockItemNotFound(sku)
        return item

    def update_stock_item_prices(
        self,
        stock_id: str,
        unit_cost: Union[Money, int, str, None] = None,
        unit_sale_price: Union[Money, int, str, None] = None,
    ) -> StockItem:
        """Met a jour le cout et/ou le prix de vente (marge verifiee)."""

        def _update(tx: ITransactionContext) -> StockItem:
            item = self._load_item(tx, stock_id)
            item.update_prices(unit_cost=unit_cost, unit_sale_price=unit_sale_price)
            return tx.stock_items.save(item)

        saved = self._run(_update, "mise a jour des prix", stock_id=stock_id)
        logger.info(
            f"Prix mis a jour: {saved.sku}",
            unit_cost=saved.unit_cost.cents,
            unit_sale_price=saved.unit_sale_price.cents,
        )
        return saved

    def check_availability(self, stock_id: str, quantity: int) -> bool:
        """Indique si l'article couvre la quantite demandee."""
        return self.get_stock_item(stock_id).has_stock(quantity)

    def list_below_minimum(self) -> list[StockItem]:
        """Articles dont le solde est sous le seuil d'alerte."""
        return self._uow.with_transaction(lambda tx: tx.stock_items.list_below_minimum())

    def list_stock_items(self) -> list[StockItem]:
        return self._uow.with_transaction(lambda tx: tx.stock_items.list_all())

    def list_movements(self, stock_id: str) -> list[StockMovement]:
        def _list(tx: ITransactionContext) -> list[StockMovement]:
            self._load_item(tx, stock_id, lock=False)
            return tx.stock_movements.list_by_stock(stock_id)

        return self._uow.with_transaction(_list)

    # ------------------------------------------------------------------
    # Mouvements
    # ------------------------------------------------------------------

    def create_stock_movement(self, movement: StockMovement) -> StockMovement:
        """
        Enregistre un mouvement et met a jour le solde de l'article.

        IN ajoute la quantite, OUT la retire, ADJUSTMENT fixe le niveau.

        Args:
            movement: Mouvement a enregistrer (non encore persiste)

        Returns:
            Le mouvement persiste

        Raises:
            StockItemNotFound: Si l'article n'existe pas
            InsufficientStock: Si une sortie rendrait le solde negatif
        """
        now = self._clock.now()
        self._check_movement_date(movement.movement_date, now)

        def _record(tx: ITransactionContext) -> StockMovement:
            item = self._load_item(tx, movement.stock_id)
            level = next_stock_level(item, movement.type, movement.quantity)
            item.set_current_stock(level, now)
            tx.stock_items.save(item)
            return tx.stock_movements.add(movement)

        saved = self._run(
            _record,
            "enregistrement du mouvement",
            stock_id=movement.stock_id,
            type=movement.type.value,
            quantity=movement.quantity,
        )
        logger.info(
            f"Mouvement {saved.type.value} enregistre",
            stock_id=saved.stock_id,
            quantity=saved.quantity,
        )
        return saved

    def record_movement(
        self,
        stock_id: str,
        movement_type: StockMovementType,
        quantity: int,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        movement_date: Optional[datetime] = None,
    ) -> StockMovement:
        """Construit puis enregistre un mouvement."""
        movement = StockMovement.create(
            type=movement_type,
            quantity=quantity,
            stock_id=stock_id,
            movement_date=movement_date or self._clock.now(),
            reason=reason,
            notes=notes,
        )
        return self.create_stock_movement(movement)

    def decrease_stock(
        self, stock_id: str, quantity: int, reason: Optional[str] = None
    ) -> StockMovement:
        """Sortie de stock (mouvement OUT)."""
        return self.record_movement(stock_id, StockMovementType.OUT, quantity, reason=reason)

    def update_stock_movement(
        self, movement_id: str, patch: StockMovementPatch
    ) -> StockMovement:
        """
        Corrige un mouvement deja enregistre.

        Le mouvement d'origine est annule sur le solde courant, puis le
        mouvement corrige est applique ; seul le niveau final est ecrit.
        Un correctif sans type ni quantite ne touche pas au solde.

        Raises:
            StockMovementNotFound: Si le mouvement n'existe pas
            StockItemNotFound: Si l'article du mouvement n'existe plus
            InsufficientStock: Si le niveau final serait negatif
        """
        now = self._clock.now()
        if patch.movement_date is not None:
            self._check_movement_date(patch.movement_date, now)

        def _amend(tx: ITransactionContext) -> StockMovement:
            movement = tx.stock_movements.get_by_id(movement_id)
            if movement is None:
                raise StockMovementNotFound(movement_id)
            item = self._load_item(tx, movement.stock_id)

            final_level = item.current_stock
            if patch.affects_stock:
                base = reverse_movement(item.current_stock, movement.type, movement.quantity)
                new_type = patch.type or movement.type
                new_quantity = patch.quantity if patch.quantity is not None else movement.quantity
                check_movement_quantity(new_type, new_quantity)
                final_level = apply_movement(base, new_type, new_quantity)
                if final_level < 0:
                    raise InsufficientStock(new_quantity, base, item.id)

            movement.apply_patch(patch, now)
            if final_level != item.current_stock:
                item.set_current_stock(final_level, now)
                tx.stock_items.save(item)
            return tx.stock_movements.update(movement)

        saved = self._run(_amend, "correction du mouvement", movement_id=movement_id)
        logger.info(
            f"Mouvement corrige: {saved.id}",
            type=saved.type.value,
            quantity=saved.quantity,
        )
        return saved

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------

    @staticmethod
    def _load_item(tx: ITransactionContext, stock_id: str, lock: bool = True) -> StockItem:
        item = tx.stock_items.get_for_update(stock_id) if lock else tx.stock_items.get_by_id(stock_id)
        if item is None:
            raise StockItemNotFound(stock_id)
        return item

    @staticmethod
    def _check_movement_date(movement_date: datetime, now: datetime) -> None:
        if not is_valid_movement_date(movement_date, now):
            raise DomainValidationError(
                "movement_date", "must be within the last year and at most one day ahead"
            )

    def _run(self, fn, operation: str, **context):
        """Execute `fn` en transaction ; les refus metier sont journalises puis relances."""
        try:
            return self._uow.with_transaction(fn)
        except DomainError as e:
            logger.warning(f"Echec {operation}: {e}", code=e.code, **context)
            raise
