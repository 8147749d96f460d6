"""
Service applicatif des devis.

Responsabilites:
- Creation d'un devis et gestion de ses lignes (total recalcule a chaque ajout)
- Envoi, accuse de reception, approbation et rejet, avec controle du role
- Verification du stock des lignes pieces avant approbation
- Balayage des devis expires

Les evenements BudgetSent / BudgetApproved / BudgetRejected sont emis apres
validation de la transaction. Leur traitement ne peut pas faire echouer
l'operation qui les a emis.
"""

from collections import defaultdict
from typing import Any, Optional, Union

from loguru import logger

from workshop.core.authorization import ensure_can_change_budget_status
from workshop.core.entities.budget import Budget, BudgetItem
from workshop.core.exceptions import (
    BudgetInsufficientStock,
    BudgetNotFound,
    DomainError,
    DomainValidationError,
    ServiceOrderNotFound,
    StockItemNotFound,
)
from workshop.core.ports.clock import IClock
from workshop.core.ports.events import (
    BUDGET_APPROVED,
    BUDGET_REJECTED,
    BUDGET_SENT,
    IEventPublisher,
)
from workshop.core.ports.unit_of_work import ITransactionContext, IUnitOfWork
from workshop.core.value_objects import (
    BudgetItemType,
    BudgetStatus,
    DeliveryMethod,
    Money,
    UserRole,
)

# Statuts encore ouverts, candidats au balayage d'expiration
EXPIRABLE_STATUSES = [BudgetStatus.GENERATED, BudgetStatus.SENT, BudgetStatus.RECEIVED]

DEFAULT_VALIDITY_DAYS = 7


class BudgetService:
    """
    Cycle de vie des devis.

    Example:
        budgets = BudgetService(uow=uow, clock=SystemClock(), events=bus)
        budget = budgets.create_budget(order.id)
        budgets.add_item(budget.id, BudgetItemType.SERVICE, "Vidange", 1, 12000)
        budgets.send(budget.id, UserRole.EMPLOYEE)
        budgets.approve(budget.id, UserRole.CLIENT)
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        clock: IClock,
        events: IEventPublisher,
        default_validity_days: int = DEFAULT_VALIDITY_DAYS,
    ) -> None:
        """
        Initialise le service des devis.

        Args:
            uow: Unite de travail
            clock: Source de l'instant courant (expiration)
            events: Publication des evenements de devis
            default_validity_days: Validite appliquee quand la creation n'en precise pas
        """
        self._uow = uow
        self._clock = clock
        self._events = events
        self._default_validity_days = default_validity_days

    # ------------------------------------------------------------------
    # Creation et lignes
    # ------------------------------------------------------------------

    def create_budget(
        self,
        service_order_id: str,
        validity_period: Optional[int] = None,
        delivery_method: Optional[DeliveryMethod] = None,
        notes: Optional[str] = None,
    ) -> Budget:
        """
        Genere un devis (statut GENERATED) pour un ordre de service.

        Le client du devis est celui de l'ordre.
        """
        now = self._clock.now()
        validity = self._default_validity_days if validity_period is None else validity_period

        def _create(tx: ITransactionContext) -> Budget:
            order = tx.service_orders.get_by_id(service_order_id)
            if order is None:
                raise ServiceOrderNotFound(service_order_id)
            budget = Budget.create(
                service_order_id=order.id,
                client_id=order.client_id,
                validity_period=validity,
                delivery_method=delivery_method,
                notes=notes,
                now=now,
            )
            return tx.budgets.save(budget)

        saved = self._run(_create, "creation du devis", service_order_id=service_order_id)
        logger.info(
            f"Devis genere: {saved.id}",
            service_order_id=service_order_id,
            validity_period=saved.validity_period,
        )
        return saved

    def add_item(
        self,
        budget_id: str,
        item_type: BudgetItemType,
        description: str,
        quantity: int,
        unit_price: Union[Money, int, str],
        stock_item_id: Optional[str] = None,
        service_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> BudgetItem:
        """
        Ajoute une ligne au devis et recalcule son total.

        Les lignes ne peuvent etre ajoutees que pendant le diagnostic de
        l'ordre de service (IN_DIAGNOSIS).
        """
        if item_type is BudgetItemType.STOCK_ITEM and not stock_item_id:
            raise DomainValidationError("stock_item_id", "is required for STOCK_ITEM lines")
        item = BudgetItem.create(
            budget_id=budget_id,
            type=item_type,
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            stock_item_id=stock_item_id,
            service_id=service_id,
            notes=notes,
        )
        now = self._clock.now()

        def _add(tx: ITransactionContext) -> BudgetItem:
            budget = self._load_editable(tx, budget_id)
            if stock_item_id and tx.stock_items.get_by_id(stock_item_id) is None:
                raise StockItemNotFound(stock_item_id)
            saved_item = tx.budget_items.save(item)
            budget.recalculate_total_amount(tx.budget_items.list_by_budget(budget_id), now)
            tx.budgets.save(budget)
            return saved_item

        saved = self._run(_add, "ajout de ligne", budget_id=budget_id)
        logger.info(
            f"Ligne ajoutee au devis {budget_id}",
            type=saved.type.value,
            total_price=saved.total_price.cents,
        )
        return saved

    def remove_item(self, budget_id: str, item_id: str) -> Budget:
        """Retire une ligne du devis et recalcule son total."""
        now = self._clock.now()

        def _remove(tx: ITransactionContext) -> Budget:
            budget = self._load_editable(tx, budget_id)
            item = tx.budget_items.get_by_id(item_id)
            if item is None or item.budget_id != budget_id:
                raise DomainValidationError("item_id", f"{item_id} is not a line of budget {budget_id}")
            tx.budget_items.delete(item_id)
            budget.recalculate_total_amount(tx.budget_items.list_by_budget(budget_id), now)
            return tx.budgets.save(budget)

        return self._run(_remove, "suppression de ligne", budget_id=budget_id)

    def list_items(self, budget_id: str) -> list[BudgetItem]:
        def _list(tx: ITransactionContext) -> list[BudgetItem]:
            self._load(tx, budget_id)
            return tx.budget_items.list_by_budget(budget_id)

        return self._uow.with_transaction(_list)

    def get(self, budget_id: str) -> Budget:
        return self._uow.with_transaction(lambda tx: self._load(tx, budget_id))

    def recalculate_total(self, budget_id: str) -> Budget:
        """Recalcule le total a partir des lignes persistees."""
        now = self._clock.now()

        def _recalculate(tx: ITransactionContext) -> Budget:
            budget = self._load(tx, budget_id)
            budget.recalculate_total_amount(tx.budget_items.list_by_budget(budget_id), now)
            return tx.budgets.save(budget)

        saved = self._run(_recalculate, "recalcul du total", budget_id=budget_id)
        logger.info(f"Total du devis {budget_id} recalcule", total=saved.total_amount.cents)
        return saved

    # ------------------------------------------------------------------
    # Cycle de vie
    # ------------------------------------------------------------------

    def send(self, budget_id: str, role: UserRole) -> Budget:
        """GENERATED -> SENT ; emet BudgetSent."""
        now = self._clock.now()

        def _send(tx: ITransactionContext) -> Budget:
            budget = self._load(tx, budget_id)
            ensure_can_change_budget_status(budget.id, budget.status, BudgetStatus.SENT, role)
            budget.send(now)
            return tx.budgets.save(budget)

        saved = self._run(_send, "envoi du devis", budget_id=budget_id, role=role.value)
        logger.info(f"Devis envoye: {budget_id}", role=role.value)
        self._emit(BUDGET_SENT, saved)
        return saved

    def mark_as_received(self, budget_id: str, role: UserRole) -> Budget:
        """SENT -> RECEIVED."""
        now = self._clock.now()

        def _receive(tx: ITransactionContext) -> Budget:
            budget = self._load(tx, budget_id)
            ensure_can_change_budget_status(
                budget.id, budget.status, BudgetStatus.RECEIVED, role
            )
            budget.mark_as_received(now)
            return tx.budgets.save(budget)

        saved = self._run(_receive, "accuse de reception", budget_id=budget_id, role=role.value)
        logger.info(f"Devis recu par le client: {budget_id}")
        return saved

    def approve(self, budget_id: str, role: UserRole) -> Budget:
        """
        SENT -> APPROVED ; emet BudgetApproved.

        Le stock des lignes pieces est verifie apres les controles de statut
        et d'expiration, avant toute mutation.

        Raises:
            BudgetNotFound: Si le devis n'existe pas
            UnauthorizedBudgetStatusChange: Si le role n'a pas la permission
            BudgetAlreadyApproved / InvalidBudgetStatus / BudgetExpired
            BudgetInsufficientStock: Si une ligne piece depasse le stock
        """
        now = self._clock.now()

        def _approve(tx: ITransactionContext) -> Budget:
            budget = self._load(tx, budget_id)
            ensure_can_change_budget_status(
                budget.id, budget.status, BudgetStatus.APPROVED, role
            )
            budget.ensure_can_approve(now)
            self._check_stock(tx, budget)
            budget.approve(now)
            return tx.budgets.save(budget)

        saved = self._run(_approve, "approbation du devis", budget_id=budget_id, role=role.value)
        logger.info(f"Devis approuve: {budget_id}", role=role.value)
        self._emit(BUDGET_APPROVED, saved)
        return saved

    def reject(
        self, budget_id: str, role: UserRole, reason: Optional[str] = None
    ) -> Budget:
        """SENT -> REJECTED ; emet BudgetRejected avec le motif."""
        now = self._clock.now()

        def _reject(tx: ITransactionContext) -> Budget:
            budget = self._load(tx, budget_id)
            ensure_can_change_budget_status(
                budget.id, budget.status, BudgetStatus.REJECTED, role
            )
            budget.reject(now)
            return tx.budgets.save(budget)

        saved = self._run(_reject, "rejet du devis", budget_id=budget_id, role=role.value)
        logger.info(f"Devis rejete: {budget_id}", reason=reason)
        self._emit(BUDGET_REJECTED, saved, reason=reason)
        return saved

    def expire(self, budget_id: str, role: UserRole) -> Budget:
        """Expiration manuelle d'un devis (ADMIN)."""
        now = self._clock.now()

        def _expire(tx: ITransactionContext) -> Budget:
            budget = self._load(tx, budget_id)
            ensure_can_change_budget_status(
                budget.id, budget.status, BudgetStatus.EXPIRED, role
            )
            budget.mark_as_expired(now)
            return tx.budgets.save(budget)

        return self._run(_expire, "expiration du devis", budget_id=budget_id, role=role.value)

    def check_expiration(self, budget_id: str) -> bool:
        """Indique si la fenetre de validite du devis est depassee."""
        budget = self.get(budget_id)
        return budget.is_expired(self._clock.now())

    def expire_overdue(self) -> list[Budget]:
        """
        Balayage periodique : passe a EXPIRED tout devis ouvert dont la
        fenetre de validite est depassee.

        Execute au nom du systeme, sans controle de role.
        """
        now = self._clock.now()

        def _sweep(tx: ITransactionContext) -> list[Budget]:
            expired = []
            for budget in tx.budgets.list_by_status(EXPIRABLE_STATUSES):
                if budget.is_expired(now):
                    budget.mark_as_expired(now)
                    expired.append(tx.budgets.save(budget))
            return expired

        expired = self._uow.with_transaction(_sweep)
        logger.info(f"{len(expired)} devis expire(s)", swept_at=now.isoformat())
        return expired

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------

    @staticmethod
    def _load(tx: ITransactionContext, budget_id: str) -> Budget:
        budget = tx.budgets.get_by_id(budget_id)
        if budget is None:
            raise BudgetNotFound(budget_id)
        return budget

    def _load_editable(self, tx: ITransactionContext, budget_id: str) -> Budget:
        budget = self._load(tx, budget_id)
        order = tx.service_orders.get_by_id(budget.service_order_id)
        if order is None:
            raise ServiceOrderNotFound(budget.service_order_id)
        if not order.can_add_budget_items():
            raise DomainValidationError(
                "service_order",
                f"budget lines can only change while order {order.id} is IN_DIAGNOSIS "
                f"(current: {order.status.value})",
            )
        return budget

    @staticmethod
    def _check_stock(tx: ITransactionContext, budget: Budget) -> None:
        """Leve BudgetInsufficientStock si une piece du devis manque."""
        requested: dict[str, int] = defaultdict(int)
        for item in tx.budget_items.list_by_budget(budget.id):
            if item.type is BudgetItemType.STOCK_ITEM and item.stock_item_id:
                requested[item.stock_item_id] += item.quantity

        for stock_item_id, quantity in requested.items():
            stock_item = tx.stock_items.get_by_id(stock_item_id)
            if stock_item is None:
                raise StockItemNotFound(stock_item_id)
            if not stock_item.has_stock(quantity):
                raise BudgetInsufficientStock(
                    budget.id, stock_item_id, quantity, stock_item.current_stock
                )

    def _emit(self, event_type: str, budget: Budget, **extra: Any) -> None:
        payload = {
            "service_order_id": budget.service_order_id,
            "client_id": budget.client_id,
            "status": budget.status.value,
            "total_amount": budget.total_amount.cents,
            "delivery_method": budget.delivery_method.value if budget.delivery_method else None,
            **extra,
        }
        try:
            self._events.emit_event(event_type, budget.id, payload)
        except Exception as e:
            logger.error(f"Publication de {event_type} impossible: {e}", budget_id=budget.id)

    def _run(self, fn, operation: str, **context):
        try:
            return self._uow.with_transaction(fn)
        except DomainError as e:
            logger.warning(f"Echec {operation}: {e}", code=e.code, **context)
            raise
