"""
Tests pour les entites Budget et BudgetItem.

Verifie la fenetre d'expiration, les gardes d'idempotence et le calcul
du total en centimes entiers.
"""

from datetime import datetime, timedelta

import pytest

from workshop.core.entities.budget import Budget, BudgetItem
from workshop.core.exceptions import (
    BudgetAlreadyApproved,
    BudgetAlreadyRejected,
    BudgetExpired,
    DomainValidationError,
    InvalidBudgetStatus,
)
from workshop.core.value_objects import BudgetItemType, BudgetStatus, DeliveryMethod, Money

T0 = datetime(2025, 3, 1, 9, 0)


def _budget(validity: int = 7) -> Budget:
    return Budget.create(
        service_order_id="so-1",
        client_id="client-1",
        validity_period=validity,
        delivery_method=DeliveryMethod.EMAIL,
        now=T0,
    )


def _sent_budget(validity: int = 7) -> Budget:
    budget = _budget(validity)
    budget.send(now=T0 + timedelta(hours=1))
    return budget


class TestCreate:
    def test_new_budget_is_generated_with_zero_total(self):
        budget = _budget()
        assert budget.status is BudgetStatus.GENERATED
        assert budget.total_amount == Money.zero()
        assert budget.generation_date == T0

    def test_negative_validity_rejected(self):
        with pytest.raises(DomainValidationError):
            Budget.create("so-1", "client-1", validity_period=-1)


class TestExpiration:
    def test_expiration_date(self):
        assert _budget(7).get_expiration_date() == T0 + timedelta(days=7)

    def test_not_expired_at_exact_boundary(self):
        assert not _budget(7).is_expired(T0 + timedelta(days=7))

    def test_expired_after_boundary(self):
        assert _budget(7).is_expired(T0 + timedelta(days=7, seconds=1))

    def test_approve_within_validity(self):
        budget = _sent_budget(7)
        budget.approve(now=T0 + timedelta(days=6))
        assert budget.status is BudgetStatus.APPROVED
        assert budget.approval_date == T0 + timedelta(days=6)

    def test_approve_after_validity_raises_and_changes_nothing(self):
        budget = _sent_budget(7)
        with pytest.raises(BudgetExpired) as exc_info:
            budget.approve(now=T0 + timedelta(days=8))
        assert exc_info.value.expiration_date == T0 + timedelta(days=7)
        assert budget.status is BudgetStatus.SENT
        assert budget.approval_date is None

    def test_reject_after_validity_raises(self):
        budget = _sent_budget(7)
        with pytest.raises(BudgetExpired):
            budget.reject(now=T0 + timedelta(days=8))
        assert budget.status is BudgetStatus.SENT


class TestTransitions:
    def test_send_sets_sent_date(self):
        budget = _budget()
        budget.send(now=T0 + timedelta(hours=2))
        assert budget.status is BudgetStatus.SENT
        assert budget.sent_date == T0 + timedelta(hours=2)

    def test_send_twice_rejected(self):
        budget = _sent_budget()
        with pytest.raises(InvalidBudgetStatus) as exc_info:
            budget.send()
        assert exc_info.value.current is BudgetStatus.SENT

    def test_mark_as_received_requires_sent(self):
        budget = _budget()
        with pytest.raises(InvalidBudgetStatus):
            budget.mark_as_received()
        sent = _sent_budget()
        sent.mark_as_received(now=T0 + timedelta(days=1))
        assert sent.status is BudgetStatus.RECEIVED

    def test_received_budget_cannot_be_approved_directly(self):
        budget = _sent_budget()
        budget.mark_as_received(now=T0 + timedelta(days=1))
        with pytest.raises(InvalidBudgetStatus):
            budget.approve(now=T0 + timedelta(days=2))

    def test_generated_budget_cannot_be_approved(self):
        with pytest.raises(InvalidBudgetStatus):
            _budget().approve(now=T0)

    def test_reject_sets_rejection_date(self):
        budget = _sent_budget()
        budget.reject(now=T0 + timedelta(days=2))
        assert budget.status is BudgetStatus.REJECTED
        assert budget.rejection_date == T0 + timedelta(days=2)

    def test_mark_as_expired_is_unconditional(self):
        budget = _sent_budget()
        budget.approve(now=T0 + timedelta(days=1))
        budget.mark_as_expired()
        assert budget.status is BudgetStatus.EXPIRED


class TestIdempotencyGuards:
    def test_approve_twice(self):
        budget = _sent_budget()
        budget.approve(now=T0 + timedelta(days=1))
        with pytest.raises(BudgetAlreadyApproved):
            budget.approve(now=T0 + timedelta(days=1))

    def test_approve_twice_even_after_expiry(self):
        """La garde d'idempotence passe avant le controle d'expiration."""
        budget = _sent_budget()
        budget.approve(now=T0 + timedelta(days=1))
        with pytest.raises(BudgetAlreadyApproved):
            budget.approve(now=T0 + timedelta(days=30))

    def test_reject_twice(self):
        budget = _sent_budget()
        budget.reject(now=T0 + timedelta(days=1))
        with pytest.raises(BudgetAlreadyRejected):
            budget.reject(now=T0 + timedelta(days=1))

    def test_reject_approved_budget(self):
        budget = _sent_budget()
        budget.approve(now=T0 + timedelta(days=1))
        with pytest.raises(InvalidBudgetStatus):
            budget.reject(now=T0 + timedelta(days=1))


class TestTotals:
    def _item(self, quantity: int, unit_price: int) -> BudgetItem:
        return BudgetItem.create(
            budget_id="b-1",
            type=BudgetItemType.SERVICE,
            description="Main d'oeuvre",
            quantity=quantity,
            unit_price=unit_price,
        )

    def test_item_total_price(self):
        assert self._item(3, 1999).total_price == Money(5997)

    def test_item_quantity_must_be_positive(self):
        with pytest.raises(DomainValidationError):
            self._item(0, 100)

    def test_calculate_total_amount(self):
        items = [self._item(1, 1000), self._item(1, 2000)]
        assert Budget.calculate_total_amount(items).cents == 3000

    def test_recalculate_only_touches_total_and_updated_at(self):
        budget = _sent_budget()
        before = (budget.status, budget.sent_date, budget.generation_date, budget.notes)
        later = T0 + timedelta(days=1)
        result = budget.recalculate_total_amount([self._item(2, 1500)], now=later)
        assert result is budget
        assert budget.total_amount == Money(3000)
        assert budget.updated_at == later
        assert (budget.status, budget.sent_date, budget.generation_date, budget.notes) == before

    def test_update_item_quantity(self):
        item = self._item(1, 500)
        item.update_quantity(4)
        assert item.total_price == Money(2000)


class TestSetters:
    def test_unconditional_setters(self):
        budget = _sent_budget()
        budget.update_total_amount("150,00")
        budget.update_validity_period(15)
        budget.update_delivery_method(DeliveryMethod.WHATSAPP)
        budget.update_notes("Remise accordee")
        assert budget.total_amount == Money(15000)
        assert budget.validity_period == 15
        assert budget.delivery_method is DeliveryMethod.WHATSAPP
        assert budget.notes == "Remise accordee"

    def test_date_setters(self):
        budget = _budget()
        when = datetime(2025, 4, 1)
        budget.update_sent_date(when)
        budget.update_approval_date(when)
        budget.update_rejection_date(when)
        assert budget.sent_date == budget.approval_date == budget.rejection_date == when
