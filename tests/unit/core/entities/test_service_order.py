"""
Tests pour l'entite ServiceOrder.

Verifie la table des transitions de facon exhaustive, l'annulation
et les predicats de cycle de vie.
"""

import itertools
from datetime import datetime

import pytest

from workshop.core.entities.service_order import (
    ALLOWED_TRANSITIONS,
    ServiceOrder,
    allowed_transitions,
)
from workshop.core.exceptions import DomainValidationError, InvalidStatusTransition
from workshop.core.value_objects import ServiceOrderStatus as S

T0 = datetime(2025, 3, 1, 9, 0)


def _order(status: S) -> ServiceOrder:
    return ServiceOrder(
        id="so-1",
        status=status,
        request_date=T0,
        client_id="client-1",
        vehicle_id="vehicle-1",
        created_at=T0,
        updated_at=T0,
    )


class TestTransitionTable:
    """Propriete exhaustive sur toutes les paires (courant, cible)."""

    @pytest.mark.parametrize("current,target", list(itertools.product(S, S)))
    def test_every_pair(self, current, target):
        order = _order(current)
        allowed = ALLOWED_TRANSITIONS[current]
        if target in allowed:
            order.update_status(target, now=datetime(2025, 3, 2))
            assert order.status is target
            assert order.updated_at == datetime(2025, 3, 2)
        else:
            with pytest.raises(InvalidStatusTransition) as exc_info:
                order.update_status(target)
            assert exc_info.value.current is current
            assert exc_info.value.attempted is target
            assert exc_info.value.allowed == allowed
            assert order.status is current
            assert order.updated_at == T0

    def test_every_status_has_a_row(self):
        assert set(ALLOWED_TRANSITIONS) == set(S)

    def test_cancelled_is_terminal(self):
        assert allowed_transitions(S.CANCELLED) == ()

    def test_asymmetric_terminal_transitions_preserved(self):
        assert S.REJECTED in allowed_transitions(S.DELIVERED)
        assert allowed_transitions(S.REJECTED) == (S.CANCELLED,)

    def test_error_message_lists_allowed_transitions(self):
        order = _order(S.REQUESTED)
        with pytest.raises(InvalidStatusTransition, match="RECEIVED, CANCELLED, REJECTED"):
            order.update_status(S.FINISHED)


class TestFactories:
    def test_create_is_requested(self):
        order = ServiceOrder.create("client-1", "vehicle-1", now=T0)
        assert order.status is S.REQUESTED
        assert order.request_date == T0
        assert order.id

    def test_create_received(self):
        order = ServiceOrder.create_received("client-1", "vehicle-1", notes="Bruit moteur")
        assert order.status is S.RECEIVED
        assert order.notes == "Bruit moteur"

    def test_ids_are_unique(self):
        a = ServiceOrder.create("c", "v")
        b = ServiceOrder.create("c", "v")
        assert a.id != b.id


class TestCancel:
    def test_cancel_sets_status_and_reason(self):
        order = _order(S.IN_DIAGNOSIS)
        order.cancel("  Client injoignable  ")
        assert order.status is S.CANCELLED
        assert order.cancellation_reason == "Client injoignable"

    @pytest.mark.parametrize("reason", ["", "   "])
    def test_empty_reason_changes_nothing(self, reason):
        order = _order(S.RECEIVED)
        with pytest.raises(DomainValidationError):
            order.cancel(reason)
        assert order.status is S.RECEIVED
        assert order.cancellation_reason is None

    def test_cancel_from_cancelled_rejected(self):
        order = _order(S.CANCELLED)
        with pytest.raises(InvalidStatusTransition):
            order.cancel("encore")
        assert order.cancellation_reason is None


class TestNamedMutators:
    def test_happy_path(self):
        order = ServiceOrder.create("client-1", "vehicle-1")
        order.mark_received()
        order.mark_in_diagnosis()
        order.mark_awaiting_approval()
        order.mark_approved()
        order.mark_in_execution()
        order.mark_finished()
        order.mark_delivered()
        assert order.status is S.DELIVERED
        assert order.is_in_final_state()

    def test_mark_rejected_from_awaiting_approval(self):
        order = _order(S.AWAITING_APPROVAL)
        order.mark_rejected()
        assert order.status is S.REJECTED

    def test_skipping_a_step_is_rejected(self):
        order = _order(S.RECEIVED)
        with pytest.raises(InvalidStatusTransition):
            order.mark_finished()


class TestPredicates:
    def test_can_add_budget_items_only_in_diagnosis(self):
        assert _order(S.IN_DIAGNOSIS).can_add_budget_items()
        assert not _order(S.RECEIVED).can_add_budget_items()

    def test_can_be_approved_or_rejected(self):
        assert _order(S.AWAITING_APPROVAL).can_be_approved_or_rejected()
        assert not _order(S.APPROVED).can_be_approved_or_rejected()

    @pytest.mark.parametrize("status", [S.DELIVERED, S.CANCELLED, S.REJECTED])
    def test_final_states(self, status):
        assert _order(status).is_in_final_state()

    def test_non_final_state(self):
        assert not _order(S.IN_EXECUTION).is_in_final_state()


class TestSetters:
    def test_update_delivery_date(self):
        order = _order(S.FINISHED)
        when = datetime(2025, 3, 10)
        order.update_delivery_date(when, now=when)
        assert order.delivery_date == when
        assert order.updated_at == when

    def test_update_notes(self):
        order = _order(S.RECEIVED)
        order.update_notes("Pneus a verifier")
        assert order.notes == "Pneus a verifier"

    def test_status_is_read_only(self):
        order = _order(S.RECEIVED)
        with pytest.raises(AttributeError):
            order.status = S.DELIVERED
