"""
Tests pour les politiques d'autorisation des changements de statut.
"""

import pytest

from workshop.core.authorization import (
    can_change_budget_status,
    can_change_order_status,
    ensure_can_change_budget_status,
    ensure_can_change_order_status,
)
from workshop.core.exceptions import UnauthorizedBudgetStatusChange, UnauthorizedStatusChange
from workshop.core.value_objects import BudgetStatus as B
from workshop.core.value_objects import ServiceOrderStatus as S
from workshop.core.value_objects import UserRole as R


class TestOrderPolicy:
    @pytest.mark.parametrize("role,expected", [(R.ADMIN, True), (R.EMPLOYEE, False), (R.CLIENT, False)])
    def test_cancel_is_admin_only(self, role, expected):
        assert can_change_order_status(S.RECEIVED, S.CANCELLED, role) is expected

    @pytest.mark.parametrize("target", [S.APPROVED, S.REJECTED])
    def test_approval_decisions(self, target):
        assert can_change_order_status(S.AWAITING_APPROVAL, target, R.CLIENT)
        assert can_change_order_status(S.AWAITING_APPROVAL, target, R.EMPLOYEE)
        assert not can_change_order_status(S.AWAITING_APPROVAL, target, R.ADMIN)

    @pytest.mark.parametrize("target", [S.IN_DIAGNOSIS, S.IN_EXECUTION, S.FINISHED, S.DELIVERED])
    def test_workshop_steps_are_employee_only(self, target):
        assert can_change_order_status(S.RECEIVED, target, R.EMPLOYEE)
        assert not can_change_order_status(S.RECEIVED, target, R.CLIENT)
        assert not can_change_order_status(S.RECEIVED, target, R.ADMIN)

    @pytest.mark.parametrize("target", [S.RECEIVED, S.AWAITING_APPROVAL, S.SCHEDULED, S.REQUESTED])
    @pytest.mark.parametrize("role", list(R))
    def test_unrestricted_targets(self, target, role):
        assert can_change_order_status(S.REQUESTED, target, role)

    def test_ensure_raises_with_context(self):
        with pytest.raises(UnauthorizedStatusChange) as exc_info:
            ensure_can_change_order_status("so-1", S.RECEIVED, S.CANCELLED, R.EMPLOYEE)
        error = exc_info.value
        assert (error.order_id, error.current, error.target, error.role) == (
            "so-1",
            S.RECEIVED,
            S.CANCELLED,
            R.EMPLOYEE,
        )

    def test_ensure_passes(self):
        ensure_can_change_order_status("so-1", S.RECEIVED, S.CANCELLED, R.ADMIN)


class TestBudgetPolicy:
    @pytest.mark.parametrize("target", [B.SENT, B.RECEIVED])
    def test_send_and_receive_are_staff_only(self, target):
        assert can_change_budget_status(B.GENERATED, target, R.EMPLOYEE)
        assert can_change_budget_status(B.GENERATED, target, R.ADMIN)
        assert not can_change_budget_status(B.GENERATED, target, R.CLIENT)

    @pytest.mark.parametrize("target", [B.APPROVED, B.REJECTED])
    @pytest.mark.parametrize("role", list(R))
    def test_decisions_open_to_all_roles(self, target, role):
        assert can_change_budget_status(B.SENT, target, role)

    def test_expire_is_admin_only(self):
        assert can_change_budget_status(B.SENT, B.EXPIRED, R.ADMIN)
        assert not can_change_budget_status(B.SENT, B.EXPIRED, R.EMPLOYEE)

    def test_ensure_raises(self):
        with pytest.raises(UnauthorizedBudgetStatusChange) as exc_info:
            ensure_can_change_budget_status("b-1", B.GENERATED, B.SENT, R.CLIENT)
        assert exc_info.value.budget_id == "b-1"
        assert exc_info.value.role is R.CLIENT
