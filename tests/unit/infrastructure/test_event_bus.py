"""Tests du bus d'evenements en memoire."""

from unittest.mock import MagicMock

from workshop.infrastructure.events import InMemoryEventBus


def test_handlers_called_in_subscription_order():
    bus = InMemoryEventBus()
    calls = []
    bus.subscribe("BudgetSent", lambda aggregate_id, payload: calls.append(("a", aggregate_id)))
    bus.subscribe("BudgetSent", lambda aggregate_id, payload: calls.append(("b", payload["x"])))

    bus.emit_event("BudgetSent", "b-1", {"x": 1})

    assert calls == [("a", "b-1"), ("b", 1)]


def test_only_matching_event_type():
    bus = InMemoryEventBus()
    handler = MagicMock()
    bus.subscribe("BudgetApproved", handler)

    bus.emit_event("BudgetRejected", "b-1", {})

    handler.assert_not_called()


def test_failing_handler_does_not_stop_others():
    bus = InMemoryEventBus()
    failing = MagicMock(side_effect=RuntimeError("boom"))
    other = MagicMock()
    bus.subscribe("BudgetSent", failing)
    bus.subscribe("BudgetSent", other)

    bus.emit_event("BudgetSent", "b-1", {"service_order_id": "so-1"})

    failing.assert_called_once()
    other.assert_called_once_with("b-1", {"service_order_id": "so-1"})


def test_unsubscribe():
    bus = InMemoryEventBus()
    handler = MagicMock()
    bus.subscribe("BudgetSent", handler)
    bus.unsubscribe("BudgetSent", handler)
    bus.unsubscribe("BudgetSent", handler)

    bus.emit_event("BudgetSent", "b-1", {})

    handler.assert_not_called()
    assert bus.handlers_for("BudgetSent") == []
