"""
Tests des commandes CLI de l'atelier.

Le Container est patche dans helpers.py ; les services exposes sont les
vrais services branches sur la base SQLite de test.
"""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from workshop.core.value_objects import UserRole
from workshop.main import __version__, app

runner = CliRunner()


@pytest.fixture
def mock_container(ledger, budget_service):
    with patch("workshop.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        container_instance.stock_ledger_service.return_value = ledger
        container_instance.budget_service.return_value = budget_service
        yield container_instance


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_info():
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "jours" in result.output


class TestStockReport:
    def test_nothing_below_minimum(self, mock_container, ledger):
        ledger.create_stock_item("Filtre", "FLT-001", 10, 2, 1500, 2500)
        result = runner.invoke(app, ["stock-report"])
        assert result.exit_code == 0
        assert "Aucun article" in result.output
        mock_container.database.init.assert_called_once()

    def test_lists_low_items(self, mock_container, ledger):
        ledger.create_stock_item("Filtre", "FLT-001", 10, 2, 1500, 2500)
        ledger.create_stock_item("Joint", "JNT-002", 1, 4, 200, 500)
        result = runner.invoke(app, ["stock-report"])
        assert result.exit_code == 0
        assert "JNT-002" in result.output
        assert "FLT-001" not in result.output

    def test_all(self, mock_container, ledger):
        ledger.create_stock_item("Filtre", "FLT-001", 10, 2, 1500, 2500)
        result = runner.invoke(app, ["stock-report", "--all"])
        assert "FLT-001" in result.output


class TestStockMove:
    def test_out_movement(self, mock_container, ledger):
        item = ledger.create_stock_item("Filtre", "FLT-001", 10, 2, 1500, 2500)
        result = runner.invoke(app, ["stock-move", "flt-001", "out", "3", "-r", "OS 9"])
        assert result.exit_code == 0
        assert "stock: 7" in result.output
        assert ledger.get_stock_item(item.id).current_stock == 7

    def test_warns_below_minimum(self, mock_container, ledger):
        ledger.create_stock_item("Filtre", "FLT-001", 3, 2, 1500, 2500)
        result = runner.invoke(app, ["stock-move", "FLT-001", "OUT", "2"])
        assert result.exit_code == 0
        assert "Attention" in result.output

    def test_insufficient_stock(self, mock_container, ledger):
        item = ledger.create_stock_item("Filtre", "FLT-001", 2, 0, 1500, 2500)
        result = runner.invoke(app, ["stock-move", "FLT-001", "OUT", "5"])
        assert result.exit_code == 1
        assert "INSUFFICIENT_STOCK" in result.output
        assert ledger.get_stock_item(item.id).current_stock == 2

    def test_unknown_sku(self, mock_container):
        result = runner.invoke(app, ["stock-move", "NOPE-1", "IN", "1"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output


class TestExpireBudgets:
    def test_nothing_to_expire(self, mock_container):
        result = runner.invoke(app, ["expire-budgets"])
        assert result.exit_code == 0
        assert "Aucun devis" in result.output

    def test_expires_overdue(self, mock_container, order_service, budget_service, clock):
        order = order_service.open_order("client-1", "v-1", UserRole.EMPLOYEE)
        budget = budget_service.create_budget(order.id)
        clock.advance(days=8)

        result = runner.invoke(app, ["expire-budgets"])

        assert result.exit_code == 0
        assert "1 devis expire(s)" in result.output
        assert budget_service.get(budget.id).status.value == "EXPIRED"
