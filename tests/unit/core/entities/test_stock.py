"""
Tests pour les entites de stock (StockItem, StockMovement, StockMovementPatch)
et l'arithmetique du registre.
"""

import pytest

from workshop.core.entities.stock import (
    StockItem,
    StockMovement,
    StockMovementPatch,
    apply_movement,
    reverse_movement,
)
from workshop.core.exceptions import (
    DomainValidationError,
    InvalidPriceMargin,
    InvalidSkuFormat,
    InvalidStockAdjustment,
)
from workshop.core.value_objects import Money, StockMovementType as M


def _item(**overrides) -> StockItem:
    fields = dict(
        name="Filtre a huile",
        sku="FLT-001",
        current_stock=10,
        min_stock_level=3,
        unit_cost=1500,
        unit_sale_price=2500,
    )
    fields.update(overrides)
    return StockItem.create(**fields)


class TestLedgerArithmetic:
    @pytest.mark.parametrize(
        "movement_type,quantity,expected",
        [(M.IN, 5, 15), (M.OUT, 4, 6), (M.OUT, 15, -5), (M.ADJUSTMENT, 20, 20)],
    )
    def test_apply(self, movement_type, quantity, expected):
        assert apply_movement(10, movement_type, quantity) == expected

    @pytest.mark.parametrize(
        "movement_type,quantity,expected",
        [(M.IN, 10, 5), (M.OUT, 3, 18), (M.ADJUSTMENT, 20, 15)],
    )
    def test_reverse(self, movement_type, quantity, expected):
        current = 15
        assert reverse_movement(current, movement_type, quantity) == expected


class TestStockItemCreation:
    def test_sku_is_normalized(self):
        assert _item(sku="flt-001").sku == "FLT-001"

    @pytest.mark.parametrize("sku", ["AB", "FLT_001", "A" * 21, ""])
    def test_invalid_sku(self, sku):
        with pytest.raises(InvalidSkuFormat):
            _item(sku=sku)

    def test_short_name_rejected(self):
        with pytest.raises(DomainValidationError):
            _item(name="A")

    def test_negative_stock_rejected(self):
        with pytest.raises(DomainValidationError):
            _item(current_stock=-1)

    def test_sale_price_below_cost_rejected(self):
        with pytest.raises(InvalidPriceMargin) as exc_info:
            _item(unit_cost=3000, unit_sale_price=2000)
        assert exc_info.value.unit_cost == 3000
        assert exc_info.value.unit_sale_price == 2000

    def test_equal_prices_allowed(self):
        assert _item(unit_cost=2000, unit_sale_price=2000).get_profit_per_unit() == Money(0)


class TestStockItemRules:
    def test_has_stock(self):
        item = _item(current_stock=5)
        assert item.has_stock(5)
        assert not item.has_stock(6)

    def test_below_minimum_and_deficit(self):
        item = _item(current_stock=1, min_stock_level=4)
        assert item.is_below_minimum_stock()
        assert item.get_stock_deficit() == 3

    def test_at_minimum_is_not_below(self):
        item = _item(current_stock=3, min_stock_level=3)
        assert not item.is_below_minimum_stock()
        assert item.get_stock_deficit() == 0

    def test_profit(self):
        item = _item(unit_cost=1500, unit_sale_price=2500)
        assert item.get_profit_per_unit() == Money(1000)
        assert item.get_profit_margin_percentage() == pytest.approx(66.666, rel=1e-3)

    def test_margin_with_zero_cost(self):
        assert _item(unit_cost=0, unit_sale_price=100).get_profit_margin_percentage() == 0.0

    def test_adjust_stock(self):
        item = _item(current_stock=10)
        item.adjust_stock(-4)
        assert item.current_stock == 6

    def test_adjust_stock_below_zero(self):
        item = _item(current_stock=2)
        with pytest.raises(InvalidStockAdjustment) as exc_info:
            item.adjust_stock(-3)
        assert exc_info.value.current == 2
        assert exc_info.value.delta == -3
        assert item.current_stock == 2


class TestStockItemPrices:
    def test_update_sale_price_below_cost(self):
        item = _item(unit_cost=1500, unit_sale_price=2500)
        with pytest.raises(InvalidPriceMargin):
            item.update_unit_sale_price(1000)
        assert item.unit_sale_price == Money(2500)

    def test_update_cost_above_sale_price(self):
        item = _item(unit_cost=1500, unit_sale_price=2500)
        with pytest.raises(InvalidPriceMargin):
            item.update_unit_cost(3000)
        assert item.unit_cost == Money(1500)

    def test_update_prices_together(self):
        item = _item(unit_cost=1500, unit_sale_price=2500)
        item.update_prices(unit_cost=3000, unit_sale_price=4000)
        assert item.unit_cost == Money(3000)
        assert item.unit_sale_price == Money(4000)


class TestStockMovement:
    def test_in_requires_positive_quantity(self):
        with pytest.raises(DomainValidationError):
            StockMovement.create(type=M.IN, quantity=0, stock_id="s-1")

    def test_adjustment_to_zero_allowed(self):
        movement = StockMovement.create(type=M.ADJUSTMENT, quantity=0, stock_id="s-1")
        assert movement.is_adjustment_movement()

    def test_negative_quantity_rejected(self):
        with pytest.raises(DomainValidationError):
            StockMovement.create(type=M.ADJUSTMENT, quantity=-1, stock_id="s-1")

    def test_stock_id_required(self):
        with pytest.raises(DomainValidationError):
            StockMovement.create(type=M.IN, quantity=1, stock_id="")

    def test_reason_too_long(self):
        with pytest.raises(DomainValidationError):
            StockMovement.create(type=M.IN, quantity=1, stock_id="s-1", reason="x" * 201)

    def test_effective_quantity(self):
        out = StockMovement.create(type=M.OUT, quantity=3, stock_id="s-1")
        assert out.get_effective_quantity() == -3
        assert out.is_out_movement()

    @pytest.mark.parametrize("movement_type", list(M))
    def test_type_predicates(self, movement_type):
        movement = StockMovement.create(type=movement_type, quantity=2, stock_id="s-1")
        assert movement.is_in_movement() is (movement_type is M.IN)
        assert movement.is_out_movement() is (movement_type is M.OUT)
        assert movement.is_adjustment_movement() is (movement_type is M.ADJUSTMENT)

    def test_apply_patch(self):
        movement = StockMovement.create(type=M.IN, quantity=10, stock_id="s-1")
        movement.apply_patch(StockMovementPatch(type=M.OUT, quantity=3, reason="Correction"))
        assert movement.type is M.OUT
        assert movement.quantity == 3
        assert movement.reason == "Correction"
        assert movement.stock_id == "s-1"

    def test_apply_patch_keeps_unset_fields(self):
        movement = StockMovement.create(type=M.IN, quantity=10, stock_id="s-1", notes="n")
        movement.apply_patch(StockMovementPatch(reason="r"))
        assert movement.type is M.IN
        assert movement.quantity == 10
        assert movement.notes == "n"

    def test_affects_stock(self):
        assert StockMovementPatch(quantity=2).affects_stock
        assert StockMovementPatch(type=M.OUT).affects_stock
        assert not StockMovementPatch(reason="typo").affects_stock
