"""
Tests pour l'objet valeur Money.

Verifie l'arithmetique entiere en centimes et l'analyse des saisies.
"""

import pytest

from workshop.core.exceptions import InvalidMoneyValue
from workshop.core.value_objects import Money


class TestMoneyArithmetic:
    """Arithmetique en centimes entiers."""

    def test_addition_is_exact(self):
        """1000 + 2000 centimes font exactement 3000."""
        assert (Money(1000) + Money(2000)).cents == 3000

    def test_subtraction(self):
        assert (Money(2500) - Money(1500)) == Money(1000)

    def test_subtraction_below_zero_is_rejected(self):
        with pytest.raises(InvalidMoneyValue):
            Money(100) - Money(200)

    def test_multiply_by_quantity(self):
        assert Money(1999).multiply(3) == Money(5997)

    def test_sum_of_many_small_amounts_has_no_drift(self):
        """Dix fois 0,10 font exactement 1,00."""
        assert Money.sum([Money(10)] * 10) == Money(100)

    def test_sum_of_empty_is_zero(self):
        assert Money.sum([]) == Money.zero()

    def test_ordering(self):
        assert Money(100) < Money(200)


class TestMoneyValidation:
    """Valeurs refusees a la construction."""

    def test_negative_cents_rejected(self):
        with pytest.raises(InvalidMoneyValue):
            Money(-1)

    def test_float_rejected(self):
        with pytest.raises(InvalidMoneyValue):
            Money(10.5)

    def test_bool_rejected(self):
        with pytest.raises(InvalidMoneyValue):
            Money(True)


class TestMoneyParse:
    """Analyse des montants saisis."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("R$ 1.234,56", 123456),
            ("1.000,00", 100000),
            ("123,45", 12345),
            ("1,234.56", 123456),
            ("1234.56", 123456),
            ("100000", 100000),
            ("R$ 0,99", 99),
        ],
    )
    def test_accepted_formats(self, text, expected):
        assert Money.parse(text).cents == expected

    @pytest.mark.parametrize("text", ["", "abc", "12,3,4", "-10,00", "1.2.3"])
    def test_rejected_formats(self, text):
        with pytest.raises(InvalidMoneyValue):
            Money.parse(text)

    def test_amount_above_ceiling_rejected(self):
        with pytest.raises(InvalidMoneyValue):
            Money.parse("1.000.001,00")

    def test_of_accepts_money_int_and_str(self):
        assert Money.of(Money(5)) == Money(5)
        assert Money.of(500) == Money(500)
        assert Money.of("5,00") == Money(500)


class TestMoneyFormat:
    def test_brazilian_format(self):
        assert Money(123456).formatted() == "R$ 1.234,56"

    def test_small_amount(self):
        assert str(Money(5)) == "R$ 0,05"
