"""
Objet valeur monétaire.

Money représente un montant en centimes entiers. Toute l'arithmétique
se fait sur des entiers : aucun flottant n'intervient dans les totaux.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from workshop.core.exceptions import InvalidMoneyValue


# Plafond accepte pour une saisie en reais (1 million)
MAX_AMOUNT_REAIS = 1_000_000

_BRAZILIAN_GROUPED = re.compile(r"^\d{1,3}(\.\d{3})+(,\d{1,2})?$")
_BRAZILIAN_SIMPLE = re.compile(r"^\d+,\d{1,2}$")
_INTERNATIONAL_GROUPED = re.compile(r"^\d{1,3}(,\d{3})+(\.\d{1,2})?$")
_INTEGER = re.compile(r"^\d+$")
_DECIMAL = re.compile(r"^\d+\.\d{1,2}$")


def _reais_to_cents(normalized: str, raw: str) -> int:
    """Convertit une chaine decimale normalisee (point decimal) en centimes."""
    try:
        amount = Decimal(normalized)
    except InvalidOperation as e:
        raise InvalidMoneyValue(raw) from e
    if amount > MAX_AMOUNT_REAIS:
        raise InvalidMoneyValue(raw)
    return int((amount * 100).to_integral_value())


@dataclass(frozen=True, order=True)
class Money:
    """
    Montant monétaire en centimes (réal brésilien).

    Attributs :
        cents : Montant en centimes, toujours >= 0

    Exemple :
        >>> Money(1000) + Money(2000)
        Money(cents=3000)
        >>> Money.parse("R$ 1.234,56").cents
        123456
    """

    cents: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise InvalidMoneyValue(self.cents)
        if self.cents < 0:
            raise InvalidMoneyValue(self.cents)

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    @classmethod
    def of(cls, value: Union["Money", int, str]) -> "Money":
        """
        Construit un Money depuis un Money, un entier (centimes) ou une chaine.

        Les entiers sont interpretes comme des centimes.
        """
        if isinstance(value, Money):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> "Money":
        """
        Analyse un montant saisi par un utilisateur.

        Formats acceptés :
        - "R$ 1.234,56", "1.000,00" : format brésilien avec séparateur de milliers
        - "1000,00", "123,45" : format brésilien simple
        - "1,234.56" : format international avec séparateur de milliers
        - "1234.56" : décimal simple (en reais)
        - "100000" : entier, interprété comme des centimes

        Lève :
            InvalidMoneyValue : si le format n'est pas reconnu ou hors limites
        """
        clean = re.sub(r"[R$\s]", "", text or "")

        if _BRAZILIAN_GROUPED.match(clean):
            return cls(_reais_to_cents(clean.replace(".", "").replace(",", "."), text))
        if _BRAZILIAN_SIMPLE.match(clean):
            return cls(_reais_to_cents(clean.replace(",", "."), text))
        if _INTERNATIONAL_GROUPED.match(clean):
            return cls(_reais_to_cents(clean.replace(",", ""), text))
        if _INTEGER.match(clean):
            cents = int(clean)
            if cents > MAX_AMOUNT_REAIS * 100:
                raise InvalidMoneyValue(text)
            return cls(cents)
        if _DECIMAL.match(clean):
            return cls(_reais_to_cents(clean, text))

        raise InvalidMoneyValue(text)

    @classmethod
    def sum(cls, amounts: Iterable["Money"]) -> "Money":
        """Additionne une sequence de montants (somme entiere des centimes)."""
        return cls(sum(amount.cents for amount in amounts))

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents - other.cents)

    def multiply(self, quantity: int) -> "Money":
        """Multiplie le montant par une quantite entiere."""
        return Money(self.cents * quantity)

    def formatted(self) -> str:
        """Retourne le montant au format brésilien (ex: "R$ 1.234,56")."""
        reais, cents = divmod(self.cents, 100)
        grouped = f"{reais:,}".replace(",", ".")
        return f"R$ {grouped},{cents:02d}"

    def __str__(self) -> str:
        return self.formatted()
