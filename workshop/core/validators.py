"""
Validateurs de champs simples.

Fonctions pures sans etat : les predicats is_valid_* retournent un booleen,
les fonctions validate_* levent DomainValidationError au premier champ invalide.
Elles sont appelees par les fabriques et les setters des entites.
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from workshop.core.exceptions import DomainValidationError, InvalidSkuFormat

SKU_PATTERN = re.compile(r"^[A-Z0-9-]{3,20}$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
SUPPLIER_MIN_LENGTH = 2
SUPPLIER_MAX_LENGTH = 100
REASON_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 500

# Fenetre acceptee pour la date d'un mouvement
MOVEMENT_DATE_MAX_PAST = timedelta(days=365)
MOVEMENT_DATE_MAX_FUTURE = timedelta(days=1)


def is_valid_sku(sku: str) -> bool:
    if not sku or not sku.strip():
        return False
    return bool(SKU_PATTERN.match(sku.strip().upper()))


def is_valid_name(name: str) -> bool:
    return bool(name) and NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH


def is_valid_description(description: Optional[str]) -> bool:
    if not description:
        return True
    return len(description.strip()) <= DESCRIPTION_MAX_LENGTH


def is_valid_supplier(supplier: Optional[str]) -> bool:
    if not supplier:
        return True
    return SUPPLIER_MIN_LENGTH <= len(supplier.strip()) <= SUPPLIER_MAX_LENGTH


def is_valid_reason(reason: Optional[str]) -> bool:
    if not reason:
        return True
    return len(reason.strip()) <= REASON_MAX_LENGTH


def is_valid_notes(notes: Optional[str]) -> bool:
    if not notes:
        return True
    return len(notes.strip()) <= NOTES_MAX_LENGTH


def is_non_negative_int(value: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_valid_movement_date(movement_date: datetime, now: datetime) -> bool:
    """La date d'un mouvement doit etre dans l'annee ecoulee et au plus demain."""
    return now - MOVEMENT_DATE_MAX_PAST <= movement_date <= now + MOVEMENT_DATE_MAX_FUTURE


def validate_stock_item_fields(
    name: str,
    sku: str,
    current_stock: int,
    min_stock_level: int,
    description: Optional[str] = None,
    supplier: Optional[str] = None,
) -> None:
    """
    Valide les champs simples d'un article de stock.

    La marge de prix est verifiee separement par l'entite (InvalidPriceMargin).

    Raises:
        InvalidSkuFormat: Si le SKU ne respecte pas le format
        DomainValidationError: Pour tout autre champ invalide
    """
    if not is_valid_name(name):
        raise DomainValidationError("name", "must be between 2 and 100 characters")
    if not is_valid_sku(sku):
        raise InvalidSkuFormat(sku)
    if not is_non_negative_int(current_stock):
        raise DomainValidationError("current_stock", "must be a non-negative integer")
    if not is_non_negative_int(min_stock_level):
        raise DomainValidationError("min_stock_level", "must be a non-negative integer")
    if not is_valid_description(description):
        raise DomainValidationError("description", "must not exceed 500 characters")
    if not is_valid_supplier(supplier):
        raise DomainValidationError("supplier", "must be between 2 and 100 characters")


def validate_movement_fields(
    quantity: int,
    stock_id: str,
    reason: Optional[str] = None,
    notes: Optional[str] = None,
) -> None:
    """Valide les champs simples d'un mouvement de stock."""
    if not is_non_negative_int(quantity):
        raise DomainValidationError("quantity", "must be a non-negative integer")
    if not stock_id or not stock_id.strip():
        raise DomainValidationError("stock_id", "cannot be empty")
    if not is_valid_reason(reason):
        raise DomainValidationError("reason", "must not exceed 200 characters")
    if not is_valid_notes(notes):
        raise DomainValidationError("notes", "must not exceed 500 characters")
