from __future__ import annotations

import math
import re
from typing import Sequence

from .errors import InsufficientFields, InvalidFloat, InvalidInteger
from .models import InventoryItem

REQUIRED_FIELDS = 7

ID_FIELD = 0
SKU_FIELD = 1
NAME_FIELD = 2
CATEGORY_FIELD = 3
STOCK_FIELD = 4
PRICE_FIELD = 5
UPDATED_FIELD = 6

_INTEGER = re.compile(r"[+-]?[0-9]+")

# Integers are 64-bit signed in the source format.
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_INFINITY_LITERALS = ("inf", "infinity")


def _parse_int(field: str, value: str, record: Sequence[str]) -> int:
    if not _INTEGER.fullmatch(value):
        raise InvalidInteger(field, value, record)
    number = int(value)
    if not _INT_MIN <= number <= _INT_MAX:
        raise InvalidInteger(field, value, record)
    return number


def _parse_float(field: str, value: str, record: Sequence[str]) -> float:
    # float() tolerates padding and digit separators; the source format does not.
    if not value or value != value.strip() or "_" in value:
        raise InvalidFloat(field, value, record)
    try:
        number = float(value)
    except ValueError:
        raise InvalidFloat(field, value, record) from None
    # Overflow to infinity is a range error; only a spelled-out infinity is accepted.
    if math.isinf(number) and value.lstrip("+-").lower() not in _INFINITY_LITERALS:
        raise InvalidFloat(field, value, record)
    return number


def parse_record(record: Sequence[str]) -> InventoryItem:
    """
    Turn one raw row into an InventoryItem.

    Columns: id, sku, product name, category, stock, price, last updated.
    Fields beyond the seventh are ignored. String fields are taken as-is.
    Raises a ParseError subclass for rows that cannot become an item.
    """
    if len(record) < REQUIRED_FIELDS:
        raise InsufficientFields(
            f"insufficient fields: expected {REQUIRED_FIELDS}, got {len(record)}", record
        )

    item_id = _parse_int("id", record[ID_FIELD], record)
    stock = _parse_int("stock", record[STOCK_FIELD], record)
    price = _parse_float("price", record[PRICE_FIELD], record)

    return InventoryItem(
        id=item_id,
        sku=record[SKU_FIELD],
        product_name=record[NAME_FIELD],
        category=record[CATEGORY_FIELD],
        stock=stock,
        price=price,
        last_updated=record[UPDATED_FIELD],
    )
