"""Turn raw CSV records into typed candidate rows.

Raw records map normalized header names to strings. Numeric fields that
are absent, empty or unparseable become None rather than rejecting the
row; only an empty required string field makes a row ineligible.
"""

import re
from dataclasses import astuple, dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Iterable, Mapping, TypeVar

DEFAULT_STATUS = "active"

# Signed 64-bit, the widest INTEGER column on either backend.
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

RawRecord = Mapping[str, str | None]

_WHITESPACE = re.compile(r"\s+")


def normalize_header(header: str) -> str:
    """'  Reorder  Level ' -> 'reorder_level'."""
    return _WHITESPACE.sub("_", header.strip().lower())


def _text(record: RawRecord, field: str) -> str:
    return (record.get(field) or "").strip()


def parse_decimal(value: str | None) -> Decimal | None:
    """Parse a finite decimal, or return None. Never raises."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def parse_integer(value: str | None) -> int | None:
    """Parse a number and truncate it toward zero ('5.7' -> 5, '1e3' -> 1000).

    Values outside the 64-bit integer range become None. Never raises.
    """
    number = parse_decimal(value)
    if number is None or number.adjusted() > 18:
        return None
    whole = int(number.to_integral_value(rounding=ROUND_DOWN))
    return whole if _INT_MIN <= whole <= _INT_MAX else None


@dataclass(frozen=True)
class SimpleProduct:
    name: str
    price: Decimal | None
    quantity: int | None

    def is_eligible(self) -> bool:
        return bool(self.name)

    def as_params(self) -> tuple:
        return astuple(self)


@dataclass(frozen=True)
class SkuProduct:
    sku: str
    name: str
    quantity: int | None
    price: Decimal | None
    reorder_level: int | None
    status: str = DEFAULT_STATUS

    def is_eligible(self) -> bool:
        return bool(self.sku) and bool(self.name)

    def as_params(self) -> tuple:
        return astuple(self)


CandidateRow = SimpleProduct | SkuProduct
R = TypeVar("R", SimpleProduct, SkuProduct)


def normalize_simple(record: RawRecord) -> SimpleProduct:
    return SimpleProduct(
        name=_text(record, "name"),
        price=parse_decimal(record.get("price")),
        quantity=parse_integer(record.get("quantity")),
    )


def normalize_sku(record: RawRecord) -> SkuProduct:
    return SkuProduct(
        sku=_text(record, "sku"),
        name=_text(record, "name"),
        quantity=parse_integer(record.get("quantity")),
        price=parse_decimal(record.get("price")),
        reorder_level=parse_integer(record.get("reorder_level")),
        status=_text(record, "status") or DEFAULT_STATUS,
    )


def filter_eligible(rows: Iterable[R]) -> list[R]:
    """Keep rows whose required fields are filled, preserving order."""
    return [row for row in rows if row.is_eligible()]
