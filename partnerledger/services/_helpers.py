"""Shared utilities for the service layer."""

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import uuid4

ZERO: Decimal = Decimal(0)
CENT: Decimal = Decimal("0.01")


def new_id() -> str:
    return str(uuid4())


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


def to_decimal(value: object) -> Decimal:
    """Normalize a stored numeric (float, int, str, None) to Decimal. None is zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def optional_decimal(value: object) -> Decimal | None:
    if value is None:
        return None
    return to_decimal(value)


def sum_decimals(values: Iterable[Decimal | None]) -> Decimal:
    return sum((v if v is not None else ZERO for v in values), ZERO)


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents for display and export; ledger math stays unrounded.

    Adding ZERO turns a negative zero (e.g. -0.001 rounded) into 0.00.
    """
    return value.quantize(CENT, rounding=ROUND_HALF_UP) + ZERO


def money_str(value: Decimal) -> str:
    return str(quantize_money(value))
