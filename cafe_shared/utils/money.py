"""
Decimal arithmetic conventions shared by every monetary and stock calculation.

Money is always a Decimal. Rounding happens only where a rule asks for it,
always half-up to two decimal places.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from cafe_shared.utils.exceptions import InvalidArgumentError

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Number | None, field: str = "value") -> Decimal:
    """
    Convert a number to Decimal without binary float artifacts.

    Floats go through str() so 4.5 becomes Decimal("4.5"), not
    Decimal("4.5000000000000001...").
    """
    if value is None:
        raise InvalidArgumentError(f"{field} is required", field=field)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field} must be a number", field=field, value=value)
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise InvalidArgumentError(f"{field} must be a number", field=field, value=value) from None


def round_money(value: Number) -> Decimal:
    """Round half-up to 2 decimal places."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percentage_of(amount: Decimal, percentage: Number) -> Decimal:
    """amount × percentage / 100, rounded to money."""
    return round_money(amount * to_decimal(percentage, "percentage") / HUNDRED)


def require_positive(value: Number | None, field: str) -> Decimal:
    """Return value as Decimal, rejecting zero and negatives."""
    amount = to_decimal(value, field)
    if amount <= ZERO:
        raise InvalidArgumentError(f"{field} must be positive", field=field, value=str(amount))
    return amount


def require_non_negative(value: Number | None, field: str) -> Decimal:
    """Return value as Decimal, rejecting negatives."""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise InvalidArgumentError(f"{field} cannot be negative", field=field, value=str(amount))
    return amount


def validate_percentage(percentage: Number | None) -> Decimal:
    """Percentages must lie in (0, 100]."""
    pct = to_decimal(percentage, "percentage")
    if pct <= ZERO or pct > HUNDRED:
        raise InvalidArgumentError(
            "Percentage must be greater than 0 and at most 100",
            field="percentage",
            value=str(pct),
        )
    return pct


def require_positive_int(value: int, field: str) -> int:
    """Integer counterpart of require_positive for quantities and points."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{field} must be an integer", field=field, value=value)
    if value <= 0:
        raise InvalidArgumentError(f"{field} must be positive", field=field, value=value)
    return value


def require_places(value: Decimal, places: int, field: str) -> Decimal:
    """Reject values with more decimal places than the column stores."""
    if value != value.quantize(Decimal(1).scaleb(-places)):
        raise InvalidArgumentError(
            f"{field} allows at most {places} decimal places",
            field=field,
            value=str(value),
        )
    return value
