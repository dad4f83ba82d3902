# ========================
# src/listing_analysis/numeric.py
# ========================

"""
Numeric helpers shared by the validator, cleaner and aggregator.

Nulls follow SQL semantics: aggregates skip them, an aggregate over
nothing is null, and nulls sort above every value.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Tuple

CENT = Decimal('0.01')


def round_half_up(value, places: int = 2) -> Optional[Decimal]:
    """Round to a fixed number of decimal places, halves away from zero."""
    if value is None:
        return None
    exponent = CENT if places == 2 else Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def sum_non_null(values: Iterable[Any]):
    """SUM(): total of the non-null values, or None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present)


def avg_non_null(values: Iterable[Any]) -> Optional[Decimal]:
    """AVG(): mean of the non-null values as a Decimal, or None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return Decimal(sum(present)) / len(present)


def percentage(part, whole) -> Optional[Decimal]:
    """part / whole * 100 rounded to 2 places; None when whole is zero or null."""
    if part is None or not whole:
        return None
    return round_half_up(Decimal(part) * 100 / Decimal(whole))


def multiply(*values) -> Optional[Any]:
    """Product of the values, null if any of them is null."""
    result = 1
    for value in values:
        if value is None:
            return None
        result = result * value
    return result


def null_high(value) -> Tuple[int, Any]:
    """Sort key placing nulls above every value (PostgreSQL ordering)."""
    if value is None:
        return (1, 0)
    return (0, value)
