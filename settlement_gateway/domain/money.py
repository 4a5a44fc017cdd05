"""Cent-accurate money helpers.

Amounts cross the public API as major-unit decimals and are carried internally
as integer cents, so summing a schedule never accumulates float drift.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() gives the shortest repr, so 0.1 becomes Decimal("0.1") and not its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def round_to_cents(value: Number) -> Decimal:
    """Round a major-unit amount to 2 places, half-up"""
    return _as_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Number) -> int:
    """Major units -> integer cents (half-up)"""
    return int(round_to_cents(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Integer cents -> major-unit Decimal with 2 places"""
    return (Decimal(cents) / 100).quantize(CENT)


def split_evenly(total_cents: int, parts: int) -> int:
    """Per-part share of `total_cents`, rounded half-up to the cent"""
    share = (Decimal(total_cents) / Decimal(parts)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(share)


def redistribute_remainder(amounts_cents: Sequence[int], target_cents: int) -> List[int]:
    """
    Reconcile a list of amounts to `target_cents` exactly.

    The whole difference lands on the last element; earlier elements are never
    touched. Amounts are already whole cents, so any non-zero difference is
    corrected.

    Example:
        [33333, 33333, 33333] against 100000 -> [33333, 33333, 33334]
    """
    result = list(amounts_cents)
    if not result:
        return result

    diff = target_cents - sum(result)
    if diff != 0:
        result[-1] += diff

    return result
