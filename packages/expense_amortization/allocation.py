"""Split a lump sum across consecutive months, exact to the cent."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)


def to_cents(amount: Any) -> int:
    """Integer minor units of ``amount``, rounding half away from zero.

    Floats go through ``str`` first so ``0.1`` means ten cents, not the binary
    approximation. Raises ``ValueError`` for non-numeric input.
    """

    try:
        d = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"not a currency amount: {amount!r}") from e
    if not d.is_finite():
        raise ValueError(f"not a currency amount: {amount!r}")
    return int((d * _HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / _HUNDRED).quantize(_CENT)


def split_amount(total: Any, months: int) -> list[Decimal]:
    """Split ``total`` into ``months`` per-month amounts.

    Every month gets ``floor(total_cents / months)`` cents and the first month
    also absorbs the remainder, so the parts always add back up to the
    cent-rounded total::

        >>> split_amount(1000, 3)
        [Decimal('333.34'), Decimal('333.33'), Decimal('333.33')]

    Returns an empty list when ``months < 1``; callers treat that as "no
    allocation".
    """

    if months < 1:
        return []
    total_cents = to_cents(total)
    base = total_cents // months
    remainder = total_cents - base * months
    amounts = [from_cents(base)] * months
    amounts[0] = from_cents(base + remainder)
    return amounts


__all__ = ["from_cents", "split_amount", "to_cents"]
