"""Spending totals over month/range reads.

Only expenses count: rows typed ``income`` are left out, while rows with no
type (imported before the income/expense split) are read as expenses.

Among expenses, a row counts when it is a virtual allocation or when it is
not ``excluded_from_totals``. Parents carry the flag, so their lump sum never
counts twice; their allocations carry it too (they copy every parent field)
and are let through explicitly.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from .models import Transaction
from .months import YearMonth, to_year_month

UNCATEGORIZED = "Uncategorized"
EXPENSE = "expense"

_ZERO = Decimal("0.00")


def is_expense(row: Transaction) -> bool:
    kind = row.transaction_type
    if kind is None or kind.strip() == "":
        return True
    return kind.strip().lower() == EXPENSE


def counts_toward_totals(row: Transaction) -> bool:
    return is_expense(row) and (row.is_virtual or not row.excluded_from_totals)


def spending_total(rows: Iterable[Transaction]) -> Decimal:
    return sum((r.amount for r in rows if counts_toward_totals(r)), _ZERO)


def average_expense(rows: Iterable[Transaction]) -> Decimal:
    """Mean amount of the counted rows, to the cent; ``0.00`` when none count."""

    counted = [r.amount for r in rows if counts_toward_totals(r)]
    if not counted:
        return _ZERO
    return (sum(counted, _ZERO) / len(counted)).quantize(_ZERO, rounding=ROUND_HALF_UP)


def totals_by_category(rows: Iterable[Transaction]) -> list[tuple[str, Decimal]]:
    """``(main_category, total)`` pairs, largest total first, ties by name."""

    grouped: dict[str, Decimal] = defaultdict(lambda: _ZERO)
    for r in rows:
        if counts_toward_totals(r):
            grouped[r.main_category or UNCATEGORIZED] += r.amount
    return sorted(grouped.items(), key=lambda kv: (-kv[1], kv[0]))


def totals_by_month(rows: Iterable[Transaction]) -> list[tuple[YearMonth, Decimal]]:
    """``(month, total)`` pairs in calendar order; months without rows are omitted."""

    grouped: dict[YearMonth, Decimal] = defaultdict(lambda: _ZERO)
    for r in rows:
        if counts_toward_totals(r):
            grouped[to_year_month(r.transaction_date)] += r.amount
    return sorted(grouped.items())


__all__ = [
    "EXPENSE",
    "UNCATEGORIZED",
    "average_expense",
    "counts_toward_totals",
    "is_expense",
    "spending_total",
    "totals_by_category",
    "totals_by_month",
]
