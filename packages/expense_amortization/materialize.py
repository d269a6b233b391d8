"""Per-month view of a user's expenses with amortized parents expanded.

A month's rows are its real transactions plus one virtual allocation for
every amortized parent whose window covers the month. Nothing is written:
the allocations are recomputed from the parents on every call.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from .allocation import split_amount
from .logging_setup import get_logger
from .models import MonthFilters, Transaction, TransactionQuery, VirtualAllocation
from .months import YearMonth, month_offset, to_year_month
from .pagination import RowStore, fetch_all

_logger = get_logger("expense_amortization.materialize")


def allocation_for_month(parent: Transaction, month: YearMonth) -> VirtualAllocation | None:
    """Return ``parent``'s virtual allocation for ``month``, or ``None``.

    ``None`` when the parent has no start month or ``month`` falls outside
    ``[start, start + effective_months)``. The amount is always
    ``split_amount(parent.amount, effective_months)[index]``; the recorded
    ``amortization_monthly_amount`` is only used when the split has no entry
    for the index.
    """

    start = parent.amortization_start_date
    if start is None:
        return None
    effective = parent.effective_months
    idx = month_offset(start, month)
    if not 0 <= idx < effective:
        return None

    amounts = split_amount(parent.amount, effective)
    if idx < len(amounts):
        amount = amounts[idx]
    else:
        amount = parent.amortization_monthly_amount or Decimal("0")
    return VirtualAllocation.from_parent(
        parent,
        month_index=idx,
        amount=amount,
        month_start=month.first_day,
        total=effective,
    )


def materialize_month(
    store: RowStore,
    owner_id: str,
    target_month: YearMonth | date | datetime | str,
    filters: MonthFilters | None = None,
    *,
    page_size: int | None = None,
) -> list[Transaction]:
    """Return the month's real transactions and virtual allocations.

    Real rows are those of ``owner_id`` dated inside the month whose
    ``is_amortized`` is false or NULL, narrowed by ``filters``. Parents are
    read without a date filter because a window can start in an earlier
    month. The result is sorted by ``transaction_date`` (stable: real rows
    keep store order and precede allocations dated the same day).

    An unparseable ``target_month`` yields ``[]``. Store errors propagate.
    """

    try:
        month = to_year_month(target_month)
    except ValueError:
        _logger.debug("materialize_month: invalid month %r", target_month)
        return []

    real = fetch_all(
        store,
        TransactionQuery.for_month(owner_id, month.first_day, month.last_day, filters),
        page_size=page_size,
    )
    parents = fetch_all(store, TransactionQuery.parents(owner_id), page_size=page_size)

    virtuals: list[Transaction] = []
    for parent in parents:
        allocation = allocation_for_month(parent, month)
        if allocation is not None:
            virtuals.append(allocation)

    _logger.debug(
        "materialized %s owner=%s real=%d virtual=%d", month, owner_id, len(real), len(virtuals)
    )
    return sorted([*real, *virtuals], key=lambda t: t.transaction_date)


__all__ = ["allocation_for_month", "materialize_month"]
