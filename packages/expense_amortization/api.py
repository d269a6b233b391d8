"""Public API for ``expense_amortization``.

The pure helpers (:func:`split_amount`, :func:`month_offset`) and the
store-agnostic readers (:func:`materialize_month`, :func:`aggregate_range`)
are re-exported from their modules. The ``get_*`` functions below bind those
readers to the SQL store configured by ``DATABASE_URL`` (or an explicit
``database_url``) for callers that don't manage a store themselves.
"""

from __future__ import annotations

from datetime import date, datetime

from .aggregate import aggregate_range
from .allocation import split_amount
from .materialize import materialize_month
from .models import MonthFilters, Transaction
from .months import YearMonth, month_offset
from .store import SqlRowStore


def get_month_transactions(
    owner_id: str,
    month: YearMonth | date | datetime | str,
    filters: MonthFilters | None = None,
    *,
    database_url: str | None = None,
    max_rows: int | None = None,
    page_size: int | None = None,
) -> list[Transaction]:
    """Real transactions plus virtual allocations for one month, sorted by date.

    ``max_rows`` declares the store's per-request row cap (if any) so page
    sizes never exceed it.
    """

    store = SqlRowStore.from_url(database_url, max_rows=max_rows)
    return materialize_month(store, owner_id, month, filters, page_size=page_size)


def get_range_transactions(
    owner_id: str,
    date_from: date | datetime | str | None,
    date_to: date | datetime | str | None,
    filters: MonthFilters | None = None,
    *,
    database_url: str | None = None,
    max_rows: int | None = None,
    page_size: int | None = None,
) -> list[Transaction]:
    """Rows dated within ``[date_from, date_to]`` with amortization expanded.

    See :func:`~expense_amortization.aggregate.aggregate_range` for ordering
    and failure semantics.
    """

    if date_from is None or date_to is None:
        return []
    store = SqlRowStore.from_url(database_url, max_rows=max_rows)
    return aggregate_range(store, owner_id, date_from, date_to, filters, page_size=page_size)


__all__ = [
    "aggregate_range",
    "get_month_transactions",
    "get_range_transactions",
    "materialize_month",
    "month_offset",
    "split_amount",
]
