"""Date-range view built from whole-month materializations.

Every month touched by the range is materialized independently (in
parallel), the results are concatenated in month order and then clipped to
the exact day bounds.
"""

from __future__ import annotations

import os
from datetime import date, datetime

from .logging_setup import get_logger
from .materialize import materialize_month
from .models import MonthFilters, Transaction
from .months import YearMonth, iter_months, parse_day, to_year_month
from .pagination import RowStore
from .pmap import p_map

_logger = get_logger("expense_amortization.aggregate")


def _resolve_max_workers(n_months: int) -> int:
    """Fan-out width for ``n_months`` month reads.

    Honors ``EA_MONTH_MAX_WORKERS`` when set to a positive integer; always
    capped to ``n_months`` and to 32 so long ranges don't exhaust the store's
    connection pool. Defaults to ``min(8, n_months)``.
    """

    env_workers = os.getenv("EA_MONTH_MAX_WORKERS")
    try:
        max_workers = int(env_workers) if env_workers else None
    except ValueError:
        max_workers = None

    if max_workers is not None and max_workers > 0:
        return max(1, min(max_workers, n_months, 32))
    return max(1, min(8, n_months))


def months_in_range(date_from: date, date_to: date) -> list[YearMonth]:
    """Every calendar month from the month of ``date_from`` to that of ``date_to``."""

    return list(iter_months(to_year_month(date_from), to_year_month(date_to)))


def aggregate_range(
    store: RowStore,
    owner_id: str,
    date_from: date | datetime | str | None,
    date_to: date | datetime | str | None,
    filters: MonthFilters | None = None,
    *,
    page_size: int | None = None,
    max_workers: int | None = None,
) -> list[Transaction]:
    """Return rows dated within ``[date_from, date_to]`` with amortization expanded.

    Missing or unparseable bounds yield ``[]``, as does ``date_from`` after
    ``date_to``. Months are materialized whole and concurrently; the first
    failing month fails the whole call (no partial results). Output keeps
    per-month order and is not globally re-sorted.
    """

    if date_from is None or date_to is None:
        return []
    try:
        start = parse_day(date_from)
        end = parse_day(date_to)
    except ValueError:
        _logger.debug("aggregate_range: invalid bounds %r..%r", date_from, date_to)
        return []

    months = months_in_range(start, end)
    if not months:
        return []

    def _one(month: YearMonth) -> list[Transaction]:
        return materialize_month(store, owner_id, month, filters, page_size=page_size)

    workers = max_workers if max_workers is not None else _resolve_max_workers(len(months))
    by_month = p_map(months, _one, concurrency=workers, thread_name_prefix="ea-month")

    merged = [row for rows in by_month for row in rows]
    clipped = [row for row in merged if start <= row.transaction_date <= end]
    _logger.info(
        "aggregated %s..%s owner=%s months=%d rows=%d",
        start.isoformat(),
        end.isoformat(),
        owner_id,
        len(months),
        len(clipped),
    )
    return clipped


__all__ = ["aggregate_range", "months_in_range"]
