"""Exhaustive paginated reads against a row-capped store.

The backing store answers each request with at most a fixed number of rows
and says nothing when it truncates. ``fetch_all`` keeps requesting
consecutive offset windows until a page comes back short, so callers always
see every matching row.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Protocol

from .logging_setup import get_logger
from .models import Transaction, TransactionQuery

DEFAULT_PAGE_SIZE: int = 1000

_logger = get_logger("expense_amortization.pagination")


class RowStore(Protocol):
    """Read interface of the store collaborator.

    ``fetch_page`` returns rows ``[offset, offset + limit)`` of the result of
    ``query``, ordered by ``(transaction_date, id)``. ``max_rows`` is the
    per-request cap the store enforces, or ``None`` when it has none.
    """

    max_rows: int | None

    def fetch_page(
        self, query: TransactionQuery, offset: int, limit: int
    ) -> Sequence[Transaction]: ...


def resolve_page_size(page_size: int | None = None) -> int:
    """Return ``page_size`` or the ``EA_PAGE_SIZE`` override, else the default."""

    if page_size is not None:
        return page_size
    env_val = os.getenv("EA_PAGE_SIZE")
    try:
        parsed = int(env_val) if env_val else None
    except ValueError:
        parsed = None
    if parsed is not None and parsed > 0:
        return parsed
    return DEFAULT_PAGE_SIZE


def fetch_all(
    store: RowStore,
    query: TransactionQuery,
    *,
    page_size: int | None = None,
) -> list[Transaction]:
    """Return every row matching ``query``.

    Pages are requested strictly in increasing offset order. A page with fewer
    than ``page_size`` rows (including an empty one) ends the loop. When the
    store advertises a ``max_rows`` cap below ``page_size`` the page size is
    lowered to the cap, since a capped page would otherwise look like the
    last one.

    Any exception from the store aborts the whole read and propagates
    unchanged; partial results are never returned.
    """

    size = resolve_page_size(page_size)
    if size < 1:
        raise ValueError("page_size must be a positive integer")
    cap = getattr(store, "max_rows", None)
    if cap is not None and 0 < cap < size:
        size = cap

    rows: list[Transaction] = []
    offset = 0
    pages = 0
    while True:
        page = store.fetch_page(query, offset, size)
        pages += 1
        rows.extend(page)
        if len(page) < size:
            break
        offset += size

    _logger.debug(
        "fetch_all owner=%s amortized=%s pages=%d rows=%d",
        query.owner_id,
        query.amortized,
        pages,
        len(rows),
    )
    return rows


__all__ = ["DEFAULT_PAGE_SIZE", "RowStore", "fetch_all", "resolve_page_size"]
