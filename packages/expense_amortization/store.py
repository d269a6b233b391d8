# ruff: noqa: I001
"""SQL-backed row store for the ``expenses`` table.

``SqlRowStore`` implements the :class:`~expense_amortization.pagination.RowStore`
read interface with SQLAlchemy. Each page is read in its own short-lived
session, so one store instance can serve concurrent month reads from several
threads. The store never writes.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session

from db.client import get_session_factory
from db.models.expenses import Expense
from .models import AmortizationStatus, Transaction, TransactionQuery


def _to_decimal(raw: Any) -> Decimal | None:
    if raw is None:
        return None
    return raw if isinstance(raw, Decimal) else Decimal(str(raw))


def build_select(query: TransactionQuery) -> Select[tuple[Expense]]:
    """Translate a query descriptor into an ordered ``SELECT`` over ``expenses``.

    Ordering is ``(transaction_date, id)``: the date alone is not unique, and
    offset windows over a non-unique key can skip or repeat rows.
    """

    stmt = select(Expense).where(Expense.user_id == query.owner_id)
    if query.date_from is not None:
        stmt = stmt.where(Expense.transaction_date >= query.date_from)
    if query.date_to is not None:
        stmt = stmt.where(Expense.transaction_date <= query.date_to)
    if query.amortized is True:
        stmt = stmt.where(Expense.is_amortized.is_(True))
    elif query.amortized is False:
        stmt = stmt.where(or_(Expense.is_amortized.is_(None), Expense.is_amortized.is_(False)))
    if not query.include_exceptional:
        stmt = stmt.where(Expense.is_exceptional.is_(False))
    min_amount = _to_decimal(query.min_amount)
    if min_amount is not None:
        stmt = stmt.where(Expense.amount >= min_amount)
    max_amount = _to_decimal(query.max_amount)
    if max_amount is not None:
        stmt = stmt.where(Expense.amount <= max_amount)
    if query.merchant:
        stmt = stmt.where(Expense.merchant.icontains(query.merchant, autoescape=True))
    return stmt.order_by(Expense.transaction_date.asc(), Expense.id.asc())


def row_to_transaction(row: Expense) -> Transaction:
    status = row.amortization_status
    return Transaction(
        id=row.id,
        user_id=row.user_id,
        transaction_date=row.transaction_date,
        amount=_to_decimal(row.amount) or Decimal("0"),
        merchant=row.merchant,
        main_category=row.main_category,
        sub_category=row.sub_category,
        transaction_type=row.transaction_type,
        is_exceptional=bool(row.is_exceptional),
        excluded_from_totals=bool(row.excluded_from_totals),
        is_amortized=row.is_amortized,
        amortization_months=row.amortization_months,
        amortization_adjusted_months=row.amortization_adjusted_months,
        amortization_start_date=row.amortization_start_date,
        amortization_monthly_amount=_to_decimal(row.amortization_monthly_amount),
        amortization_status=AmortizationStatus(status) if status else None,
        amortization_adjusted_at=row.amortization_adjusted_at,
    )


class SqlRowStore:
    """Read-only ``RowStore`` over SQLAlchemy sessions.

    Parameters
    ----------
    session_factory:
        Zero-argument callable returning a new ``Session`` (typically a
        ``sessionmaker`` from :func:`db.client.get_session_factory`).
    max_rows:
        Optional per-request cap, mirroring hosted row stores that silently
        truncate large responses. ``None`` means no cap.
    """

    def __init__(
        self, session_factory: Callable[[], Session], *, max_rows: int | None = None
    ) -> None:
        if max_rows is not None and max_rows < 1:
            raise ValueError("max_rows must be a positive integer when set")
        self._session_factory = session_factory
        self.max_rows = max_rows

    @classmethod
    def from_url(
        cls, database_url: str | None = None, *, max_rows: int | None = None
    ) -> SqlRowStore:
        """Build a store on the shared engine for ``database_url`` (or ``DATABASE_URL``)."""

        return cls(get_session_factory(database_url=database_url), max_rows=max_rows)

    def fetch_page(self, query: TransactionQuery, offset: int, limit: int) -> list[Transaction]:
        if self.max_rows is not None:
            limit = min(limit, self.max_rows)
        stmt = build_select(query).offset(offset).limit(limit)
        with self._session_factory() as session:
            return [row_to_transaction(row) for row in session.scalars(stmt)]


__all__ = ["SqlRowStore", "build_select", "row_to_transaction"]
