# ruff: noqa: I001
"""Amortization lifecycle actions on stored expenses.

These are the only writes in the package. They operate on a caller-owned
SQLAlchemy ``Session`` (use :func:`db.client.session_scope`) and flush but do
not commit.

- ``setup_amortization``: turn a plain expense into an amortized parent.
- ``adjust_amortization``: shorten the effective duration of a parent.
- ``cancel_amortization``: turn a parent back into a plain expense.

Virtual allocations are never touched here; month reads recompute them from
the parent's current state.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.expenses import Expense
from .allocation import split_amount
from .errors import AmortizationError, ExpenseNotFoundError
from .logging_setup import get_logger
from .models import AmortizationPlan, AmortizationStatus, Transaction
from .months import YearMonth, month_offset
from .store import row_to_transaction

_logger = get_logger("expense_amortization.lifecycle")


def _load_expense(session: Session, expense_id: int, owner_id: str) -> Expense:
    row = session.scalars(
        select(Expense).where(Expense.id == expense_id, Expense.user_id == owner_id)
    ).one_or_none()
    if row is None:
        raise ExpenseNotFoundError(expense_id, owner_id)
    return row


def _validation_message(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first['msg']}" if loc else str(first["msg"])


def completed_months(parent: Transaction, today: date | None = None) -> int:
    """Months of the original plan that have started by ``today``.

    The current month counts as completed. Clamped to ``[0, amortization_months]``.
    """

    start = parent.amortization_start_date
    original = parent.amortization_months or 0
    if start is None:
        return 0
    elapsed = month_offset(start, today or date.today()) + 1
    return max(0, min(original, elapsed))


def adjustment_bounds(parent: Transaction, today: date | None = None) -> tuple[int, int]:
    """Inclusive ``(min, max)`` for ``amortization_adjusted_months``.

    The duration can only shrink, and never below the months already
    completed (or 1).
    """

    return max(1, completed_months(parent, today)), parent.amortization_months or 0


def setup_amortization(
    session: Session,
    *,
    expense_id: int,
    owner_id: str,
    months: int,
    start_month: YearMonth | date | datetime | str,
) -> Transaction:
    """Convert an expense into an amortized parent spread over ``months``.

    Re-running setup on an existing parent replaces its plan and drops any
    adjustment. Raises ``AmortizationError`` for an invalid plan or a
    non-positive amount and ``ExpenseNotFoundError`` for an unknown id.
    """

    try:
        plan = AmortizationPlan(months=months, start_month=start_month)
    except ValidationError as e:
        raise AmortizationError(_validation_message(e)) from e

    row = _load_expense(session, expense_id, owner_id)
    amount = Decimal(str(row.amount))
    if amount <= 0:
        raise AmortizationError("only expenses with a positive amount can be amortized")

    row.is_amortized = True
    row.amortization_months = plan.months
    row.amortization_adjusted_months = None
    row.amortization_start_date = plan.start_month
    row.amortization_monthly_amount = split_amount(amount, plan.months)[0]
    row.excluded_from_totals = True
    row.amortization_status = AmortizationStatus.ACTIVE.value
    row.amortization_adjusted_at = None
    row.updated_at = func.now()
    session.flush()

    _logger.info(
        "amortization set up expense=%s months=%d start=%s",
        expense_id,
        plan.months,
        plan.start_month.isoformat(),
    )
    return row_to_transaction(row)


def adjust_amortization(
    session: Session,
    *,
    expense_id: int,
    owner_id: str,
    adjusted_months: int,
    today: date | None = None,
) -> Transaction:
    """Set a shorter effective duration on an amortized parent.

    ``adjusted_months`` must lie within :func:`adjustment_bounds`. The parent's
    ``amount`` is unchanged; later reads split it over the new duration.
    """

    row = _load_expense(session, expense_id, owner_id)
    if not row.is_amortized or row.amortization_start_date is None:
        raise AmortizationError(f"expense {expense_id} is not amortized")

    low, high = adjustment_bounds(row_to_transaction(row), today)
    if not low <= adjusted_months <= high:
        raise AmortizationError(f"adjusted months must be between {low} and {high}")

    row.amortization_adjusted_months = adjusted_months
    row.amortization_status = AmortizationStatus.ADJUSTED.value
    row.amortization_adjusted_at = datetime.now(UTC)
    row.updated_at = func.now()
    session.flush()

    _logger.info("amortization adjusted expense=%s months=%d", expense_id, adjusted_months)
    return row_to_transaction(row)


def cancel_amortization(session: Session, *, expense_id: int, owner_id: str) -> Transaction:
    """Clear every amortization field so the expense counts as a single payment."""

    row = _load_expense(session, expense_id, owner_id)
    cleared: dict[str, Any] = {
        "is_amortized": False,
        "excluded_from_totals": False,
        "amortization_months": None,
        "amortization_adjusted_months": None,
        "amortization_start_date": None,
        "amortization_monthly_amount": None,
        "amortization_status": None,
        "amortization_adjusted_at": None,
    }
    for name, value in cleared.items():
        setattr(row, name, value)
    row.updated_at = func.now()
    session.flush()

    _logger.info("amortization cancelled expense=%s", expense_id)
    return row_to_transaction(row)


def get_expense(session: Session, *, expense_id: int, owner_id: str) -> Transaction:
    """Read one stored expense (raises ``ExpenseNotFoundError`` when missing)."""

    return row_to_transaction(_load_expense(session, expense_id, owner_id))


__all__ = [
    "adjust_amortization",
    "adjustment_bounds",
    "cancel_amortization",
    "completed_months",
    "get_expense",
    "setup_amortization",
]
