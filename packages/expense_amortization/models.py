"""Data models and type aliases for ``expense_amortization``.

Rows read from the store are exposed as immutable :class:`Transaction`
values. Per-month shares of an amortized parent are
:class:`VirtualAllocation` values: they carry every parent field, are built
fresh on each read and are never written back.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .months import to_year_month

# ---------------------------------------------------------------------------
# Stored rows
# ---------------------------------------------------------------------------


class AmortizationStatus(StrEnum):
    """Audit marker on a parent record; does not affect materialization."""

    ACTIVE = "active"
    ADJUSTED = "adjusted"


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single expense row as read from the store.

    Attributes
    ----------
    id:
        Store identifier. Integer for stored rows; virtual allocations use a
        synthetic string id (see :class:`VirtualAllocation`).
    is_amortized:
        True only on the parent record holding the original lump sum. ``None``
        on rows that predate amortization; treated like ``False``.
    amortization_months:
        Planned duration fixed at setup (1..60).
    amortization_adjusted_months:
        Optional shorter duration set later. Overrides
        ``amortization_months`` for materialization but never changes
        ``amount``.
    amortization_monthly_amount:
        First-month amount recorded at setup for display. Materialization
        always recomputes amounts from ``amount``.
    transaction_type:
        ``"expense"`` or ``"income"``. ``None`` (legacy rows) reads as an expense.
    excluded_from_totals:
        True on parents so their full amount is left out of simple sums.
    """

    id: int | str
    user_id: str
    transaction_date: date
    amount: Decimal
    merchant: str | None = None
    main_category: str | None = None
    sub_category: str | None = None
    transaction_type: str | None = None
    is_exceptional: bool = False
    excluded_from_totals: bool = False
    is_amortized: bool | None = None
    amortization_months: int | None = None
    amortization_adjusted_months: int | None = None
    amortization_start_date: date | None = None
    amortization_monthly_amount: Decimal | None = None
    amortization_status: AmortizationStatus | None = None
    amortization_adjusted_at: datetime | None = None

    @property
    def is_virtual(self) -> bool:
        return False

    @property
    def effective_months(self) -> int:
        """Adjusted duration when set, else the original one (0 when neither)."""

        if self.amortization_adjusted_months is not None:
            return self.amortization_adjusted_months
        return self.amortization_months or 0


@dataclass(frozen=True, slots=True, kw_only=True)
class VirtualAllocation(Transaction):
    """One month's share of an amortized parent.

    ``id`` is ``"virtual_<parent id>_<zero-based month index>"``; ``amount`` is
    the split amount for that index and ``transaction_date`` the first day of
    the month. ``index`` is 1-based and ``total`` is the effective month count
    the split was computed with.
    """

    parent_id: int | str
    index: int
    total: int

    @property
    def is_virtual(self) -> bool:
        return True

    @classmethod
    def from_parent(
        cls,
        parent: Transaction,
        *,
        month_index: int,
        amount: Decimal,
        month_start: date,
        total: int,
    ) -> VirtualAllocation:
        values: dict[str, Any] = {f.name: getattr(parent, f.name) for f in fields(Transaction)}
        values.update(
            id=virtual_id(parent.id, month_index),
            amount=amount,
            transaction_date=month_start,
        )
        return cls(**values, parent_id=parent.id, index=month_index + 1, total=total)


def virtual_id(parent_id: int | str, month_index: int) -> str:
    return f"virtual_{parent_id}_{month_index}"


# Rows returned by month/range reads: real transactions and virtual allocations.
type Rows = list[Transaction]


# ---------------------------------------------------------------------------
# Read filters and the store query descriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MonthFilters:
    """Optional filters applied to real (non-amortized) rows of a month read.

    Virtual allocations are not filtered; a parent contributes its share to
    every month inside its window.
    """

    include_exceptional: bool = True
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    merchant: str | None = None


@dataclass(frozen=True, slots=True)
class TransactionQuery:
    """Filters for one logical read against the ``expenses`` table.

    ``amortized`` selects parents (``True``), plain rows (``False``, which also
    matches NULL) or both (``None``). Stores must order results by
    ``(transaction_date, id)`` so that offset windows never skip or repeat rows.
    """

    owner_id: str
    date_from: date | None = None
    date_to: date | None = None
    amortized: bool | None = None
    include_exceptional: bool = True
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    merchant: str | None = None

    @classmethod
    def for_month(
        cls, owner_id: str, first_day: date, last_day: date, filters: MonthFilters | None = None
    ) -> TransactionQuery:
        f = filters or MonthFilters()
        return cls(
            owner_id=owner_id,
            date_from=first_day,
            date_to=last_day,
            amortized=False,
            include_exceptional=f.include_exceptional,
            min_amount=f.min_amount,
            max_amount=f.max_amount,
            merchant=f.merchant or None,
        )

    @classmethod
    def parents(cls, owner_id: str) -> TransactionQuery:
        return cls(owner_id=owner_id, amortized=True)


# ---------------------------------------------------------------------------
# Lifecycle input
# ---------------------------------------------------------------------------


class AmortizationPlan(BaseModel):
    """Validated input for setting up amortization on an expense."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    months: int = Field(ge=1, le=60)
    start_month: date

    @field_validator("start_month", mode="before")
    @classmethod
    def _first_of_month(cls, v: Any) -> date:
        return to_year_month(v).first_day


__all__ = [
    "AmortizationPlan",
    "AmortizationStatus",
    "MonthFilters",
    "Rows",
    "Transaction",
    "TransactionQuery",
    "VirtualAllocation",
    "virtual_id",
]
