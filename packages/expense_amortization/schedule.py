"""Projected allocation tables for previews and parent detail views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from .allocation import split_amount
from .models import Transaction
from .months import YearMonth, to_year_month


class AllocationState(StrEnum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


@dataclass(frozen=True, slots=True)
class ScheduledAllocation:
    month: YearMonth
    amount: Decimal
    index: int  # 1-based
    total: int
    state: AllocationState


def _state(month: YearMonth, current: YearMonth) -> AllocationState:
    if month < current:
        return AllocationState.PAST
    if month == current:
        return AllocationState.CURRENT
    return AllocationState.FUTURE


def preview_schedule(
    total: Any,
    months: int,
    start_month: YearMonth | date | datetime | str,
    *,
    today: date | None = None,
) -> list[ScheduledAllocation]:
    """Per-month amounts a plan would produce, before it is saved.

    Amounts are exactly what month reads will later return for the same
    total and duration. ``months < 1`` gives an empty schedule.
    """

    start = to_year_month(start_month)
    current = to_year_month(today or date.today())
    return [
        ScheduledAllocation(
            month=start.shift(i),
            amount=amount,
            index=i + 1,
            total=months,
            state=_state(start.shift(i), current),
        )
        for i, amount in enumerate(split_amount(total, months))
    ]


def allocation_schedule(
    parent: Transaction, *, today: date | None = None
) -> list[ScheduledAllocation]:
    """Schedule of an existing parent over its effective duration.

    Returns ``[]`` for rows that are not amortized or have no start month.
    """

    if not parent.is_amortized or parent.amortization_start_date is None:
        return []
    return preview_schedule(
        parent.amount,
        parent.effective_months,
        parent.amortization_start_date,
        today=today,
    )


__all__ = [
    "AllocationState",
    "ScheduledAllocation",
    "allocation_schedule",
    "preview_schedule",
]
