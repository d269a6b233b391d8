from __future__ import annotations

from datetime import date
from decimal import Decimal

from expense_amortization.months import YearMonth
from expense_amortization.schedule import AllocationState, allocation_schedule, preview_schedule
from tests.helpers.stores import make_parent, make_tx


def test_preview_marks_past_current_and_future_months():
    rows = preview_schedule("100.00", 3, "2026-11", today=date(2026, 12, 5))

    assert [str(r.month) for r in rows] == ["2026-11", "2026-12", "2027-01"]
    assert [r.amount for r in rows] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert [r.state for r in rows] == [
        AllocationState.PAST,
        AllocationState.CURRENT,
        AllocationState.FUTURE,
    ]
    assert [(r.index, r.total) for r in rows] == [(1, 3), (2, 3), (3, 3)]


def test_preview_with_no_months_is_empty():
    assert preview_schedule("100.00", 0, "2026-01") == []


def test_parent_schedule_follows_the_adjusted_duration():
    parent = make_parent(1, "1200.00", 12, date(2026, 1, 1), adjusted=5)
    rows = allocation_schedule(parent, today=date(2026, 1, 20))

    assert len(rows) == 5
    assert rows[-1].month == YearMonth(2026, 5)
    assert sum(r.amount for r in rows) == Decimal("1200.00")
    assert rows[0].state is AllocationState.CURRENT


def test_plain_expense_has_no_schedule():
    assert allocation_schedule(make_tx(1, date(2026, 1, 2), "5.00")) == []
