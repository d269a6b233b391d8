from __future__ import annotations

from datetime import date, datetime

import pytest

from expense_amortization.months import (
    YearMonth,
    iter_months,
    month_bounds,
    month_offset,
    parse_day,
    to_year_month,
)


def test_offset_of_a_month_with_itself_is_zero():
    assert month_offset("2026-01", "2026-01") == 0


def test_offset_forward_and_backward():
    assert month_offset("2026-01", "2026-03") == 2
    assert month_offset("2026-03", "2026-01") == -2


def test_offset_across_years():
    assert month_offset("2025-11", "2026-02") == 3
    assert month_offset(YearMonth(2026, 1), YearMonth(2024, 12)) == -13


def test_offset_ignores_day_of_month():
    assert month_offset("2026-01-31", "2026-02-01") == 1
    assert month_offset(date(2026, 1, 15), "2026-03") == 2
    assert month_offset(datetime(2026, 1, 1, 23, 59), date(2026, 1, 31)) == 0


@pytest.mark.parametrize("bad", ["2026-13", "2026-00", "26-01", "January", "2026-02-30", ""])
def test_invalid_months_raise(bad):
    with pytest.raises(ValueError):
        to_year_month(bad)


@pytest.mark.parametrize(
    "bad", [YearMonth(2026, 13), YearMonth(2026, 0), YearMonth(0, 5), YearMonth(10000, 1)]
)
def test_out_of_range_year_month_values_raise(bad):
    with pytest.raises(ValueError):
        to_year_month(bad)
    with pytest.raises(ValueError):
        month_offset(YearMonth(2026, 1), bad)


def test_to_year_month_rejects_other_types():
    with pytest.raises(ValueError):
        to_year_month(202601)  # type: ignore[arg-type]


def test_shift_wraps_years():
    assert YearMonth(2026, 11).shift(3) == YearMonth(2027, 2)
    assert YearMonth(2026, 1).shift(-1) == YearMonth(2025, 12)
    assert YearMonth(2026, 5).shift(0) == YearMonth(2026, 5)


def test_str_is_zero_padded():
    assert str(YearMonth(2026, 3)) == "2026-03"


def test_month_bounds_handle_leap_years():
    assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds("2026-02-10") == (date(2026, 2, 1), date(2026, 2, 28))
    assert month_bounds(YearMonth(2026, 12)) == (date(2026, 12, 1), date(2026, 12, 31))


def test_iter_months_is_inclusive_and_empty_when_reversed():
    assert list(iter_months(YearMonth(2025, 11), YearMonth(2026, 2))) == [
        YearMonth(2025, 11),
        YearMonth(2025, 12),
        YearMonth(2026, 1),
        YearMonth(2026, 2),
    ]
    assert list(iter_months(YearMonth(2026, 2), YearMonth(2026, 1))) == []


def test_parse_day_accepts_timestamps():
    assert parse_day("2026-03-31T23:00:00Z") == date(2026, 3, 31)
    assert parse_day(datetime(2026, 3, 31, 8)) == date(2026, 3, 31)
    with pytest.raises(ValueError):
        parse_day("not a date")
