"""Calendar-month arithmetic.

``YearMonth`` is the month value used throughout the package. ``month_offset``
is the zero-based distance between two months, which is how a target month
is mapped to an index in a parent's allocation window.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterator
from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import NamedTuple

_YM_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


class YearMonth(NamedTuple):
    """A calendar month (day-of-month is never part of the value)."""

    year: int
    month: int

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def shift(self, months: int) -> YearMonth:
        """Return the month ``months`` after this one (negative goes back)."""

        zero_based = self.year * 12 + (self.month - 1) + months
        return YearMonth(zero_based // 12, zero_based % 12 + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def _checked(year: int, month: int, raw: object) -> YearMonth:
    if not (1 <= month <= 12 and MINYEAR <= year <= MAXYEAR):
        raise ValueError(f"invalid month in {raw!r}")
    return YearMonth(year, month)


def to_year_month(value: YearMonth | date | datetime | str) -> YearMonth:
    """Coerce a month-ish value into a :class:`YearMonth`.

    Accepts ``YearMonth``, ``date``/``datetime`` and ISO strings in either
    ``YYYY-MM`` or ``YYYY-MM-DD[...]`` form. Raises ``ValueError`` for anything
    that does not name a real calendar month.
    """

    if isinstance(value, YearMonth):
        return _checked(value.year, value.month, value)
    if isinstance(value, date):  # datetime is a date subclass
        return YearMonth(value.year, value.month)
    if isinstance(value, str):
        s = value.strip()
        m = _YM_RE.match(s)
        if m:
            return _checked(int(m.group(1)), int(m.group(2)), value)
        d = parse_day(s)
        return YearMonth(d.year, d.month)
    raise ValueError(f"cannot interpret {value!r} as a calendar month")


def parse_day(value: date | datetime | str) -> date:
    """Coerce a day-ish value into a ``date``; time-of-day is dropped.

    Strings are read from their first ten characters (``YYYY-MM-DD``), so
    full ISO timestamps are accepted. Raises ``ValueError`` when malformed.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"cannot interpret {value!r} as a calendar date")


def month_offset(
    start: YearMonth | date | datetime | str, target: YearMonth | date | datetime | str
) -> int:
    """Zero-based month index of ``target`` relative to ``start``.

    ``(ty - sy) * 12 + (tm - sm)``; day components are ignored. The result may
    be negative (target before start) or past the end of any window; callers
    range-check it.

    >>> month_offset("2026-01", "2026-03")
    2
    >>> month_offset("2026-01-15", "2025-12")
    -1
    """

    s = to_year_month(start)
    t = to_year_month(target)
    return (t.year - s.year) * 12 + (t.month - s.month)


def month_bounds(month: YearMonth | date | datetime | str) -> tuple[date, date]:
    """First and last calendar day of ``month``."""

    ym = to_year_month(month)
    return ym.first_day, ym.last_day


def iter_months(first: YearMonth, last: YearMonth) -> Iterator[YearMonth]:
    """Yield every month from ``first`` through ``last`` inclusive.

    Yields nothing when ``last`` precedes ``first``.
    """

    current = first
    while current <= last:
        yield current
        current = current.shift(1)


__all__ = [
    "YearMonth",
    "iter_months",
    "month_bounds",
    "month_offset",
    "parse_day",
    "to_year_month",
]
