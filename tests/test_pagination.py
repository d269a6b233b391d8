from __future__ import annotations

from datetime import date, timedelta

import pytest

from expense_amortization.models import TransactionQuery
from expense_amortization.pagination import DEFAULT_PAGE_SIZE, fetch_all, resolve_page_size
from tests.helpers.stores import InMemoryRowStore, StoreUnavailable, make_tx

PAGE = 10


def _rows(n: int, user_id: str = "u1"):
    base = date(2026, 1, 1)
    # Several rows per day so ordering has to fall back to id.
    return [
        make_tx(i + 1, base + timedelta(days=i // 4), "10.00", user_id=user_id) for i in range(n)
    ]


@pytest.mark.parametrize("n", [0, PAGE - 1, PAGE, PAGE + 1, 3 * PAGE + 7])
def test_fetch_all_returns_every_row_once(n):
    store = InMemoryRowStore(_rows(n))
    got = fetch_all(store, TransactionQuery(owner_id="u1"), page_size=PAGE)

    ids = [t.id for t in got]
    assert ids == list(range(1, n + 1))
    assert len(set(ids)) == n


@pytest.mark.parametrize(
    ("n", "expected_offsets"),
    [
        (0, [0]),
        (PAGE - 1, [0]),
        (PAGE, [0, PAGE]),
        (PAGE + 1, [0, PAGE]),
        (3 * PAGE + 7, [0, PAGE, 2 * PAGE, 3 * PAGE]),
    ],
)
def test_pages_are_requested_in_increasing_offset_order(n, expected_offsets):
    store = InMemoryRowStore(_rows(n))
    fetch_all(store, TransactionQuery(owner_id="u1"), page_size=PAGE)
    assert [offset for _, offset, _ in store.calls] == expected_offsets
    assert {limit for _, _, limit in store.calls} == {PAGE}


def test_store_cap_below_page_size_does_not_truncate():
    # The store silently returns at most 7 rows per request.
    store = InMemoryRowStore(_rows(40), max_rows=7)
    got = fetch_all(store, TransactionQuery(owner_id="u1"), page_size=PAGE)
    assert [t.id for t in got] == list(range(1, 41))
    assert {limit for _, _, limit in store.calls} == {7}


def test_only_matching_rows_are_returned():
    store = InMemoryRowStore(_rows(15) + _rows(5, user_id="someone-else"))
    got = fetch_all(store, TransactionQuery(owner_id="u1"), page_size=PAGE)
    assert len(got) == 15
    assert {t.user_id for t in got} == {"u1"}


def test_a_failing_page_aborts_the_whole_fetch():
    store = InMemoryRowStore(_rows(35), fail_when=lambda _q, offset: offset == 2 * PAGE)
    with pytest.raises(StoreUnavailable):
        fetch_all(store, TransactionQuery(owner_id="u1"), page_size=PAGE)
    assert [offset for _, offset, _ in store.calls] == [0, PAGE, 2 * PAGE]


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        fetch_all(InMemoryRowStore(), TransactionQuery(owner_id="u1"), page_size=0)


def test_page_size_env_override(monkeypatch: pytest.MonkeyPatch):
    assert resolve_page_size() == DEFAULT_PAGE_SIZE == 1000
    monkeypatch.setenv("EA_PAGE_SIZE", "250")
    assert resolve_page_size() == 250
    assert resolve_page_size(50) == 50
    monkeypatch.setenv("EA_PAGE_SIZE", "lots")
    assert resolve_page_size() == DEFAULT_PAGE_SIZE
    monkeypatch.setenv("EA_PAGE_SIZE", "-3")
    assert resolve_page_size() == DEFAULT_PAGE_SIZE
