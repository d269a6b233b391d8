from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from db.client import session_scope
from db.models.expenses import Expense
from typer.testing import CliRunner

from expense_amortization.cli import app
from tests.helpers.db import insert_expense, insert_parent

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # The CLI loads ./.env; run from an empty directory.
    monkeypatch.chdir(tmp_path)


def test_split_prints_the_schedule():
    result = runner.invoke(app, ["split", "1000", "3", "--start", "2026-01"])
    assert result.exit_code == 0, result.output
    assert "333.34" in result.output
    assert "2026-03" in result.output


def test_split_rejects_zero_months():
    result = runner.invoke(app, ["split", "1000", "0"])
    assert result.exit_code == 1


def test_offset():
    result = runner.invoke(app, ["offset", "2025-11", "2026-02-14"])
    assert result.exit_code == 0
    assert result.output.strip() == "3"


def test_offset_rejects_bad_months():
    assert runner.invoke(app, ["offset", "2025-13", "2026-02"]).exit_code == 1


def test_month_lists_rows_and_totals(sqlite_url: str):
    insert_expense(
        sqlite_url,
        user_id="u1",
        transaction_date=date(2026, 2, 3),
        amount="12.50",
        merchant="Bakery",
        main_category="Groceries",
    )
    insert_parent(
        sqlite_url,
        user_id="u1",
        amount="1000.00",
        months=3,
        start=date(2026, 1, 1),
        merchant="Insurer",
        main_category="Insurance",
    )

    result = runner.invoke(
        app, ["month", "--owner", "u1", "--month", "2026-02", "--database-url", sqlite_url]
    )

    assert result.exit_code == 0, result.output
    assert "Bakery" in result.output
    assert "2/3" in result.output
    assert "345.83" in result.output  # 333.33 + 12.50


def test_month_rejects_a_bad_month(sqlite_url: str):
    result = runner.invoke(
        app, ["month", "--owner", "u1", "--month", "2026-13", "--database-url", sqlite_url]
    )
    assert result.exit_code == 1


def test_range_reads_database_url_from_env(sqlite_url: str, monkeypatch: pytest.MonkeyPatch):
    insert_parent(sqlite_url, user_id="u1", amount="90.00", months=3, start=date(2026, 1, 1))
    monkeypatch.setenv("DATABASE_URL", sqlite_url)

    result = runner.invoke(
        app, ["range", "--owner", "u1", "--from", "2026-01-01", "--to", "2026-12-31"]
    )

    assert result.exit_code == 0, result.output
    assert "90.00" in result.output


def test_setup_adjust_cancel_round(sqlite_url: str):
    eid = insert_expense(
        sqlite_url, user_id="u1", transaction_date=date(2099, 1, 5), amount="1200.00"
    )
    base = ["--owner", "u1", "--expense-id", str(eid), "--database-url", sqlite_url]

    setup = runner.invoke(app, ["setup", *base, "--months", "12", "--start", "2099-01"])
    assert setup.exit_code == 0, setup.output
    assert "100.00" in setup.output

    schedule = runner.invoke(app, ["schedule", *base])
    assert schedule.exit_code == 0, schedule.output
    assert "Adjustable to 1..12 months" in schedule.output

    adjust = runner.invoke(app, ["adjust", *base, "--months", "6"])
    assert adjust.exit_code == 0, adjust.output
    with session_scope(database_url=sqlite_url) as s:
        assert s.get(Expense, eid).amortization_adjusted_months == 6

    too_long = runner.invoke(app, ["adjust", *base, "--months", "13"])
    assert too_long.exit_code == 1

    cancel = runner.invoke(app, ["cancel", *base])
    assert cancel.exit_code == 0, cancel.output
    with session_scope(database_url=sqlite_url) as s:
        assert s.get(Expense, eid).is_amortized is False


def test_unknown_expense_fails(sqlite_url: str):
    result = runner.invoke(
        app,
        ["cancel", "--owner", "u1", "--expense-id", "999", "--database-url", sqlite_url],
    )
    assert result.exit_code == 1


def test_log_level_applies_to_each_invocation(sqlite_url: str):
    insert_parent(sqlite_url, user_id="u1", amount="90.00", months=3, start=date(2026, 1, 1))
    args = ["month", "--owner", "u1", "--month", "2026-02", "--database-url", sqlite_url]

    quiet = runner.invoke(app, ["--log-level", "warning", *args])
    chatty = runner.invoke(app, ["--log-level", "debug", *args])

    assert quiet.exit_code == chatty.exit_code == 0
    assert "materialized 2026-02" not in quiet.output
    assert "materialized 2026-02" in chatty.output


def test_unknown_log_level_fails():
    result = runner.invoke(app, ["--log-level", "chatty", "offset", "2026-01", "2026-02"])
    assert result.exit_code == 1
