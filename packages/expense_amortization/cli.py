# ruff: noqa: I001
"""CLI for the ``expense_amortization`` package.

Typer-based console interface over the public API: allocation previews,
month and range reads with amortization expanded, and the set up / adjust /
cancel lifecycle actions. A local ``.env`` is loaded (without overriding the
environment) before any command runs, so ``DATABASE_URL`` can live there.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .logging_setup import configure_logging
from .models import MonthFilters, Transaction, VirtualAllocation
from .schedule import ScheduledAllocation

app = typer.Typer(
    name="expense-amortization",
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Spread lump-sum expenses across months and query monthly views with the "
        "virtual allocations expanded. Reads DATABASE_URL from the environment or .env."
    ),
)
console = Console()
err_console = Console(stderr=True)

DatabaseUrl = Annotated[
    str | None, typer.Option(help="Override DATABASE_URL (falls back to env var).")
]
Owner = Annotated[str, typer.Option("--owner", help="Owner (user) id whose expenses to read.")]
ExpenseId = Annotated[int, typer.Option("--expense-id", help="Id of the stored expense.")]
IncludeExceptional = Annotated[
    bool,
    typer.Option(
        "--include-exceptional/--exclude-exceptional",
        help="Keep or drop transactions flagged as exceptional.",
    ),
]
MinAmount = Annotated[float | None, typer.Option(help="Only real rows with amount >= this.")]
MaxAmount = Annotated[float | None, typer.Option(help="Only real rows with amount <= this.")]
Merchant = Annotated[
    str | None, typer.Option(help="Case-insensitive merchant substring (real rows only).")
]


# ---- Small module-level helpers ----------------------------------------------


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}")
    return typer.Exit(1)


def _filters(
    include_exceptional: bool,
    min_amount: float | None,
    max_amount: float | None,
    merchant: str | None,
) -> MonthFilters:
    return MonthFilters(
        include_exceptional=include_exceptional,
        min_amount=Decimal(str(min_amount)) if min_amount is not None else None,
        max_amount=Decimal(str(max_amount)) if max_amount is not None else None,
        merchant=merchant or None,
    )


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _schedule_table(title: str, rows: list[ScheduledAllocation]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Month")
    table.add_column("Amount", justify="right")
    table.add_column("State")
    for r in rows:
        table.add_row(f"{r.index}/{r.total}", str(r.month), _money(r.amount), r.state.value)
    return table


def _rows_table(title: str, rows: list[Transaction]) -> Table:
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Merchant")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Allocation")
    for r in rows:
        note = f"{r.index}/{r.total}" if isinstance(r, VirtualAllocation) else ""
        table.add_row(
            r.transaction_date.isoformat(),
            r.merchant or "",
            r.main_category or "",
            _money(r.amount),
            note,
        )
    return table


def _print_totals(rows: list[Transaction]) -> None:
    from .reports import average_expense, spending_total, totals_by_category

    for category, total in totals_by_category(rows):
        console.print(f"{category}: {_money(total)}")
    console.print(f"[bold]Total:[/bold] {_money(spending_total(rows))}")
    console.print(f"Average expense: {_money(average_expense(rows))}")


# ---- Commands -----------------------------------------------------------------


@app.command("split")
def split_cmd(
    total: Annotated[float, typer.Argument(help="Lump-sum amount to spread.")],
    months: Annotated[int, typer.Argument(help="Number of months (1-60).")],
    start: Annotated[
        str | None, typer.Option(help="First month (YYYY-MM); defaults to the current month.")
    ] = None,
) -> None:
    """Preview how a total is split across months (first month absorbs rounding)."""

    from .schedule import preview_schedule

    if months < 1:
        raise _fail("months must be at least 1")
    try:
        rows = preview_schedule(Decimal(str(total)), months, start or date.today())
    except ValueError as e:
        raise _fail(str(e)) from e
    console.print(_schedule_table(f"{_money(Decimal(str(total)))} over {months} months", rows))


@app.command("offset")
def offset_cmd(
    start: Annotated[str, typer.Argument(help="Start month (YYYY-MM or YYYY-MM-DD).")],
    target: Annotated[str, typer.Argument(help="Target month (YYYY-MM or YYYY-MM-DD).")],
) -> None:
    """Print the zero-based month index of TARGET relative to START."""

    from .months import month_offset

    try:
        console.print(str(month_offset(start, target)))
    except ValueError as e:
        raise _fail(str(e)) from e


@app.command("month")
def month_cmd(
    owner: Owner,
    month: Annotated[str, typer.Option("--month", help="Month to read (YYYY-MM).")],
    include_exceptional: IncludeExceptional = True,
    min_amount: MinAmount = None,
    max_amount: MaxAmount = None,
    merchant: Merchant = None,
    database_url: DatabaseUrl = None,
) -> None:
    """List a month's transactions with virtual allocations expanded."""

    from .api import get_month_transactions
    from .months import to_year_month

    try:
        to_year_month(month)
    except ValueError as e:
        raise _fail(str(e)) from e
    filters = _filters(include_exceptional, min_amount, max_amount, merchant)
    try:
        rows = get_month_transactions(owner, month, filters, database_url=database_url)
    except Exception as e:
        raise _fail(f"month read failed: {e}") from e
    console.print(_rows_table(f"Expenses for {month}", rows))
    _print_totals(rows)


@app.command("range")
def range_cmd(
    owner: Owner,
    date_from: Annotated[str, typer.Option("--from", help="First day (YYYY-MM-DD).")],
    date_to: Annotated[str, typer.Option("--to", help="Last day (YYYY-MM-DD).")],
    include_exceptional: IncludeExceptional = True,
    min_amount: MinAmount = None,
    max_amount: MaxAmount = None,
    merchant: Merchant = None,
    database_url: DatabaseUrl = None,
) -> None:
    """List transactions between two days (inclusive) with allocations expanded."""

    from .api import get_range_transactions
    from .reports import totals_by_month

    filters = _filters(include_exceptional, min_amount, max_amount, merchant)
    try:
        rows = get_range_transactions(
            owner, date_from, date_to, filters, database_url=database_url
        )
    except Exception as e:
        raise _fail(f"range read failed: {e}") from e
    rows = sorted(rows, key=lambda r: r.transaction_date)
    console.print(_rows_table(f"Expenses {date_from} to {date_to}", rows))
    for month, total in totals_by_month(rows):
        console.print(f"{month}: {_money(total)}")
    _print_totals(rows)


@app.command("schedule")
def schedule_cmd(
    owner: Owner,
    expense_id: ExpenseId,
    database_url: DatabaseUrl = None,
) -> None:
    """Show the allocation schedule of an amortized expense."""

    from db.client import session_scope
    from .lifecycle import adjustment_bounds, get_expense
    from .schedule import allocation_schedule

    try:
        with session_scope(database_url=database_url) as session:
            parent = get_expense(session, expense_id=expense_id, owner_id=owner)
    except Exception as e:
        raise _fail(str(e)) from e
    rows = allocation_schedule(parent)
    if not rows:
        raise _fail(f"expense {expense_id} is not amortized")
    status = parent.amortization_status.value if parent.amortization_status else "active"
    console.print(_schedule_table(f"Expense {expense_id} ({status})", rows))
    low, high = adjustment_bounds(parent)
    console.print(f"Adjustable to {low}..{high} months")


@app.command("setup")
def setup_cmd(
    owner: Owner,
    expense_id: ExpenseId,
    months: Annotated[int, typer.Option(help="Number of months (1-60).")],
    start: Annotated[str, typer.Option(help="First month of the allocation (YYYY-MM).")],
    database_url: DatabaseUrl = None,
) -> None:
    """Spread a stored expense across MONTHS months starting at START."""

    from db.client import session_scope
    from .lifecycle import setup_amortization

    try:
        with session_scope(database_url=database_url) as session:
            parent = setup_amortization(
                session, expense_id=expense_id, owner_id=owner, months=months, start_month=start
            )
    except Exception as e:
        raise _fail(str(e)) from e
    console.print(
        f"Expense {expense_id} amortized over {parent.amortization_months} months "
        f"({_money(parent.amortization_monthly_amount or Decimal('0'))} first month)"
    )


@app.command("adjust")
def adjust_cmd(
    owner: Owner,
    expense_id: ExpenseId,
    months: Annotated[int, typer.Option(help="New effective number of months.")],
    database_url: DatabaseUrl = None,
) -> None:
    """Shorten the effective duration of an amortized expense."""

    from db.client import session_scope
    from .lifecycle import adjust_amortization

    try:
        with session_scope(database_url=database_url) as session:
            adjust_amortization(
                session, expense_id=expense_id, owner_id=owner, adjusted_months=months
            )
    except Exception as e:
        raise _fail(str(e)) from e
    console.print(f"Expense {expense_id} adjusted to {months} months")


@app.command("cancel")
def cancel_cmd(
    owner: Owner,
    expense_id: ExpenseId,
    database_url: DatabaseUrl = None,
) -> None:
    """Turn an amortized expense back into a single payment."""

    from db.client import session_scope
    from .lifecycle import cancel_amortization

    try:
        with session_scope(database_url=database_url) as session:
            cancel_amortization(session, expense_id=expense_id, owner_id=owner)
    except Exception as e:
        raise _fail(str(e)) from e
    console.print(f"Expense {expense_id} is no longer amortized")


@app.callback()
def _root(
    log_level: Annotated[
        str | None, typer.Option(help="Log level (defaults to EXPENSE_AMORTIZATION_LOG_LEVEL).")
    ] = None,
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level, replace=True)
    except ValueError as e:
        raise _fail(str(e)) from e


def main() -> None:  # pragma: no cover - console script entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m expense_amortization.cli`
    app()
