"""DB helpers for tests: bootstrap a temporary SQLite DB and insert expenses."""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from db.client import get_engine, session_scope
from db.models.expenses import Expense
from sqlalchemy import CheckConstraint, Column, Integer, event
from sqlalchemy import text as sql_text
from sqlalchemy.schema import MetaData, Table


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize the schema, and return the URL.

    A file-backed DB lets the per-thread sessions opened by concurrent month
    reads all see the same data (in-memory DBs are per-connection).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(database_url=url)

    # Provide a `now()` shim so server_default=now() works
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _):  # pragma: no cover - tiny bridge
        dbapi_conn.create_function(
            "now", 0, lambda: datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        )

    _create_sqlite_expenses(engine)
    _assert_expenses_schema_in_sync(url)
    return url


def _create_sqlite_expenses(engine) -> None:
    """Create the ``expenses`` table in SQLite based on the ORM model.

    ``id`` becomes ``INTEGER PRIMARY KEY`` (rowid) instead of ``BIGINT`` so
    SQLite assigns ids on insert; everything else, CHECK constraints
    included, is copied from the model.
    """

    meta = MetaData()
    cols: list[Column] = []
    for c in Expense.__table__.columns:
        if c.name == "id":
            cols.append(Column("id", Integer, primary_key=True, autoincrement=True, nullable=False))
            continue
        cols.append(
            Column(
                c.name,
                c.type,
                nullable=c.nullable,
                server_default=(c.server_default.arg if c.server_default is not None else None),
            )
        )

    checks = [
        CheckConstraint(cons.sqltext, name=cons.name)
        for cons in Expense.__table__.constraints
        if isinstance(cons, CheckConstraint)
    ]

    table = Table("expenses", meta, *cols, *checks, sqlite_autoincrement=True)
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE IF EXISTS expenses")
        table.create(bind=conn)


def _assert_expenses_schema_in_sync(database_url: str) -> None:
    expected = {c.name for c in Expense.__table__.columns}
    with session_scope(database_url=database_url) as session:
        rows = session.execute(sql_text("PRAGMA table_info('expenses')")).fetchall()
        got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
    missing = expected - got
    extra = got - expected
    assert not missing and not extra, (
        f"expenses schema drift: missing={missing or '∅'}, extra={extra or '∅'}"
    )


def insert_expense(
    database_url: str,
    *,
    user_id: str,
    transaction_date: date,
    amount: Decimal | str | int,
    **fields: Any,
) -> int:
    """Insert one expense row and return its id."""

    now = datetime.now(UTC)
    with session_scope(database_url=database_url) as session:
        row = Expense(
            user_id=user_id,
            transaction_date=transaction_date,
            amount=Decimal(str(amount)),
            is_exceptional=fields.pop("is_exceptional", False),
            excluded_from_totals=fields.pop("excluded_from_totals", False),
            created_at=now,
            updated_at=now,
            **fields,
        )
        session.add(row)
        session.flush()
        return row.id


def insert_parent(
    database_url: str,
    *,
    user_id: str,
    amount: Decimal | str | int,
    months: int,
    start: date,
    transaction_date: date | None = None,
    adjusted_months: int | None = None,
    **fields: Any,
) -> int:
    """Insert an already-amortized parent row (as set up by the lifecycle)."""

    return insert_expense(
        database_url,
        user_id=user_id,
        transaction_date=transaction_date or start,
        amount=amount,
        is_amortized=True,
        excluded_from_totals=True,
        amortization_months=months,
        amortization_adjusted_months=adjusted_months,
        amortization_start_date=start,
        amortization_status="adjusted" if adjusted_months is not None else "active",
        **fields,
    )
