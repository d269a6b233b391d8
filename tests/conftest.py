"""Pytest configuration shared by the suite.

Puts the workspace packages on ``sys.path`` (``packages/`` for
``expense_amortization`` and ``libs/db/src`` for ``db``) so tests run from a
plain checkout, and keeps each test hermetic: engine caches are disposed,
package logging is reset and the tuning environment variables are cleared.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs/db/src"), str(_ROOT)]
    if p not in sys.path
]

_ENV_VARS = (
    "DATABASE_URL",
    "EA_PAGE_SIZE",
    "EA_MONTH_MAX_WORKERS",
    "EXPENSE_AMORTIZATION_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    yield

    from db.client import dispose_engines
    from expense_amortization.logging_setup import reset_logging

    dispose_engines()
    reset_logging()


@pytest.fixture()
def sqlite_url(tmp_path: Path) -> str:
    """A fresh file-backed SQLite database with the ``expenses`` table."""

    from tests.helpers.db import bootstrap_sqlite_db

    return bootstrap_sqlite_db(tmp_path / "expenses.db")
