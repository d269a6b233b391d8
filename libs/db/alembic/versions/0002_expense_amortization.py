# ruff: noqa: I001
"""Add amortization columns to expenses.

Revision ID: 0002_expense_amortization
Revises: 0001_expenses_core
Create Date: 2026-02-03
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002_expense_amortization"
down_revision: str | None = "0001_expenses_core"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Existing rows keep NULL here; readers treat NULL as "not amortized".
    op.add_column("expenses", sa.Column("is_amortized", sa.Boolean(), nullable=True))
    op.add_column("expenses", sa.Column("amortization_months", sa.Integer(), nullable=True))
    op.add_column(
        "expenses", sa.Column("amortization_adjusted_months", sa.Integer(), nullable=True)
    )
    op.add_column("expenses", sa.Column("amortization_start_date", sa.Date(), nullable=True))
    op.add_column(
        "expenses", sa.Column("amortization_monthly_amount", sa.Numeric(12, 2), nullable=True)
    )
    op.add_column("expenses", sa.Column("amortization_status", sa.Text(), nullable=True))
    op.add_column(
        "expenses",
        sa.Column("amortization_adjusted_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_check_constraint(
        "ck_expenses_amortization_months",
        "expenses",
        "amortization_months IS NULL OR "
        "(amortization_months >= 1 AND amortization_months <= 60)",
    )
    op.create_check_constraint(
        "ck_expenses_amortization_adjusted_months",
        "expenses",
        "amortization_adjusted_months IS NULL OR "
        "(amortization_adjusted_months >= 1 AND amortization_adjusted_months <= 60)",
    )
    op.create_check_constraint(
        "ck_expenses_amortization_status",
        "expenses",
        "amortization_status IS NULL OR amortization_status in ('active','adjusted')",
    )
    op.create_check_constraint(
        "ck_expenses_amortized_excluded",
        "expenses",
        "is_amortized IS NOT TRUE OR excluded_from_totals",
    )

    op.create_index(
        "ix_expenses_user_amortized",
        "expenses",
        ["user_id", "is_amortized"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_expenses_user_amortized", table_name="expenses")
    op.drop_constraint("ck_expenses_amortized_excluded", "expenses", type_="check")
    op.drop_constraint("ck_expenses_amortization_status", "expenses", type_="check")
    op.drop_constraint("ck_expenses_amortization_adjusted_months", "expenses", type_="check")
    op.drop_constraint("ck_expenses_amortization_months", "expenses", type_="check")
    for column in (
        "amortization_adjusted_at",
        "amortization_status",
        "amortization_monthly_amount",
        "amortization_start_date",
        "amortization_adjusted_months",
        "amortization_months",
        "is_amortized",
    ):
        op.drop_column("expenses", column)
