from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: expenses
# ---------------------------


class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    # Owner of the row (auth user id); every read is scoped by it.
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    merchant: Mapped[str | None] = mapped_column(Text, nullable=True)
    main_category: Mapped[str | None] = mapped_column(String, nullable=True)
    sub_category: Mapped[str | None] = mapped_column(String, nullable=True)
    # "expense" or "income"; NULL on rows imported before the split and read
    # as an expense.
    transaction_type: Mapped[str | None] = mapped_column(String, nullable=True)
    is_exceptional: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    excluded_from_totals: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    # Amortization sub-state. Only the parent row (the original lump sum) is
    # stored; per-month allocations are recomputed on every read.
    #
    # ``is_amortized`` is nullable because rows imported before amortization
    # existed carry NULL; readers treat NULL and false alike.
    is_amortized: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    amortization_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    amortization_adjusted_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    amortization_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # Display-only: amount of the first allocated month at setup time.
    amortization_monthly_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    amortization_status: Mapped[str | None] = mapped_column(String, nullable=True)
    amortization_adjusted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    __table_args__ = (
        CheckConstraint(
            "amortization_months IS NULL OR "
            "(amortization_months >= 1 AND amortization_months <= 60)",
            name="ck_expenses_amortization_months",
        ),
        CheckConstraint(
            "amortization_adjusted_months IS NULL OR "
            "(amortization_adjusted_months >= 1 AND amortization_adjusted_months <= 60)",
            name="ck_expenses_amortization_adjusted_months",
        ),
        CheckConstraint(
            "amortization_status IS NULL OR amortization_status in ('active','adjusted')",
            name="ck_expenses_amortization_status",
        ),
        CheckConstraint(
            "is_amortized IS NOT TRUE OR excluded_from_totals",
            name="ck_expenses_amortized_excluded",
        ),
        Index("ix_expenses_user_date", "user_id", "transaction_date", "id"),
        Index("ix_expenses_user_amortized", "user_id", "is_amortized"),
    )


__all__ = [
    "Base",
    "Expense",
]
