"""Shared SQLAlchemy models registry for the expenses database.

Currently includes the ``expenses`` table read by ``expense_amortization``.
"""

from .expenses import Base, Expense

__all__ = [
    "Base",
    "Expense",
]
