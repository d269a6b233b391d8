"""Exceptions raised by the amortization lifecycle (write) paths.

Read paths never raise for bad input; they return empty results. Store and
database errors are not wrapped and reach callers unchanged.
"""

from __future__ import annotations


class AmortizationError(ValueError):
    """An amortization action violates a business rule (bad months, not a parent, ...)."""


class ExpenseNotFoundError(AmortizationError):
    """No expense with the given id exists for the given owner."""

    def __init__(self, expense_id: int, owner_id: str) -> None:
        super().__init__(f"expense {expense_id} not found for owner {owner_id!r}")
        self.expense_id = expense_id
        self.owner_id = owner_id


__all__ = ["AmortizationError", "ExpenseNotFoundError"]
