"""Public interface for the ``expense_amortization`` package.

Symbol re-exports only; see the individual modules for behavior.
"""

from .aggregate import aggregate_range
from .allocation import split_amount
from .api import get_month_transactions, get_range_transactions
from .errors import AmortizationError, ExpenseNotFoundError
from .lifecycle import (
    adjust_amortization,
    adjustment_bounds,
    cancel_amortization,
    completed_months,
    setup_amortization,
)
from .materialize import materialize_month
from .models import (
    AmortizationPlan,
    AmortizationStatus,
    MonthFilters,
    Transaction,
    TransactionQuery,
    VirtualAllocation,
)
from .months import YearMonth, month_bounds, month_offset
from .pagination import DEFAULT_PAGE_SIZE, RowStore, fetch_all
from .reports import average_expense, spending_total, totals_by_category, totals_by_month
from .schedule import ScheduledAllocation, allocation_schedule, preview_schedule
from .store import SqlRowStore

__all__ = [
    # Core
    "split_amount",
    "month_offset",
    "fetch_all",
    "materialize_month",
    "aggregate_range",
    # Database-bound readers
    "get_month_transactions",
    "get_range_transactions",
    "SqlRowStore",
    "RowStore",
    "DEFAULT_PAGE_SIZE",
    # Lifecycle
    "setup_amortization",
    "adjust_amortization",
    "cancel_amortization",
    "completed_months",
    "adjustment_bounds",
    # Previews and totals
    "preview_schedule",
    "allocation_schedule",
    "ScheduledAllocation",
    "spending_total",
    "average_expense",
    "totals_by_category",
    "totals_by_month",
    # Models / types
    "Transaction",
    "VirtualAllocation",
    "MonthFilters",
    "TransactionQuery",
    "AmortizationPlan",
    "AmortizationStatus",
    "YearMonth",
    "month_bounds",
    # Errors
    "AmortizationError",
    "ExpenseNotFoundError",
]
