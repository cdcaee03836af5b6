"""Query execution and aggregation package."""

from household_expenses.queries.executor import QueryExecutor
from household_expenses.queries.summary import filter_by_owner, summarize, totals_by_owner

__all__ = ["QueryExecutor", "filter_by_owner", "summarize", "totals_by_owner"]
