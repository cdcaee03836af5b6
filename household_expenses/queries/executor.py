"""
Query Execution Engine

DESIGN DECISION: The list view's filters are turned into exactly one
storage call:
- a start date selects the date-range query (end date optional)
- no start date selects the "most recent N" query

The owner filter is NOT sent to storage. It is applied client-side by
summarize(), together with the per-owner totals, over the fetched set.
"""

from datetime import date
from typing import Optional

from household_expenses.models.expense import Expense, ExpenseQuery, ExpenseSummary
from household_expenses.queries.summary import summarize
from household_expenses.services.storage import ExpenseStorageInterface


class QueryExecutor:
    """
    Executes list-view queries against expense storage.

    StorageError from the backend is propagated unchanged; the caller
    decides what happens to the list it is currently showing.
    """

    def __init__(self, storage: ExpenseStorageInterface):
        self._storage = storage

    async def fetch(self, query: ExpenseQuery) -> list[Expense]:
        """Run the storage query the filters call for, without owner filtering."""
        if query.is_date_range:
            return await self._storage.fetch_by_date_range(
                query.start_date,
                query.end_date,
            )
        return await self._storage.fetch_recent(query.limit)

    async def execute(self, query: ExpenseQuery) -> ExpenseSummary:
        """Fetch and summarize."""
        records = await self.fetch(query)
        return summarize(records, query.owner)

    def describe(self, query: ExpenseQuery) -> str:
        """Human-readable description of what a query shows."""
        if query.is_date_range:
            desc = self._date_range_str(query.start_date, query.end_date)
        else:
            desc = f"Last {query.limit} expenses"
        if query.owner.owner is not None:
            desc += f" for {query.owner.value}"
        return desc

    def _date_range_str(
        self,
        date_from: date,
        date_to: Optional[date],
    ) -> str:
        """Format date range for description."""
        if date_to is None:
            return f"Expenses from {date_from.strftime('%d %b %Y')}"
        if date_from == date_to:
            return f"Expenses on {date_from.strftime('%d %b %Y')}"
        if date_from.month == date_to.month and date_from.year == date_to.year:
            return f"Expenses in {date_from.strftime('%B %Y')}"
        if date_from.year == date_to.year:
            return f"Expenses from {date_from.strftime('%d %b')} to {date_to.strftime('%d %b %Y')}"
        return f"Expenses from {date_from.strftime('%d %b %Y')} to {date_to.strftime('%d %b %Y')}"
