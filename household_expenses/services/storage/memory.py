"""
In-Memory Storage Implementation

Keeps expenses in a Python list. Used by the test-suite and by the app
when Supabase is not configured, so the add/list flows can be exercised
without a network.

It mirrors what the database does on insert: sequential ids and a UTC
created_at timestamp.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import ValidationError

from household_expenses.models.expense import Expense, ExpenseDraft
from household_expenses.services.storage.interface import (
    ExpenseStorageInterface,
    StorageError,
)


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """List-backed expense storage."""

    def __init__(self, expenses: Optional[list[Expense]] = None):
        self._expenses: list[Expense] = list(expenses or [])
        self._next_id = max((e.id for e in self._expenses), default=0) + 1

    def _newest_first(self, expenses: list[Expense]) -> list[Expense]:
        # sorted() is stable, so same-day records keep insertion order
        return sorted(expenses, key=lambda e: e.date, reverse=True)

    async def fetch_recent(self, limit: int = 20) -> list[Expense]:
        return self._newest_first(self._expenses)[:limit]

    async def fetch_by_date_range(
        self,
        start: date,
        end: Optional[date] = None,
    ) -> list[Expense]:
        matching = [
            e for e in self._expenses
            if e.date >= start and (end is None or e.date <= end)
        ]
        return self._newest_first(matching)

    async def insert(self, draft: ExpenseDraft) -> Expense:
        try:
            expense = Expense.from_draft(
                draft,
                expense_id=self._next_id,
                created_at=datetime.now(timezone.utc),
            )
        except ValidationError as e:
            raise StorageError(f"Failed to add expense: {e}")
        self._next_id += 1
        self._expenses.append(expense)
        return expense

    async def delete_by_id(self, expense_id: int) -> None:
        self._expenses = [e for e in self._expenses if e.id != expense_id]

    def __len__(self) -> int:
        return len(self._expenses)
