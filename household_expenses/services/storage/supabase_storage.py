"""
Supabase Storage Implementation

DESIGN DECISION: Expenses live in a single `expenses` table of a hosted
Supabase (PostgreSQL) project because:
1. Both household members see the same data from any device
2. No database server to run or back up
3. The generated client covers every query we need

TRADEOFFS:
- Every call is a network round-trip (fine for household volumes)
- No retry: a failed call is reported once and the user tries again
- The database assigns id and created_at, so we always read the
  inserted row back rather than building it locally
"""

from datetime import date
from typing import Optional

from supabase import Client, create_client

from household_expenses.config import SupabaseSettings, get_settings
from household_expenses.models.expense import Expense, ExpenseDraft
from household_expenses.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    StorageError,
)


class SupabaseClient:
    """
    Low-level Supabase client wrapper.

    Handles configuration and lazily creates the generated client.
    """

    def __init__(
        self,
        settings: Optional[SupabaseSettings] = None,
        client: Optional[Client] = None,
    ):
        self._settings = settings
        self._client = client

    @property
    def settings(self) -> SupabaseSettings:
        if self._settings is None:
            try:
                self._settings = get_settings().supabase
            except Exception as e:
                raise ConnectionError(f"Supabase is not configured: {e}")
        return self._settings

    def connect(self) -> Client:
        """Create the Supabase client on first use."""
        if self._client is None:
            settings = self.settings
            try:
                self._client = create_client(settings.url, settings.key)
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Supabase: {e}")
        return self._client

    def table(self):
        """Start a query against the expenses table."""
        return self.connect().table(self.settings.table_name)


class SupabaseExpenseStorage(ExpenseStorageInterface):
    """
    Supabase implementation of expense storage.

    Rows come back as plain dicts and are validated into Expense models.
    A row that does not validate (for example an owner outside the
    household) is reported as a StorageError rather than passed through.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()

    def _rows_to_expenses(self, rows: Optional[list]) -> list[Expense]:
        return [Expense.model_validate(row) for row in rows or []]

    async def fetch_recent(self, limit: int = 20) -> list[Expense]:
        """Fetch the newest `limit` expenses."""
        try:
            response = (
                self._client.table()
                .select("*")
                .order("date", desc=True)
                .limit(limit)
                .execute()
            )
            return self._rows_to_expenses(response.data)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to fetch expenses: {e}")

    async def fetch_by_date_range(
        self,
        start: date,
        end: Optional[date] = None,
    ) -> list[Expense]:
        """Fetch expenses dated within [start, end]."""
        try:
            query = self._client.table().select("*").gte("date", start.isoformat())
            if end is not None:
                query = query.lte("date", end.isoformat())
            response = query.order("date", desc=True).execute()
            return self._rows_to_expenses(response.data)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to fetch expenses by date range: {e}")

    async def insert(self, draft: ExpenseDraft) -> Expense:
        """
        Insert a draft and return the stored row.

        A draft the stored form would refuse is rejected before anything
        is written.
        """
        if draft.amount <= 0:
            raise StorageError(
                f"Failed to add expense: amount must be greater than zero, got {draft.amount}"
            )

        try:
            response = self._client.table().insert(draft.to_row()).execute()
            rows = self._rows_to_expenses(response.data)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to add expense: {e}")

        if not rows:
            raise StorageError("Failed to add expense: storage returned no row")
        return rows[0]

    async def delete_by_id(self, expense_id: int) -> None:
        """Delete an expense; a missing id is not an error."""
        try:
            self._client.table().delete().eq("id", expense_id).execute()
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete expense {expense_id}: {e}")
