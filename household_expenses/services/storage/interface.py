"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the hosted Supabase table behind a narrow seam
2. Use in-memory storage for testing and offline runs
3. Keep the list/add flows decoupled from the storage implementation

The interface is intentionally tiny: there is no update operation.
A wrong entry is corrected by deleting it and adding it again.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from household_expenses.models.expense import Expense, ExpenseDraft


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Every method is a network round-trip in the real backend. Callers
    must await each call; two calls are only ordered if the caller
    sequences them.
    """

    @abstractmethod
    async def fetch_recent(self, limit: int = 20) -> list[Expense]:
        """
        Fetch the most recent expenses.

        Args:
            limit: Maximum number of records to return

        Returns:
            Up to `limit` records, newest date first

        Raises:
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    async def fetch_by_date_range(
        self,
        start: date,
        end: Optional[date] = None,
    ) -> list[Expense]:
        """
        Fetch expenses within a date range.

        Args:
            start: Include records dated on or after this day
            end: Include records dated on or before this day (no bound if None)

        Returns:
            Matching records, newest date first

        Raises:
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    async def insert(self, draft: ExpenseDraft) -> Expense:
        """
        Store a new expense.

        Args:
            draft: The validated form data

        Returns:
            The stored record including its generated id and created_at

        Raises:
            StorageError: If storage rejects the row, including a draft
                whose amount is not positive (nothing is written then)
        """
        pass

    @abstractmethod
    async def delete_by_id(self, expense_id: int) -> None:
        """
        Delete an expense by id.

        Deleting an id that does not exist is not an error.

        Raises:
            StorageError: If storage cannot be reached
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
