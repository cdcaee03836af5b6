"""Services package."""

from household_expenses.services.storage import (
    ConnectionError,
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    StorageError,
    SupabaseClient,
    SupabaseExpenseStorage,
)

__all__ = [
    "ConnectionError",
    "ExpenseStorageInterface",
    "InMemoryExpenseStorage",
    "StorageError",
    "SupabaseClient",
    "SupabaseExpenseStorage",
]
