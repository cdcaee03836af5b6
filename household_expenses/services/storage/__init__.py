"""
Storage Services Package

Provides the abstract expense storage interface and its implementations.
Supabase is the real backend; the in-memory one backs tests and offline runs.
"""

from household_expenses.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    StorageError,
)
from household_expenses.services.storage.memory import InMemoryExpenseStorage
from household_expenses.services.storage.supabase_storage import (
    SupabaseClient,
    SupabaseExpenseStorage,
)

__all__ = [
    # Interface
    "ExpenseStorageInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "InMemoryExpenseStorage",
    "SupabaseClient",
    "SupabaseExpenseStorage",
]
