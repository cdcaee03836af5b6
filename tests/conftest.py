"""Shared fixtures: sample records and storage doubles. No network access."""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest

from household_expenses.models.expense import Expense, ExpenseDraft, Owner
from household_expenses.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    StorageError,
)


CREATED = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


def make_expense(
    expense_id: int,
    owner: Owner,
    day: date,
    amount: str,
    description: str = "Groceries",
    comment: Optional[str] = None,
) -> Expense:
    return Expense(
        id=expense_id,
        owner=owner,
        date=day,
        description=description,
        amount=Decimal(amount),
        comment=comment,
        created_at=CREATED,
    )


@pytest.fixture
def sample_expenses() -> list[Expense]:
    """Five expenses, newest date first, both owners, one outside January."""
    return [
        make_expense(5, Owner.VICKY, date(2024, 2, 3), "19.99", "Pharmacy"),
        make_expense(4, Owner.MAKIS, date(2024, 1, 31), "0.10", "Parking"),
        make_expense(3, Owner.VICKY, date(2024, 1, 15), "0.20", "Bread"),
        make_expense(2, Owner.MAKIS, date(2024, 1, 15), "500", "Rent"),
        make_expense(1, Owner.MAKIS, date(2024, 1, 1), "42.50", "Electricity"),
    ]


@pytest.fixture
def rent_draft() -> ExpenseDraft:
    return ExpenseDraft(
        owner=Owner.MAKIS,
        date=date(2024, 1, 15),
        description="Rent",
        amount=Decimal("500"),
        comment=None,
    )


@pytest.fixture
def memory_storage(sample_expenses) -> InMemoryExpenseStorage:
    return InMemoryExpenseStorage(sample_expenses)


class FailingStorage(ExpenseStorageInterface):
    """Storage double whose selected operations raise StorageError."""

    def __init__(self, inner: ExpenseStorageInterface, failing: set[str]):
        self.inner = inner
        self.failing = failing
        self.calls: list[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise StorageError(f"{operation} unavailable")

    async def fetch_recent(self, limit: int = 20):
        self._check("fetch_recent")
        return await self.inner.fetch_recent(limit)

    async def fetch_by_date_range(self, start, end=None):
        self._check("fetch_by_date_range")
        return await self.inner.fetch_by_date_range(start, end)

    async def insert(self, draft):
        self._check("insert")
        return await self.inner.insert(draft)

    async def delete_by_id(self, expense_id):
        self._check("delete_by_id")
        return await self.inner.delete_by_id(expense_id)


class FakeQuery:
    """
    Stands in for the Supabase query builder.

    Records every builder call and returns canned data from execute().
    """

    def __init__(self, data=None, error: Optional[Exception] = None):
        self.data = data if data is not None else []
        self.error = error
        self.calls: list[tuple] = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def gte(self, *args, **kwargs):
        return self._record("gte", *args, **kwargs)

    def lte(self, *args, **kwargs):
        return self._record("lte", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._record("insert", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._record("delete", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def execute(self):
        self.calls.append(("execute", (), {}))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)

    @property
    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeSupabase:
    """Stands in for supabase.Client; hands out one FakeQuery."""

    def __init__(self, query: FakeQuery):
        self.query = query
        self.tables: list[str] = []

    def table(self, name: str) -> FakeQuery:
        self.tables.append(name)
        return self.query
