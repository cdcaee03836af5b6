"""
Tests for the storage implementations

The Supabase backend is exercised against a fake query builder that
records the calls it receives; nothing talks to a real project.
"""

import pytest
from datetime import date
from decimal import Decimal

from household_expenses.config import SupabaseSettings
from household_expenses.services.storage import (
    ConnectionError,
    InMemoryExpenseStorage,
    StorageError,
    SupabaseClient,
    SupabaseExpenseStorage,
)

from conftest import FakeQuery, FakeSupabase


ROW = {
    "id": 11,
    "owner": "Makis",
    "date": "2024-01-15",
    "description": "Rent",
    "amount": 500,
    "comment": None,
    "created_at": "2024-01-15T09:30:00+00:00",
}


def supabase_storage(query: FakeQuery) -> tuple[SupabaseExpenseStorage, FakeSupabase]:
    fake = FakeSupabase(query)
    settings = SupabaseSettings(url="https://example.supabase.co", key="anon-key")
    return SupabaseExpenseStorage(SupabaseClient(settings=settings, client=fake)), fake


class TestInMemoryStorage:
    """Tests for InMemoryExpenseStorage."""

    @pytest.mark.asyncio
    async def test_fetch_recent_newest_first_with_limit(self, memory_storage):
        records = await memory_storage.fetch_recent(limit=3)
        assert [r.id for r in records] == [5, 4, 3]

    @pytest.mark.asyncio
    async def test_fetch_recent_keeps_same_day_order(self, memory_storage):
        records = await memory_storage.fetch_recent()
        # ids 3 and 2 share a date; insertion order is kept
        assert [r.id for r in records] == [5, 4, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, memory_storage):
        records = await memory_storage.fetch_by_date_range(
            date(2024, 1, 1), date(2024, 1, 31)
        )
        assert [r.id for r in records] == [4, 3, 2, 1]
        assert all(date(2024, 1, 1) <= r.date <= date(2024, 1, 31) for r in records)
        dates = [r.date for r in records]
        assert dates == sorted(dates, reverse=True)

    @pytest.mark.asyncio
    async def test_date_range_without_end(self, memory_storage):
        records = await memory_storage.fetch_by_date_range(date(2024, 1, 31))
        assert [r.id for r in records] == [5, 4]

    @pytest.mark.asyncio
    async def test_insert_then_fetch_round_trip(self, rent_draft):
        storage = InMemoryExpenseStorage()

        stored = await storage.insert(rent_draft)
        fetched = await storage.fetch_recent()

        assert fetched == [stored]
        assert stored.id == 1
        assert stored.created_at is not None
        assert stored.to_draft() == rent_draft

    @pytest.mark.asyncio
    async def test_insert_continues_after_existing_ids(self, memory_storage, rent_draft):
        stored = await memory_storage.insert(rent_draft)
        assert stored.id == 6

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-3"])
    async def test_insert_non_positive_amount_is_storage_error(self, rent_draft, amount):
        storage = InMemoryExpenseStorage()
        draft = rent_draft.model_copy(update={"amount": Decimal(amount)})

        with pytest.raises(StorageError, match="Failed to add expense"):
            await storage.insert(draft)

        assert len(storage) == 0
        assert (await storage.insert(rent_draft)).id == 1

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, memory_storage):
        await memory_storage.delete_by_id(3)
        await memory_storage.delete_by_id(3)
        await memory_storage.delete_by_id(999)

        assert len(memory_storage) == 4
        assert 3 not in [r.id for r in await memory_storage.fetch_recent()]


class TestSupabaseStorage:
    """Tests for SupabaseExpenseStorage query construction and errors."""

    @pytest.mark.asyncio
    async def test_fetch_recent_query(self):
        query = FakeQuery(data=[ROW])
        storage, fake = supabase_storage(query)

        records = await storage.fetch_recent(limit=20)

        assert fake.tables == ["expenses"]
        assert query.calls == [
            ("select", ("*",), {}),
            ("order", ("date",), {"desc": True}),
            ("limit", (20,), {}),
            ("execute", (), {}),
        ]
        assert records[0].id == 11
        assert records[0].amount == Decimal("500")

    @pytest.mark.asyncio
    async def test_date_range_query_with_end(self):
        query = FakeQuery(data=[])
        storage, _ = supabase_storage(query)

        await storage.fetch_by_date_range(date(2024, 1, 1), date(2024, 1, 31))

        assert query.calls == [
            ("select", ("*",), {}),
            ("gte", ("date", "2024-01-01"), {}),
            ("lte", ("date", "2024-01-31"), {}),
            ("order", ("date",), {"desc": True}),
            ("execute", (), {}),
        ]

    @pytest.mark.asyncio
    async def test_date_range_query_without_end(self):
        query = FakeQuery(data=[])
        storage, _ = supabase_storage(query)

        await storage.fetch_by_date_range(date(2024, 1, 1))

        assert "lte" not in query.names
        assert "limit" not in query.names

    @pytest.mark.asyncio
    async def test_insert_sends_row_and_returns_stored(self, rent_draft):
        query = FakeQuery(data=[ROW])
        storage, _ = supabase_storage(query)

        stored = await storage.insert(rent_draft)

        assert query.calls[0] == ("insert", (rent_draft.to_row(),), {})
        assert stored.id == 11
        assert stored.to_draft() == rent_draft

    @pytest.mark.asyncio
    async def test_insert_without_returned_row_fails(self, rent_draft):
        storage, _ = supabase_storage(FakeQuery(data=[]))
        with pytest.raises(StorageError, match="no row"):
            await storage.insert(rent_draft)

    @pytest.mark.asyncio
    async def test_insert_non_positive_amount_sends_nothing(self, rent_draft):
        query = FakeQuery(data=[dict(ROW, amount=0)])
        storage, fake = supabase_storage(query)
        draft = rent_draft.model_copy(update={"amount": Decimal("0")})

        with pytest.raises(StorageError, match="greater than zero"):
            await storage.insert(draft)

        assert query.calls == []
        assert fake.tables == []

    @pytest.mark.asyncio
    async def test_delete_query(self):
        query = FakeQuery(data=[])
        storage, _ = supabase_storage(query)

        result = await storage.delete_by_id(42)

        assert result is None
        assert query.calls == [
            ("delete", (), {}),
            ("eq", ("id", 42), {}),
            ("execute", (), {}),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["fetch_recent", "range", "insert", "delete"])
    async def test_client_errors_become_storage_errors(self, operation, rent_draft):
        storage, _ = supabase_storage(FakeQuery(error=RuntimeError("boom")))

        with pytest.raises(StorageError, match="boom"):
            if operation == "fetch_recent":
                await storage.fetch_recent()
            elif operation == "range":
                await storage.fetch_by_date_range(date(2024, 1, 1))
            elif operation == "insert":
                await storage.insert(rent_draft)
            else:
                await storage.delete_by_id(1)

    @pytest.mark.asyncio
    async def test_unknown_owner_rejected_at_boundary(self):
        bad_row = dict(ROW, owner="Nikos")
        storage, _ = supabase_storage(FakeQuery(data=[bad_row]))

        with pytest.raises(StorageError):
            await storage.fetch_recent()

    @pytest.mark.asyncio
    async def test_custom_table_name(self):
        query = FakeQuery(data=[])
        fake = FakeSupabase(query)
        settings = SupabaseSettings(
            url="https://example.supabase.co",
            key="anon-key",
            table_name="family_expenses",
        )
        storage = SupabaseExpenseStorage(SupabaseClient(settings=settings, client=fake))

        await storage.fetch_recent()

        assert fake.tables == ["family_expenses"]


class TestSupabaseClient:
    """Tests for SupabaseClient configuration handling."""

    def test_missing_settings_raise_connection_error(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)  # no .env here
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_KEY", raising=False)

        with pytest.raises(ConnectionError, match="not configured"):
            SupabaseClient().connect()

    def test_connection_error_is_storage_error(self):
        assert issubclass(ConnectionError, StorageError)

    def test_url_must_be_http(self):
        with pytest.raises(ValueError):
            SupabaseSettings(url="example.supabase.co", key="k")

    def test_injected_client_is_reused(self):
        fake = FakeSupabase(FakeQuery())
        client = SupabaseClient(
            settings=SupabaseSettings(url="https://example.supabase.co/", key="k"),
            client=fake,
        )
        assert client.connect() is fake
        assert client.settings.url == "https://example.supabase.co"
