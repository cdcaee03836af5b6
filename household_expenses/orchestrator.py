"""
Main Orchestrator for Household Expenses

This module ties together all the components and defines the
end-to-end flows for:
1. Adding an expense (draft → validate → insert)
2. The expense list (query → fetch → summarize, delete → re-summarize)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches storage without passing validation first
- The in-memory list only changes after storage confirms a change
- Every storage failure is audited, and none crashes the app
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from household_expenses.audit import AuditLogger, create_correlation_id
from household_expenses.config import get_settings
from household_expenses.models.expense import (
    Expense,
    ExpenseDraft,
    ExpenseQuery,
    ExpenseSummary,
    Owner,
    OwnerFilter,
)
from household_expenses.queries import QueryExecutor, summarize
from household_expenses.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    StorageError,
    SupabaseClient,
    SupabaseExpenseStorage,
)
from household_expenses.validation import ExpenseValidationError, ExpenseValidator


logger = structlog.get_logger(__name__)


async def _log_unexpected(
    audit_logger: Optional[AuditLogger],
    operation: str,
    error: Exception,
    correlation_id: UUID,
) -> None:
    """Audit an exception that is not a storage or validation failure."""
    if audit_logger:
        await audit_logger.log_error(
            error_type=type(error).__name__,
            error_message=str(error),
            details={"operation": operation},
            correlation_id=correlation_id,
        )


class AddExpenseFlow:
    """
    Orchestrates the add-expense form submission.

    Flow:
    1. Validate → blocking message on failure, nothing is sent
    2. Insert → storage assigns id and created_at
    3. Audit → the stored record is logged
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger

    async def submit(
        self,
        draft: ExpenseDraft,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Validate and store a draft.

        Returns:
            The stored Expense

        Raises:
            ExpenseValidationError: Draft refused, storage not called
            StorageError: Storage rejected the insert
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            self._validator.validate(draft)
        except ExpenseValidationError as e:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    kind=e.kind.value,
                    message=e.user_message,
                    correlation_id=correlation_id,
                )
            raise

        try:
            expense = await self._storage.insert(draft)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="insert",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise
        except Exception as e:
            await _log_unexpected(self._audit_logger, "insert", e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_expense_added(
                expense_id=expense.id,
                owner=expense.owner.value,
                amount=str(expense.amount),
                correlation_id=correlation_id,
            )

        return expense


class ExpenseListFlow:
    """
    Holds the expense list as the list view shows it.

    GUARANTEES:
    - A failed load keeps the records and totals already shown
      (before the first successful load that means empty)
    - A failed delete changes nothing; a record is removed locally
      only after storage confirmed the delete
    - Totals are always recomputed from the remaining records
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        limit: int = 20,
    ):
        self._storage = storage
        self._executor = QueryExecutor(storage)
        self._audit_logger = audit_logger
        self._default_query = ExpenseQuery(limit=limit)

        self.query: ExpenseQuery = self._default_query
        self.summary: ExpenseSummary = ExpenseSummary()
        self.loaded = False
        self.last_error: Optional[StorageError] = None

    @property
    def records(self) -> list[Expense]:
        return self.summary.records

    def total_for(self, owner: Owner) -> Decimal:
        return self.summary.total_for(owner)

    @property
    def description(self) -> str:
        return self._executor.describe(self.query)

    def make_query(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        owner: OwnerFilter = OwnerFilter.ALL,
    ) -> ExpenseQuery:
        """
        Build a query from the filter inputs, keeping the configured limit.

        Raises:
            ValueError: If end_date is before start_date
        """
        return ExpenseQuery(
            start_date=start_date,
            end_date=end_date,
            owner=owner,
            limit=self._default_query.limit,
        )

    async def load(
        self,
        query: Optional[ExpenseQuery] = None,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Load the list for a query (the current one if omitted).

        Returns True on success. On failure the error is kept in
        last_error and the list is left as it was.
        """
        query = query or self.query
        correlation_id = correlation_id or create_correlation_id()

        try:
            summary = await self._executor.execute(query)
        except StorageError as e:
            self.last_error = e
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return False
        except Exception as e:
            await _log_unexpected(self._audit_logger, "load", e, correlation_id)
            raise

        self.query = query
        self.summary = summary
        self.loaded = True
        self.last_error = None

        if self._audit_logger:
            await self._audit_logger.log_expenses_loaded(
                query=query.model_dump(mode="json"),
                result_count=summary.count,
                correlation_id=correlation_id,
            )
        return True

    async def clear_filters(self, correlation_id: Optional[UUID] = None) -> bool:
        """Back to the most recent expenses of both owners."""
        return await self.load(self._default_query, correlation_id=correlation_id)

    async def delete(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete an expense and drop it from the list.

        Returns True on success, including when the id was not in
        storage or not in the list.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            await self._storage.delete_by_id(expense_id)
        except StorageError as e:
            self.last_error = e
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="delete",
                    error_message=str(e),
                    correlation_id=correlation_id,
                    expense_id=expense_id,
                )
            return False
        except Exception as e:
            await _log_unexpected(self._audit_logger, "delete", e, correlation_id)
            raise

        remaining = [record for record in self.summary.records if record.id != expense_id]
        self.summary = summarize(remaining, self.query.owner)
        self.last_error = None

        if self._audit_logger:
            await self._audit_logger.log_expense_deleted(
                expense_id=expense_id,
                correlation_id=correlation_id,
            )
        return True


def create_app_components(
    use_storage: bool = True,
) -> tuple[AddExpenseFlow, ExpenseStorageInterface, AuditLogger]:
    """
    Factory function to create the shared application components.

    These hold no per-user state and can be shared between sessions.
    Each session builds its own list with create_list_flow().

    Args:
        use_storage: Whether to use Supabase storage.
                    Set to False to run against in-memory storage.

    Returns:
        (add_expense_flow, storage, audit_logger)
    """
    storage: ExpenseStorageInterface
    audit_logger = AuditLogger()

    if use_storage:
        try:
            client = SupabaseClient()
            client.connect()
            storage = SupabaseExpenseStorage(client)
        except StorageError as e:
            # Storage not configured - continue in memory
            logger.warning("storage_not_configured", error=str(e))
            storage = InMemoryExpenseStorage()
    else:
        storage = InMemoryExpenseStorage()

    add_flow = AddExpenseFlow(storage=storage, audit_logger=audit_logger)

    return add_flow, storage, audit_logger


def create_list_flow(
    storage: ExpenseStorageInterface,
    audit_logger: Optional[AuditLogger] = None,
) -> ExpenseListFlow:
    """Create a list view state using the configured recent-records limit."""
    limit = get_settings().app.recent_limit
    return ExpenseListFlow(storage=storage, audit_logger=audit_logger, limit=limit)
