"""
Audit Logger

DESIGN DECISION: Every action that touches storage is logged.
This provides:
1. A trace of what was added and deleted, and by whom
2. The diagnosis for failures the UI only reports generically

The audit logger:
- Is async so flows can await it alongside storage calls
- Never raises into the caller (a logging failure must not fail an action)
- Supports correlation IDs to tie the events of one user action together
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from household_expenses.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Writes each event to the structured local log at a level
    matching the event's severity.
    """

    def __init__(self, logger=None):
        self._logger = logger or structlog.get_logger("household_expenses.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False

        return True

    async def log_validation_failed(
        self,
        kind: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected form submission."""
        event = AuditEventBuilder.validation_failed(
            kind=kind,
            message=message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_expense_added(
        self,
        expense_id: int,
        owner: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a stored expense."""
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            owner=owner,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_expense_deleted(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a deletion."""
        event = AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_expenses_loaded(
        self,
        query: dict,
        result_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a list load."""
        event = AuditEventBuilder.expenses_loaded(
            query=query,
            result_count=result_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
        expense_id: Optional[int] = None,
    ) -> None:
        """Log a failed storage call."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
            expense_id=expense_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., submitting the form).
    """
    return uuid4()
