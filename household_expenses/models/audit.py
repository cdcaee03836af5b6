"""
Audit Models for Household Expenses

Every user action that touches storage is logged so that a failed load,
a rejected insert or a delete can be diagnosed after the fact.

DESIGN DECISION: Audit events are write-once. Builders below produce
the events; the AuditLogger decides where they go.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Form
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_LOADED = "expenses_loaded"

    # System events
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which expense is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'query')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Storage id of the expense this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, owner, amount, correlation_id)
        event = AuditEventBuilder.storage_error("delete", str(exc), correlation_id)
    """

    @staticmethod
    def validation_failed(
        kind: str,
        message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=f"Expense form rejected: {message}",
            details={
                "kind": kind,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_added(
        expense_id: int,
        owner: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense saved: {owner} - {amount}",
            details={
                "owner": owner,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense deleted: {expense_id}",
            is_user_action=True,
        )

    @staticmethod
    def expenses_loaded(
        query: dict,
        result_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="query",
            correlation_id=correlation_id,
            description=f"Expense list loaded with {result_count} records",
            details={
                "query": query,
                "result_count": result_count,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
        expense_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
