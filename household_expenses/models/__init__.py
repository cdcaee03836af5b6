"""
Data Models Package

This package contains all Pydantic models used in Household Expenses.
All data flowing through the system must conform to these schemas.
"""

from household_expenses.models.expense import (
    Expense,
    ExpenseDraft,
    ExpenseQuery,
    ExpenseSummary,
    Owner,
    OwnerFilter,
    ValidationErrorKind,
)
from household_expenses.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Expense",
    "ExpenseDraft",
    "ExpenseQuery",
    "ExpenseSummary",
    "Owner",
    "OwnerFilter",
    "ValidationErrorKind",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
