"""Expense form validation package."""

from household_expenses.validation.validator import (
    ExpenseValidationError,
    ExpenseValidator,
    validate,
)

__all__ = ["ExpenseValidationError", "ExpenseValidator", "validate"]
