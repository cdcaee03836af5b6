"""
Expense Form Validation

Runs before anything is sent to storage. Two rules decide whether the
add-expense form may submit:

1. The description is not empty once surrounding whitespace is removed
2. The amount is strictly positive

IMPORTANT: Validation NEVER silently fixes a draft. It either returns
the draft untouched or raises with the reason, so the user corrects it.
Amount parsing from the raw text field happens in the UI beforehand.
"""

from household_expenses.models.expense import ExpenseDraft, ValidationErrorKind


class ExpenseValidationError(ValueError):
    """The draft cannot be submitted."""

    MESSAGES = {
        ValidationErrorKind.EMPTY_DESCRIPTION: "Description is required",
        ValidationErrorKind.NON_POSITIVE_AMOUNT: "Amount must be greater than zero",
    }

    def __init__(self, kind: ValidationErrorKind):
        self.kind = kind
        super().__init__(self.user_message)

    @property
    def user_message(self) -> str:
        """Blocking message shown next to the form."""
        return self.MESSAGES[self.kind]


class ExpenseValidator:
    """
    Validates an ExpenseDraft before submission.

    Stateless; the class exists so flows can be handed an alternative
    validator in tests.
    """

    def validate(self, draft: ExpenseDraft) -> ExpenseDraft:
        """
        Check a draft against the submission rules.

        Returns:
            The same draft object, unchanged

        Raises:
            ExpenseValidationError: With the first rule that fails,
                description before amount
        """
        if not draft.description.strip():
            raise ExpenseValidationError(ValidationErrorKind.EMPTY_DESCRIPTION)

        if draft.amount <= 0:
            raise ExpenseValidationError(ValidationErrorKind.NON_POSITIVE_AMOUNT)

        return draft


def validate(draft: ExpenseDraft) -> ExpenseDraft:
    """Module-level shortcut for ExpenseValidator().validate."""
    return ExpenseValidator().validate(draft)
