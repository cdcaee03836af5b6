"""
Core Data Models for Household Expenses

These models define the schemas for all data flowing through the system:
1. What the add-expense form submits (ExpenseDraft)
2. What storage hands back (Expense)
3. What the list view asks for and shows (ExpenseQuery, ExpenseSummary)

DESIGN DECISION: The household has exactly two members. Owner is a closed
enum, and a stored row naming anyone else is a data error, not a new case.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Owner(str, Enum):
    """The two household members who record expenses."""
    MAKIS = "Makis"
    VICKY = "Vicky"


class OwnerFilter(str, Enum):
    """
    Owner selection in the list view.

    ALL is a sentinel meaning "no owner filtering"; the other members
    mirror Owner one-to-one.
    """
    ALL = "all"
    MAKIS = Owner.MAKIS.value
    VICKY = Owner.VICKY.value

    @classmethod
    def coerce(cls, value: Union["OwnerFilter", Owner, str, None]) -> "OwnerFilter":
        """Accept an OwnerFilter, an Owner or their string value."""
        if value is None:
            return cls.ALL
        if isinstance(value, cls):
            return value
        if isinstance(value, Owner):
            return cls(value.value)
        return cls(value)

    @property
    def owner(self) -> Optional[Owner]:
        """The concrete owner, or None for ALL."""
        if self is OwnerFilter.ALL:
            return None
        return Owner(self.value)


class ValidationErrorKind(str, Enum):
    """Reasons the add-expense form refuses to submit."""
    EMPTY_DESCRIPTION = "empty_description"
    NON_POSITIVE_AMOUNT = "non_positive_amount"


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    An expense as entered in the form, before storage has seen it.

    CRITICAL: id and created_at are assigned by storage and can never
    be supplied here (extra fields are forbidden).

    Description and amount are NOT constrained at this level: the form
    validator is the one place that decides what is submittable, so an
    invalid draft must still be representable.
    """
    model_config = ConfigDict(extra="forbid")

    owner: Owner = Field(
        ...,
        description="Household member who paid"
    )
    date: dt.date = Field(
        ...,
        description="Day the expense happened"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="What the expense was for"
    )
    amount: Decimal = Field(
        ...,
        description="Amount in the household currency"
    )
    comment: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-form note"
    )

    @field_validator('comment')
    @classmethod
    def blank_comment_is_none(cls, v: Optional[str]) -> Optional[str]:
        """The form submits an empty string when no comment is given."""
        if v is not None and not v.strip():
            return None
        return v

    def to_row(self) -> dict:
        """
        Convert to a JSON-safe row for insertion.

        Dates become ISO strings and the Decimal amount a numeric string,
        which the database casts to its numeric column.
        """
        return self.model_dump(mode="json")


class Expense(BaseModel):
    """
    A stored expense record.

    Everything in ExpenseDraft plus the storage-assigned id and created_at.
    """

    id: int = Field(
        ...,
        description="Storage-assigned identifier"
    )
    owner: Owner
    date: dt.date
    description: str
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in the household currency"
    )
    comment: Optional[str] = None
    created_at: dt.datetime = Field(
        ...,
        description="When storage accepted the record"
    )

    @classmethod
    def from_draft(
        cls,
        draft: ExpenseDraft,
        expense_id: int,
        created_at: dt.datetime,
    ) -> "Expense":
        """Build the stored form of a draft."""
        return cls(id=expense_id, created_at=created_at, **draft.model_dump())

    def to_draft(self) -> ExpenseDraft:
        """Strip the storage-assigned fields."""
        return ExpenseDraft(**self.model_dump(exclude={"id", "created_at"}))


# =============================================================================
# LIST VIEW MODELS
# =============================================================================

class ExpenseQuery(BaseModel):
    """
    What the list view asks storage for.

    With a start_date the query is a date range (end_date optional);
    without one it is "the most recent `limit` records" and end_date
    is ignored.
    """

    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    owner: OwnerFilter = OwnerFilter.ALL
    limit: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Record count for the recent-records query"
    )

    @field_validator('owner', mode='before')
    @classmethod
    def coerce_owner(cls, v):
        return OwnerFilter.coerce(v)

    @model_validator(mode='after')
    def validate_range(self) -> 'ExpenseQuery':
        """Validate date relationships."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    @property
    def is_date_range(self) -> bool:
        return self.start_date is not None


class ExpenseSummary(BaseModel):
    """
    A list view's worth of records plus per-owner totals.

    totals always has an entry for every Owner; owners with no
    records total Decimal("0").
    """

    records: list[Expense] = Field(default_factory=list)
    totals: dict[Owner, Decimal] = Field(default_factory=dict)

    @model_validator(mode='after')
    def fill_missing_owners(self) -> 'ExpenseSummary':
        for owner in Owner:
            self.totals.setdefault(owner, Decimal("0"))
        return self

    def total_for(self, owner: Owner) -> Decimal:
        return self.totals[owner]

    @property
    def grand_total(self) -> Decimal:
        """Sum of the per-owner totals."""
        return sum(self.totals.values(), Decimal("0"))

    @property
    def count(self) -> int:
        return len(self.records)
