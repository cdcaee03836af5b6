"""
Per-owner aggregation of an expense list.

Pure functions only: no storage access, no side effects. The list view
recomputes the summary from the full record list after every load and
every delete.
"""

from decimal import Decimal
from typing import Iterable, Union

from household_expenses.models.expense import (
    Expense,
    ExpenseSummary,
    Owner,
    OwnerFilter,
)


def filter_by_owner(
    records: Iterable[Expense],
    owner_filter: Union[OwnerFilter, Owner, str, None] = OwnerFilter.ALL,
) -> list[Expense]:
    """Keep the records of one owner, preserving order. ALL keeps everything."""
    owner = OwnerFilter.coerce(owner_filter).owner
    if owner is None:
        return list(records)
    return [record for record in records if record.owner == owner]


def totals_by_owner(records: Iterable[Expense]) -> dict[Owner, Decimal]:
    """
    Sum amounts per owner.

    Every owner gets an entry. Accumulation is Decimal, in input order.
    """
    totals = {owner: Decimal("0") for owner in Owner}
    for record in records:
        totals[record.owner] += record.amount
    return totals


def summarize(
    records: Iterable[Expense],
    owner_filter: Union[OwnerFilter, Owner, str, None] = OwnerFilter.ALL,
) -> ExpenseSummary:
    """
    Filter a result set by owner and total it per owner.

    Totals are computed over the filtered records, so filtering on one
    owner leaves the other owner's total at zero.

    Raises:
        ValueError: If owner_filter is not "all" or a known owner
    """
    filtered = filter_by_owner(records, owner_filter)
    return ExpenseSummary(records=filtered, totals=totals_by_owner(filtered))
