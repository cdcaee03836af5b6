"""
Household Expenses - Source Package

A small expense tracker for a two-person household: record what was
spent, by whom, and see per-person totals for any date range.

DESIGN PRINCIPLES:
1. Validate before anything reaches storage
2. Storage confirms before the list changes
3. Fail visibly, never crash
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Household Expenses Team"
