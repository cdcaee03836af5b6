"""Configuration package."""

from household_expenses.config.settings import (
    AppSettings,
    Settings,
    SupabaseSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "SupabaseSettings",
    "get_settings",
    "validate_all_settings",
]
