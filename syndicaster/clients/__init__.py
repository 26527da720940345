"""Expose constructed client wrappers."""

from .api import ApiClient
from .option_store import (
    ACCOUNT_KEY,
    APP_KEY,
    AUTH_TOKEN_KEY,
    OptionStore,
    SQLiteOptionStore,
)
from .token_manager import TokenManager

__all__ = [
    "ACCOUNT_KEY",
    "APP_KEY",
    "AUTH_TOKEN_KEY",
    "ApiClient",
    "OptionStore",
    "SQLiteOptionStore",
    "TokenManager",
]
