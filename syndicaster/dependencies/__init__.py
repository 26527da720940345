"""Expose dependency helpers for the library and command-line tool."""

from .clients import (
    get_api_client,
    get_option_store,
    get_token_cipher_service,
    get_token_manager,
    resolve_app_credentials,
    resolve_credentials,
)
from .config import get_app_settings

__all__ = [
    "get_api_client",
    "get_app_settings",
    "get_option_store",
    "get_token_cipher_service",
    "get_token_manager",
    "resolve_app_credentials",
    "resolve_credentials",
]
