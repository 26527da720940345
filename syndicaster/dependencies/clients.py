"""
Factory functions providing shared stores, token managers and API clients.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from syndicaster.clients import (
    ACCOUNT_KEY,
    APP_KEY,
    ApiClient,
    OptionStore,
    SQLiteOptionStore,
    TokenManager,
)
from syndicaster.dependencies.config import get_app_settings
from syndicaster.models.account import AppCredentials, Credentials
from syndicaster.services import TokenCipherService


def resolve_credentials(store: OptionStore) -> Credentials:
    """Configured account settings win; otherwise fall back to the stored account."""
    settings = get_app_settings()
    if settings.account.is_configured():
        return settings.account.to_credentials()
    stored = store.get(ACCOUNT_KEY)
    return Credentials.model_validate(stored) if stored else Credentials()


def resolve_app_credentials(store: OptionStore) -> AppCredentials:
    """Configured app settings win; otherwise fall back to the stored app identity."""
    settings = get_app_settings()
    if settings.app.is_configured():
        return settings.app.to_credentials()
    stored = store.get(APP_KEY)
    return AppCredentials.model_validate(stored) if stored else AppCredentials()


@lru_cache()
def get_option_store() -> SQLiteOptionStore:
    """Provide the shared SQLite option store."""
    return SQLiteOptionStore(get_app_settings().option_store_path)


@lru_cache()
def get_token_cipher_service() -> Optional[TokenCipherService]:
    """Provide token encryption when a secret is available, else store plaintext."""
    settings = get_app_settings()
    secret = (
        settings.token_encryption_secret
        or resolve_app_credentials(get_option_store()).client_secret
    )
    if not secret:
        return None
    return TokenCipherService(secret=secret)


@lru_cache()
def get_token_manager() -> TokenManager:
    """Create the singleton token manager for the configured credential set."""
    settings = get_app_settings()
    store = get_option_store()
    return TokenManager(
        store=store,
        credentials=resolve_credentials(store),
        app_credentials=resolve_app_credentials(store),
        base_url=settings.base_url,
        timeout=settings.request_timeout,
        scope=settings.oauth_scope,
        token_cipher=get_token_cipher_service(),
    )


@lru_cache()
def get_api_client() -> ApiClient:
    """Create the singleton catalog client."""
    settings = get_app_settings()
    return ApiClient(
        token_manager=get_token_manager(),
        credentials=resolve_credentials(get_option_store()),
        base_url=settings.base_url,
        timeout=settings.request_timeout,
        display_timezone=settings.display_timezone,
    )


__all__ = [
    "get_api_client",
    "get_option_store",
    "get_token_cipher_service",
    "get_token_manager",
    "resolve_app_credentials",
    "resolve_credentials",
]
