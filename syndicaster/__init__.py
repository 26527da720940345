"""Client library for the Syndicaster video catalog service."""

from syndicaster.clients import ApiClient, SQLiteOptionStore, TokenManager
from syndicaster.core.errors import (
    AuthorizationExpired,
    EmptyResultError,
    MissingConfigurationError,
    ResponseDecodeError,
    SyndicasterError,
    TransportError,
)
from syndicaster.models.account import AppCredentials, Credentials
from syndicaster.models.token import AuthError, Token
from syndicaster.schemas import NormalizedRecord
from syndicaster.services import format_records

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "AppCredentials",
    "AuthError",
    "AuthorizationExpired",
    "Credentials",
    "EmptyResultError",
    "MissingConfigurationError",
    "NormalizedRecord",
    "ResponseDecodeError",
    "SQLiteOptionStore",
    "SyndicasterError",
    "Token",
    "TokenManager",
    "TransportError",
    "format_records",
]
