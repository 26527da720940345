"""Exceptions raised by the catalog client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from syndicaster.models.token import AuthError


class SyndicasterError(Exception):
    """Base class for every error raised by this package."""


class TransportError(SyndicasterError):
    """Raised when an HTTP attempt fails before a response is received."""


class ResponseDecodeError(SyndicasterError):
    """Raised when a response body cannot be decoded as JSON."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Undecodable response body (HTTP {status_code}).")
        self.status_code = status_code
        self.body = body


class AuthorizationExpired(SyndicasterError):
    """Raised when a 401 could not be repaired because re-authentication failed."""

    def __init__(self, auth_error: "AuthError") -> None:
        super().__init__("Authorization rejected and re-authentication failed.")
        self.auth_error = auth_error


class EmptyResultError(SyndicasterError, IndexError):
    """Raised when a response is missing an element the caller depends on."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class MissingConfigurationError(SyndicasterError):
    """Raised when an operation needs an identifier or credential that is not set."""


__all__ = [
    "AuthorizationExpired",
    "EmptyResultError",
    "MissingConfigurationError",
    "ResponseDecodeError",
    "SyndicasterError",
    "TransportError",
]
