"""
OAuth token lifecycle for the catalog service.

Handles the password and refresh-token grants and keeps the current token in
the option store, which is the source of truth across processes.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from syndicaster.clients.option_store import AUTH_TOKEN_KEY, OptionStore
from syndicaster.core.errors import MissingConfigurationError, ResponseDecodeError
from syndicaster.models.account import AppCredentials, Credentials
from syndicaster.models.token import AuthError, AuthResult, Token
from syndicaster.schemas.records import EndpointRequest
from syndicaster.services.token_cipher import TokenCipherService
from syndicaster.utils.http import decode_json, send_once

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """Acquire, persist and renew the access token for one credential set."""

    TOKEN_PATH = "oauth/access_token"

    def __init__(
        self,
        *,
        store: OptionStore,
        credentials: Credentials,
        app_credentials: AppCredentials,
        base_url: str,
        timeout: float = 10.0,
        scope: str = "read",
        token_cipher: Optional[TokenCipherService] = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._credentials = credentials
        self._app = app_credentials
        self._base_url = base_url
        self._timeout = timeout
        self._scope = scope
        self._cipher = token_cipher
        self._transport = transport
        self._clock = clock
        self._lock = asyncio.Lock()

    async def authenticate(self, refresh_token: Optional[str] = None) -> AuthResult:
        """
        Run a grant against the token endpoint and persist the issued token.

        Uses the refresh-token grant when ``refresh_token`` is given and the
        password grant otherwise. A response whose ``expires_in`` is missing or
        null is returned as an :class:`AuthError` and leaves the stored token
        untouched.
        """
        payload = self._grant_payload(refresh_token)
        grant_type = payload["grant_type"]
        request = EndpointRequest(
            method="POST",
            path=self.TOKEN_PATH,
            body=payload,
            json_body=False,
            requires_auth=False,
        )

        response = await send_once(
            request,
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        received_at = self._clock()
        body = decode_json(response)

        if not isinstance(body, dict) or body.get("expires_in") is None:
            logger.warning(
                "Token grant rejected",
                extra={"grant_type": grant_type, "status_code": response.status_code},
            )
            return AuthError(raw=body)

        try:
            token = Token.from_response(body, received_at=received_at)
        except (TypeError, ValueError) as exc:
            raise ResponseDecodeError(response.status_code, response.text) from exc

        self._persist(token)
        logger.info(
            "Stored new access token",
            extra={"grant_type": grant_type, "expires_at": token.expires_at.isoformat()},
        )
        return token

    def get_cached_token(self) -> Optional[Token]:
        """Return the stored token, or ``None`` when not yet authenticated.

        No expiry check is made; an expired token is only replaced once the
        service rejects it.
        """
        record = self._store.get(AUTH_TOKEN_KEY)
        if not record:
            return None
        try:
            if self._cipher is not None:
                record = self._cipher.open_record(record)
            return Token.model_validate(record)
        except ValueError as exc:
            logger.warning("Ignoring unreadable cached token: %s", exc)
            return None

    async def reauthenticate(self, stale_access_token: Optional[str]) -> AuthResult:
        """Replace a rejected token with a password grant, at most one grant at a time.

        A caller that waited on the lock gets the token stored by whoever held
        it, instead of issuing another grant.
        """
        async with self._lock:
            cached = self.get_cached_token()
            if cached is not None and cached.access_token != stale_access_token:
                logger.debug("Reusing token refreshed by a concurrent request")
                return cached
            return await self.authenticate()

    def _grant_payload(self, refresh_token: Optional[str]) -> Dict[str, Any]:
        if not self._app.client_id or not self._app.client_secret:
            raise MissingConfigurationError(
                "Application client id and secret are required to authenticate."
            )

        if refresh_token:
            return {
                "grant_type": "refresh_token",
                "client_id": self._app.client_id,
                "client_secret": self._app.client_secret,
                "refresh_token": refresh_token,
            }

        if not self._credentials.user or not self._credentials.password:
            raise MissingConfigurationError(
                "Account user and password are required for the password grant."
            )
        return {
            "grant_type": "password",
            "client_id": self._app.client_id,
            "client_secret": self._app.client_secret,
            "scope": self._scope,
            "username": self._credentials.user,
            "password": self._credentials.password,
        }

    def _persist(self, token: Token) -> None:
        record = token.model_dump(mode="json")
        if self._cipher is not None:
            record = self._cipher.seal_record(record)
        self._store.set(AUTH_TOKEN_KEY, record)


__all__ = ["TokenManager"]
