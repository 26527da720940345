"""
Authenticated client for the Syndicaster catalog endpoints.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

import httpx

from syndicaster.clients.token_manager import TokenManager
from syndicaster.core.errors import (
    AuthorizationExpired,
    EmptyResultError,
    MissingConfigurationError,
)
from syndicaster.models.account import Credentials
from syndicaster.models.token import AuthError
from syndicaster.schemas.records import EndpointRequest, NormalizedRecord
from syndicaster.services.normalize import DEFAULT_DISPLAY_TIMEZONE, format_records
from syndicaster.utils.http import decode_json, send_once, send_with_reauthentication

logger = logging.getLogger(__name__)

# Media type and status filters applied to every search.
SEARCH_MEDIA_TYPE_IDS = ["3"]
SEARCH_STATUS_IDS = ["3"]


class ApiClient:
    """Issue catalog requests, repairing a rejected token once per call."""

    def __init__(
        self,
        *,
        token_manager: TokenManager,
        credentials: Credentials,
        base_url: str,
        timeout: float = 10.0,
        display_timezone: str = DEFAULT_DISPLAY_TIMEZONE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tokens = token_manager
        self._credentials = credentials
        self._base_url = base_url
        self._timeout = timeout
        self._display_timezone = display_timezone
        self._transport = transport

    @property
    def token_manager(self) -> TokenManager:
        return self._tokens

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: bool = True,
        requires_auth: bool = True,
    ) -> Any:
        """
        Send one request and return its decoded JSON body, whatever the status.

        Authenticated requests that get a 401 trigger a single password-grant
        re-authentication followed by a single retry; the retry's response is
        returned as-is, even if it is another 401.
        """
        endpoint = EndpointRequest(
            method=method,
            path=path,
            body=body,
            params=params,
            json_body=json_body,
            requires_auth=requires_auth,
        )
        return await self.send(endpoint)

    async def send(self, endpoint: EndpointRequest) -> Any:
        if not endpoint.requires_auth:
            response = await send_once(
                endpoint,
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
            return decode_json(response)

        async def attempt(access_token: Optional[str]) -> httpx.Response:
            headers = {"Content-Type": "application/json"}
            if access_token:
                headers["Authorization"] = f"OAuth {access_token}"
            return await send_once(
                endpoint,
                base_url=self._base_url,
                timeout=self._timeout,
                headers=headers,
                transport=self._transport,
            )

        async def reauthenticate(stale_access_token: Optional[str]) -> str:
            logger.info(
                "Access token rejected; re-authenticating",
                extra={"method": endpoint.method, "path": endpoint.path},
            )
            result = await self._tokens.reauthenticate(stale_access_token)
            if isinstance(result, AuthError):
                raise AuthorizationExpired(result)
            return result.access_token

        cached = self._tokens.get_cached_token()
        response = await send_with_reauthentication(
            attempt,
            reauthenticate,
            cached.access_token if cached is not None else None,
        )
        return decode_json(response)

    async def get_playlists(self) -> Any:
        """List the configured publisher's playlists; ``None`` without a publisher."""
        if not self._credentials.publisher_id:
            return None
        return await self.request(
            "GET",
            "syndi_playlists.json",
            params={"publisher_id[]": self._credentials.publisher_id},
        )

    async def search(
        self,
        playlist: str,
        lookup: str = "",
        per_page: int = 12,
        page: int = 1,
        formatted: bool = True,
    ) -> Union[List[NormalizedRecord], Any]:
        """Search distributable file sets of the configured content owner."""
        if not self._credentials.content_owner_id:
            raise MissingConfigurationError("A content owner id is required to search.")

        query = f"{lookup} {playlist}".strip()
        payload = {
            "content_owner_ids": [self._credentials.content_owner_id],
            "distributable": True,
            "per_page": per_page,
            "page": page,
            "media_type_ids": SEARCH_MEDIA_TYPE_IDS,
            "query": query,
            "status_ids": SEARCH_STATUS_IDS,
        }
        response = await self.request("POST", "file_sets/search.json", payload)
        if formatted:
            return format_records(response, display_timezone=self._display_timezone)
        return response

    async def get_video_info(
        self,
        file_id: Union[int, str],
        options: str = "metadata,files",
        formatted: bool = True,
    ) -> Union[List[NormalizedRecord], Any]:
        response = await self.request("GET", f"file_sets/{file_id}/{options}")
        if formatted:
            return format_records(response, display_timezone=self._display_timezone)
        return response

    async def get_clip_id(
        self, file_id: Union[int, str], return_id_only: bool = True
    ) -> Any:
        """Return the first distribution's ``repo_guid``, or every distribution."""
        response = await self.request("GET", f"file_sets/{file_id}/distributions")
        if not return_id_only:
            return response
        if not isinstance(response, list) or not response:
            raise EmptyResultError(
                f"File set {file_id} has no distributions.", payload=response
            )
        return response[0].get("repo_guid")

    async def content_owners(self, lookup: str = "") -> Any:
        if lookup:
            logger.debug("content_owners lookup %r is not sent to the service", lookup)
        return await self.request("GET", "/admin/content_owners")


__all__ = ["ApiClient", "SEARCH_STATUS_IDS", "SEARCH_MEDIA_TYPE_IDS"]
