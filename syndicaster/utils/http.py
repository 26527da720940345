"""HTTP utilities: single attempts and the one-shot re-authentication sequence."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from syndicaster.core.errors import ResponseDecodeError, TransportError
from syndicaster.schemas.records import EndpointRequest

UNAUTHORIZED = 401

Attempt = Callable[[Optional[str]], Awaitable[httpx.Response]]
Reauthenticate = Callable[[Optional[str]], Awaitable[str]]


async def send_once(
    request: EndpointRequest,
    *,
    base_url: str,
    timeout: float,
    headers: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """Execute ``request`` exactly once and return the raw response."""
    kwargs: dict[str, Any] = {}
    body = request.body
    if body is not None and body != "":
        if request.json_body:
            kwargs["json"] = body
        elif isinstance(body, Mapping):
            kwargs["data"] = body
        else:
            kwargs["content"] = body

    try:
        async with httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        ) as client:
            return await client.request(
                request.method,
                request.path,
                params=request.params,
                headers=headers,
                **kwargs,
            )
    except httpx.TransportError as exc:
        raise TransportError(
            f"{request.method} {request.path} failed: {exc.__class__.__name__}: {exc}"
        ) from exc


def decode_json(response: httpx.Response) -> Any:
    """Decode a response body regardless of status; an empty body decodes to ``None``."""
    if not response.content.strip():
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ResponseDecodeError(response.status_code, response.text) from exc


async def send_with_reauthentication(
    attempt: Attempt,
    reauthenticate: Reauthenticate,
    access_token: Optional[str],
) -> httpx.Response:
    """Run ``attempt``; on a 401 re-authenticate once and run it exactly once more.

    The second response is returned whatever its status.
    """
    response = await attempt(access_token)
    if response.status_code != UNAUTHORIZED:
        return response

    fresh_token = await reauthenticate(access_token)
    return await attempt(fresh_token)


__all__ = [
    "UNAUTHORIZED",
    "decode_json",
    "send_once",
    "send_with_reauthentication",
]
