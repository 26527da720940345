from __future__ import annotations

import asyncio

import httpx
import pytest

from _fakes import (
    CREDENTIALS,
    FakeOptionStore,
    RecordingTransport,
    build_client,
    form_fields,
    json_body,
    token_response,
)
from syndicaster.clients import AUTH_TOKEN_KEY
from syndicaster.core.errors import (
    AuthorizationExpired,
    EmptyResultError,
    MissingConfigurationError,
    ResponseDecodeError,
    TransportError,
)
from syndicaster.models.account import Credentials
from syndicaster.schemas import NormalizedRecord

TOKEN_PATH = "/oauth/access_token"


def _store_with_token(access_token: str = "cached-token") -> FakeOptionStore:
    return FakeOptionStore(
        {
            AUTH_TOKEN_KEY: {
                "access_token": access_token,
                "token_type": "bearer",
                "expires_at": "2030-01-01T00:00:00+00:00",
            }
        }
    )


def _file_set(file_set_id: int, title: str) -> dict:
    return {
        "id": file_set_id,
        "parent_file_set_id": file_set_id * 10,
        "completed_at": "2014-03-04T15:15:00Z",
        "metadata": {"title": title},
        "files": [
            {"uri": f"https://cdn.example/{file_set_id}/thumb.jpg"},
            {"uri": f"https://cdn.example/{file_set_id}/image.jpg"},
        ],
    }


@pytest.mark.anyio
async def test_authenticated_request_attaches_oauth_header() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json={"ok": True}))
    client = build_client(_store_with_token(), transport)

    result = await client.request("GET", "file_sets/1/distributions")

    assert result == {"ok": True}
    (request,) = transport.requests
    assert str(request.url) == "https://api.syndicaster.test/file_sets/1/distributions"
    assert request.headers["authorization"] == "OAuth cached-token"
    assert request.headers["content-type"] == "application/json"


@pytest.mark.anyio
async def test_unauthorized_triggers_one_reauthentication_and_one_retry() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            return token_response("fresh-token")
        if request.headers["authorization"] == "OAuth cached-token":
            return httpx.Response(401, json={"error": "expired"})
        return httpx.Response(200, json={"items": [1, 2]})

    store = _store_with_token()
    transport = RecordingTransport(handler)
    client = build_client(store, transport)

    result = await client.request("GET", "syndi_playlists.json")

    assert result == {"items": [1, 2]}
    assert len(transport.calls_to(TOKEN_PATH)) == 1
    assert form_fields(transport.calls_to(TOKEN_PATH)[0])["grant_type"] == "password"
    attempts = transport.calls_to("/syndi_playlists.json")
    assert [request.headers["authorization"] for request in attempts] == [
        "OAuth cached-token",
        "OAuth fresh-token",
    ]
    assert store.get(AUTH_TOKEN_KEY)["access_token"] == "fresh-token"


@pytest.mark.anyio
async def test_second_unauthorized_is_returned_unmodified() -> None:
    rejection = {"error": "access_denied", "attempt": "second"}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            return token_response("fresh-token")
        return httpx.Response(401, json=rejection)

    transport = RecordingTransport(handler)
    client = build_client(_store_with_token(), transport)

    result = await client.request("GET", "file_sets/9/metadata,files")

    assert result == rejection
    assert len(transport.calls_to(TOKEN_PATH)) == 1
    assert len(transport.calls_to("/file_sets/9/metadata,files")) == 2


@pytest.mark.anyio
async def test_failed_reauthentication_raises_authorization_expired() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            return httpx.Response(400, json={"error": "invalid_client"})
        return httpx.Response(401, json={"error": "expired"})

    transport = RecordingTransport(handler)
    client = build_client(_store_with_token(), transport)

    with pytest.raises(AuthorizationExpired) as excinfo:
        await client.request("GET", "syndi_playlists.json")

    assert excinfo.value.auth_error.raw == {"error": "invalid_client"}
    assert len(transport.calls_to("/syndi_playlists.json")) == 1


@pytest.mark.anyio
async def test_missing_token_is_obtained_after_first_rejection(option_store) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            return token_response("first-token")
        if "authorization" not in request.headers:
            return httpx.Response(401, json={"error": "unauthorized"})
        return httpx.Response(200, json=[{"repo_guid": "guid-1"}])

    transport = RecordingTransport(handler)
    client = build_client(option_store, transport)

    assert await client.get_clip_id(5) == "guid-1"
    assert [request.url.path for request in transport.requests] == [
        "/file_sets/5/distributions",
        TOKEN_PATH,
        "/file_sets/5/distributions",
    ]


@pytest.mark.anyio
async def test_other_error_statuses_are_decoded_without_retry() -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(500, json={"error": "boom"})
    )
    client = build_client(_store_with_token(), transport)

    assert await client.request("GET", "syndi_playlists.json") == {"error": "boom"}
    assert len(transport.requests) == 1


@pytest.mark.anyio
async def test_unauthenticated_request_returns_unauthorized_as_is() -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(401, json={"error": "nope"})
    )
    client = build_client(_store_with_token(), transport)

    result = await client.request(
        "POST", "oauth/access_token", {"a": "b"}, json_body=False, requires_auth=False
    )

    assert result == {"error": "nope"}
    (request,) = transport.requests
    assert "authorization" not in request.headers
    assert form_fields(request) == {"a": "b"}


@pytest.mark.anyio
async def test_empty_body_decodes_to_none() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(204))
    client = build_client(_store_with_token(), transport)

    assert await client.request("GET", "syndi_playlists.json") is None


@pytest.mark.anyio
async def test_non_json_body_raises_decode_error() -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(502, text="<html>Bad Gateway</html>")
    )
    client = build_client(_store_with_token(), transport)

    with pytest.raises(ResponseDecodeError) as excinfo:
        await client.request("GET", "syndi_playlists.json")

    assert excinfo.value.status_code == 502


@pytest.mark.anyio
async def test_network_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = build_client(_store_with_token(), RecordingTransport(handler))

    with pytest.raises(TransportError):
        await client.request("GET", "syndi_playlists.json")


@pytest.mark.anyio
async def test_concurrent_rejections_share_one_reauthentication() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            await asyncio.sleep(0.01)
            return token_response("fresh-token")
        if request.headers["authorization"] == "OAuth cached-token":
            await asyncio.sleep(0.01)
            return httpx.Response(401, json={"error": "expired"})
        return httpx.Response(200, json={"ok": True})

    transport = RecordingTransport(handler)
    client = build_client(_store_with_token(), transport)

    results = await asyncio.gather(
        client.request("GET", "syndi_playlists.json"),
        client.request("GET", "syndi_playlists.json"),
    )

    assert results == [{"ok": True}, {"ok": True}]
    assert len(transport.calls_to(TOKEN_PATH)) == 1


@pytest.mark.anyio
async def test_get_playlists_without_publisher_makes_no_call(option_store) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=[]))
    client = build_client(
        option_store,
        transport,
        credentials=CREDENTIALS.model_copy(update={"publisher_id": None}),
    )

    assert await client.get_playlists() is None
    assert transport.requests == []


@pytest.mark.anyio
async def test_get_playlists_filters_by_publisher() -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(200, json=[{"id": 1, "name": "News"}])
    )
    client = build_client(_store_with_token(), transport)

    assert await client.get_playlists() == [{"id": 1, "name": "News"}]
    (request,) = transport.requests
    assert request.method == "GET"
    assert request.url.path == "/syndi_playlists.json"
    assert request.url.params["publisher_id[]"] == "77"


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("playlist", "lookup", "expected"),
    [
        ("foo", "", "foo"),
        ("foo", "bar", "bar foo"),
        ("", "bar", "bar"),
    ],
)
async def test_search_builds_query_from_lookup_then_playlist(
    playlist: str, lookup: str, expected: str
) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json={"results": []}))
    client = build_client(_store_with_token(), transport)

    await client.search(playlist, lookup)

    assert json_body(transport.requests[0])["query"] == expected


@pytest.mark.anyio
async def test_search_posts_fixed_filter_document() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json={"results": []}))
    client = build_client(_store_with_token(), transport)

    raw = await client.search("News", per_page=5, page=3, formatted=False)

    assert raw == {"results": []}
    (request,) = transport.requests
    assert request.method == "POST"
    assert request.url.path == "/file_sets/search.json"
    assert json_body(request) == {
        "content_owner_ids": ["42"],
        "distributable": True,
        "per_page": 5,
        "page": 3,
        "media_type_ids": ["3"],
        "query": "News",
        "status_ids": ["3"],
    }


@pytest.mark.anyio
async def test_search_formats_results_in_order() -> None:
    payload = {"results": [_file_set(1, "First"), _file_set(2, "Second")]}
    transport = RecordingTransport(lambda request: httpx.Response(200, json=payload))
    client = build_client(_store_with_token(), transport)

    records = await client.search("News")

    assert [record.title for record in records] == ["First", "Second"]
    assert all(isinstance(record, NormalizedRecord) for record in records)


@pytest.mark.anyio
async def test_search_requires_content_owner(option_store) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json={}))
    client = build_client(option_store, transport, credentials=Credentials(user="u"))

    with pytest.raises(MissingConfigurationError):
        await client.search("News")

    assert transport.requests == []


@pytest.mark.anyio
async def test_get_video_info_requests_options_path_and_formats() -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(200, json=_file_set(7, "Solo"))
    )
    client = build_client(_store_with_token(), transport)

    records = await client.get_video_info(7)

    assert transport.requests[0].url.path == "/file_sets/7/metadata,files"
    assert len(records) == 1
    assert records[0].id == "7"
    assert records[0].image_uri == "https://cdn.example/7/image.jpg"


@pytest.mark.anyio
async def test_get_video_info_raw_passthrough() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json={"id": 7}))
    client = build_client(_store_with_token(), transport)

    raw = await client.get_video_info(7, options="metadata", formatted=False)

    assert raw == {"id": 7}
    assert transport.requests[0].url.path == "/file_sets/7/metadata"


@pytest.mark.anyio
async def test_get_clip_id_returns_first_guid_or_full_list() -> None:
    distributions = [{"repo_guid": "guid-a"}, {"repo_guid": "guid-b"}]
    transport = RecordingTransport(lambda request: httpx.Response(200, json=distributions))
    client = build_client(_store_with_token(), transport)

    assert await client.get_clip_id(3) == "guid-a"
    assert await client.get_clip_id(3, return_id_only=False) == distributions


@pytest.mark.anyio
async def test_get_clip_id_on_empty_distributions_raises() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=[]))
    client = build_client(_store_with_token(), transport)

    with pytest.raises(EmptyResultError):
        await client.get_clip_id(3)


@pytest.mark.anyio
async def test_content_owners_never_sends_lookup() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=[{"id": 42}]))
    client = build_client(_store_with_token(), transport)

    assert await client.content_owners("acme") == [{"id": 42}]
    (request,) = transport.requests
    assert request.method == "GET"
    assert request.url.path == "/admin/content_owners"
    assert request.url.query == b""
    assert request.content == b""
