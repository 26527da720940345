#!/usr/bin/env python
"""Command-line access to the Syndicaster catalog.

Example usages::

    # Store the account and app identity once.
    python -m scripts.syndicaster_cli configure --user me --password secret \
        --content-owner 12 --publisher 34 --client-id app --client-secret shh

    # Search and print normalized records.
    python -m scripts.syndicaster_cli search "Evening News" --lookup weather

    # Drop the cached token so the next call re-authenticates.
    python -m scripts.syndicaster_cli logout

    # Exchange a refresh token for a new access token.
    python -m scripts.syndicaster_cli token --refresh-token abc123
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from syndicaster.clients import (  # noqa: E402
    ACCOUNT_KEY,
    APP_KEY,
    AUTH_TOKEN_KEY,
    ApiClient,
)
from syndicaster.core.errors import (  # noqa: E402
    AuthorizationExpired,
    EmptyResultError,
    MissingConfigurationError,
    ResponseDecodeError,
    TransportError,
)
from syndicaster.core.logging import configure_logging  # noqa: E402
from syndicaster.dependencies import (  # noqa: E402
    get_api_client,
    get_app_settings,
    get_option_store,
)
from syndicaster.models.token import AuthError  # noqa: E402
from syndicaster.schemas import NormalizedRecord  # noqa: E402

EXIT_OK = 0
EXIT_AUTH_ERROR = 2
EXIT_CONFIG_ERROR = 3
EXIT_TRANSPORT_ERROR = 4


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, NormalizedRecord):
        return value.model_dump(by_alias=True)
    return value


def _emit(value: Any) -> None:
    print(json.dumps(_to_jsonable(value), indent=2, default=str))


async def _token(client: ApiClient, args: argparse.Namespace) -> int:
    result = await client.token_manager.authenticate(refresh_token=args.refresh_token)
    if isinstance(result, AuthError):
        print(f"Authentication failed: {result.message}", file=sys.stderr)
        _emit(result.raw)
        return EXIT_AUTH_ERROR
    _emit(
        {
            "token_type": result.token_type,
            "expires_at": result.expires_at.isoformat(),
            "has_refresh_token": bool(result.refresh_token),
        }
    )
    return EXIT_OK


async def _playlists(client: ApiClient, args: argparse.Namespace) -> int:
    playlists = await client.get_playlists()
    if playlists is None:
        print("No publisher id configured; nothing to list.", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    _emit(playlists)
    return EXIT_OK


async def _search(client: ApiClient, args: argparse.Namespace) -> int:
    _emit(
        await client.search(
            args.playlist,
            lookup=args.lookup,
            per_page=args.per_page,
            page=args.page,
            formatted=not args.raw,
        )
    )
    return EXIT_OK


async def _video(client: ApiClient, args: argparse.Namespace) -> int:
    _emit(
        await client.get_video_info(
            args.file_id, options=args.options, formatted=not args.raw
        )
    )
    return EXIT_OK


async def _clip(client: ApiClient, args: argparse.Namespace) -> int:
    _emit(await client.get_clip_id(args.file_id, return_id_only=not args.all))
    return EXIT_OK


async def _content_owners(client: ApiClient, args: argparse.Namespace) -> int:
    _emit(await client.content_owners(args.lookup))
    return EXIT_OK


_HANDLERS: dict[str, Callable[[ApiClient, argparse.Namespace], Awaitable[int]]] = {
    "token": _token,
    "playlists": _playlists,
    "search": _search,
    "video": _video,
    "clip": _clip,
    "content-owners": _content_owners,
}


def _configure(args: argparse.Namespace) -> int:
    """Persist account and app identity in the option store."""
    store = get_option_store()
    account = {
        "user": args.user,
        "password": args.password,
        "content_owner_id": args.content_owner,
        "publisher_id": args.publisher,
    }
    app = {"client_id": args.client_id, "client_secret": args.client_secret}
    store.set(ACCOUNT_KEY, {**(store.get(ACCOUNT_KEY) or {}), **_present(account)})
    store.set(APP_KEY, {**(store.get(APP_KEY) or {}), **_present(app)})
    print("Stored account and app credentials.")
    return EXIT_OK


def _logout(args: argparse.Namespace) -> int:
    """Forget the cached token; stored credentials stay unless --forget-credentials."""
    store = get_option_store()
    keys = [AUTH_TOKEN_KEY]
    if args.forget_credentials:
        keys += [ACCOUNT_KEY, APP_KEY]
    for key in keys:
        store.delete(key)
    print("Removed " + ", ".join(keys) + " from the option store.")
    return EXIT_OK


def _present(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query the Syndicaster video catalog.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    configure_parser = subparsers.add_parser(
        "configure", help="Store account and app credentials in the option store."
    )
    for flag in (
        "--user",
        "--password",
        "--content-owner",
        "--publisher",
        "--client-id",
        "--client-secret",
    ):
        configure_parser.add_argument(flag, default=None)

    logout_parser = subparsers.add_parser(
        "logout", help="Remove the cached access token from the option store."
    )
    logout_parser.add_argument(
        "--forget-credentials",
        action="store_true",
        help="Also remove the stored account and app credentials.",
    )

    token_parser = subparsers.add_parser(
        "token", help="Authenticate and store a fresh access token."
    )
    token_parser.add_argument(
        "--refresh-token",
        default=None,
        help="Use the refresh-token grant instead of the password grant.",
    )

    subparsers.add_parser("playlists", help="List the publisher's playlists.")

    search_parser = subparsers.add_parser("search", help="Search file sets.")
    search_parser.add_argument("playlist")
    search_parser.add_argument("--lookup", default="")
    search_parser.add_argument("--per-page", type=int, default=12)
    search_parser.add_argument("--page", type=int, default=1)
    search_parser.add_argument("--raw", action="store_true", help="Skip normalization.")

    video_parser = subparsers.add_parser("video", help="Show one file set.")
    video_parser.add_argument("file_id")
    video_parser.add_argument("--options", default="metadata,files")
    video_parser.add_argument("--raw", action="store_true", help="Skip normalization.")

    clip_parser = subparsers.add_parser("clip", help="Show a file set's clip id.")
    clip_parser.add_argument("file_id")
    clip_parser.add_argument(
        "--all", action="store_true", help="Print every distribution instead."
    )

    owners_parser = subparsers.add_parser(
        "content-owners", help="List the account's content owners."
    )
    owners_parser.add_argument(
        "--lookup",
        default="",
        help="Accepted for compatibility; the service listing is not filtered.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_app_settings().log_level)

    if args.command == "configure":
        return _configure(args)
    if args.command == "logout":
        return _logout(args)

    handler = _HANDLERS[args.command]
    try:
        return asyncio.run(handler(get_api_client(), args))
    except AuthorizationExpired as exc:
        print(f"Authorization failed: {exc.auth_error.message}", file=sys.stderr)
        return EXIT_AUTH_ERROR
    except (MissingConfigurationError, EmptyResultError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except (TransportError, ResponseDecodeError) as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return EXIT_TRANSPORT_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
