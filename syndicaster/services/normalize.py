"""Flatten file set payloads into display records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional
from zoneinfo import ZoneInfo

from syndicaster.core.errors import EmptyResultError
from syndicaster.schemas.records import NormalizedRecord

DEFAULT_DISPLAY_TIMEZONE = "America/Chicago"
DISPLAY_DATE_FORMAT = "%a, %m/%d/%y at %I:%M"

logger = logging.getLogger(__name__)


def format_records(
    payload: Any, *, display_timezone: str = DEFAULT_DISPLAY_TIMEZONE
) -> List[NormalizedRecord]:
    """
    Normalize a search result wrapper (``{"results": [...]}``) or a single file set.

    Records keep their input order. A record with fewer than two files raises
    :class:`EmptyResultError`; callers formatting many records should expect
    that failure per record.
    """
    if payload is None:
        return []
    if isinstance(payload, Mapping) and payload.get("results") is not None:
        entries = list(payload["results"])
    else:
        entries = [payload]

    zone = ZoneInfo(display_timezone)
    return [normalize_record(entry, zone=zone) for entry in entries]


def normalize_record(entry: Any, *, zone: ZoneInfo) -> NormalizedRecord:
    if not isinstance(entry, Mapping):
        raise EmptyResultError("Expected a file set object.", payload=entry)

    files = entry.get("files") or []
    if len(files) < 2:
        raise EmptyResultError(
            f"File set {entry.get('id')} has {len(files)} file(s); "
            "a thumbnail and an image are required.",
            payload=entry,
        )

    metadata = entry.get("metadata") or {}
    return NormalizedRecord(
        id=entry.get("id"),
        parent_id=entry.get("parent_file_set_id"),
        title=metadata.get("title"),
        display_date=format_display_date(entry.get("completed_at"), zone=zone),
        thumbnail_uri=files[0].get("uri"),
        image_uri=files[1].get("uri"),
    )


def format_display_date(value: Any, *, zone: ZoneInfo) -> Optional[str]:
    """Render a completion timestamp as e.g. ``Tue, 03/04/14 at 09:15 am``."""
    moment = _parse_timestamp(value, zone=zone)
    if moment is None:
        return None
    local = moment.astimezone(zone)
    return f"{local.strftime(DISPLAY_DATE_FORMAT)} {local.strftime('%p').lower()}"


def _parse_timestamp(value: Any, *, zone: ZoneInfo) -> Optional[datetime]:
    """Parse epochs and ISO 8601 strings; times without an offset are in ``zone``."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        logger.debug("Unparseable completion timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


__all__ = [
    "DEFAULT_DISPLAY_TIMEZONE",
    "format_display_date",
    "format_records",
    "normalize_record",
]
