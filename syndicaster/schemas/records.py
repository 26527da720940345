"""Schemas describing outbound requests and normalized catalog records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class EndpointRequest:
    """One outbound call against the catalog service."""

    method: str
    path: str
    body: Any = None
    params: Optional[Mapping[str, Any]] = None
    json_body: bool = True
    requires_auth: bool = True


class NormalizedRecord(BaseModel):
    """Flat display shape of a file set.

    Dumping with ``by_alias=True`` yields the legacy keys consumed by existing
    templates (``date``, ``thumb``, ``image``).
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: Optional[str] = None
    parent_id: Optional[str] = None
    title: Optional[str] = None
    display_date: Optional[str] = Field(None, serialization_alias="date")
    thumbnail_uri: Optional[str] = Field(None, serialization_alias="thumb")
    image_uri: Optional[str] = Field(None, serialization_alias="image")


__all__ = ["EndpointRequest", "NormalizedRecord"]
