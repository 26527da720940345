"""
Domain models for OAuth token persistence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class Token(BaseModel):
    """Access token issued by the OAuth endpoint.

    ``expires_at`` is an absolute UTC deadline. Any extra fields returned by the
    token endpoint (``scope`` for instance) are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_at: datetime

    @classmethod
    def from_response(cls, payload: dict[str, Any], *, received_at: datetime) -> "Token":
        """Build a token from a successful grant response.

        The server reports ``expires_in`` as seconds from now; it is converted to
        a deadline relative to ``received_at`` and not kept.
        """
        fields = {key: value for key, value in payload.items() if key != "expires_in"}
        fields["expires_at"] = received_at + timedelta(seconds=float(payload["expires_in"]))
        return cls.model_validate(fields)

    @model_validator(mode="before")
    @classmethod
    def _legacy_absolute_expiry(cls, data: Any) -> Any:
        # Older records stored the absolute epoch deadline under ``expires_in``.
        if isinstance(data, dict) and "expires_at" not in data and "expires_in" in data:
            data = dict(data)
            epoch = float(data.pop("expires_in"))
            data["expires_at"] = datetime.fromtimestamp(epoch, tz=timezone.utc)
        return data

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


@dataclass(frozen=True)
class AuthError:
    """Failed grant: the decoded response carried no ``expires_in`` field."""

    raw: Any

    @property
    def message(self) -> str:
        if isinstance(self.raw, dict):
            for key in ("error_description", "error", "message"):
                if self.raw.get(key):
                    return str(self.raw[key])
        return "Authentication endpoint did not return a token."


AuthResult = Union[Token, AuthError]


__all__ = ["AuthError", "AuthResult", "Token"]
