"""
Client configuration models and helpers.

Centralizes settings management so the library, the command-line tool and
tests share a consistent configuration surface.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from syndicaster.models.account import AppCredentials, Credentials


class AccountSettings(BaseSettings):
    """Account identity used for the password grant and query scoping."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    user: Optional[str] = Field(None, validation_alias="SYNDICASTER_USER")
    password: Optional[str] = Field(None, validation_alias="SYNDICASTER_PASSWORD")
    content_owner_id: Optional[str] = Field(
        None,
        validation_alias="SYNDICASTER_CONTENT_OWNER_ID",
        description="Content owner used to scope file set searches.",
    )
    publisher_id: Optional[str] = Field(
        None,
        validation_alias="SYNDICASTER_PUBLISHER_ID",
        description="Publisher whose playlists are listed.",
    )

    def is_configured(self) -> bool:
        return bool(self.user)

    def to_credentials(self) -> Credentials:
        return Credentials(
            user=self.user,
            password=self.password,
            content_owner_id=self.content_owner_id,
            publisher_id=self.publisher_id,
        )


class AppCredentialSettings(BaseSettings):
    """Registered application identity for the OAuth endpoint."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    client_id: Optional[str] = Field(None, validation_alias="SYNDICASTER_CLIENT_ID")
    client_secret: Optional[str] = Field(
        None, validation_alias="SYNDICASTER_CLIENT_SECRET"
    )

    def is_configured(self) -> bool:
        return bool(self.client_id)

    def to_credentials(self) -> AppCredentials:
        return AppCredentials(client_id=self.client_id, client_secret=self.client_secret)


class SyndicasterSettings(BaseSettings):
    """Root settings object for the catalog client."""

    model_config = SettingsConfigDict(
        env_prefix="SYNDICASTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    base_url: str = Field("http://api.syndicaster.tv/")
    request_timeout: float = Field(
        10.0,
        description="Timeout in seconds applied to every individual HTTP attempt.",
    )
    oauth_scope: str = Field("read")
    option_store_path: str = Field(
        ".syndicaster/options.db",
        description="SQLite file holding the cached token and stored credentials.",
    )
    display_timezone: str = Field(
        "America/Chicago",
        description=(
            "Fixed timezone used when rendering completion dates for display."
        ),
    )
    log_level: str = Field("INFO")
    token_encryption_secret: Optional[str] = Field(
        None,
        description="Secret used to derive the key encrypting stored tokens.",
    )
    account: AccountSettings = Field(default_factory=AccountSettings)
    app: AppCredentialSettings = Field(default_factory=AppCredentialSettings)

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        """Endpoint paths are appended directly to the base URL."""
        return value if value.endswith("/") else f"{value}/"

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout must be positive")
        return value


@lru_cache()
def get_settings() -> SyndicasterSettings:
    """Return a cached settings object."""
    return SyndicasterSettings()


__all__ = [
    "AccountSettings",
    "AppCredentialSettings",
    "SyndicasterSettings",
    "get_settings",
]
