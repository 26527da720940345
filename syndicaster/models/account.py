"""
Domain models for the account and application identities.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Account identity used for the password grant and to scope catalog queries."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, coerce_numbers_to_str=True
    )

    user: Optional[str] = None
    password: Optional[str] = None
    content_owner_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("content_owner_id", "content_owner")
    )
    publisher_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("publisher_id", "publisher")
    )


class AppCredentials(BaseModel):
    """Registered application identity presented to the OAuth endpoint."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, coerce_numbers_to_str=True
    )

    client_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("client_id", "id")
    )
    client_secret: Optional[str] = Field(
        None, validation_alias=AliasChoices("client_secret", "secret")
    )


__all__ = ["AppCredentials", "Credentials"]
