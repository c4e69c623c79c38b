"""Pydantic schemas for user API payloads."""

from __future__ import annotations

from typing import ClassVar

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from directory_api.ingestion.rules import RequestModel
from directory_api.ingestion.rules import Rule
from directory_api.ingestion.rules import email_address
from directory_api.ingestion.rules import length
from directory_api.ingestion.rules import must_match
from directory_api.ingestion.rules import required

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

# Form keys a user payload is assembled from; anything else in the form is ignored.
USER_FORM_FIELDS = ("name", "email", "password", "password_confirmation", "avatar")

_confirmation_matches = must_match("password", message="Must match password")
# Whitespace in a password is significant.
_password_length = length(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH, strip=False)


class UserCreate(RequestModel):
    """Payload to create a user."""

    field_rules: ClassVar[dict[str, tuple[Rule, ...]]] = {
        "name": (required, length(max_length=255)),
        "email": (required, email_address),
        "password": (required, _password_length),
        "password_confirmation": (required, _confirmation_matches),
    }

    name: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None
    avatar: str | None = None


class UserUpdate(RequestModel):
    """Payload to update a user; a new password needs a matching confirmation."""

    field_rules: ClassVar[dict[str, tuple[Rule, ...]]] = {
        "name": (length(min_length=1, max_length=255),),
        "email": (email_address,),
        "password": (_password_length,),
        "password_confirmation": (_confirmation_matches,),
    }

    name: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None
    avatar: str | None = None


class User(BaseModel):
    """User response payload; the password hash is never exposed."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(validation_alias=AliasChoices("_key", "key"))
    name: str
    email: str
    avatar: str | None = None


class UserListResponse(BaseModel):
    """List response envelope for users."""

    items: list[User]
