"""Pydantic schemas for company API payloads."""

from __future__ import annotations

from typing import ClassVar

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from directory_api.ingestion.rules import RequestModel
from directory_api.ingestion.rules import Rule
from directory_api.ingestion.rules import email_address
from directory_api.ingestion.rules import http_url
from directory_api.ingestion.rules import length
from directory_api.ingestion.rules import required
from directory_api.ingestion.rules import year_between

FOUNDING_YEAR_MIN = 1800

_OPTIONAL_RULES: dict[str, tuple[Rule, ...]] = {
    "name": (length(min_length=1, max_length=255),),
    "since": (year_between(FOUNDING_YEAR_MIN),),
    "email": (email_address,),
    "website": (http_url,),
    "description": (length(max_length=2000),),
}


class CompanyCreate(RequestModel):
    """Payload to create a company."""

    field_rules: ClassVar[dict[str, tuple[Rule, ...]]] = {
        **_OPTIONAL_RULES,
        "name": (required, length(max_length=255)),
        "since": (required, year_between(FOUNDING_YEAR_MIN)),
    }

    name: str | None = None
    since: int | None = None
    email: str | None = None
    website: str | None = None
    description: str | None = None


class CompanyUpdate(RequestModel):
    """Payload to update mutable company fields; absent fields are left untouched."""

    field_rules: ClassVar[dict[str, tuple[Rule, ...]]] = _OPTIONAL_RULES

    name: str | None = None
    since: int | None = None
    email: str | None = None
    website: str | None = None
    description: str | None = None


class CompanyDelete(RequestModel):
    """Deletion confirmation: the caller repeats the company's current name."""

    field_rules: ClassVar[dict[str, tuple[Rule, ...]]] = {"name": (required,)}

    name: str | None = None


class Company(BaseModel):
    """Company response payload."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(validation_alias=AliasChoices("_key", "key"))
    name: str
    since: int
    email: str | None = None
    website: str | None = None
    description: str | None = None


class CompanyListResponse(BaseModel):
    """List response envelope for companies."""

    items: list[Company]
