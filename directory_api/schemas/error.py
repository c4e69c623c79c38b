"""Error envelope schemas returned by every rejected request."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """One field-attributed problem with the inbound request."""

    field: str
    issue: str


class ErrorObject(BaseModel):
    """Body of the error envelope."""

    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorObject


def details_from_mapping(errors: Mapping[str, Iterable[str]]) -> list[ErrorDetail]:
    """Flatten a field -> messages mapping into envelope details, field order preserved."""
    return [ErrorDetail(field=field, issue=issue) for field, issues in errors.items() for issue in issues]
