"""Normalization of list-endpoint query parameters into a FindRequest."""

from __future__ import annotations

from enum import Enum
import re

from fastapi import Query

from directory_api.core.errors import ParsingError
from directory_api.schemas.find import FindRequest

LIMIT_MIN = 1
LIMIT_MAX = 100

_U32_MAX = 2**32 - 1
_UNSIGNED_DIGITS = re.compile(r"\+?[0-9]+")


def describe_choices(sort_fields: type[Enum]) -> str:
    """Phrase the allowed sort names as ``Must be one of a, b and c``."""
    names = [member.value for member in sort_fields]
    if len(names) == 1:
        return f"Must be {names[0]}"
    return f"Must be one of {', '.join(names[:-1])} and {names[-1]}"


def parse_limit(raw: str) -> int:
    """Parse an unsigned 32-bit integer the strict way; the error names what was wrong."""
    if raw == "" or raw == "+":
        raise ValueError("cannot parse integer from empty string")
    if not _UNSIGNED_DIGITS.fullmatch(raw):
        raise ValueError("invalid digit found in string")
    value = int(raw)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def normalize_find_params(
    sort_fields: type[Enum],
    *,
    search: str | None = None,
    sort_by: str | None = None,
    limit: str | None = None,
) -> FindRequest:
    """Convert raw query strings into a FindRequest, failing on the first bad parameter."""
    sort_value: Enum | None = None
    if sort_by is not None:
        try:
            sort_value = sort_fields(sort_by)
        except ValueError:
            raise ParsingError("sort_by", describe_choices(sort_fields)) from None

    limit_value: int | None = None
    if limit is not None:
        try:
            limit_value = parse_limit(limit)
        except ValueError as exc:
            raise ParsingError("limit", str(exc)) from None
        if not LIMIT_MIN <= limit_value <= LIMIT_MAX:
            raise ParsingError("limit", f"Must be between {LIMIT_MIN} and {LIMIT_MAX}")

    return FindRequest(search=search, sort_by=sort_value, limit=limit_value)


def find_request(sort_fields: type[Enum]):
    """Build a FastAPI dependency for a list endpoint ordered by ``sort_fields``.

    Parameters are declared as plain strings so malformed values reach the
    normalizer and get a field-attributed error instead of a generic one.
    """

    def dependency(
        search: str | None = Query(default=None),
        sort_by: str | None = Query(default=None, description=describe_choices(sort_fields)),
        limit: str | None = Query(default=None, description=f"{LIMIT_MIN}-{LIMIT_MAX}"),
    ) -> FindRequest:
        return normalize_find_params(sort_fields, search=search, sort_by=sort_by, limit=limit)

    dependency.__name__ = f"find_{sort_fields.__name__.lower()}"
    return dependency
