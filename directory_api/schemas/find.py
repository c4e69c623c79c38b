"""Typed list-query request shared by the resource list endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CompanySortField(str, Enum):
    """Attributes a company listing may be ordered by."""

    NAME = "name"
    SINCE = "since"


class UserSortField(str, Enum):
    """Attributes a user listing may be ordered by."""

    NAME = "name"
    EMAIL = "email"


@dataclass(frozen=True)
class FindRequest:
    """Normalized ``search``/``sort_by``/``limit`` query parameters.

    Every attribute left as ``None`` means the database default applies.
    """

    search: str | None = None
    sort_by: Enum | None = None
    limit: int | None = None
