"""Parameterized AQL for list endpoints.

User input never becomes part of the query text: the search term, sort
attribute and limit all travel as bind variables.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any

from directory_api.schemas.find import FindRequest

DEFAULT_SEARCH_FIELD = "name"


@dataclass(frozen=True)
class FindQuery:
    """AQL text plus the values bound to its placeholders."""

    query: str
    bind_vars: dict[str, Any] = field(default_factory=dict)


def build_find_query(
    collection: str,
    request: FindRequest,
    *,
    search_field: str = DEFAULT_SEARCH_FIELD,
) -> FindQuery:
    """Build the list query; clauses always appear as filter, sort, limit."""
    terms = ["FOR doc IN @@collection"]
    bind_vars: dict[str, Any] = {"@collection": collection}

    search = (request.search or "").strip()
    if search:
        terms.append("FILTER CONTAINS(doc.@search_field, @search)")
        bind_vars["search_field"] = search_field
        bind_vars["search"] = search

    if request.sort_by is not None:
        terms.append("SORT doc.@sort_by ASC")
        bind_vars["sort_by"] = request.sort_by.value

    if request.limit is not None:
        terms.append("LIMIT 0, @limit")
        bind_vars["limit"] = request.limit

    terms.append("RETURN doc")
    return FindQuery(query=" ".join(terms), bind_vars=bind_vars)
