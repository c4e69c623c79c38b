"""Unit tests for the parameterized list query builder."""

from __future__ import annotations

from directory_api.db.query import build_find_query
from directory_api.schemas.find import CompanySortField
from directory_api.schemas.find import FindRequest
from directory_api.schemas.find import UserSortField


def test_default_request_selects_whole_collection() -> None:
    find = build_find_query("companies", FindRequest())

    assert find.query == "FOR doc IN @@collection RETURN doc"
    assert find.bind_vars == {"@collection": "companies"}


def test_all_clauses_are_bound_in_fixed_order() -> None:
    find = build_find_query(
        "users",
        FindRequest(search="  ali  ", sort_by=UserSortField.EMAIL, limit=25),
    )

    assert find.query == (
        "FOR doc IN @@collection "
        "FILTER CONTAINS(doc.@search_field, @search) "
        "SORT doc.@sort_by ASC "
        "LIMIT 0, @limit "
        "RETURN doc"
    )
    assert find.bind_vars == {
        "@collection": "users",
        "search_field": "name",
        "search": "ali",
        "sort_by": "email",
        "limit": 25,
    }


def test_blank_search_adds_no_filter() -> None:
    find = build_find_query("companies", FindRequest(search="   ", limit=5))

    assert "FILTER" not in find.query
    assert "search" not in find.bind_vars
    assert find.query == "FOR doc IN @@collection LIMIT 0, @limit RETURN doc"


def test_clause_order_holds_without_search() -> None:
    find = build_find_query("companies", FindRequest(sort_by=CompanySortField.SINCE, limit=3))

    assert find.query.index("SORT") < find.query.index("LIMIT")
    assert find.bind_vars["sort_by"] == "since"


def test_user_values_never_appear_in_query_text() -> None:
    search = '" || true RETURN x //'
    find = build_find_query("companies", FindRequest(search=search, limit=77))

    assert search.strip() not in find.query
    assert "77" not in find.query
    assert find.bind_vars["search"] == search.strip()
    assert find.bind_vars["limit"] == 77
