"""Unit tests for list query parameter normalization."""

from __future__ import annotations

import pytest

from directory_api.core.errors import ParsingError
from directory_api.ingestion.query import describe_choices
from directory_api.ingestion.query import normalize_find_params
from directory_api.ingestion.query import parse_limit
from directory_api.schemas.find import CompanySortField
from directory_api.schemas.find import FindRequest
from directory_api.schemas.find import UserSortField


def test_empty_params_produce_default_request() -> None:
    assert normalize_find_params(CompanySortField) == FindRequest()


def test_search_is_passed_through_verbatim() -> None:
    request = normalize_find_params(UserSortField, search="  ali ")

    assert request.search == "  ali "


@pytest.mark.parametrize("limit", [1, 2, 50, 99, 100])
def test_limits_within_range_are_accepted(limit: int) -> None:
    request = normalize_find_params(CompanySortField, limit=str(limit))

    assert request.limit == limit


@pytest.mark.parametrize("limit", ["0", "101", "4294967295"])
def test_limits_out_of_range_are_rejected(limit: str) -> None:
    with pytest.raises(ParsingError) as exc_info:
        normalize_find_params(CompanySortField, limit=limit)

    assert exc_info.value.field == "limit"
    assert exc_info.value.message == "Must be between 1 and 100"


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ("", "cannot parse integer from empty string"),
        ("ten", "invalid digit found in string"),
        ("-5", "invalid digit found in string"),
        ("1.5", "invalid digit found in string"),
        (" 5", "invalid digit found in string"),
        ("4294967296", "number too large to fit in target type"),
    ],
)
def test_unparseable_limits_report_the_reason(raw: str, reason: str) -> None:
    with pytest.raises(ParsingError) as exc_info:
        normalize_find_params(UserSortField, limit=raw)

    assert exc_info.value.field == "limit"
    assert exc_info.value.message == reason


def test_parse_limit_accepts_explicit_plus_sign() -> None:
    assert parse_limit("+7") == 7


def test_sort_by_matches_resource_fields() -> None:
    assert normalize_find_params(CompanySortField, sort_by="since").sort_by is CompanySortField.SINCE
    assert normalize_find_params(UserSortField, sort_by="email").sort_by is UserSortField.EMAIL


def test_unknown_sort_by_lists_allowed_fields() -> None:
    with pytest.raises(ParsingError) as exc_info:
        normalize_find_params(CompanySortField, sort_by="bogus")

    assert exc_info.value.field == "sort_by"
    assert exc_info.value.message == "Must be one of name and since"


def test_sort_field_sets_differ_per_resource() -> None:
    with pytest.raises(ParsingError) as exc_info:
        normalize_find_params(UserSortField, sort_by="since")

    assert exc_info.value.message == "Must be one of name and email"


def test_sort_by_is_checked_before_limit() -> None:
    with pytest.raises(ParsingError) as exc_info:
        normalize_find_params(CompanySortField, sort_by="bogus", limit="0")

    assert exc_info.value.field == "sort_by"


def test_describe_choices_joins_with_and() -> None:
    assert describe_choices(CompanySortField) == "Must be one of name and since"
