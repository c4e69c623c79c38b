"""Unit tests for rejection types and the shared error envelope."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from directory_api.core.errors import NotFoundError
from directory_api.core.errors import ParsingError
from directory_api.core.errors import PayloadTooLargeError
from directory_api.core.errors import ValidationError
from directory_api.core.errors import register_error_handlers


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/typed")
    def typed(page: int) -> dict[str, int]:
        return {"page": page}

    @app.get("/parsing")
    def parsing() -> None:
        raise ParsingError("sort_by", "Must be one of name and since")

    @app.get("/validation")
    def validation() -> None:
        raise ValidationError(
            {
                "email": ["Must be a valid email address"],
                "password_confirmation": ["Must match password"],
            }
        )

    @app.get("/too-large")
    def too_large() -> None:
        raise PayloadTooLargeError(limit=10)

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError(message="Company not found")

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("storage unavailable")

    return TestClient(app, raise_server_exceptions=False)


def test_parsing_error_carries_single_field() -> None:
    response = _build_client().get("/parsing")

    assert response.status_code == 400
    assert response.json() == {
        "error": {
            "code": "parsing_error",
            "message": "Must be one of name and since",
            "details": [{"field": "sort_by", "issue": "Must be one of name and since"}],
        }
    }


def test_validation_error_lists_every_field() -> None:
    response = _build_client().get("/validation")

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["code"] == "validation_error"
    assert payload["error"]["details"] == [
        {"field": "email", "issue": "Must be a valid email address"},
        {"field": "password_confirmation", "issue": "Must match password"},
    ]


def test_validation_error_keeps_mapping() -> None:
    error = ValidationError({"name": ["This field is required"]})

    assert error.errors == {"name": ["This field is required"]}
    assert error.status_code == 400


def test_payload_too_large_maps_to_413() -> None:
    response = _build_client().get("/too-large")

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "payload_too_large"


def test_not_found_errors_use_shared_envelope() -> None:
    response = _build_client().get("/not-found")

    assert response.status_code == 404
    assert response.json() == {"error": {"code": "not_found", "message": "Company not found"}}


def test_framework_validation_errors_are_normalized() -> None:
    response = _build_client().get("/typed")

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["code"] == "validation_error"
    assert payload["error"]["details"][0]["field"] == "page"


def test_unknown_routes_use_shared_envelope() -> None:
    response = _build_client().get("/missing")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_unexpected_failures_become_internal_errors() -> None:
    response = _build_client().get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": {"code": "internal_error", "message": "Internal server error"}}
