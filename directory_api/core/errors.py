"""Request rejection types and the exception handlers that render them."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from directory_api.schemas.error import ErrorDetail
from directory_api.schemas.error import ErrorObject
from directory_api.schemas.error import ErrorResponse
from directory_api.schemas.error import details_from_mapping

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base application exception for explicit API error responses."""

    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Sequence[ErrorDetail] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = list(details) if details else None


class ParsingError(APIError):
    """Malformed or out-of-contract input, attributed to a single field.

    Raised at the structural level: a bad query value, a body that does not
    decode, a rejected upload type, or a failed read/write of an uploaded part.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="parsing_error",
            message=message,
            details=[ErrorDetail(field=field, issue=message)],
        )
        self.field = field


class ValidationError(APIError):
    """Well-formed input that breaks one or more field rules.

    ``errors`` maps each offending field to every message raised for it, so
    the client sees all invalid fields at once.
    """

    def __init__(self, errors: Mapping[str, Sequence[str]]) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="validation_error",
            message="Request validation failed",
            details=details_from_mapping(errors),
        )
        self.errors = {field: list(messages) for field, messages in errors.items()}


class PayloadTooLargeError(APIError):
    """Request body exceeded the configured upload cap."""

    def __init__(self, *, limit: int) -> None:
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code="payload_too_large",
            message=f"Request body exceeds the limit of {limit} bytes",
        )
        self.limit = limit


class NotFoundError(APIError):
    """Convenience exception for missing resources."""

    def __init__(self, *, message: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, code="not_found", message=message)


def _build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Sequence[ErrorDetail] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(error=ErrorObject(code=code, message=message, details=list(details) if details else None))
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE:
        return "payload_too_large"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's own parameter validation failures in the shared envelope."""

    details = [
        ErrorDetail(field=_format_location(issue.get("loc", ())), issue=str(issue.get("msg", "Invalid value")))
        for issue in exc.errors()
    ]
    return _build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=details,
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize routing-level HTTP errors (unknown path, wrong method)."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    return _build_error_response(
        status_code=exc.status_code,
        code=_http_error_code(exc.status_code),
        message=message,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Return explicit domain errors in the shared envelope."""

    logger.info(
        "Rejected %s %s with code=%s details=%s",
        request.method,
        request.url.path,
        exc.code,
        [detail.model_dump() for detail in exc.details or []],
    )
    return _build_error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Storage or database failures surface as a generic 500."""

    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
        message="Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
