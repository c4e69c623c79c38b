"""Two-phase decoding of JSON request bodies.

Phase one decodes the raw body against a types-only model and stops at the
first structural failure, reporting it against the exact field path. Phase
two runs the model's declarative rules and reports every violation at once.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import TypeVar

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from directory_api.core.errors import ParsingError
from directory_api.ingestion.rules import RequestModel
from directory_api.ingestion.rules import validate_request

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=RequestModel)

BODY_FIELD = "body"


def format_field_path(location: Sequence[str | int]) -> str:
    """Render a pydantic error location as ``a.b[0].c``; empty means the body itself."""
    path = ""
    for part in location:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = part
    return path or BODY_FIELD


def decode_structure(model_cls: type[ModelT], raw: bytes | str) -> ModelT:
    """Decode ``raw`` JSON into ``model_cls`` or raise ParsingError for the first bad field."""
    try:
        return model_cls.model_validate_json(raw)
    except PydanticValidationError as exc:
        issue = exc.errors(include_url=False)[0]
        field = format_field_path(issue["loc"])
        logger.debug("Structural decode of %s failed at %s", model_cls.__name__, field)
        raise ParsingError(field, issue["msg"]) from exc


def decode_request(model_cls: type[ModelT], raw: bytes | str) -> ModelT:
    """Decode then validate a JSON body; phase two only runs on a decoded model."""
    return validate_request(decode_structure(model_cls, raw))


def json_body(model_cls: type[ModelT]):
    """Build a FastAPI dependency that yields a decoded and validated ``model_cls``."""

    async def dependency(request: Request) -> ModelT:
        return decode_request(model_cls, await request.body())

    dependency.__name__ = f"decode_{model_cls.__name__.lower()}"
    return dependency
