"""Declarative field rules for decoded request payloads.

A request model lists its rules per field in ``field_rules``. Each rule is a
callable taking the field value and the whole model and returning an error
message, or ``None`` when the value is acceptable. Apart from ``required``
and ``must_match``, rules ignore absent values so optional fields are only
checked when supplied. Each field reports its first failing rule; every
field is checked.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any
from typing import ClassVar

from pydantic import AnyHttpUrl
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic import validate_email
from pydantic_core import PydanticCustomError

from directory_api.core.errors import ValidationError

Rule = Callable[[Any, BaseModel], str | None]

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class RequestModel(BaseModel):
    """Types-only request payload with rules applied after decoding."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    field_rules: ClassVar[dict[str, tuple[Rule, ...]]] = {}


def required(value: Any, _: BaseModel) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return "This field is required"
    return None


def length(*, min_length: int | None = None, max_length: int | None = None, strip: bool = True) -> Rule:
    """Bound the length of a string field, trimmed first unless ``strip`` is false."""

    def check(value: Any, _: BaseModel) -> str | None:
        if value is None:
            return None
        size = len(value.strip() if strip else value)
        if min_length is not None and size < min_length:
            return f"Must be at least {min_length} characters long"
        if max_length is not None and size > max_length:
            return f"Must be at most {max_length} characters long"
        return None

    return check


def email_address(value: Any, _: BaseModel) -> str | None:
    if value is None:
        return None
    try:
        validate_email(value)
    except PydanticCustomError:
        return "Must be a valid email address"
    return None


def http_url(value: Any, _: BaseModel) -> str | None:
    if value is None:
        return None
    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError:
        return "Must be a valid http or https URL"
    return None


def year_between(minimum: int) -> Rule:
    """Accept years from ``minimum`` up to and including the current year."""

    def check(value: Any, _: BaseModel) -> str | None:
        if value is None:
            return None
        current = date.today().year
        if not minimum <= value <= current:
            return f"Must be between {minimum} and {current}"
        return None

    return check


def must_match(other: str, *, message: str) -> Rule:
    """Require the field to equal ``other`` whenever either of them is supplied."""

    def check(value: Any, model: BaseModel) -> str | None:
        expected = getattr(model, other)
        if value is None and expected is None:
            return None
        if value != expected:
            return message
        return None

    return check


def collect_violations(model: RequestModel) -> dict[str, list[str]]:
    """Run every rule of ``model`` and return the messages keyed by field."""
    violations: dict[str, list[str]] = {}
    for field, rules in model.field_rules.items():
        value = getattr(model, field)
        for rule in rules:
            message = rule(value, model)
            if message is not None:
                violations.setdefault(field, []).append(message)
                break
    return violations


def validate_request(model: RequestModel) -> RequestModel:
    """Return ``model`` unchanged or raise one ValidationError with all violations."""
    violations = collect_violations(model)
    if violations:
        raise ValidationError(violations)
    return model
