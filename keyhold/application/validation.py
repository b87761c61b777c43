"""Request validation gate.

Requests are validated before any handler runs. A request either becomes
a validated (frozen) pydantic model or a ValidationRejection listing
human-readable messages; never both.

Collection policy:
    - Fail-fast per field: a field reports only its first failing rule.
    - Collect across fields: every invalid field is reported.
    - Messages follow field declaration order, then cross-field rules
      in declaration order of the field they are attached to.

Usage:
    match validate_request(CreateAccountRequest, payload):
        case Success(value=request):
            result = await handler.handle(request.to_command())
        case Failure(errors=(rejection,)):
            return rejection.messages
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from keyhold.core.result import Failure, Result, Success

ModelT = TypeVar("ModelT", bound=BaseModel)

# Location prefixes FastAPI adds to request errors.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


@dataclass(frozen=True, kw_only=True)
class FieldViolation:
    """One rule violation.

    Attributes:
        field: Dotted field path ("" for model-level violations).
        message: Human-readable message.
        code: Pydantic error type (e.g. "value_error", "missing").
    """

    field: str
    message: str
    code: str = "value_error"


@dataclass(frozen=True, kw_only=True)
class ValidationRejection:
    """Pre-handler rejection. Never reaches the handler layer."""

    violations: tuple[FieldViolation, ...]

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


def _message_for(error: Mapping[str, Any]) -> str:
    # Rules raise ValueError; pydantic prefixes those with "Value error, ".
    if error.get("type") == "value_error":
        ctx = error.get("ctx") or {}
        cause = ctx.get("error")
        if cause is not None:
            return str(cause)
    return str(error.get("msg", "Invalid value"))


def _field_path(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def rejection_from_errors(errors: Sequence[Mapping[str, Any]]) -> ValidationRejection:
    """Build a ValidationRejection from pydantic/FastAPI error dicts."""
    return ValidationRejection(
        violations=tuple(
            FieldViolation(
                field=_field_path(error.get("loc", ())),
                message=_message_for(error),
                code=str(error.get("type", "value_error")),
            )
            for error in errors
        )
    )


def validate_request(
    model: type[ModelT], payload: Mapping[str, Any]
) -> Result[ModelT, ValidationRejection]:
    """Validate a raw payload against a request model.

    Args:
        model: Request model class.
        payload: Raw (JSON-decoded) payload.

    Returns:
        Success(model instance) or Failure(ValidationRejection).
    """
    try:
        return Success(value=model.model_validate(payload))
    except PydanticValidationError as e:
        return Failure.of(rejection_from_errors(e.errors()))
