"""Centralized validation rules.

Each rule is a factory returning a pure validator ``(value) -> value`` that
raises ValueError with a caller-facing message. Rules are composed into
Annotated types (keyhold.domain.types) with AfterValidator; pydantic stops
a field's chain at the first failing rule, so each field reports at most
one message.

All rules are cataloged in the Validation Rules Registry
(keyhold.domain.validators.registry).
"""

import re
from collections.abc import Callable
from uuid import UUID

Validator = Callable[[str | None], str]

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_NUMBER_PATTERN = re.compile(r"^\d{10}$")
NO_WHITESPACE_PATTERN = re.compile(r"^\S*$")
JWT_SEGMENT_COUNTS = (3, 5)  # JWS compact and JWE compact serializations


def required(message: str) -> Validator:
    """Reject None, empty and whitespace-only values.

    Example:
        >>> required("Full name is required")("  ")
        ValueError: Full name is required
    """

    def validate(v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError(message)
        return v

    return validate


def min_length(length: int, message: str) -> Validator:
    def validate(v: str | None) -> str:
        if v is None or len(v) < length:
            raise ValueError(message)
        return v

    return validate


def no_whitespace(message: str) -> Validator:
    def validate(v: str | None) -> str:
        if v is None or not NO_WHITESPACE_PATTERN.match(v):
            raise ValueError(message)
        return v

    return validate


def email_address(message: str) -> Validator:
    """Require an RFC-shaped address (local@domain.tld).

    The value is returned unchanged; lookups are case-insensitive.
    """

    def validate(v: str | None) -> str:
        if v is None or not EMAIL_PATTERN.match(v):
            raise ValueError(message)
        return v

    return validate


def phone_number(message: str) -> Validator:
    """Require exactly 10 digits."""

    def validate(v: str | None) -> str:
        if v is None or not PHONE_NUMBER_PATTERN.match(v):
            raise ValueError(message)
        return v

    return validate


def jwt_shape(message: str) -> Validator:
    """Require a compact JWT shape: 3 or 5 dot-separated segments.

    Only the shape is checked here. Signature and claims are checked by
    the token service.

    Example:
        >>> jwt_shape("Access token must be a valid JWT")("a.b")
        ValueError: Access token must be a valid JWT
    """

    def validate(v: str | None) -> str:
        if v is None or len(v.split(".")) not in JWT_SEGMENT_COUNTS:
            raise ValueError(message)
        return v

    return validate


def one_of(allowed: tuple[str, ...], message: str) -> Validator:
    def validate(v: str | None) -> str:
        if v is None or v not in allowed:
            raise ValueError(message)
        return v

    return validate


def uuid_format(message: str) -> Validator:
    def validate(v: str | None) -> str:
        try:
            UUID(v or "")
        except ValueError:
            raise ValueError(message) from None
        return v or ""

    return validate
