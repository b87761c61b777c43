"""Error kinds (machine-readable error categories).

Every DomainError carries one kind. The presentation layer translates the
kind into an HTTP status code; nothing below the presentation layer knows
about HTTP.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a domain error."""

    FAILURE = "failure"
    UNEXPECTED = "unexpected"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    UNPROCESSABLE = "unprocessable"
    BAD_REQUEST = "bad_request"
