"""Error response builder for RFC 9457 Problem Details.

Converts handler failures (DomainError tuples) and pre-handler validation
rejections into JSON problem responses. This is the only place that knows
how an ErrorKind maps to an HTTP status.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
    status_for_kind: ErrorKind -> HTTP status
"""

from collections.abc import Sequence

from fastapi import Request, status
from fastapi.responses import JSONResponse

from keyhold.application.validation import ValidationRejection
from keyhold.core.config import get_settings
from keyhold.core.enums import ErrorKind
from keyhold.core.errors import DomainError
from keyhold.core.request_context import get_trace_id
from keyhold.presentation.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FAILURE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.UNEXPECTED: 422,
    ErrorKind.UNPROCESSABLE: 422,
}

# HTTP status code to (title, slug) mapping
HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    405: ("Method Not Allowed", "method-not-allowed"),
    409: ("Resource Conflict", "conflict"),
    422: ("Unprocessable Request", "unprocessable"),
    500: ("Internal Server Error", "internal-server-error"),
    503: ("Service Unavailable", "service-unavailable"),
}


def status_for_kind(kind: ErrorKind) -> int:
    """Map an error kind to its HTTP status (500 for anything unmapped)."""
    return _KIND_STATUS.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def problem_type(slug: str) -> str:
    return f"{get_settings().api_base_url}/errors/{slug}"


def status_info(status_code: int) -> tuple[str, str]:
    return HTTP_STATUS_INFO.get(status_code, ("Error", "error"))


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses.

    Example:
        >>> match result:
        ...     case Failure(errors=errors):
        ...         return ErrorResponseBuilder.from_domain_errors(errors, request)
    """

    @staticmethod
    def from_domain_errors(
        errors: Sequence[DomainError], request: Request
    ) -> JSONResponse:
        """Convert a handler failure to a problem response.

        The first error decides the status and the ``detail``; every error
        is listed in ``errors`` and ``error_codes``.
        """
        first = errors[0]
        status_code = status_for_kind(first.kind)
        title, slug = status_info(status_code)

        problem = ProblemDetails(
            type=problem_type(slug),
            title=title,
            status=status_code,
            detail=first.description,
            instance=str(request.url.path),
            errors=[ErrorDetail(code=e.code, message=e.description) for e in errors],
            error_codes=[e.code for e in errors],
            trace_id=get_trace_id(),
        )
        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
        )

    @staticmethod
    def from_rejection(rejection: ValidationRejection, request: Request) -> JSONResponse:
        """Convert a validation rejection to a 400 problem response."""
        messages = rejection.messages
        problem = ProblemDetails(
            type=problem_type("validation-failed"),
            title="Validation Failed",
            status=status.HTTP_400_BAD_REQUEST,
            detail=messages[0] if messages else "Request validation failed",
            instance=str(request.url.path),
            errors=[
                ErrorDetail(code=v.code, message=v.message, field=v.field or None)
                for v in rejection.violations
            ],
            error_codes=[v.code for v in rejection.violations],
            trace_id=get_trace_id(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=problem.model_dump(exclude_none=True),
        )
