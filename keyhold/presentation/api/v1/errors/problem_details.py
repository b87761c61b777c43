"""RFC 9457 Problem Details for HTTP APIs.

RFC 9457: https://www.rfc-editor.org/rfc/rfc9457

Exports:
    ErrorDetail: One error (domain error or field violation)
    ProblemDetails: RFC 9457 compliant error response schema
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Individual error.

    Domain errors carry no field; validation violations name the field
    that failed.

    Examples:
        >>> ErrorDetail(
        ...     code="value_error",
        ...     message="Email address is not valid",
        ...     field="email",
        ... )
    """

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    field: str | None = Field(None, description="Field name (validation errors)")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: First error description
        instance: Request path
        errors: Every error of the failure, in order
        error_codes: Codes of every error, in order
        trace_id: Request trace ID for debugging

    Examples:
        >>> ProblemDetails(
        ...     type="http://localhost:8000/errors/conflict",
        ...     title="Resource Conflict",
        ...     status=409,
        ...     detail="Email address jane@example.com is already registered",
        ...     instance="/api/v1/accounts",
        ...     errors=[ErrorDetail(code="User.Exists", message="...")],
        ...     error_codes=["User.Exists"],
        ...     trace_id="0192f1c4-...",
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:8000/errors/validation-failed"],
    )
    title: str = Field(..., description="Short, human-readable summary", examples=["Validation Failed"])
    status: int = Field(..., description="HTTP status code", examples=[400])
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Email address is not valid"],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/api/v1/accounts"],
    )
    errors: list[ErrorDetail] | None = Field(None, description="List of errors")
    error_codes: list[str] | None = Field(None, description="Codes of every error")
    trace_id: str | None = Field(None, description="Request trace ID for debugging")
