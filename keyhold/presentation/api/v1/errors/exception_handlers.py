"""Global exception handlers for FastAPI application.

Handlers:
    http_exception_handler: Converts HTTPException to RFC 9457 format
    validation_exception_handler: Converts RequestValidationError to a 400
        validation rejection (same conversion as validate_request)
    generic_exception_handler: Catches all unhandled exceptions

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from keyhold.application.validation import rejection_from_errors
from keyhold.core.container import get_logger
from keyhold.core.request_context import get_trace_id
from keyhold.presentation.api.v1.errors.error_response_builder import (
    ErrorResponseBuilder,
    problem_type,
    status_info,
)
from keyhold.presentation.api.v1.errors.problem_details import ProblemDetails


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert HTTPException to RFC 9457 Problem Details response.

    Covers auth dependencies (401/403) and routing errors (404/405).
    Headers such as WWW-Authenticate are preserved.
    """
    assert isinstance(exc, StarletteHTTPException)

    title, slug = status_info(exc.status_code)
    problem = ProblemDetails(
        type=problem_type(slug),
        title=title,
        status=exc.status_code,
        detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        instance=str(request.url.path),
        trace_id=get_trace_id(),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert RequestValidationError to a 400 validation rejection.

    A request that fails validation never reaches a handler.
    """
    assert isinstance(exc, RequestValidationError)

    rejection = rejection_from_errors(exc.errors())
    get_logger().info(
        "request_rejected",
        path=request.url.path,
        violations=len(rejection.violations),
    )
    return ErrorResponseBuilder.from_rejection(rejection, request)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected Python exceptions.

    Logged once at error level; the response never carries exception text.
    """
    get_logger().error(
        "unhandled_exception",
        error=exc,
        path=request.url.path,
        method=request.method,
    )

    problem = ProblemDetails(
        type=problem_type("internal-server-error"),
        title="Internal Server Error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please contact support with the trace ID.",
        instance=str(request.url.path),
        trace_id=get_trace_id(),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=problem.model_dump(exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application."""
    # Starlette's base class also covers router-level 404/405
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
