"""Trace middleware to inject a trace_id per request.

- Reuses an incoming X-Trace-Id header or mints a uuid7
- Sets the request-scoped trace id and client IP context variables
- Binds trace_id into structlog's contextvars for every log entry
- Adds X-Trace-Id response header
"""

from collections.abc import Awaitable, Callable
from time import perf_counter

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from uuid_extensions import uuid7

from keyhold.core.container import get_logger
from keyhold.core.request_context import client_ip_context, trace_id_context

TRACE_HEADER = "X-Trace-Id"


def client_ip(request: Request) -> str | None:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


class TraceMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that injects a trace ID into each request context."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid7())
        trace_token = trace_id_context.set(trace_id)
        ip_token = client_ip_context.set(client_ip(request))
        request.state.trace_id = trace_id
        structlog.contextvars.bind_contextvars(trace_id=trace_id)

        started = perf_counter()
        try:
            response = await call_next(request)
            response.headers[TRACE_HEADER] = trace_id
            get_logger().info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            # Clear context after request to prevent leakage
            structlog.contextvars.unbind_contextvars("trace_id")
            client_ip_context.reset(ip_token)
            trace_id_context.reset(trace_token)
