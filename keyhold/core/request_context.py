"""Request-scoped context variables.

Set by the trace middleware (trace id, client IP) and the authentication
dependency (actor). Read by the span tracer and the audit interceptor,
which run below the HTTP layer and never see the Request object.
"""

from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class Actor:
    """Authenticated caller recorded on audit trails."""

    username: str
    full_name: str | None = None


trace_id_context: ContextVar[str | None] = ContextVar("trace_id", default=None)
client_ip_context: ContextVar[str | None] = ContextVar("client_ip", default=None)
actor_context: ContextVar[Actor | None] = ContextVar("actor", default=None)


def get_trace_id() -> str | None:
    """Return the current trace ID, or None outside a request."""
    return trace_id_context.get()


def get_client_ip() -> str | None:
    return client_ip_context.get()


def get_actor() -> Actor | None:
    return actor_context.get()
