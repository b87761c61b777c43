"""Tracing protocol for handler spans.

A span brackets one handler invocation (or one nested step). Spans are
observability-only: recording on a span must never change control flow.

Tracers are passed to handlers at construction; there are no global trace
sources.

Usage:
    with self._tracer.start_span("DeleteAccount", subject=str(user_id)) as span:
        span.add_event("repository_called")
        ...
        span.set_status("error", "Account deletion failed")
"""

from contextlib import AbstractContextManager
from typing import Any, Literal, Protocol

SpanStatus = Literal["unset", "ok", "error", "cancelled"]


class SpanProtocol(Protocol):
    """One trace segment."""

    name: str

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def add_event(self, name: str, **attributes: Any) -> None:
        ...

    def set_status(self, status: SpanStatus, description: str | None = None) -> None:
        ...


class TracerProtocol(Protocol):
    """Factory for spans."""

    def start_span(
        self, name: str, **attributes: Any
    ) -> AbstractContextManager[SpanProtocol]:
        """Open a span for the duration of the ``with`` block.

        Args:
            name: Operation name (e.g. "CreateAccount").
            **attributes: Initial span attributes (e.g. subject id).
        """
        ...
