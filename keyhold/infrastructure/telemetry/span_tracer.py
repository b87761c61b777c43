"""In-process span tracer.

Spans nest through a ContextVar (a span opened while another is active
becomes its child), are tagged with the request trace id, and are logged
as ``span_completed`` at debug level when they close.

Recording never changes control flow: exceptions raised inside a span are
recorded and re-raised unchanged.

Usage:
    tracer = SpanTracer(logger)
    with tracer.start_span("CreateAccount", subject=email) as span:
        span.add_event("repository_called")
        span.set_status("ok")
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from keyhold.core.request_context import get_trace_id
from keyhold.domain.protocols import LoggerProtocol, SpanStatus

_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)


@dataclass
class Span:
    """Timed trace segment."""

    name: str
    trace_id: str | None = None
    parent: Span | None = None
    span_id: str = field(default_factory=lambda: uuid4().hex[:16])
    children: list[Span] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)
    events: list[dict[str, Any]] = field(default_factory=list)
    status: SpanStatus = "unset"
    status_description: str | None = None
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def add_event(self, name: str, **attributes: Any) -> None:
        self.events.append({"name": name, **attributes})

    def set_status(self, status: SpanStatus, description: str | None = None) -> None:
        self.status = status
        self.status_description = description

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "span_id": self.span_id,
            "trace_id": self.trace_id,
            "status": self.status,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.status_description:
            result["status_description"] = self.status_description
        if self.attributes:
            result["attributes"] = self.attributes
        if self.events:
            result["events"] = self.events
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


class SpanTracer:
    """TracerProtocol implementation backed by the structured logger."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    @contextmanager
    def start_span(self, name: str, **attributes: Any) -> Iterator[Span]:
        parent = _current_span.get()
        span = Span(
            name=name,
            trace_id=parent.trace_id if parent else get_trace_id(),
            parent=parent,
            attributes=dict(attributes),
        )
        if parent is not None:
            parent.children.append(span)

        token = _current_span.set(span)
        try:
            yield span
        except asyncio.CancelledError:
            span.set_status("cancelled", "Task cancelled")
            raise
        except Exception as e:
            if span.status == "unset":
                span.set_status("error", type(e).__name__)
            raise
        finally:
            span.end()
            _current_span.reset(token)
            self._logger.debug(
                "span_completed",
                span_name=span.name,
                span_id=span.span_id,
                parent_span_id=parent.span_id if parent else None,
                trace_id=span.trace_id,
                status=span.status,
                duration_ms=round(span.duration_ms, 2),
                **span.attributes,
            )


def get_current_span() -> Span | None:
    """Return the innermost active span (for manual annotation)."""
    return _current_span.get()
