"""Tracing adapters."""

from keyhold.infrastructure.telemetry.span_tracer import Span, SpanTracer

__all__ = ["Span", "SpanTracer"]
