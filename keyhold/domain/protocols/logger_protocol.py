"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the codebase while
remaining backend-agnostic. Implementations MUST ensure logs are structured
(key-value context) and safe (no secrets).

Context Binding:
    Use bind() or with_context() to create request-scoped loggers with
    permanent context (trace_id, user_id) automatically included in all logs.

Security:
    - NEVER log passwords, tokens, confirmation codes or temporary passwords

Usage:
    from keyhold.core.container import get_logger

    logger: LoggerProtocol = get_logger()
    logger.info("account_created", user_id=str(user_id))

    request_logger = logger.bind(trace_id=trace_id)
    request_logger.info("request_started")  # trace_id auto-included
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls MUST be structured: message + key-value context.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        ...

    def info(self, message: str, /, **context: Any) -> None:
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event name (snake_case, avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message.

        Handlers use CRITICAL for unexpected exceptions caught at their
        boundary: exactly one entry per failed invocation, carrying the
        operation name and subject identifier.
        """
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with context bound to all subsequent logs."""
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
