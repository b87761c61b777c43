"""Base domain error class for Railway-Oriented Programming.

DomainError is the single error type carried by Failure results. Errors
represent business rule violations, missing resources, and infrastructure
failures that were caught at a handler boundary. They flow through the
system as data (Result types), not exceptions.

Codes are stable, dotted strings of the form ``<Entity>.<Reason>``
(e.g. ``User.NotFound``) so clients can match on them.
"""

from dataclasses import dataclass

from keyhold.core.enums import ErrorKind


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (``Entity.Reason``).
        description: Human-readable, caller-safe description.
        kind: Error category used for HTTP mapping.
        details: Optional context for debugging (never raw exception text).
    """

    code: str
    description: str
    kind: ErrorKind = ErrorKind.FAILURE
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code}: {self.description}"
