"""Entity-agnostic error factories.

Each factory takes the entity name ("User", "AuditTrail", ...) and returns
a DomainError with a stable ``<Entity>.<Reason>`` code.
"""

from keyhold.core.enums import ErrorKind
from keyhold.core.errors.domain_error import DomainError


def task_cancelled(entity: str) -> DomainError:
    return DomainError(
        code=f"{entity}.TaskCancelled",
        description="The request was cancelled.",
        kind=ErrorKind.FAILURE,
    )


def exception(entity: str, message: str) -> DomainError:
    """Error returned when a handler catches an unexpected exception.

    Args:
        entity: Entity the operation acted on.
        message: Caller-safe description chosen by the handler.
    """
    return DomainError(
        code=f"{entity}.Exception",
        description=message,
        kind=ErrorKind.UNEXPECTED,
    )


def conflict(entity: str) -> DomainError:
    return DomainError(
        code=f"{entity}.Conflict",
        description=f"{entity} already exists.",
        kind=ErrorKind.CONFLICT,
    )


def not_found(entity: str) -> DomainError:
    return DomainError(
        code=f"{entity}.NotFound",
        description=f"{entity} not found",
        kind=ErrorKind.NOT_FOUND,
    )


def publish_failed(message: str = "Could not publish message") -> DomainError:
    """Event publication failed after the primary operation succeeded."""
    return DomainError(
        code="Messaging.PublishFailed",
        description=message,
        kind=ErrorKind.FAILURE,
    )
