"""Exception-to-result boundary shared by every handler.

Handlers follow the same flow: Start (open a span) → Delegate (one
repository call) → Completed | Failed. This module implements the Delegate
step so that every handler converts exceptions identically:

    - OperationCancelledError: logged once at WARNING as
      ``operation_cancelled``; returns ``<Entity>.TaskCancelled``.
    - Any other Exception: logged once at CRITICAL as ``operation_failed``
      with operation and subject; returns ``<Entity>.Exception`` (Unexpected)
      carrying the handler's caller-safe message.
    - asyncio.CancelledError is not an Exception; it propagates (the span
      records it as cancelled).

Raw exception text is logged, never returned.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from keyhold.core.cancellation import CancellationToken, OperationCancelledError
from keyhold.core.errors import DomainError, general_errors
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.events.base_event import DomainEvent
from keyhold.domain.protocols import (
    EventBusProtocol,
    EventPublishError,
    LoggerProtocol,
    SpanProtocol,
)

T = TypeVar("T")


async def delegate(
    call: Callable[[], Awaitable[Result[T, DomainError]]],
    *,
    span: SpanProtocol,
    logger: LoggerProtocol,
    cancellation: CancellationToken,
    operation: str,
    subject: str,
    entity: str,
    failure_message: str,
) -> Result[T, DomainError]:
    """Run one repository call and convert exceptions into results.

    Args:
        call: Zero-argument coroutine factory performing the repository call.
        span: Active span of the calling handler.
        logger: Handler logger.
        cancellation: Request cancellation token (checked before the call).
        operation: Operation name (e.g. "DeleteAccount").
        subject: Subject identifier (user id, email, audit id).
        entity: Entity name used in error codes (e.g. "User").
        failure_message: Caller-safe description for unexpected failures.

    Returns:
        The repository result, or a Failure describing the exception.
    """
    try:
        cancellation.raise_if_cancelled()
        result = await call()
    except OperationCancelledError as e:
        logger.warning(
            "operation_cancelled",
            operation=operation,
            subject=subject,
            reason=e.reason,
        )
        span.set_status("cancelled", e.reason)
        return Failure.of(general_errors.task_cancelled(entity))
    except Exception as e:
        logger.critical(
            "operation_failed",
            error=e,
            operation=operation,
            subject=subject,
            message=failure_message,
        )
        span.set_status("error", failure_message)
        return Failure.of(general_errors.exception(entity, failure_message))

    match result:
        case Failure(errors=errors):
            span.set_status("error", errors[0].code)
            logger.info(
                "operation_rejected",
                operation=operation,
                subject=subject,
                error_codes=[error.code for error in errors],
            )
        case Success():
            span.set_status("ok")
    return result


async def publish_event(
    event_bus: EventBusProtocol,
    event: DomainEvent,
    *,
    span: SpanProtocol,
    logger: LoggerProtocol,
    operation: str,
    subject: str,
) -> Result[None, DomainError]:
    """Publish an event after the primary operation succeeded.

    Publication is attempted once. A failure becomes the request's own
    error (Messaging.PublishFailed); the already-committed primary
    operation is not rolled back.
    """
    try:
        await event_bus.publish(event)
    except EventPublishError as e:
        logger.error(
            "event_publish_failed",
            error=e,
            operation=operation,
            subject=subject,
            event_type=type(event).__name__,
        )
        span.set_status("error", "Messaging.PublishFailed")
        return Failure.of(general_errors.publish_failed())
    except Exception as e:
        logger.critical(
            "event_publish_failed",
            error=e,
            operation=operation,
            subject=subject,
            event_type=type(event).__name__,
        )
        span.set_status("error", "Messaging.PublishFailed")
        return Failure.of(general_errors.publish_failed())

    span.add_event("event_published", event_type=type(event).__name__)
    return Success(value=None)
