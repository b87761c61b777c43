"""In-memory event bus implementation.

Implements EventBusProtocol with a dictionary-based handler registry.
Suitable for single-process deployments and tests; the redis-streams
transport replaces it when consumers must survive restarts.

Architecture:
    - Dictionary-based handler registry (event_type -> list of handlers)
    - One tracked background task per handler delivery; publish() returns
      once the deliveries are scheduled
    - Fail-open: one handler failure doesn't break others, and publish()
      never raises
    - Redelivery: a failing handler is retried up to max_delivery_attempts
      times (at-least-once), then logged as ``event_handler_failed``
    - close() waits for deliveries still in flight

Usage:
    >>> bus = InMemoryEventBus(logger=logger)
    >>> bus.subscribe(ConfirmationEmailEvent, consumer.handle)
    >>> await bus.publish(ConfirmationEmailEvent(user_id=uid, email=e, verification_code=c))
    >>> await bus.close()
"""

import asyncio
from collections import defaultdict

from keyhold.domain.events.base_event import DomainEvent
from keyhold.domain.protocols.event_bus_protocol import EventHandler
from keyhold.domain.protocols.logger_protocol import LoggerProtocol


class InMemoryEventBus:
    """In-memory event bus with fail-open, at-least-once delivery.

    Thread Safety:
        NOT thread-safe (single event loop design).

    Attributes:
        _handlers: Event class -> async handlers. Only exact type matches.
        _logger: Logger for publishing and handler failures.
        _max_delivery_attempts: Deliveries of one event to one handler.
        _deliveries: Delivery tasks not yet finished.
    """

    def __init__(self, logger: LoggerProtocol, *, max_delivery_attempts: int = 3) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._logger = logger
        self._max_delivery_attempts = max_delivery_attempts
        self._deliveries: set[asyncio.Task[None]] = set()

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register an event handler for a specific event type.

        Notes:
            - Handlers execute concurrently (no ordering)
            - No duplicate detection
            - Handlers must tolerate redelivery of the same event
        """
        self._handlers[event_type].append(handler)

    def subscribed_event_types(self) -> set[type[DomainEvent]]:
        """Event classes with at least one handler."""
        return {event_type for event_type, handlers in self._handlers.items() if handlers}

    async def publish(self, event: DomainEvent) -> None:
        """Deliver an event to every handler registered for its type.

        No handlers is a no-op. Each delivery runs as its own task, so a
        slow consumer never holds up the request that published. Handler
        exceptions are retried and then logged, never propagated.
        """
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        if not handlers:
            return

        self._logger.debug(
            "event_publishing",
            event_type=event_type.__name__,
            event_id=str(event.event_id),
            handler_count=len(handlers),
        )

        for handler in handlers:
            task = asyncio.create_task(self._deliver(handler, event))
            self._deliveries.add(task)
            task.add_done_callback(self._deliveries.discard)

    async def close(self) -> None:
        """Wait for every delivery still in flight."""
        while self._deliveries:
            await asyncio.gather(*self._deliveries)

    async def _deliver(self, handler: EventHandler, event: DomainEvent) -> None:
        handler_name = getattr(handler, "__qualname__", repr(handler))
        for attempt in range(1, self._max_delivery_attempts + 1):
            try:
                await handler(event)
                return
            except Exception as e:
                if attempt < self._max_delivery_attempts:
                    self._logger.warning(
                        "event_handler_retrying",
                        event_type=type(event).__name__,
                        event_id=str(event.event_id),
                        handler_name=handler_name,
                        attempt=attempt,
                        error_type=type(e).__name__,
                    )
                    continue
                self._logger.error(
                    "event_handler_failed",
                    error=e,
                    event_type=type(event).__name__,
                    event_id=str(event.event_id),
                    handler_name=handler_name,
                    attempts=attempt,
                )
