"""Event bus protocol for domain event publishing.

Publishers (command handlers) publish events after their primary operation
has succeeded. Consumers subscribe per event type and must tolerate
redelivery: delivery is at-least-once.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from keyhold.domain.events.base_event import DomainEvent

# Type alias for event handler functions
EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventPublishError(Exception):
    """Raised by a transport that could not accept an event.

    Handlers convert this into the request's own error; publication is
    never retried by the publisher.
    """


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Key Requirements:
        1. subscribe() registers consumers per concrete event type.
        2. publish() hands the event to the transport. It raises
           EventPublishError when the transport rejects the event.
        3. Consumer failures never propagate to the publisher, and publish()
           does not wait for consumers to finish.
        4. close() releases the transport once the application stops.
    """

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        ...

    async def publish(self, event: DomainEvent) -> None:
        ...

    async def close(self) -> None:
        ...
