"""Domain Events Registry.

Statically declared catalog of every event the system publishes. Event
transports use it to serialize events by name and to rebuild them on the
consuming side; the container uses it to verify every event has a consumer.

Adding new events:
1. Define the event dataclass in an *_events.py module
2. Add an EventMetadata entry to EVENT_REGISTRY
3. Subscribe a consumer in keyhold.core.container.events
"""

from dataclasses import dataclass
from enum import Enum

from keyhold.domain.events.account_events import (
    ConfirmationEmailEvent,
    TemporaryPasswordEvent,
)
from keyhold.domain.events.base_event import DomainEvent


class EventCategory(Enum):
    """Event categories for organization and filtering."""

    ACCOUNT = "account"


@dataclass(frozen=True)
class EventMetadata:
    """Metadata for a domain event.

    Attributes:
        event_class: The event dataclass.
        name: Stable wire name (never the Python import path).
        category: Event category.
        requires_email: Whether an email consumer handles the event.
    """

    event_class: type[DomainEvent]
    name: str
    category: EventCategory
    requires_email: bool = False


EVENT_REGISTRY: list[EventMetadata] = [
    EventMetadata(
        event_class=ConfirmationEmailEvent,
        name="account.confirmation_email",
        category=EventCategory.ACCOUNT,
        requires_email=True,
    ),
    EventMetadata(
        event_class=TemporaryPasswordEvent,
        name="account.temporary_password",
        category=EventCategory.ACCOUNT,
        requires_email=True,
    ),
]

_BY_CLASS: dict[type[DomainEvent], EventMetadata] = {
    meta.event_class: meta for meta in EVENT_REGISTRY
}
_BY_NAME: dict[str, EventMetadata] = {meta.name: meta for meta in EVENT_REGISTRY}


def get_event_name(event_class: type[DomainEvent]) -> str:
    """Return the wire name of a registered event class.

    Raises:
        KeyError: If the class is not registered.
    """
    return _BY_CLASS[event_class].name


def get_event_class(name: str) -> type[DomainEvent]:
    """Return the event class registered under ``name``.

    Raises:
        KeyError: If no event is registered under that name.
    """
    return _BY_NAME[name].event_class
