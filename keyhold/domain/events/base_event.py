"""Base domain event class.

Domain events represent "things that happened" in the business domain.
They are published only after the operation that produced them has been
persisted, and may be delivered more than once to a consumer.

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (UUID) for tracking and de-duplication
    - occurred_at timestamp (UTC)

Usage:
    >>> @dataclass(frozen=True, kw_only=True, slots=True)
    >>> class AccountCreated(DomainEvent):
    ...     user_id: UUID
    >>>
    >>> event = AccountCreated(user_id=uuid4())
    >>> event.event_id  # Auto-generated UUID
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    Attributes:
        event_id: Unique identifier for this event instance. Preserved
            across redeliveries so consumers can correlate duplicates.
        occurred_at: Timestamp when the event occurred (UTC).
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
