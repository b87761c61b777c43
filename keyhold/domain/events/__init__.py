"""Domain events."""

from keyhold.domain.events.account_events import (
    ConfirmationEmailEvent,
    TemporaryPasswordEvent,
)
from keyhold.domain.events.base_event import DomainEvent

__all__ = ["ConfirmationEmailEvent", "DomainEvent", "TemporaryPasswordEvent"]
