"""Event consumers that turn account events into outbound email."""

from keyhold.infrastructure.events.consumers.confirmation_email_consumer import (
    ConfirmationEmailConsumer,
)
from keyhold.infrastructure.events.consumers.temporary_password_consumer import (
    TemporaryPasswordConsumer,
)

__all__ = ["ConfirmationEmailConsumer", "TemporaryPasswordConsumer"]
