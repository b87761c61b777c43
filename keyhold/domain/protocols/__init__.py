"""Domain protocols (ports).

Structural interfaces implemented by infrastructure adapters.
"""

from keyhold.domain.protocols.email_sender_protocol import (
    EmailMessage,
    EmailSenderProtocol,
)
from keyhold.domain.protocols.event_bus_protocol import (
    EventBusProtocol,
    EventHandler,
    EventPublishError,
)
from keyhold.domain.protocols.logger_protocol import LoggerProtocol
from keyhold.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from keyhold.domain.protocols.token_service_protocol import TokenServiceProtocol
from keyhold.domain.protocols.tracer_protocol import (
    SpanProtocol,
    SpanStatus,
    TracerProtocol,
)

__all__ = [
    "EmailMessage",
    "EmailSenderProtocol",
    "EventBusProtocol",
    "EventHandler",
    "EventPublishError",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "SpanProtocol",
    "SpanStatus",
    "TokenServiceProtocol",
    "TracerProtocol",
]
