"""Account lifecycle events that trigger outbound email."""

from dataclasses import dataclass
from uuid import UUID

from keyhold.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class ConfirmationEmailEvent(DomainEvent):
    """An account needs its email address confirmed.

    Published after account creation and on confirmation resend.

    Attributes:
        user_id: Account to confirm.
        email: Address to send the confirmation link to.
        verification_code: URL-safe code embedded in the link.
    """

    user_id: UUID
    email: str
    verification_code: str


@dataclass(frozen=True, kw_only=True, slots=True)
class TemporaryPasswordEvent(DomainEvent):
    """A forgotten password was replaced with a temporary one."""

    user_id: UUID
    email: str
    temporary_password: str
