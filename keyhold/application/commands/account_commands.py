"""Account commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments
(kw_only=True). They are built from requests that already passed the
validation gate, so fields are plain, trusted values.
"""

from dataclasses import dataclass
from uuid import UUID

from keyhold.domain.entities import UserRole


@dataclass(frozen=True, kw_only=True)
class CreateAccount:
    """Create an unconfirmed account and send a confirmation email.

    Example:
        >>> command = CreateAccount(
        ...     full_name="Jane Doe",
        ...     email="jane@example.com",
        ...     username="jane@example.com",
        ...     phone_number="0241234567",
        ...     password="secret1",
        ... )
        >>> result = await handler.handle(command, cancellation)
    """

    full_name: str
    email: str
    username: str
    phone_number: str
    password: str
    role: UserRole = UserRole.USER


@dataclass(frozen=True, kw_only=True)
class UpdateAccount:
    user_id: UUID
    full_name: str
    phone_number: str
    email: str
    role: UserRole


@dataclass(frozen=True, kw_only=True)
class UpdateProfile:
    """Self-service edit of the caller's own name and phone number."""

    user_id: UUID
    full_name: str
    phone_number: str


@dataclass(frozen=True, kw_only=True)
class ActivateAccount:
    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class DeactivateAccount:
    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class DeleteAccount:
    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ConfirmEmail:
    user_id: UUID
    code: str


@dataclass(frozen=True, kw_only=True)
class ResendConfirmation:
    """Send a new confirmation email to an unconfirmed account."""

    email: str
