"""User account domain entity.

Pure business logic, no framework dependencies.

Lifecycle:
    - Created unconfirmed and active by the account creation flow
    - Confirmed once via the emailed confirmation code
    - Activated/deactivated by administrators
    - Profile fields updated through update()
    - Deleted physically by the persistence layer
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles that can be assigned to an account."""

    ADMIN = "Admin"
    USER = "User"


@dataclass
class UserAccount:
    """User account entity with login business rules.

    Business Rules:
        - Email confirmation required before login
        - Deactivated accounts cannot login
        - Full name and phone number are stored trimmed

    Attributes:
        id: Unique account identifier.
        username: Login name (an email address).
        email: Contact email address.
        phone_number: 10-digit phone number.
        full_name: Display name.
        role: Assigned role.
        password_hash: Bcrypt hash (never plaintext).
        is_active: Whether the account may login.
        email_confirmed: Whether the email address has been confirmed.
        phone_number_confirmed: Whether the phone number has been confirmed.
        refresh_token: Current refresh token (None when logged out).
        refresh_token_expires_at: Refresh token expiry.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: UUID
    username: str
    email: str
    phone_number: str
    full_name: str
    password_hash: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    email_confirmed: bool = False
    phone_number_confirmed: bool = False
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def activate(self) -> None:
        self.is_active = True
        self._touch()

    def deactivate(self) -> None:
        self.is_active = False
        self._touch()

    def update(self, full_name: str, phone_number: str) -> None:
        """Update profile fields, trimming surrounding whitespace."""
        self.full_name = full_name.strip()
        self.phone_number = phone_number.strip()
        self._touch()

    def confirm_email(self) -> None:
        self.email_confirmed = True
        self._touch()

    def set_refresh_token(self, token: str, expires_at: datetime) -> None:
        self.refresh_token = token
        self.refresh_token_expires_at = expires_at
        self._touch()

    def revoke_refresh_token(self) -> None:
        self.refresh_token = None
        self.refresh_token_expires_at = None
        self._touch()

    def has_valid_refresh_token(self, token: str) -> bool:
        """Check a presented refresh token against the stored one.

        Returns:
            bool: True if tokens match and the stored token has not expired.
        """
        if self.refresh_token is None or self.refresh_token != token:
            return False
        if self.refresh_token_expires_at is None:
            return False
        expires_at = self.refresh_token_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return datetime.now(UTC) < expires_at

    def can_login(self) -> bool:
        return self.email_confirmed and self.is_active

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
