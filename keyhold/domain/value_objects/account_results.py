"""Values returned by account repository capabilities."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class AccountCreated:
    """An account that needs confirming, with the code to confirm it."""

    user_id: UUID
    email: str
    verification_code: str


@dataclass(frozen=True, kw_only=True)
class AuthTokens:
    """Tokens issued on login or refresh."""

    user_id: UUID
    access_token: str
    refresh_token: str
    session_id: UUID


@dataclass(frozen=True, kw_only=True)
class TemporaryPassword:
    """A temporary password set by the forgot-password flow."""

    user_id: UUID
    email: str
    temporary_password: str


@dataclass(frozen=True, kw_only=True)
class AccountStats:
    """Account counts shown to administrators."""

    total_users: int
    total_admins: int
