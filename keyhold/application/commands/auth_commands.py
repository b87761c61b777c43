"""Authentication commands (CQRS write operations)."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class Login:
    """Authenticate with username and password.

    Attributes:
        username: Login name.
        password: Plain text password (verified against stored hash).
        ip_address: Client address recorded on the new session.
        user_agent: Client User-Agent recorded on the new session.
    """

    username: str
    password: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class Logout:
    """End every session of the caller and revoke the refresh token."""

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class LogoutSession:
    user_id: UUID
    session_id: UUID


@dataclass(frozen=True, kw_only=True)
class RefreshToken:
    """Exchange an (expired) access token and refresh token for new tokens."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True, kw_only=True)
class ResetPassword:
    """Administrative password reset (no old password required)."""

    user_id: UUID
    new_password: str


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    user_id: UUID
    old_password: str
    new_password: str


@dataclass(frozen=True, kw_only=True)
class ForgotPassword:
    """Replace a forgotten password with an emailed temporary one."""

    email: str
