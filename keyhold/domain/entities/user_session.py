"""User login session entity.

One session is opened per successful login. Its id travels in the access
token's ``session_id`` claim and survives token refresh; a token can only
be refreshed while its session is active.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass
class UserSession:
    """Login session.

    Attributes:
        id: Session identifier (the token's ``session_id`` claim).
        user_id: Account that logged in.
        ip_address: Client address at login.
        user_agent: Client User-Agent at login.
        login_at: When the session was opened.
        last_activity_at: Last login or token refresh.
        logout_at: When the session was ended (None while active).
        is_active: Whether tokens from this session may be refreshed.
    """

    id: UUID
    user_id: UUID
    ip_address: str | None = None
    user_agent: str | None = None
    login_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_activity_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    logout_at: datetime | None = None
    is_active: bool = True

    def log_out(self) -> None:
        """End the session. Ending an ended session keeps its first logout time."""
        if not self.is_active:
            return
        self.is_active = False
        self.logout_at = datetime.now(UTC)

    def record_activity(self) -> None:
        self.last_activity_at = datetime.now(UTC)
