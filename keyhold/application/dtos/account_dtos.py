"""Account read models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from keyhold.domain.entities import UserAccount, UserSession


@dataclass(frozen=True, kw_only=True)
class UserAccountResponse:
    """Account as exposed to callers (no credentials)."""

    user_id: UUID
    email: str
    full_name: str
    username: str
    phone_number: str
    role: str
    is_active: bool
    email_confirmed: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, account: UserAccount) -> "UserAccountResponse":
        return cls(
            user_id=account.id,
            email=account.email,
            full_name=account.full_name,
            username=account.username,
            phone_number=account.phone_number,
            role=account.role.value,
            is_active=account.is_active,
            email_confirmed=account.email_confirmed,
            created_at=account.created_at,
        )


@dataclass(frozen=True, kw_only=True)
class UserSessionResponse:
    session_id: UUID
    user_id: UUID
    ip_address: str | None
    user_agent: str | None
    login_at: datetime
    last_activity_at: datetime
    logout_at: datetime | None
    is_active: bool

    @classmethod
    def from_entity(cls, session: UserSession) -> "UserSessionResponse":
        return cls(
            session_id=session.id,
            user_id=session.user_id,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            login_at=session.login_at,
            last_activity_at=session.last_activity_at,
            logout_at=session.logout_at,
            is_active=session.is_active,
        )
