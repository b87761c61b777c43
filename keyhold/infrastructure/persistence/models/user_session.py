"""User login session database model.

The row id is the session id carried in access tokens. Sessions are not
audited; logins and logouts are already visible through their own rows.
"""

from datetime import datetime
from uuid import UUID as PythonUUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from keyhold.infrastructure.persistence.base import BaseModel, utc_now

USER_AGENT_MAX_LENGTH = 512


class UserSessionModel(BaseModel):
    """One row per successful login.

    Indexes:
        - (user_id, login_at): paged session listing per account
    """

    __tablename__ = "user_sessions"

    user_id: Mapped[PythonUUID] = mapped_column(
        Uuid,
        ForeignKey("user_accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(
        String(USER_AGENT_MAX_LENGTH), nullable=True
    )
    login_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    logout_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_user_sessions_user_login", "user_id", "login_at"),)
