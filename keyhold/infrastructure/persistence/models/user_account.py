"""User account database model.

Security:
    - password_hash: NEVER plaintext (bcrypt)
    - confirmation_code_hash: SHA-256 of the emailed code; the code itself
      is never stored
    - refresh_token: current opaque refresh token (None when logged out)
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from keyhold.infrastructure.persistence.base import BaseMutableModel


class UserAccountModel(BaseMutableModel):
    """User account row.

    Changes to this table are written to audit_trails by the audit
    interceptor; columns in ``__audit_redacted__`` are masked there.

    Indexes:
        - username, email, phone_number: unique
    """

    __tablename__ = "user_accounts"
    __audited__ = True
    __audit_redacted__ = frozenset(
        {"password_hash", "refresh_token", "confirmation_code_hash"}
    )

    username: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="User")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    phone_number_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    confirmation_code_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(String(256), nullable=True)
    refresh_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
