"""Audit trail database model (immutable, append-only)."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from keyhold.infrastructure.persistence.base import BaseModel, utc_now


class AuditTrailModel(BaseModel):
    """One row per audited insert, update or delete.

    Written by the audit interceptor inside the same flush (and so the same
    transaction) as the change it records.
    """

    __tablename__ = "audit_trails"

    action: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    table_name: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, index=True
    )
    username: Mapped[str | None] = mapped_column(String(256), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    old_values: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    new_values: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    affected_columns: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_audit_trails_username", "username"),)
