"""Audit trail read models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from keyhold.domain.entities import AuditTrail


@dataclass(frozen=True, kw_only=True)
class AuditTrailResponse:
    id: UUID
    username: str | None
    full_name: str | None
    action: str
    table_name: str
    timestamp: datetime
    old_values: dict[str, Any]
    new_values: dict[str, Any]
    affected_columns: list[str]
    ip_address: str | None
    message: str | None

    @classmethod
    def from_entity(cls, audit: AuditTrail) -> "AuditTrailResponse":
        return cls(
            id=audit.id,
            username=audit.username,
            full_name=audit.full_name,
            action=audit.action.value,
            table_name=audit.table_name,
            timestamp=audit.timestamp,
            old_values=dict(audit.old_values),
            new_values=dict(audit.new_values),
            affected_columns=list(audit.affected_columns),
            ip_address=audit.ip_address,
            message=audit.message,
        )
