"""Audit trail domain entity.

Audit records are immutable facts: one per audited entity change, written
by the persistence layer's flush interceptor and never modified.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class AuditAction(str, Enum):
    """Kind of change captured in an audit record."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


@dataclass(frozen=True, kw_only=True)
class AuditTrail:
    """Immutable audit record.

    Attributes:
        id: Audit record identifier.
        username: Actor username (None for anonymous operations).
        full_name: Actor display name.
        action: Create, Update or Delete.
        table_name: Table of the changed entity.
        timestamp: When the change was flushed (UTC).
        old_values: Column snapshot before the change.
        new_values: Column snapshot after the change.
        affected_columns: Columns that changed (updates only).
        ip_address: Origin address of the request.
        message: Optional free-text note.
    """

    id: UUID
    action: AuditAction
    table_name: str
    timestamp: datetime
    username: str | None = None
    full_name: str | None = None
    old_values: dict[str, Any] = field(default_factory=dict)
    new_values: dict[str, Any] = field(default_factory=dict)
    affected_columns: list[str] = field(default_factory=list)
    ip_address: str | None = None
    message: str | None = None
