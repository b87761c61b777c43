"""Audit trail queries (CQRS read operations)."""

from dataclasses import dataclass
from uuid import UUID

from keyhold.domain.value_objects import AuditPagingParameters


@dataclass(frozen=True, kw_only=True)
class GetPagedAudits:
    paging: AuditPagingParameters


@dataclass(frozen=True, kw_only=True)
class GetAuditLogById:
    audit_id: UUID
