"""Audit trail read capabilities."""

from typing import Protocol
from uuid import UUID

from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Result
from keyhold.domain.entities import AuditTrail
from keyhold.domain.value_objects import AuditPagingParameters, PagedList


class PagedAuditReader(Protocol):
    async def get_paged_audits(
        self, paging: AuditPagingParameters, cancellation: CancellationToken
    ) -> Result[PagedList[AuditTrail], DomainError]:
        ...


class AuditReader(Protocol):
    async def get_audit_by_id(
        self, audit_id: UUID, cancellation: CancellationToken
    ) -> Result[AuditTrail | None, DomainError]:
        """Return the record, or Success(None) when it does not exist."""
        ...
