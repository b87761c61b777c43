"""AuditRepository - read side of the audit trail.

Filters follow the compliance-query shape: optional action, actor
username, actor full name, free-text search and an inclusive date range,
always ordered newest first.
"""

from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Result, Success
from keyhold.domain.entities import AuditAction, AuditTrail
from keyhold.domain.value_objects import AuditPagingParameters, PagedList, PageMetadata
from keyhold.infrastructure.persistence.models.audit_trail import AuditTrailModel


class AuditRepository:
    """SQLAlchemy implementation of PagedAuditReader and AuditReader."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_paged_audits(
        self, paging: AuditPagingParameters, cancellation: CancellationToken
    ) -> Result[PagedList[AuditTrail], DomainError]:
        query = self._filtered(paging)

        cancellation.raise_if_cancelled()
        total_count = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )

        query = (
            query.order_by(AuditTrailModel.timestamp.desc(), AuditTrailModel.id.desc())
            .limit(paging.limit)
            .offset(paging.offset)
        )
        cancellation.raise_if_cancelled()
        rows = (await self.session.scalars(query)).all()

        return Success(
            value=PagedList(
                items=[self._to_domain(row) for row in rows],
                metadata=PageMetadata.build(
                    page_number=paging.page_number,
                    page_size=paging.limit,
                    total_count=total_count or 0,
                ),
            )
        )

    async def get_audit_by_id(
        self, audit_id: UUID, cancellation: CancellationToken
    ) -> Result[AuditTrail | None, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(AuditTrailModel, audit_id)
        return Success(value=self._to_domain(model) if model is not None else None)

    def _filtered(self, paging: AuditPagingParameters) -> Select[tuple[AuditTrailModel]]:
        query = select(AuditTrailModel)

        if paging.action:
            query = query.where(func.lower(AuditTrailModel.action) == paging.action.lower())
        if paging.username:
            query = query.where(AuditTrailModel.username.ilike(f"%{paging.username}%"))
        if paging.full_name:
            query = query.where(AuditTrailModel.full_name.ilike(f"%{paging.full_name}%"))
        if paging.search:
            pattern = f"%{paging.search.strip()}%"
            query = query.where(
                or_(
                    AuditTrailModel.table_name.ilike(pattern),
                    AuditTrailModel.username.ilike(pattern),
                    AuditTrailModel.full_name.ilike(pattern),
                    AuditTrailModel.message.ilike(pattern),
                )
            )
        if paging.start_date is not None:
            query = query.where(AuditTrailModel.timestamp >= paging.start_date)
        if paging.end_date is not None:
            query = query.where(AuditTrailModel.timestamp <= paging.end_date)
        return query

    def _to_domain(self, model: AuditTrailModel) -> AuditTrail:
        return AuditTrail(
            id=model.id,
            action=AuditAction(model.action),
            table_name=model.table_name,
            timestamp=model.timestamp,
            username=model.username,
            full_name=model.full_name,
            old_values=dict(model.old_values or {}),
            new_values=dict(model.new_values or {}),
            affected_columns=list(model.affected_columns or []),
            ip_address=model.ip_address,
            message=model.message,
        )
