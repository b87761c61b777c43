"""Audit trail query handlers."""

from keyhold.application.dtos import AuditTrailResponse
from keyhold.application.handler_boundary import delegate
from keyhold.application.queries.audit_queries import GetAuditLogById, GetPagedAudits
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError, general_errors
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.audit_capabilities import AuditReader, PagedAuditReader
from keyhold.domain.value_objects import PagedList


class GetPagedAuditsHandler:
    """Handler for GetPagedAudits query."""

    OPERATION = "GetPagedAudits"
    COULD_NOT_FETCH = "Could not fetch audit logs"

    def __init__(
        self,
        audits: PagedAuditReader,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._audits = audits
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, query: GetPagedAudits, cancellation: CancellationToken | None = None
    ) -> Result[PagedList[AuditTrailResponse], DomainError]:
        token = cancellation or CancellationToken.none()
        subject = f"page:{query.paging.page_number}"
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._audits.get_paged_audits(query.paging, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="AuditTrail",
                failure_message=self.COULD_NOT_FETCH,
            )

        match result:
            case Success(value=page):
                return Success(
                    value=PagedList(
                        items=[AuditTrailResponse.from_entity(a) for a in page.items],
                        metadata=page.metadata,
                    )
                )
            case Failure(errors=errors):
                return Failure(errors=errors)


class GetAuditLogByIdHandler:
    """Handler for GetAuditLogById query.

    A missing record is reported as AuditTrail.NotFound.
    """

    OPERATION = "GetAuditLogById"
    COULD_NOT_FETCH = "Could not fetch audit log"

    def __init__(
        self,
        audits: AuditReader,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._audits = audits
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, query: GetAuditLogById, cancellation: CancellationToken | None = None
    ) -> Result[AuditTrailResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(query.audit_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._audits.get_audit_by_id(query.audit_id, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="AuditTrail",
                failure_message=self.COULD_NOT_FETCH,
            )

        match result:
            case Success(value=None):
                return Failure.of(general_errors.not_found("AuditTrail"))
            case Success(value=audit):
                return Success(value=AuditTrailResponse.from_entity(audit))
            case Failure(errors=errors):
                return Failure(errors=errors)
