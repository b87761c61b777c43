"""Audit trail endpoints (administrators only).

Endpoints:
    GET /audits/paged        - Paged, filtered audit trail (newest first)
    GET /audits/{audit_id}   - One audit entry
"""

import json
from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Request, Response
from fastapi.responses import JSONResponse

from keyhold.application.queries.audit_queries import GetAuditLogById, GetPagedAudits
from keyhold.application.queries.handlers.audit_handlers import (
    GetAuditLogByIdHandler,
    GetPagedAuditsHandler,
)
from keyhold.core.cancellation import CancellationToken
from keyhold.core.container import (
    get_audit_log_by_id_handler,
    get_cancellation_token,
    get_paged_audits_handler,
)
from keyhold.core.result import Failure, Success
from keyhold.domain.value_objects import AuditPagingParameters
from keyhold.presentation.api.middleware.auth_dependencies import AdminUser
from keyhold.presentation.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from keyhold.schemas.response_schemas import (
    AuditTrailSchema,
    PagedResponse,
    PageMetadataSchema,
)

router = APIRouter(
    prefix="/audits",
    tags=["Audits"],
    responses={
        400: {"model": ProblemDetails},
        401: {"model": ProblemDetails},
        403: {"model": ProblemDetails},
        404: {"model": ProblemDetails},
    },
)


@router.get(
    "/paged",
    response_model=PagedResponse[AuditTrailSchema],
    summary="Paged audit trail",
)
async def get_paged_audits(
    request: Request,
    response: Response,
    current_user: AdminUser,
    cancellation: Annotated[CancellationToken, Depends(get_cancellation_token)],
    page_size: Annotated[int, Query(ge=1)] = 10,
    page_number: Annotated[int, Query(ge=1)] = 1,
    search: Annotated[str | None, Query(description="Matches message or table")] = None,
    action: Annotated[str | None, Query(description="Create, Update or Delete")] = None,
    username: Annotated[str | None, Query()] = None,
    full_name: Annotated[str | None, Query()] = None,
    start_date: Annotated[datetime | None, Query()] = None,
    end_date: Annotated[datetime | None, Query()] = None,
    handler: GetPagedAuditsHandler = Depends(get_paged_audits_handler),
) -> PagedResponse[AuditTrailSchema] | JSONResponse:
    paging = AuditPagingParameters(
        page_size=page_size,
        page_number=page_number,
        search=search,
        action=action,
        username=username,
        full_name=full_name,
        start_date=start_date,
        end_date=end_date,
    )
    match await handler.handle(GetPagedAudits(paging=paging), cancellation):
        case Success(value=page):
            metadata = PageMetadataSchema.from_value(page.metadata)
            response.headers["X-Pagination"] = json.dumps(metadata.model_dump())
            return PagedResponse[AuditTrailSchema](
                items=[AuditTrailSchema.model_validate(item) for item in page.items],
                metadata=metadata,
            )
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


@router.get("/{audit_id}", response_model=AuditTrailSchema, summary="Get audit entry")
async def get_audit_log(
    request: Request,
    audit_id: Annotated[UUID, Path(description="Audit entry id")],
    current_user: AdminUser,
    cancellation: Annotated[CancellationToken, Depends(get_cancellation_token)],
    handler: GetAuditLogByIdHandler = Depends(get_audit_log_by_id_handler),
) -> AuditTrailSchema | JSONResponse:
    match await handler.handle(GetAuditLogById(audit_id=audit_id), cancellation):
        case Success(value=audit):
            return AuditTrailSchema.model_validate(audit)
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)
