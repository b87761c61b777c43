"""Repository dependency factories.

Request-scoped repository instances sharing the request's session.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from keyhold.core.config import get_settings
from keyhold.core.container.infrastructure import (
    get_db_session,
    get_logger,
    get_password_service,
    get_token_service,
)
from keyhold.infrastructure.persistence.repositories import (
    AccountRepository,
    AuditRepository,
)


async def get_account_repository(
    session: AsyncSession = Depends(get_db_session),
) -> AccountRepository:
    """Get account repository (request-scoped).

    The repository satisfies every account capability protocol; handler
    factories below pass it where a narrower capability is declared.
    """
    return AccountRepository(
        session,
        get_password_service(),
        get_token_service(),
        get_logger(),
        refresh_token_days=get_settings().jwt.refresh_token_expiry_days,
    )


async def get_audit_repository(
    session: AsyncSession = Depends(get_db_session),
) -> AuditRepository:
    return AuditRepository(session)
