"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Settings
- Logging (structlog console/JSON)
- Tracing (span tracer)
- Database (SQLAlchemy async engine)
- Password hashing (bcrypt)
- Token generation (JWT)
- Email (logging/SMTP)

Request-scoped dependencies (session, cancellation token) live at the
bottom of the module.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import suppress
from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from keyhold.core.cancellation import CancellationToken
from keyhold.core.config import Settings, get_settings
from keyhold.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from keyhold.domain.protocols import (
        EmailSenderProtocol,
        LoggerProtocol,
        PasswordHashingProtocol,
        TokenServiceProtocol,
        TracerProtocol,
    )


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Get logger singleton (app-scoped).

    Console renderer in development, JSON when ``LOG_JSON`` is set.

    Usage:
        logger = get_logger()
        logger.info("account_created", user_id=str(user_id))
    """
    from keyhold.infrastructure.logging import ConsoleAdapter

    settings = get_settings()
    level = "DEBUG" if settings.is_development else "INFO"
    return ConsoleAdapter(use_json=settings.log_json, level=level)


@lru_cache()
def get_tracer() -> "TracerProtocol":
    from keyhold.infrastructure.telemetry import SpanTracer

    return SpanTracer(logger=get_logger())


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Use get_db_session() for per-request sessions.
    """
    settings = get_settings()
    return Database(database_url=settings.database_url, echo=settings.db_echo)


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    from keyhold.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_service() -> "TokenServiceProtocol":
    """Get JWT token service singleton (app-scoped).

    Raises:
        ValueError: If the configured secret is too short.
    """
    from keyhold.infrastructure.security import JWTService

    return JWTService(get_settings().jwt)


@lru_cache()
def get_email_sender() -> "EmailSenderProtocol":
    """Get email sender singleton (app-scoped).

    Adapter is chosen by ``EMAIL__SENDER``:
        - 'logging': LoggingEmailSender (development, logs instead of sending)
        - 'smtp': SmtpEmailSender
    """
    from keyhold.infrastructure.email import LoggingEmailSender, SmtpEmailSender

    settings = get_settings()
    if settings.email.sender == "smtp":
        return SmtpEmailSender(settings=settings.email, logger=get_logger())
    return LoggingEmailSender(logger=get_logger())


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


def get_app_settings() -> Settings:
    """Settings as a FastAPI dependency (overridable in tests)."""
    return get_settings()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Commits on success, rolls back on exception, always closes.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


DISCONNECT_POLL_SECONDS = 0.5


async def _cancel_on_disconnect(request: Request, token: CancellationToken) -> None:
    while not token.cancelled:
        if await request.is_disconnected():
            token.cancel("Client disconnected")
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


async def get_cancellation_token(
    request: Request,
) -> AsyncGenerator[CancellationToken, None]:
    """Per-request cancellation token.

    Fires when the configured deadline passes or the client goes away,
    whichever comes first.
    """
    token = CancellationToken.with_timeout(get_settings().request_timeout_seconds)
    watcher = asyncio.create_task(_cancel_on_disconnect(request, token))
    try:
        yield token
    finally:
        watcher.cancel()
        with suppress(asyncio.CancelledError):
            await watcher
        token.dispose()
