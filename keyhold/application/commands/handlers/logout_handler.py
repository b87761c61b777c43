"""Logout handlers.

Logout ends every session of the caller and revokes the stored refresh
token; LogoutSession ends a single session so tokens issued to it can no
longer be refreshed.
"""

from keyhold.application.commands.auth_commands import Logout, LogoutSession
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import (
    SessionTerminator,
    SingleSessionTerminator,
)


class LogoutHandler:
    OPERATION = "Logout"
    COULD_NOT_LOGOUT = "Could not logout user"

    def __init__(
        self,
        accounts: SessionTerminator,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: Logout, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.logout(cmd.user_id, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.COULD_NOT_LOGOUT,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)


class LogoutSessionHandler:
    """Handler for LogoutSession command."""

    OPERATION = "LogoutSession"
    COULD_NOT_LOGOUT = "Could not logout user"

    def __init__(
        self,
        accounts: SingleSessionTerminator,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: LogoutSession, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(
            self.OPERATION, subject=subject, session_id=str(cmd.session_id)
        ) as span:
            result = await delegate(
                lambda: self._accounts.logout_session(cmd.user_id, cmd.session_id, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="UserSession",
                failure_message=self.COULD_NOT_LOGOUT,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)
