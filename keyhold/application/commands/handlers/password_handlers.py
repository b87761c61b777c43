"""Password reset (administrative) and change (self-service) handlers."""

from keyhold.application.commands.auth_commands import ChangePassword, ResetPassword
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import (
    PasswordChanger,
    PasswordResetter,
)


class ResetPasswordHandler:
    """Handler for ResetPassword command."""

    OPERATION = "ResetPassword"
    RESET_FAILED = "User password reset failed!"

    def __init__(
        self,
        accounts: PasswordResetter,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: ResetPassword, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.reset_password(
                    cmd.user_id, cmd.new_password, token
                ),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.RESET_FAILED,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)


class ChangePasswordHandler:
    """Handler for ChangePassword command."""

    OPERATION = "ChangePassword"
    CHANGE_FAILED = "Password change failed"

    def __init__(
        self,
        accounts: PasswordChanger,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: ChangePassword, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.change_password(
                    cmd.user_id, cmd.old_password, cmd.new_password, token
                ),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.CHANGE_FAILED,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)
