"""Email confirmation handler.

Already-confirmed accounts succeed with an informational message; the
repository decides which message applies.
"""

from keyhold.application.commands.account_commands import ConfirmEmail
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import EmailConfirmer


class ConfirmEmailHandler:
    """Handler for ConfirmEmail command."""

    OPERATION = "ConfirmEmail"
    CONFIRM_FAILED = "Confirm email failed"

    def __init__(
        self,
        accounts: EmailConfirmer,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: ConfirmEmail, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.confirm_email(cmd.user_id, cmd.code, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.CONFIRM_FAILED,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)
