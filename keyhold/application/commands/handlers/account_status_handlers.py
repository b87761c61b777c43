"""Account activation and deactivation handlers.

Both handlers delegate to a single capability and return the repository's
message in the success envelope.
"""

from keyhold.application.commands.account_commands import (
    ActivateAccount,
    DeactivateAccount,
)
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import (
    AccountActivator,
    AccountDeactivator,
)


class ActivateAccountHandler:
    """Handler for ActivateAccount command."""

    OPERATION = "ActivateAccount"
    COULD_NOT_ACTIVATE = "Could not activate account"

    def __init__(
        self,
        accounts: AccountActivator,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: ActivateAccount, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.activate_account(cmd.user_id, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.COULD_NOT_ACTIVATE,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)


class DeactivateAccountHandler:
    """Handler for DeactivateAccount command."""

    OPERATION = "DeactivateAccount"
    COULD_NOT_DEACTIVATE = "Could not deactivate account"

    def __init__(
        self,
        accounts: AccountDeactivator,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: DeactivateAccount, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.deactivate_account(cmd.user_id, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.COULD_NOT_DEACTIVATE,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)
