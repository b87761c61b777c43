"""Account deletion handler.

Any repository failure (including User.NotFound) is reported to the
caller as a single User.DeleteFailed error; the original error codes are
logged, not returned.
"""

from keyhold.application.commands.account_commands import DeleteAccount
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError, user_errors
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import AccountDeleter


class DeleteAccountMessages:
    DELETED = "Account deleted successfully"
    DELETION_FAILED = "Account deletion failed"
    COULD_NOT_DELETE = "Could not delete account"


class DeleteAccountHandler:
    """Handler for DeleteAccount command."""

    OPERATION = "DeleteAccount"

    def __init__(
        self,
        accounts: AccountDeleter,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: DeleteAccount, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)

        async def delete() -> Result[bool, DomainError]:
            deleted = await self._accounts.delete_account(cmd.user_id, token)
            if isinstance(deleted, Failure):
                self._logger.warning(
                    "account_deletion_failed",
                    user_id=subject,
                    error_codes=[error.code for error in deleted.errors],
                )
                return Failure.of(
                    user_errors.delete_failed(DeleteAccountMessages.DELETION_FAILED)
                )
            return deleted

        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                delete,
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=DeleteAccountMessages.COULD_NOT_DELETE,
            )

        match result:
            case Success():
                return Success(value=ApiResponse(message=DeleteAccountMessages.DELETED))
            case Failure(errors=errors):
                return Failure(errors=errors)
