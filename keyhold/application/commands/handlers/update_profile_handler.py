"""Profile update handler (self-service, caller's own account only)."""

from keyhold.application.commands.account_commands import UpdateProfile
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import ProfileUpdater


class UpdateProfileHandler:
    OPERATION = "UpdateProfile"
    COULD_NOT_UPDATE = "Could not update user profile"

    def __init__(
        self,
        accounts: ProfileUpdater,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: UpdateProfile, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(cmd.user_id)
        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                lambda: self._accounts.update_profile(
                    cmd.user_id,
                    full_name=cmd.full_name,
                    phone_number=cmd.phone_number,
                    cancellation=token,
                ),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.COULD_NOT_UPDATE,
            )

        match result:
            case Success(value=message):
                return Success(value=ApiResponse(message=message))
            case Failure(errors=errors):
                return Failure(errors=errors)
