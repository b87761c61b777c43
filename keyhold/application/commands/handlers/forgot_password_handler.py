"""Forgotten password handler.

Replaces the account password with a temporary one and publishes a
TemporaryPasswordEvent so the consumer can email it.
"""

from keyhold.application.commands.auth_commands import ForgotPassword
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate, publish_event
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.events import TemporaryPasswordEvent
from keyhold.domain.protocols import EventBusProtocol, LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import TemporaryPasswordIssuer


class ForgotPasswordHandler:
    """Handler for ForgotPassword command."""

    OPERATION = "ForgotPassword"
    SENT = "A temporary password has been sent to your email."
    RESET_FAILED = "Sorry, we could not reset your password, please try again."

    def __init__(
        self,
        accounts: TemporaryPasswordIssuer,
        event_bus: EventBusProtocol,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._event_bus = event_bus
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: ForgotPassword, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        with self._tracer.start_span(self.OPERATION, subject=cmd.email) as span:
            result = await delegate(
                lambda: self._accounts.issue_temporary_password(cmd.email, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=cmd.email,
                entity="User",
                failure_message=self.RESET_FAILED,
            )

            match result:
                case Failure(errors=errors):
                    return Failure(errors=errors)
                case Success(value=issued):
                    published = await publish_event(
                        self._event_bus,
                        TemporaryPasswordEvent(
                            user_id=issued.user_id,
                            email=issued.email,
                            temporary_password=issued.temporary_password,
                        ),
                        span=span,
                        logger=self._logger,
                        operation=self.OPERATION,
                        subject=str(issued.user_id),
                    )
                    if isinstance(published, Failure):
                        return Failure(errors=published.errors)
                    return Success(value=ApiResponse(message=self.SENT))
