"""Confirmation email resend handler.

Flow:
1. Open ResendConfirmation span
2. Delegate to ConfirmationCodeIssuer (fails with User.AlreadyConfirmed
   or User.NotFound)
3. Publish ConfirmationEmailEvent with the fresh code
4. Return ApiResponse
"""

from keyhold.application.commands.account_commands import ResendConfirmation
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate, publish_event
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.events import ConfirmationEmailEvent
from keyhold.domain.protocols import EventBusProtocol, LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import ConfirmationCodeIssuer


class ResendConfirmationHandler:
    """Handler for ResendConfirmation command."""

    OPERATION = "ResendConfirmation"
    SENT = "Confirmation email sent successfully."
    RESEND_FAILED = "Confirmation email resend failed"

    def __init__(
        self,
        accounts: ConfirmationCodeIssuer,
        event_bus: EventBusProtocol,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._event_bus = event_bus
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: ResendConfirmation, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        with self._tracer.start_span(self.OPERATION, subject=cmd.email) as span:
            result = await delegate(
                lambda: self._accounts.reissue_confirmation_code(cmd.email, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=cmd.email,
                entity="User",
                failure_message=self.RESEND_FAILED,
            )

            match result:
                case Failure(errors=errors):
                    return Failure(errors=errors)
                case Success(value=issued):
                    published = await publish_event(
                        self._event_bus,
                        ConfirmationEmailEvent(
                            user_id=issued.user_id,
                            email=issued.email,
                            verification_code=issued.verification_code,
                        ),
                        span=span,
                        logger=self._logger,
                        operation=self.OPERATION,
                        subject=str(issued.user_id),
                    )
                    if isinstance(published, Failure):
                        return Failure(errors=published.errors)
                    return Success(value=ApiResponse(message=self.SENT))
