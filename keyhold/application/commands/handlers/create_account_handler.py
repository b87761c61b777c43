"""Account creation handler.

Flow:
1. Open CreateAccount span
2. Delegate to AccountCreator.create_account (duplicate email/phone
   checks, password hashing and confirmation code live in the repository)
3. On success, publish ConfirmationEmailEvent (once, after the account
   is persisted)
4. Return ApiResponse with the new account id

On failure:
- Repository errors (e.g. User.Exists) are returned unchanged
- Publish failure returns Messaging.PublishFailed (account stays created;
  the user can request a resend)
- Unexpected exceptions return User.Exception

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, events)
- Repository is injected via its capability protocol
"""

from keyhold.application.commands.account_commands import CreateAccount
from keyhold.application.dtos import ApiResponse
from keyhold.application.handler_boundary import delegate, publish_event
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.events import ConfirmationEmailEvent
from keyhold.domain.protocols import EventBusProtocol, LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import AccountCreator


class CreateAccountMessages:
    """Create-account messages."""

    CREATED = "Account created successfully. Check your email to confirm your account."
    COULD_NOT_CREATE = "Could not create account"


class CreateAccountHandler:
    """Handler for CreateAccount command."""

    OPERATION = "CreateAccount"

    def __init__(
        self,
        accounts: AccountCreator,
        event_bus: EventBusProtocol,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            accounts: Account creation capability.
            event_bus: Event bus for the confirmation email event.
            tracer: Tracer for the handler span.
            logger: Structured logger.
        """
        self._accounts = accounts
        self._event_bus = event_bus
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: CreateAccount, cancellation: CancellationToken | None = None
    ) -> Result[ApiResponse, DomainError]:
        """Handle CreateAccount command.

        Returns:
            Success(ApiResponse(item=user_id)) on success.
            Failure(errors) on repository, publish or unexpected failure.

        Side Effects:
            - Persists the account (via repository)
            - Publishes ConfirmationEmailEvent on success only
        """
        token = cancellation or CancellationToken.none()
        with self._tracer.start_span(self.OPERATION, subject=cmd.email) as span:
            result = await delegate(
                lambda: self._accounts.create_account(
                    full_name=cmd.full_name,
                    email=cmd.email,
                    username=cmd.username,
                    phone_number=cmd.phone_number,
                    password=cmd.password,
                    role=cmd.role,
                    cancellation=token,
                ),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=cmd.email,
                entity="User",
                failure_message=CreateAccountMessages.COULD_NOT_CREATE,
            )

            match result:
                case Failure(errors=errors):
                    return Failure(errors=errors)
                case Success(value=created):
                    published = await publish_event(
                        self._event_bus,
                        ConfirmationEmailEvent(
                            user_id=created.user_id,
                            email=created.email,
                            verification_code=created.verification_code,
                        ),
                        span=span,
                        logger=self._logger,
                        operation=self.OPERATION,
                        subject=str(created.user_id),
                    )
                    if isinstance(published, Failure):
                        return Failure(errors=published.errors)

                    self._logger.info("account_created", user_id=str(created.user_id))
                    return Success(
                        value=ApiResponse(
                            message=CreateAccountMessages.CREATED,
                            item=created.user_id,
                        )
                    )
