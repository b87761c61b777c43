"""GetUserAccount query handler."""

from keyhold.application.dtos import UserAccountResponse
from keyhold.application.handler_boundary import delegate
from keyhold.application.queries.account_queries import GetUserAccount
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError, user_errors
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.entities import UserAccount
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import AccountReader


class GetUserAccountHandler:
    """Fetch a single account by id.

    Any repository failure is reported as User.NotFound. Exceptions and
    cancellation are still converted by the boundary.
    """

    OPERATION = "GetUserAccount"
    COULD_NOT_FETCH = "Could not fetch user account"

    def __init__(
        self,
        accounts: AccountReader,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, query: GetUserAccount, cancellation: CancellationToken | None = None
    ) -> Result[UserAccountResponse, DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(query.user_id)

        async def fetch() -> Result[UserAccount, DomainError]:
            found = await self._accounts.get_account(query.user_id, token)
            if isinstance(found, Failure):
                return Failure.of(user_errors.user_not_found())
            return found

        with self._tracer.start_span(self.OPERATION, subject=subject) as span:
            result = await delegate(
                fetch,
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.COULD_NOT_FETCH,
            )

        match result:
            case Success(value=account):
                return Success(value=UserAccountResponse.from_entity(account))
            case Failure(errors=errors):
                return Failure(errors=errors)
