"""Login handler.

Returns the repository's AuthTokens unchanged on success. Credential,
confirmation and activity checks live in the repository, which reports
User.InvalidCredentials, User.NotConfirmed or User.InActive. The client
address and User-Agent are recorded on the session the login opens.
"""

from keyhold.application.commands.auth_commands import Login
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Result
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import AccountAuthenticator
from keyhold.domain.value_objects import AuthTokens


class LoginHandler:
    """Handler for Login command."""

    OPERATION = "Login"
    COULD_NOT_LOGIN = "Could not login user"

    def __init__(
        self,
        accounts: AccountAuthenticator,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: Login, cancellation: CancellationToken | None = None
    ) -> Result[AuthTokens, DomainError]:
        token = cancellation or CancellationToken.none()
        with self._tracer.start_span(self.OPERATION, subject=cmd.username) as span:
            return await delegate(
                lambda: self._accounts.login(
                    cmd.username,
                    cmd.password,
                    token,
                    ip_address=cmd.ip_address,
                    user_agent=cmd.user_agent,
                ),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=cmd.username,
                entity="User",
                failure_message=self.COULD_NOT_LOGIN,
            )
