"""Token refresh handler.

The access token may be expired; the repository verifies its signature,
matches the refresh token against the stored one and rotates both.
"""

from keyhold.application.commands.auth_commands import RefreshToken
from keyhold.application.handler_boundary import delegate
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Result
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import TokenRefresher
from keyhold.domain.value_objects import AuthTokens


class RefreshTokenHandler:
    """Handler for RefreshToken command."""

    OPERATION = "RefreshToken"
    REFRESH_FAILED = "Token refresh failed"

    def __init__(
        self,
        accounts: TokenRefresher,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, cmd: RefreshToken, cancellation: CancellationToken | None = None
    ) -> Result[AuthTokens, DomainError]:
        token = cancellation or CancellationToken.none()
        # Tokens are secrets; the span subject is a fixed label.
        with self._tracer.start_span(self.OPERATION, subject="token") as span:
            return await delegate(
                lambda: self._accounts.refresh_token(
                    cmd.access_token, cmd.refresh_token, token
                ),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject="token",
                entity="User",
                failure_message=self.REFRESH_FAILED,
            )
