"""GetUserStats query handler."""

from keyhold.application.handler_boundary import delegate
from keyhold.application.queries.account_queries import GetUserStats
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Result
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import AccountStatsReader
from keyhold.domain.value_objects import AccountStats


class GetUserStatsHandler:
    OPERATION = "GetUserStats"
    COULD_NOT_FETCH = "Could not fetch account statistics"

    def __init__(
        self,
        accounts: AccountStatsReader,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, query: GetUserStats, cancellation: CancellationToken | None = None
    ) -> Result[AccountStats, DomainError]:
        token = cancellation or CancellationToken.none()
        with self._tracer.start_span(self.OPERATION, subject="accounts") as span:
            return await delegate(
                lambda: self._accounts.get_account_stats(token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject="accounts",
                entity="User",
                failure_message=self.COULD_NOT_FETCH,
            )
