"""GetUserSessions query handler.

Lists one account's login sessions, newest login first. An unknown
account simply has no sessions.
"""

from keyhold.application.dtos import UserSessionResponse
from keyhold.application.handler_boundary import delegate
from keyhold.application.queries.account_queries import GetUserSessions
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import SessionReader
from keyhold.domain.value_objects import PagedList


class GetUserSessionsHandler:
    OPERATION = "GetUserSessions"
    COULD_NOT_FETCH = "Could not fetch user sessions"

    def __init__(
        self,
        accounts: SessionReader,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, query: GetUserSessions, cancellation: CancellationToken | None = None
    ) -> Result[PagedList[UserSessionResponse], DomainError]:
        token = cancellation or CancellationToken.none()
        subject = str(query.user_id)
        with self._tracer.start_span(
            self.OPERATION, subject=subject, page=query.paging.page_number
        ) as span:
            result = await delegate(
                lambda: self._accounts.get_paged_sessions(query.user_id, query.paging, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="UserSession",
                failure_message=self.COULD_NOT_FETCH,
            )

        match result:
            case Success(value=page):
                return Success(
                    value=PagedList(
                        items=[UserSessionResponse.from_entity(s) for s in page.items],
                        metadata=page.metadata,
                    )
                )
            case Failure(errors=errors):
                return Failure(errors=errors)
