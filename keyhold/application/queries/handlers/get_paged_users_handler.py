"""GetPagedUsers query handler."""

from keyhold.application.dtos import UserAccountResponse
from keyhold.application.handler_boundary import delegate
from keyhold.application.queries.account_queries import GetPagedUsers
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.protocols import LoggerProtocol, TracerProtocol
from keyhold.domain.protocols.account_capabilities import PagedAccountReader
from keyhold.domain.value_objects import PagedList


class GetPagedUsersHandler:
    OPERATION = "GetPagedUsers"
    COULD_NOT_FETCH = "Could not fetch user accounts"

    def __init__(
        self,
        accounts: PagedAccountReader,
        tracer: TracerProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._accounts = accounts
        self._tracer = tracer
        self._logger = logger

    async def handle(
        self, query: GetPagedUsers, cancellation: CancellationToken | None = None
    ) -> Result[PagedList[UserAccountResponse], DomainError]:
        token = cancellation or CancellationToken.none()
        subject = f"page:{query.paging.page_number}"
        with self._tracer.start_span(
            self.OPERATION, subject=subject, page_size=query.paging.page_size
        ) as span:
            result = await delegate(
                lambda: self._accounts.get_paged_accounts(query.paging, token),
                span=span,
                logger=self._logger,
                cancellation=token,
                operation=self.OPERATION,
                subject=subject,
                entity="User",
                failure_message=self.COULD_NOT_FETCH,
            )

        match result:
            case Success(value=page):
                return Success(
                    value=PagedList(
                        items=[UserAccountResponse.from_entity(a) for a in page.items],
                        metadata=page.metadata,
                    )
                )
            case Failure(errors=errors):
                return Failure(errors=errors)
