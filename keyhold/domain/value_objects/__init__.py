"""Domain value objects."""

from keyhold.domain.value_objects.account_results import (
    AccountCreated,
    AccountStats,
    AuthTokens,
    TemporaryPassword,
)
from keyhold.domain.value_objects.paging import (
    AuditPagingParameters,
    PagedList,
    PageMetadata,
    PagingParameters,
    SessionPagingParameters,
    SortOrder,
)

__all__ = [
    "AccountCreated",
    "AccountStats",
    "AuditPagingParameters",
    "AuthTokens",
    "PagedList",
    "PageMetadata",
    "PagingParameters",
    "SessionPagingParameters",
    "SortOrder",
    "TemporaryPassword",
]
