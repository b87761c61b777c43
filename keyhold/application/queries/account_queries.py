"""Account queries (CQRS read operations)."""

from dataclasses import dataclass
from uuid import UUID

from keyhold.domain.value_objects import PagingParameters, SessionPagingParameters


@dataclass(frozen=True, kw_only=True)
class GetUserAccount:
    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class GetPagedUsers:
    paging: PagingParameters


@dataclass(frozen=True, kw_only=True)
class GetUserStats:
    """Account totals for administrators (users and admins)."""


@dataclass(frozen=True, kw_only=True)
class GetUserSessions:
    user_id: UUID
    paging: SessionPagingParameters
