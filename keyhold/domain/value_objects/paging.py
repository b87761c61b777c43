"""Paging value objects.

PagingParameters describe the requested page; PagedList is what
repositories return. Bounds (page_size >= 1, page_number >= 1) are
enforced at the HTTP boundary, not here.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

MAX_PAGE_SIZE = 100


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, kw_only=True)
class PagingParameters:
    """Requested page plus optional filter and sort fields."""

    page_size: int = 10
    page_number: int = 1
    search: str | None = None
    order_by: str | None = None
    sort_order: SortOrder = SortOrder.ASC

    @property
    def limit(self) -> int:
        return min(self.page_size, MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.limit


@dataclass(frozen=True, kw_only=True)
class SessionPagingParameters(PagingParameters):
    """Paging parameters for one account's login sessions.

    ``active_only`` of None lists every session; True or False filters on
    whether the session is still active.
    """

    active_only: bool | None = None


@dataclass(frozen=True, kw_only=True)
class AuditPagingParameters(PagingParameters):
    """Paging parameters with audit-specific filters."""

    action: str | None = None
    full_name: str | None = None
    username: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class PageMetadata:
    """Pagination metadata returned alongside a page of items."""

    current_page: int
    total_pages: int
    page_size: int
    total_count: int
    has_previous: bool
    has_next: bool

    @classmethod
    def build(cls, *, page_number: int, page_size: int, total_count: int) -> "PageMetadata":
        total_pages = math.ceil(total_count / page_size) if page_size else 0
        return cls(
            current_page=page_number,
            total_pages=total_pages,
            page_size=page_size,
            total_count=total_count,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )


@dataclass(frozen=True, kw_only=True)
class PagedList(Generic[T]):
    """One page of items with its metadata."""

    items: list[T]
    metadata: PageMetadata
