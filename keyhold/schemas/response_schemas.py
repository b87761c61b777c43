"""Response schemas.

Handlers return plain dataclasses; routers render them through these
models so the OpenAPI document describes every payload.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from keyhold.domain.value_objects import AuthTokens, PageMetadata

T = TypeVar("T")


class ApiResponseSchema(BaseModel):
    """Success envelope for commands."""

    message: str = Field(..., description="Outcome message")
    item: Any = Field(default=None, description="Optional payload (e.g. created id)")


class PageMetadataSchema(BaseModel):
    current_page: int
    total_pages: int
    page_size: int
    total_count: int
    has_previous: bool
    has_next: bool

    @classmethod
    def from_value(cls, metadata: PageMetadata) -> "PageMetadataSchema":
        return cls(
            current_page=metadata.current_page,
            total_pages=metadata.total_pages,
            page_size=metadata.page_size,
            total_count=metadata.total_count,
            has_previous=metadata.has_previous,
            has_next=metadata.has_next,
        )


class PagedResponse(BaseModel, Generic[T]):
    """Paged envelope. ``metadata`` is repeated in the X-Pagination header."""

    items: list[T]
    metadata: PageMetadataSchema


class UserAccountSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: str
    full_name: str
    username: str
    phone_number: str
    role: str
    is_active: bool
    email_confirmed: bool
    created_at: datetime


class UserSessionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: UUID
    user_id: UUID
    ip_address: str | None
    user_agent: str | None
    login_at: datetime
    last_activity_at: datetime
    logout_at: datetime | None
    is_active: bool


class UserStatsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_users: int
    total_admins: int


class AuditTrailSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str | None
    full_name: str | None
    action: str
    table_name: str
    timestamp: datetime
    old_values: dict[str, Any]
    new_values: dict[str, Any]
    affected_columns: list[str]
    ip_address: str | None
    message: str | None


class LoginResponse(BaseModel):
    user_id: UUID
    access_token: str
    refresh_token: str
    session_id: UUID
    token_type: str = "bearer"

    @classmethod
    def from_tokens(cls, tokens: AuthTokens) -> "LoginResponse":
        return cls(
            user_id=tokens.user_id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            session_id=tokens.session_id,
        )


class RefreshTokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

    @classmethod
    def from_tokens(cls, tokens: AuthTokens) -> "RefreshTokenResponse":
        return cls(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str
