"""Unit tests for account and audit query handlers."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from keyhold.application.dtos import (
    AuditTrailResponse,
    UserAccountResponse,
    UserSessionResponse,
)
from keyhold.application.queries.account_queries import (
    GetPagedUsers,
    GetUserAccount,
    GetUserSessions,
    GetUserStats,
)
from keyhold.application.queries.audit_queries import GetAuditLogById, GetPagedAudits
from keyhold.application.queries.handlers.audit_handlers import (
    GetAuditLogByIdHandler,
    GetPagedAuditsHandler,
)
from keyhold.application.queries.handlers.get_paged_users_handler import (
    GetPagedUsersHandler,
)
from keyhold.application.queries.handlers.get_user_account_handler import (
    GetUserAccountHandler,
)
from keyhold.application.queries.handlers.get_user_sessions_handler import (
    GetUserSessionsHandler,
)
from keyhold.application.queries.handlers.get_user_stats_handler import (
    GetUserStatsHandler,
)
from keyhold.core.errors import DomainError, user_errors
from keyhold.core.result import Failure, Success
from keyhold.domain.entities import (
    AuditAction,
    AuditTrail,
    UserAccount,
    UserRole,
    UserSession,
)
from keyhold.domain.value_objects import (
    AccountStats,
    AuditPagingParameters,
    PagedList,
    PageMetadata,
    PagingParameters,
    SessionPagingParameters,
)


def make_account(**overrides) -> UserAccount:
    values = {
        "id": uuid7(),
        "username": "jane@example.com",
        "email": "jane@example.com",
        "phone_number": "0241234567",
        "full_name": "Jane Doe",
        "password_hash": "$2b$10$hash",
        "role": UserRole.USER,
        "email_confirmed": True,
        "refresh_token": "secret-refresh",
    }
    values.update(overrides)
    return UserAccount(**values)


def make_audit() -> AuditTrail:
    return AuditTrail(
        id=uuid7(),
        action=AuditAction.UPDATE,
        table_name="user_accounts",
        timestamp=datetime.now(UTC),
        username="admin@example.com",
        old_values={"is_active": True},
        new_values={"is_active": False},
        affected_columns=["is_active"],
        message="Update user_accounts 1",
    )


@pytest.mark.unit
class TestGetUserAccountHandler:
    @pytest.mark.asyncio
    async def test_maps_entity_without_credentials(self, tracer, mock_logger):
        account = make_account()
        accounts = Mock()
        accounts.get_account = AsyncMock(return_value=Success(value=account))
        handler = GetUserAccountHandler(accounts, tracer, mock_logger)

        result = await handler.handle(GetUserAccount(user_id=account.id))

        assert isinstance(result.value, UserAccountResponse)
        assert result.value.user_id == account.id
        assert result.value.role == "User"
        assert not hasattr(result.value, "password_hash")
        assert not hasattr(result.value, "refresh_token")

    @pytest.mark.asyncio
    async def test_any_repository_failure_is_not_found(self, tracer, mock_logger):
        accounts = Mock()
        accounts.get_account = AsyncMock(
            return_value=Failure.of(DomainError(code="User.Whatever", description="x"))
        )
        handler = GetUserAccountHandler(accounts, tracer, mock_logger)

        result = await handler.handle(GetUserAccount(user_id=uuid7()))

        assert result.errors == (user_errors.user_not_found(),)

    @pytest.mark.asyncio
    async def test_exception_is_not_translated_to_not_found(self, tracer, mock_logger):
        accounts = Mock()
        accounts.get_account = AsyncMock(side_effect=RuntimeError("boom"))
        handler = GetUserAccountHandler(accounts, tracer, mock_logger)

        result = await handler.handle(GetUserAccount(user_id=uuid7()))

        assert result.error.code == "User.Exception"


@pytest.mark.unit
class TestGetPagedUsersHandler:
    @pytest.mark.asyncio
    async def test_maps_page_items_and_keeps_metadata(self, tracer, mock_logger):
        metadata = PageMetadata.build(page_number=1, page_size=10, total_count=2)
        accounts = Mock()
        accounts.get_paged_accounts = AsyncMock(
            return_value=Success(
                value=PagedList(items=[make_account(), make_account()], metadata=metadata)
            )
        )
        handler = GetPagedUsersHandler(accounts, tracer, mock_logger)

        result = await handler.handle(GetPagedUsers(paging=PagingParameters()))

        assert len(result.value.items) == 2
        assert all(isinstance(i, UserAccountResponse) for i in result.value.items)
        assert result.value.metadata is metadata


@pytest.mark.unit
class TestAccountStatsAndSessions:
    @pytest.mark.asyncio
    async def test_stats_pass_through(self, tracer, mock_logger):
        stats = AccountStats(total_users=7, total_admins=2)
        accounts = Mock()
        accounts.get_account_stats = AsyncMock(return_value=Success(value=stats))
        handler = GetUserStatsHandler(accounts, tracer, mock_logger)

        result = await handler.handle(GetUserStats())

        assert result.value is stats

    @pytest.mark.asyncio
    async def test_stats_exception_is_reported(self, tracer, mock_logger):
        accounts = Mock()
        accounts.get_account_stats = AsyncMock(side_effect=RuntimeError("db down"))
        handler = GetUserStatsHandler(accounts, tracer, mock_logger)

        result = await handler.handle(GetUserStats())

        assert isinstance(result, Failure)
        assert result.error.code == "User.Exception"

    @pytest.mark.asyncio
    async def test_sessions_are_mapped(self, tracer, mock_logger):
        user_id = uuid7()
        session = UserSession(id=uuid7(), user_id=user_id, ip_address="203.0.113.7")
        metadata = PageMetadata.build(page_number=1, page_size=10, total_count=1)
        accounts = Mock()
        accounts.get_paged_sessions = AsyncMock(
            return_value=Success(value=PagedList(items=[session], metadata=metadata))
        )
        handler = GetUserSessionsHandler(accounts, tracer, mock_logger)
        paging = SessionPagingParameters(active_only=True)

        result = await handler.handle(GetUserSessions(user_id=user_id, paging=paging))

        item = result.value.items[0]
        assert isinstance(item, UserSessionResponse)
        assert item.session_id == session.id
        assert item.is_active is True
        assert result.value.metadata is metadata
        assert accounts.get_paged_sessions.await_args.args[:2] == (user_id, paging)


@pytest.mark.unit
class TestAuditQueryHandlers:
    @pytest.mark.asyncio
    async def test_paged_audits(self, tracer, mock_logger):
        audit = make_audit()
        metadata = PageMetadata.build(page_number=1, page_size=10, total_count=1)
        audits = Mock()
        audits.get_paged_audits = AsyncMock(
            return_value=Success(value=PagedList(items=[audit], metadata=metadata))
        )
        handler = GetPagedAuditsHandler(audits, tracer, mock_logger)

        result = await handler.handle(
            GetPagedAudits(paging=AuditPagingParameters(action="Update"))
        )

        item = result.value.items[0]
        assert isinstance(item, AuditTrailResponse)
        assert item.action == "Update"
        assert item.affected_columns == ["is_active"]

    @pytest.mark.asyncio
    async def test_audit_by_id(self, tracer, mock_logger):
        audit = make_audit()
        audits = Mock()
        audits.get_audit_by_id = AsyncMock(return_value=Success(value=audit))
        handler = GetAuditLogByIdHandler(audits, tracer, mock_logger)

        result = await handler.handle(GetAuditLogById(audit_id=audit.id))

        assert result.value.id == audit.id

    @pytest.mark.asyncio
    async def test_missing_audit_is_not_found(self, tracer, mock_logger):
        audits = Mock()
        audits.get_audit_by_id = AsyncMock(return_value=Success(value=None))
        handler = GetAuditLogByIdHandler(audits, tracer, mock_logger)

        result = await handler.handle(GetAuditLogById(audit_id=uuid7()))

        assert result.error.code == "AuditTrail.NotFound"
