"""API tests for audit trail endpoints (administrators only)."""

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from uuid_extensions import uuid7

from keyhold.application.dtos import AuditTrailResponse
from keyhold.core.container import get_audit_log_by_id_handler, get_paged_audits_handler
from keyhold.core.errors import general_errors
from keyhold.core.result import Failure, Success
from keyhold.domain.value_objects import PagedList, PageMetadata
from keyhold.main import app
from keyhold.presentation.api.middleware.auth_dependencies import (
    CurrentUser,
    get_current_user,
)

BASE = "/api/v1/audits"


def mock_handler(result) -> Mock:
    handler = Mock()
    handler.handle = AsyncMock(return_value=result)
    return handler


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def as_admin():
    """Authenticate every request as an administrator."""
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(
        user_id=uuid7(), email="admin@example.com", roles=["Admin"]
    )
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def audit() -> AuditTrailResponse:
    return AuditTrailResponse(
        id=uuid7(),
        username="admin@example.com",
        full_name=None,
        action="Update",
        table_name="user_accounts",
        timestamp=datetime(2026, 1, 15, 9, 30, tzinfo=UTC),
        old_values={"is_active": True},
        new_values={"is_active": False},
        affected_columns=["is_active"],
        ip_address="10.0.0.1",
        message="Update user_accounts 42",
    )


@pytest.mark.api
class TestPagedAudits:
    def test_returns_page_and_pagination_header(self, client, as_admin, audit):
        metadata = PageMetadata.build(page_number=1, page_size=10, total_count=1)
        handler = mock_handler(Success(value=PagedList(items=[audit], metadata=metadata)))
        app.dependency_overrides[get_paged_audits_handler] = lambda: handler

        response = client.get(
            f"{BASE}/paged",
            params={
                "action": "update",
                "username": "admin",
                "start_date": "2026-01-01T00:00:00Z",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["items"][0]["affected_columns"] == ["is_active"]
        assert body["metadata"]["total_count"] == 1
        assert json.loads(response.headers["X-Pagination"])["total_pages"] == 1

        paging = handler.handle.await_args.args[0].paging
        assert paging.action == "update"
        assert paging.username == "admin"
        assert paging.start_date == datetime(2026, 1, 1, tzinfo=UTC)

    def test_non_admin_is_forbidden(self, client):
        handler = mock_handler(None)
        app.dependency_overrides[get_paged_audits_handler] = lambda: handler
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(
            user_id=uuid7(), email="jane@example.com", roles=["User"]
        )
        try:
            response = client.get(f"{BASE}/paged")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 403
        handler.handle.assert_not_awaited()

    def test_anonymous_is_unauthorized(self, client):
        response = client.get(f"{BASE}/paged")

        assert response.status_code == 401
        assert response.json()["title"] == "Authentication Required"


@pytest.mark.api
class TestAuditById:
    def test_returns_entry(self, client, as_admin, audit):
        app.dependency_overrides[get_audit_log_by_id_handler] = lambda: mock_handler(
            Success(value=audit)
        )

        response = client.get(f"{BASE}/{audit.id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Update user_accounts 42"

    def test_missing_entry_is_404(self, client, as_admin):
        app.dependency_overrides[get_audit_log_by_id_handler] = lambda: mock_handler(
            Failure.of(general_errors.not_found("AuditTrail"))
        )

        response = client.get(f"{BASE}/{uuid7()}")

        assert response.status_code == 404
        assert response.json()["error_codes"] == ["AuditTrail.NotFound"]
