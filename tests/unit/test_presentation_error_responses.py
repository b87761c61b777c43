"""Unit tests for ErrorKind to HTTP status mapping and problem responses."""

import json
from unittest.mock import Mock

import pytest

from keyhold.application.validation import FieldViolation, ValidationRejection
from keyhold.core.enums import ErrorKind
from keyhold.core.errors import general_errors, user_errors
from keyhold.core.request_context import trace_id_context
from keyhold.presentation.api.v1.errors import ErrorResponseBuilder, status_for_kind


@pytest.fixture
def request_stub() -> Mock:
    request = Mock()
    request.url.path = "/api/v1/accounts"
    return request


@pytest.mark.unit
class TestStatusForKind:
    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (ErrorKind.CONFLICT, 409),
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.VALIDATION, 400),
            (ErrorKind.FAILURE, 400),
            (ErrorKind.BAD_REQUEST, 400),
            (ErrorKind.UNAUTHORIZED, 401),
            (ErrorKind.FORBIDDEN, 403),
            (ErrorKind.UNEXPECTED, 422),
            (ErrorKind.UNPROCESSABLE, 422),
        ],
    )
    def test_mapping(self, kind, expected):
        assert status_for_kind(kind) == expected


@pytest.mark.unit
class TestErrorResponseBuilder:
    def test_first_error_decides_status_and_detail(self, request_stub):
        trace_id_context.set("trace-1")
        errors = (user_errors.email_exists("jane@example.com"), general_errors.conflict("User"))

        response = ErrorResponseBuilder.from_domain_errors(errors, request_stub)

        body = json.loads(response.body)
        assert response.status_code == 409
        assert body["title"] == "Resource Conflict"
        assert body["type"].endswith("/errors/conflict")
        assert body["detail"] == "Email: 'jane@example.com' already exists."
        assert body["error_codes"] == ["User.Exists", "User.Conflict"]
        assert body["instance"] == "/api/v1/accounts"
        assert body["trace_id"] == "trace-1"

    def test_unexpected_error_is_422(self, request_stub):
        response = ErrorResponseBuilder.from_domain_errors(
            (general_errors.exception("User", "Could not create account"),), request_stub
        )

        assert response.status_code == 422

    def test_rejection_lists_every_violation(self, request_stub):
        rejection = ValidationRejection(
            violations=(
                FieldViolation(field="full_name", message="Full name is required"),
                FieldViolation(field="", message="Model-level problem"),
            )
        )

        response = ErrorResponseBuilder.from_rejection(rejection, request_stub)

        body = json.loads(response.body)
        assert response.status_code == 400
        assert body["title"] == "Validation Failed"
        assert body["detail"] == "Full name is required"
        assert body["errors"][0]["field"] == "full_name"
        assert "field" not in body["errors"][1]
