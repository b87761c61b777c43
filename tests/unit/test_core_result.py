"""Unit tests for Result types and DomainError."""

import pytest

from keyhold.core.enums import ErrorKind
from keyhold.core.errors import DomainError, general_errors, user_errors
from keyhold.core.result import Failure, Success


@pytest.mark.unit
class TestResult:
    def test_success_holds_value(self):
        result = Success(value=42)

        assert result.value == 42

    def test_failure_requires_at_least_one_error(self):
        with pytest.raises(ValueError, match="at least one error"):
            Failure(errors=())

    def test_failure_of_builds_tuple_and_exposes_first_error(self):
        first = user_errors.user_not_found()
        second = general_errors.conflict("User")

        result = Failure.of(first, second)

        assert result.errors == (first, second)
        assert result.error is first

    def test_results_are_matchable(self):
        result = Failure.of(user_errors.invalid_credentials())

        match result:
            case Success():
                matched = "success"
            case Failure(errors=(error, *_)):
                matched = error.code

        assert matched == "User.InvalidCredentials"


@pytest.mark.unit
class TestDomainError:
    def test_default_kind_is_failure(self):
        error = DomainError(code="User.Something", description="Something")

        assert error.kind is ErrorKind.FAILURE

    def test_str_includes_code_and_description(self):
        assert str(user_errors.user_not_found()) == "User.NotFound: User account not found."

    def test_general_errors_use_entity_in_code(self):
        assert general_errors.task_cancelled("AuditTrail").code == "AuditTrail.TaskCancelled"
        assert general_errors.not_found("AuditTrail").kind is ErrorKind.NOT_FOUND

        unexpected = general_errors.exception("User", "Could not create account")
        assert unexpected.code == "User.Exception"
        assert unexpected.kind is ErrorKind.UNEXPECTED
        assert unexpected.description == "Could not create account"

    def test_duplicate_email_and_phone_share_code(self):
        email = user_errors.email_exists("jane@example.com")
        phone = user_errors.phone_number_exists("0241234567")

        assert email.code == phone.code == "User.Exists"
        assert email.kind is ErrorKind.CONFLICT
        assert "jane@example.com" in email.description
