"""Unit tests for account command handlers.

Repositories and the event bus are AsyncMocks; the tracer is a real
SpanTracer over a mock logger.

Reference:
    - keyhold/application/commands/handlers/
"""

from unittest.mock import AsyncMock, Mock
from uuid import UUID

import pytest
from uuid_extensions import uuid7

from keyhold.application.commands.account_commands import (
    ActivateAccount,
    ConfirmEmail,
    CreateAccount,
    DeactivateAccount,
    DeleteAccount,
    ResendConfirmation,
    UpdateAccount,
    UpdateProfile,
)
from keyhold.application.commands.auth_commands import (
    ChangePassword,
    ForgotPassword,
    Login,
    Logout,
    LogoutSession,
    RefreshToken,
    ResetPassword,
)
from keyhold.application.commands.handlers.account_status_handlers import (
    ActivateAccountHandler,
    DeactivateAccountHandler,
)
from keyhold.application.commands.handlers.confirm_email_handler import (
    ConfirmEmailHandler,
)
from keyhold.application.commands.handlers.create_account_handler import (
    CreateAccountHandler,
    CreateAccountMessages,
)
from keyhold.application.commands.handlers.delete_account_handler import (
    DeleteAccountHandler,
    DeleteAccountMessages,
)
from keyhold.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
)
from keyhold.application.commands.handlers.login_handler import LoginHandler
from keyhold.application.commands.handlers.logout_handler import (
    LogoutHandler,
    LogoutSessionHandler,
)
from keyhold.application.commands.handlers.password_handlers import (
    ChangePasswordHandler,
    ResetPasswordHandler,
)
from keyhold.application.commands.handlers.refresh_token_handler import (
    RefreshTokenHandler,
)
from keyhold.application.commands.handlers.resend_confirmation_handler import (
    ResendConfirmationHandler,
)
from keyhold.application.commands.handlers.update_account_handler import (
    UpdateAccountHandler,
)
from keyhold.application.commands.handlers.update_profile_handler import (
    UpdateProfileHandler,
)
from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import general_errors, user_errors
from keyhold.core.result import Failure, Success
from keyhold.domain.entities import UserRole
from keyhold.domain.events import ConfirmationEmailEvent, TemporaryPasswordEvent
from keyhold.domain.protocols import EventPublishError
from keyhold.domain.value_objects import AccountCreated, AuthTokens, TemporaryPassword

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def user_id() -> UUID:
    return uuid7()


@pytest.fixture
def accounts() -> Mock:
    """Account repository double; each capability is an AsyncMock."""
    return Mock()


@pytest.fixture
def event_bus() -> Mock:
    bus = Mock()
    bus.publish = AsyncMock()
    return bus


@pytest.fixture
def create_command() -> CreateAccount:
    return CreateAccount(
        full_name="Jane Doe",
        email="jane@example.com",
        username="jane@example.com",
        phone_number="0241234567",
        password="secret1",
    )


# ============================================================================
# CreateAccount
# ============================================================================


@pytest.mark.unit
class TestCreateAccountHandler:
    @pytest.fixture
    def handler(self, accounts, event_bus, tracer, mock_logger) -> CreateAccountHandler:
        return CreateAccountHandler(accounts, event_bus, tracer, mock_logger)

    @pytest.mark.asyncio
    async def test_success_publishes_confirmation_event(
        self, handler, accounts, event_bus, create_command, user_id
    ):
        # Arrange
        accounts.create_account = AsyncMock(
            return_value=Success(
                value=AccountCreated(
                    user_id=user_id, email="jane@example.com", verification_code="code-1"
                )
            )
        )

        # Act
        result = await handler.handle(create_command)

        # Assert
        assert isinstance(result, Success)
        assert result.value.message == CreateAccountMessages.CREATED
        assert result.value.item == user_id

        event = event_bus.publish.await_args.args[0]
        assert isinstance(event, ConfirmationEmailEvent)
        assert event.user_id == user_id
        assert event.verification_code == "code-1"

    @pytest.mark.asyncio
    async def test_passes_role_and_token_to_repository(
        self, handler, accounts, create_command, user_id
    ):
        accounts.create_account = AsyncMock(
            return_value=Success(
                value=AccountCreated(user_id=user_id, email="e", verification_code="c")
            )
        )
        token = CancellationToken.none()

        await handler.handle(create_command, token)

        kwargs = accounts.create_account.await_args.kwargs
        assert kwargs["role"] is UserRole.USER
        assert kwargs["cancellation"] is token

    @pytest.mark.asyncio
    async def test_duplicate_email_does_not_publish(
        self, handler, accounts, event_bus, create_command
    ):
        accounts.create_account = AsyncMock(
            return_value=Failure.of(user_errors.email_exists("jane@example.com"))
        )

        result = await handler.handle(create_command)

        assert isinstance(result, Failure)
        assert result.error.code == "User.Exists"
        event_bus.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_failure_is_returned(
        self, handler, accounts, event_bus, create_command, user_id
    ):
        accounts.create_account = AsyncMock(
            return_value=Success(
                value=AccountCreated(user_id=user_id, email="e", verification_code="c")
            )
        )
        event_bus.publish.side_effect = EventPublishError("redis down")

        result = await handler.handle(create_command)

        assert isinstance(result, Failure)
        assert result.error.code == "Messaging.PublishFailed"
        event_bus.publish.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repository_exception_becomes_user_exception(
        self, handler, accounts, event_bus, create_command
    ):
        accounts.create_account = AsyncMock(side_effect=RuntimeError("db gone"))

        result = await handler.handle(create_command)

        assert result.error.code == "User.Exception"
        assert result.error.description == CreateAccountMessages.COULD_NOT_CREATE
        event_bus.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancelled_token_never_reaches_repository(
        self, handler, accounts, create_command
    ):
        accounts.create_account = AsyncMock()
        token = CancellationToken.none()
        token.cancel()

        result = await handler.handle(create_command, token)

        assert result.error.code == "User.TaskCancelled"
        accounts.create_account.assert_not_awaited()


# ============================================================================
# Update / status / delete
# ============================================================================


@pytest.mark.unit
class TestAccountMaintenanceHandlers:
    @pytest.mark.asyncio
    async def test_update_forwards_fields(self, accounts, tracer, mock_logger, user_id):
        accounts.update_account = AsyncMock(
            return_value=Success(value="Updated account successfully.")
        )
        handler = UpdateAccountHandler(accounts, tracer, mock_logger)

        result = await handler.handle(
            UpdateAccount(
                user_id=user_id,
                full_name="Jane Doe",
                phone_number="0241234567",
                email="jane@example.com",
                role=UserRole.ADMIN,
            )
        )

        assert result.value.message == "Updated account successfully."
        args = accounts.update_account.await_args
        assert args.args[0] == user_id
        assert args.kwargs["role"] is UserRole.ADMIN

    @pytest.mark.asyncio
    async def test_update_profile_forwards_fields(
        self, accounts, tracer, mock_logger, user_id
    ):
        accounts.update_profile = AsyncMock(
            return_value=Success(value="Profile updated successfully.")
        )
        handler = UpdateProfileHandler(accounts, tracer, mock_logger)

        result = await handler.handle(
            UpdateProfile(user_id=user_id, full_name="Jane Smith", phone_number="0241234567")
        )

        assert result.value.message == "Profile updated successfully."
        args = accounts.update_profile.await_args
        assert args.args[0] == user_id
        assert args.kwargs["full_name"] == "Jane Smith"
        assert "role" not in args.kwargs

    @pytest.mark.asyncio
    async def test_update_profile_conflict_passes_through(
        self, accounts, tracer, mock_logger, user_id
    ):
        accounts.update_profile = AsyncMock(
            return_value=Failure.of(user_errors.phone_number_exists("0241234567"))
        )
        handler = UpdateProfileHandler(accounts, tracer, mock_logger)

        result = await handler.handle(
            UpdateProfile(user_id=user_id, full_name="Jane Smith", phone_number="0241234567")
        )

        assert isinstance(result, Failure)
        assert result.error.code == "User.Exists"

    @pytest.mark.asyncio
    async def test_activate_and_deactivate(self, accounts, tracer, mock_logger, user_id):
        accounts.activate_account = AsyncMock(return_value=Success(value="activated"))
        accounts.deactivate_account = AsyncMock(
            return_value=Failure.of(user_errors.user_not_found())
        )

        activated = await ActivateAccountHandler(accounts, tracer, mock_logger).handle(
            ActivateAccount(user_id=user_id)
        )
        deactivated = await DeactivateAccountHandler(accounts, tracer, mock_logger).handle(
            DeactivateAccount(user_id=user_id)
        )

        assert activated.value.message == "activated"
        assert deactivated.error.code == "User.NotFound"

    @pytest.mark.asyncio
    async def test_delete_success(self, accounts, tracer, mock_logger, user_id):
        accounts.delete_account = AsyncMock(return_value=Success(value=True))
        handler = DeleteAccountHandler(accounts, tracer, mock_logger)

        result = await handler.handle(DeleteAccount(user_id=user_id))

        assert result.value.message == DeleteAccountMessages.DELETED

    @pytest.mark.asyncio
    async def test_delete_reports_any_repository_failure_as_delete_failed(
        self, accounts, tracer, mock_logger, user_id
    ):
        accounts.delete_account = AsyncMock(
            return_value=Failure.of(user_errors.user_not_found())
        )
        handler = DeleteAccountHandler(accounts, tracer, mock_logger)

        result = await handler.handle(DeleteAccount(user_id=user_id))

        assert result.errors == (
            user_errors.delete_failed(DeleteAccountMessages.DELETION_FAILED),
        )
        mock_logger.warning.assert_any_call(
            "account_deletion_failed", user_id=str(user_id), error_codes=["User.NotFound"]
        )


# ============================================================================
# Email confirmation
# ============================================================================


@pytest.mark.unit
class TestConfirmationHandlers:
    @pytest.mark.asyncio
    async def test_confirm_email(self, accounts, tracer, mock_logger, user_id):
        accounts.confirm_email = AsyncMock(
            return_value=Success(value="Account confirmed successfully.")
        )
        handler = ConfirmEmailHandler(accounts, tracer, mock_logger)

        result = await handler.handle(ConfirmEmail(user_id=user_id, code="abc"))

        assert result.value.message == "Account confirmed successfully."
        assert accounts.confirm_email.await_args.args[:2] == (user_id, "abc")

    @pytest.mark.asyncio
    async def test_resend_publishes_new_code(
        self, accounts, event_bus, tracer, mock_logger, user_id
    ):
        accounts.reissue_confirmation_code = AsyncMock(
            return_value=Success(
                value=AccountCreated(
                    user_id=user_id, email="jane@example.com", verification_code="code-2"
                )
            )
        )
        handler = ResendConfirmationHandler(accounts, event_bus, tracer, mock_logger)

        result = await handler.handle(ResendConfirmation(email="jane@example.com"))

        assert result.value.message == ResendConfirmationHandler.SENT
        event = event_bus.publish.await_args.args[0]
        assert event.verification_code == "code-2"

    @pytest.mark.asyncio
    async def test_resend_for_confirmed_account_fails_without_publishing(
        self, accounts, event_bus, tracer, mock_logger
    ):
        accounts.reissue_confirmation_code = AsyncMock(
            return_value=Failure.of(user_errors.already_confirmed())
        )
        handler = ResendConfirmationHandler(accounts, event_bus, tracer, mock_logger)

        result = await handler.handle(ResendConfirmation(email="jane@example.com"))

        assert result.error.code == "User.AlreadyConfirmed"
        event_bus.publish.assert_not_awaited()


# ============================================================================
# Authentication
# ============================================================================


@pytest.mark.unit
class TestAuthenticationHandlers:
    @pytest.fixture
    def tokens(self, user_id) -> AuthTokens:
        return AuthTokens(
            user_id=user_id,
            access_token="a.b.c",
            refresh_token="refresh",
            session_id=uuid7(),
        )

    @pytest.mark.asyncio
    async def test_login_returns_tokens(self, accounts, tracer, mock_logger, tokens):
        accounts.login = AsyncMock(return_value=Success(value=tokens))
        handler = LoginHandler(accounts, tracer, mock_logger)

        result = await handler.handle(Login(username="jane@example.com", password="secret1"))

        assert result.value is tokens

    @pytest.mark.asyncio
    async def test_login_rejection_passes_through(self, accounts, tracer, mock_logger):
        accounts.login = AsyncMock(return_value=Failure.of(user_errors.not_confirmed()))
        handler = LoginHandler(accounts, tracer, mock_logger)

        result = await handler.handle(Login(username="jane@example.com", password="x"))

        assert result.error.code == "User.NotConfirmed"

    @pytest.mark.asyncio
    async def test_logout(self, accounts, tracer, mock_logger, user_id):
        accounts.logout = AsyncMock(return_value=Success(value="Logged out successfully."))
        handler = LogoutHandler(accounts, tracer, mock_logger)

        result = await handler.handle(Logout(user_id=user_id))

        assert result.value.message == "Logged out successfully."

    @pytest.mark.asyncio
    async def test_login_forwards_client_details(self, accounts, tracer, mock_logger, tokens):
        accounts.login = AsyncMock(return_value=Success(value=tokens))
        handler = LoginHandler(accounts, tracer, mock_logger)

        await handler.handle(
            Login(
                username="jane@example.com",
                password="secret1",
                ip_address="203.0.113.7",
                user_agent="keyhold-tests/1.0",
            )
        )

        kwargs = accounts.login.await_args.kwargs
        assert kwargs["ip_address"] == "203.0.113.7"
        assert kwargs["user_agent"] == "keyhold-tests/1.0"

    @pytest.mark.asyncio
    async def test_logout_session(self, accounts, tracer, mock_logger, user_id):
        session_id = uuid7()
        accounts.logout_session = AsyncMock(
            return_value=Success(value="Logged out successfully.")
        )
        handler = LogoutSessionHandler(accounts, tracer, mock_logger)

        result = await handler.handle(LogoutSession(user_id=user_id, session_id=session_id))

        assert result.value.message == "Logged out successfully."
        assert accounts.logout_session.await_args.args[:2] == (user_id, session_id)

    @pytest.mark.asyncio
    async def test_logout_unknown_session(self, accounts, tracer, mock_logger, user_id):
        accounts.logout_session = AsyncMock(
            return_value=Failure.of(general_errors.not_found("UserSession"))
        )
        handler = LogoutSessionHandler(accounts, tracer, mock_logger)

        result = await handler.handle(LogoutSession(user_id=user_id, session_id=uuid7()))

        assert result.error.code == "UserSession.NotFound"

    @pytest.mark.asyncio
    async def test_refresh_token(self, accounts, tracer, mock_logger, tokens):
        accounts.refresh_token = AsyncMock(return_value=Success(value=tokens))
        handler = RefreshTokenHandler(accounts, tracer, mock_logger)

        result = await handler.handle(
            RefreshToken(access_token="a.b.c", refresh_token="refresh")
        )

        assert result.value.refresh_token == "refresh"
        assert accounts.refresh_token.await_args.args[:2] == ("a.b.c", "refresh")


# ============================================================================
# Passwords
# ============================================================================


@pytest.mark.unit
class TestPasswordHandlers:
    @pytest.mark.asyncio
    async def test_reset_password(self, accounts, tracer, mock_logger, user_id):
        accounts.reset_password = AsyncMock(
            return_value=Success(value="User password reset successfully.")
        )
        handler = ResetPasswordHandler(accounts, tracer, mock_logger)

        result = await handler.handle(ResetPassword(user_id=user_id, new_password="secret2"))

        assert result.value.message == "User password reset successfully."

    @pytest.mark.asyncio
    async def test_change_password_incorrect_old_password(
        self, accounts, tracer, mock_logger, user_id
    ):
        accounts.change_password = AsyncMock(
            return_value=Failure.of(user_errors.password_change_failed("Incorrect password."))
        )
        handler = ChangePasswordHandler(accounts, tracer, mock_logger)

        result = await handler.handle(
            ChangePassword(user_id=user_id, old_password="wrong1", new_password="secret2")
        )

        assert result.error.code == "User.PasswordChangeFailed"
        assert result.error.description == "Incorrect password."

    @pytest.mark.asyncio
    async def test_forgot_password_publishes_temporary_password(
        self, accounts, event_bus, tracer, mock_logger, user_id
    ):
        accounts.issue_temporary_password = AsyncMock(
            return_value=Success(
                value=TemporaryPassword(
                    user_id=user_id, email="jane@example.com", temporary_password="Tmp12345"
                )
            )
        )
        handler = ForgotPasswordHandler(accounts, event_bus, tracer, mock_logger)

        result = await handler.handle(ForgotPassword(email="jane@example.com"))

        assert result.value.message == ForgotPasswordHandler.SENT
        event = event_bus.publish.await_args.args[0]
        assert isinstance(event, TemporaryPasswordEvent)
        assert event.temporary_password == "Tmp12345"

    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email(
        self, accounts, event_bus, tracer, mock_logger
    ):
        accounts.issue_temporary_password = AsyncMock(
            return_value=Failure.of(general_errors.not_found("User"))
        )
        handler = ForgotPasswordHandler(accounts, event_bus, tracer, mock_logger)

        result = await handler.handle(ForgotPassword(email="nobody@example.com"))

        assert result.error.code == "User.NotFound"
        event_bus.publish.assert_not_awaited()
