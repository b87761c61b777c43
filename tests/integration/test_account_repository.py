"""Integration tests for AccountRepository against an in-memory database.

Covers the full account lifecycle with real bcrypt hashing and real JWTs:
creation and uniqueness, email confirmation, login rules, refresh token
rotation, login sessions, password flows and deletion.
"""

import pytest
from uuid_extensions import uuid7

from keyhold.core.cancellation import CancellationToken, OperationCancelledError
from keyhold.core.result import Failure, Success
from keyhold.domain.entities import UserRole
from keyhold.domain.value_objects import (
    AccountStats,
    PagingParameters,
    SessionPagingParameters,
    SortOrder,
)
from keyhold.infrastructure.persistence.repositories import AccountRepository
from keyhold.infrastructure.persistence.repositories.account_repository import (
    TEMPORARY_PASSWORD_LENGTH,
    AccountMessages,
)

NONE = CancellationToken.none()


@pytest.fixture
def make_repository(password_service, token_service, mock_logger):
    def build(session) -> AccountRepository:
        return AccountRepository(session, password_service, token_service, mock_logger)

    return build


async def create(repo: AccountRepository, **overrides):
    values = {
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "username": "jane@example.com",
        "phone_number": "0241234567",
        "password": "secret1",
        "role": UserRole.USER,
    }
    values.update(overrides)
    result = await repo.create_account(**values, cancellation=NONE)
    assert isinstance(result, Success), result
    return result.value


async def create_confirmed(repo: AccountRepository, **overrides):
    created = await create(repo, **overrides)
    await repo.confirm_email(created.user_id, created.verification_code, NONE)
    return created


@pytest.mark.integration
class TestCreateAccount:
    @pytest.mark.asyncio
    async def test_creates_unconfirmed_account(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)

            created = await create(repo, full_name="  Jane Doe  ")
            result = await repo.get_account(created.user_id, NONE)

        account = result.value
        assert account.full_name == "Jane Doe"
        assert account.email_confirmed is False
        assert account.is_active is True
        assert account.role is UserRole.USER
        assert account.password_hash != "secret1"
        assert created.verification_code

    @pytest.mark.asyncio
    async def test_duplicate_phone_number_is_checked_first(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo)

            result = await repo.create_account(
                full_name="Other",
                email="jane@example.com",
                username="jane@example.com",
                phone_number="0241234567",
                password="secret1",
                role=UserRole.USER,
                cancellation=NONE,
            )

        assert isinstance(result, Failure)
        assert result.error.code == "User.Exists"
        assert "Phone number" in result.error.description

    @pytest.mark.asyncio
    async def test_duplicate_email_is_case_insensitive(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo)

            result = await repo.create_account(
                full_name="Other",
                email="JANE@example.com",
                username="other@example.com",
                phone_number="0249999999",
                password="secret1",
                role=UserRole.USER,
                cancellation=NONE,
            )

        assert result.error.description == "Email: 'JANE@example.com' already exists."

    @pytest.mark.asyncio
    async def test_duplicate_username_is_reported_as_email(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo)

            result = await repo.create_account(
                full_name="Other",
                email="other@example.com",
                username="jane@example.com",
                phone_number="0249999999",
                password="secret1",
                role=UserRole.USER,
                cancellation=NONE,
            )

        assert result.error.code == "User.Exists"

    @pytest.mark.asyncio
    async def test_cancelled_token_stops_before_writing(self, database, make_repository):
        token = CancellationToken()
        token.cancel()

        async with database.get_session() as session:
            repo = make_repository(session)
            with pytest.raises(OperationCancelledError):
                await repo.create_account(
                    full_name="Jane Doe",
                    email="jane@example.com",
                    username="jane@example.com",
                    phone_number="0241234567",
                    password="secret1",
                    role=UserRole.USER,
                    cancellation=token,
                )
            page = await repo.get_paged_accounts(PagingParameters(), NONE)

        assert page.value.metadata.total_count == 0


@pytest.mark.integration
class TestEmailConfirmation:
    @pytest.mark.asyncio
    async def test_valid_code_confirms(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            result = await repo.confirm_email(created.user_id, created.verification_code, NONE)
            account = (await repo.get_account(created.user_id, NONE)).value

        assert result == Success(value=AccountMessages.EMAIL_CONFIRMED)
        assert account.email_confirmed is True

    @pytest.mark.asyncio
    async def test_invalid_code_is_rejected(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            result = await repo.confirm_email(created.user_id, "wrong-code", NONE)

        assert result.error.code == "User.EmailConfirmationFailed"
        assert result.error.description == AccountMessages.INVALID_CODE

    @pytest.mark.asyncio
    async def test_confirming_twice_reports_already_confirmed(
        self, database, make_repository
    ):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)

            result = await repo.confirm_email(created.user_id, created.verification_code, NONE)

        assert result == Success(value=AccountMessages.ALREADY_CONFIRMED)

    @pytest.mark.asyncio
    async def test_reissued_code_replaces_the_old_one(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            reissued = (await repo.reissue_confirmation_code("jane@example.com", NONE)).value
            stale = await repo.confirm_email(created.user_id, created.verification_code, NONE)
            fresh = await repo.confirm_email(created.user_id, reissued.verification_code, NONE)

        assert isinstance(stale, Failure)
        assert fresh == Success(value=AccountMessages.EMAIL_CONFIRMED)

    @pytest.mark.asyncio
    async def test_reissue_for_confirmed_account_fails(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)

            result = await repo.reissue_confirmation_code("jane@example.com", NONE)

        assert result.error.code == "User.AlreadyConfirmed"

    @pytest.mark.asyncio
    async def test_reissue_for_unknown_email_fails(self, database, make_repository):
        async with database.get_session() as session:
            result = await make_repository(session).reissue_confirmation_code(
                "nobody@example.com", NONE
            )

        assert result.error.code == "User.NotFound"


@pytest.mark.integration
class TestLogin:
    @pytest.mark.asyncio
    async def test_wrong_password(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)

            result = await repo.login("jane@example.com", "wrong1", NONE)

        assert result.error.code == "User.InvalidCredentials"

    @pytest.mark.asyncio
    async def test_unknown_user(self, database, make_repository):
        async with database.get_session() as session:
            result = await make_repository(session).login("nobody@example.com", "x", NONE)

        assert result.error.code == "User.InvalidCredentials"

    @pytest.mark.asyncio
    async def test_unconfirmed_account(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo)

            result = await repo.login("jane@example.com", "secret1", NONE)

        assert result.error.code == "User.NotConfirmed"

    @pytest.mark.asyncio
    async def test_deactivated_account(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            await repo.deactivate_account(created.user_id, NONE)

            result = await repo.login("jane@example.com", "secret1", NONE)

        assert result.error.code == "User.InActive"

    @pytest.mark.asyncio
    async def test_success_issues_verifiable_tokens(
        self, database, make_repository, token_service
    ):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)

            result = await repo.login("JANE@example.com", "secret1", NONE)

        tokens = result.value
        assert tokens.user_id == created.user_id
        claims = token_service.validate_access_token(tokens.access_token).value
        assert claims["sub"] == str(created.user_id)
        assert claims["roles"] == ["User"]
        assert claims["session_id"] == str(tokens.session_id)

    @pytest.mark.asyncio
    async def test_valid_refresh_token_is_reused_across_logins(
        self, database, make_repository
    ):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)

            first = (await repo.login("jane@example.com", "secret1", NONE)).value
            second = (await repo.login("jane@example.com", "secret1", NONE)).value

        assert first.refresh_token == second.refresh_token
        assert first.session_id != second.session_id

    @pytest.mark.asyncio
    async def test_refresh_token_is_reused_from_a_new_session(
        self, database, make_repository
    ):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)
            first = (await repo.login("jane@example.com", "secret1", NONE)).value

        async with database.get_session() as session:
            second = (
                await make_repository(session).login("jane@example.com", "secret1", NONE)
            ).value

        assert first.refresh_token == second.refresh_token


@pytest.mark.integration
class TestRefreshAndLogout:
    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)
            tokens = (await repo.login("jane@example.com", "secret1", NONE)).value

            refreshed = await repo.refresh_token(
                tokens.access_token, tokens.refresh_token, NONE
            )
            replay = await repo.refresh_token(tokens.access_token, tokens.refresh_token, NONE)

        assert refreshed.value.refresh_token != tokens.refresh_token
        assert refreshed.value.session_id == tokens.session_id
        assert replay.error.code == "User.InvalidRefreshToken"

    @pytest.mark.asyncio
    async def test_refresh_with_garbage_access_token(self, database, make_repository):
        async with database.get_session() as session:
            result = await make_repository(session).refresh_token("a.b.c", "r", NONE)

        assert result.error.code == "User.InvalidRefreshToken"

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            tokens = (await repo.login("jane@example.com", "secret1", NONE)).value

            logout = await repo.logout(created.user_id, NONE)
            result = await repo.refresh_token(tokens.access_token, tokens.refresh_token, NONE)

        assert logout == Success(value=AccountMessages.LOGGED_OUT)
        assert result.error.code == "User.InvalidRefreshToken"


@pytest.mark.integration
class TestSessions:
    @pytest.mark.asyncio
    async def test_login_opens_session(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)

            tokens = (
                await repo.login(
                    "jane@example.com",
                    "secret1",
                    NONE,
                    ip_address="203.0.113.7",
                    user_agent="x" * 600,
                )
            ).value
            page = (
                await repo.get_paged_sessions(
                    created.user_id, SessionPagingParameters(), NONE
                )
            ).value

        assert [s.id for s in page.items] == [tokens.session_id]
        opened = page.items[0]
        assert opened.is_active is True
        assert opened.ip_address == "203.0.113.7"
        assert len(opened.user_agent) == 512

    @pytest.mark.asyncio
    async def test_ended_session_cannot_refresh(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            phone = (await repo.login("jane@example.com", "secret1", NONE)).value
            laptop = (await repo.login("jane@example.com", "secret1", NONE)).value

            ended = await repo.logout_session(created.user_id, phone.session_id, NONE)
            rejected = await repo.refresh_token(
                phone.access_token, phone.refresh_token, NONE
            )
            refreshed = await repo.refresh_token(
                laptop.access_token, laptop.refresh_token, NONE
            )

        assert ended == Success(value=AccountMessages.LOGGED_OUT)
        assert rejected.error.code == "User.InvalidRefreshToken"
        assert refreshed.value.session_id == laptop.session_id

    @pytest.mark.asyncio
    async def test_ending_a_session_twice_succeeds(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            tokens = (await repo.login("jane@example.com", "secret1", NONE)).value

            await repo.logout_session(created.user_id, tokens.session_id, NONE)
            again = await repo.logout_session(created.user_id, tokens.session_id, NONE)

        assert again == Success(value=AccountMessages.LOGGED_OUT)

    @pytest.mark.asyncio
    async def test_other_users_session_is_not_found(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)
            other = await create_confirmed(
                repo,
                email="john@example.com",
                username="john@example.com",
                phone_number="0249999999",
            )
            tokens = (await repo.login("jane@example.com", "secret1", NONE)).value

            result = await repo.logout_session(other.user_id, tokens.session_id, NONE)
            missing = await repo.logout_session(other.user_id, uuid7(), NONE)

        assert result.error.code == "UserSession.NotFound"
        assert missing.error.code == "UserSession.NotFound"

    @pytest.mark.asyncio
    async def test_logout_ends_every_session(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            await repo.login("jane@example.com", "secret1", NONE)
            await repo.login("jane@example.com", "secret1", NONE)

            await repo.logout(created.user_id, NONE)
            active = (
                await repo.get_paged_sessions(
                    created.user_id, SessionPagingParameters(active_only=True), NONE
                )
            ).value
            ended = (
                await repo.get_paged_sessions(
                    created.user_id, SessionPagingParameters(active_only=False), NONE
                )
            ).value

        assert active.metadata.total_count == 0
        assert ended.metadata.total_count == 2
        assert all(s.logout_at is not None for s in ended.items)

    @pytest.mark.asyncio
    async def test_sessions_are_paged_newest_first(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            first = (await repo.login("jane@example.com", "secret1", NONE)).value
            second = (await repo.login("jane@example.com", "secret1", NONE)).value

            page = (
                await repo.get_paged_sessions(
                    created.user_id, SessionPagingParameters(page_size=1), NONE
                )
            ).value

        assert [s.id for s in page.items] == [second.session_id]
        assert first.session_id != second.session_id
        assert page.metadata.total_count == 2
        assert page.metadata.has_next is True

    @pytest.mark.asyncio
    async def test_unknown_user_has_no_sessions(self, database, make_repository):
        async with database.get_session() as session:
            page = (
                await make_repository(session).get_paged_sessions(
                    uuid7(), SessionPagingParameters(), NONE
                )
            ).value

        assert page.items == []
        assert page.metadata.total_count == 0

    @pytest.mark.asyncio
    async def test_delete_account_removes_sessions(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)
            await repo.login("jane@example.com", "secret1", NONE)

            await repo.delete_account(created.user_id, NONE)
            page = (
                await repo.get_paged_sessions(
                    created.user_id, SessionPagingParameters(), NONE
                )
            ).value

        assert page.metadata.total_count == 0


@pytest.mark.integration
class TestPasswords:
    @pytest.mark.asyncio
    async def test_change_password_requires_old_password(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)

            result = await repo.change_password(created.user_id, "wrong1", "secret2", NONE)

        assert result.error.code == "User.PasswordChangeFailed"
        assert result.error.description == AccountMessages.INCORRECT_PASSWORD

    @pytest.mark.asyncio
    async def test_change_password(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)

            await repo.change_password(created.user_id, "secret1", "secret2", NONE)
            old = await repo.login("jane@example.com", "secret1", NONE)
            new = await repo.login("jane@example.com", "secret2", NONE)

        assert isinstance(old, Failure)
        assert isinstance(new, Success)

    @pytest.mark.asyncio
    async def test_reset_password(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create_confirmed(repo)

            result = await repo.reset_password(created.user_id, "secret9", NONE)
            login = await repo.login("jane@example.com", "secret9", NONE)

        assert result == Success(value=AccountMessages.PASSWORD_RESET)
        assert isinstance(login, Success)

    @pytest.mark.asyncio
    async def test_temporary_password_replaces_password(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create_confirmed(repo)

            issued = (await repo.issue_temporary_password("jane@example.com", NONE)).value
            login = await repo.login("jane@example.com", issued.temporary_password, NONE)

        assert len(issued.temporary_password) == TEMPORARY_PASSWORD_LENGTH
        assert isinstance(login, Success)

    @pytest.mark.asyncio
    async def test_temporary_password_for_unknown_email(self, database, make_repository):
        async with database.get_session() as session:
            result = await make_repository(session).issue_temporary_password(
                "nobody@example.com", NONE
            )

        assert result.error.code == "User.NotFound"


@pytest.mark.integration
class TestAccountManagement:
    @pytest.mark.asyncio
    async def test_update_account(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            result = await repo.update_account(
                created.user_id,
                full_name=" Jane Q. Doe ",
                phone_number="0249999999",
                email="jane.doe@example.com",
                role=UserRole.ADMIN,
                cancellation=NONE,
            )
            account = (await repo.get_account(created.user_id, NONE)).value

        assert result == Success(value=AccountMessages.UPDATED)
        assert account.full_name == "Jane Q. Doe"
        assert account.email == "jane.doe@example.com"
        assert account.role is UserRole.ADMIN

    @pytest.mark.asyncio
    async def test_update_to_taken_phone_number(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo)
            other = await create(
                repo,
                email="john@example.com",
                username="john@example.com",
                phone_number="0249999999",
            )

            result = await repo.update_account(
                other.user_id,
                full_name="John",
                phone_number="0241234567",
                email="john@example.com",
                role=UserRole.USER,
                cancellation=NONE,
            )

        assert result.error.code == "User.Exists"

    @pytest.mark.asyncio
    async def test_update_profile_keeps_email_and_role(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            result = await repo.update_profile(
                created.user_id,
                full_name=" Jane Smith ",
                phone_number="0249999999",
                cancellation=NONE,
            )
            account = (await repo.get_account(created.user_id, NONE)).value

        assert result == Success(value=AccountMessages.PROFILE_UPDATED)
        assert account.full_name == "Jane Smith"
        assert account.phone_number == "0249999999"
        assert account.email == "jane@example.com"
        assert account.role is UserRole.USER

    @pytest.mark.asyncio
    async def test_update_profile_for_unknown_user(self, database, make_repository):
        async with database.get_session() as session:
            result = await make_repository(session).update_profile(
                uuid7(), full_name="Jane", phone_number="0241234567", cancellation=NONE
            )

        assert result.error.code == "User.NotFound"

    @pytest.mark.asyncio
    async def test_account_stats(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo)
            await create(
                repo,
                email="admin@example.com",
                username="admin@example.com",
                phone_number="0249999999",
                role=UserRole.ADMIN,
            )

            stats = (await repo.get_account_stats(NONE)).value

        assert stats == AccountStats(total_users=2, total_admins=1)

    @pytest.mark.asyncio
    async def test_activate_and_deactivate(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            deactivated = await repo.deactivate_account(created.user_id, NONE)
            inactive = (await repo.get_account(created.user_id, NONE)).value.is_active
            activated = await repo.activate_account(created.user_id, NONE)
            active = (await repo.get_account(created.user_id, NONE)).value.is_active

        assert deactivated == Success(value=AccountMessages.DEACTIVATED)
        assert inactive is False
        assert activated == Success(value=AccountMessages.ACTIVATED)
        assert active is True

    @pytest.mark.asyncio
    async def test_delete_account(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            created = await create(repo)

            deleted = await repo.delete_account(created.user_id, NONE)
            lookup = await repo.get_account(created.user_id, NONE)
            again = await repo.delete_account(created.user_id, NONE)

        assert deleted == Success(value=True)
        assert lookup.error.code == "User.NotFound"
        assert again.error.code == "User.NotFound"

    @pytest.mark.asyncio
    async def test_paged_accounts_search_and_sort(self, database, make_repository):
        async with database.get_session() as session:
            repo = make_repository(session)
            await create(repo, full_name="Alice Adams")
            await create(
                repo,
                full_name="Bob Brown",
                email="bob@example.com",
                username="bob@example.com",
                phone_number="0240000001",
            )
            await create(
                repo,
                full_name="Carol Brown",
                email="carol@example.com",
                username="carol@example.com",
                phone_number="0240000002",
            )

            page = (
                await repo.get_paged_accounts(
                    PagingParameters(
                        page_size=1,
                        search="brown",
                        order_by="full_name",
                        sort_order=SortOrder.DESC,
                    ),
                    NONE,
                )
            ).value

        assert [account.full_name for account in page.items] == ["Carol Brown"]
        assert page.metadata.total_count == 2
        assert page.metadata.total_pages == 2
        assert page.metadata.has_next is True
