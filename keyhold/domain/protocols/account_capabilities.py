"""Account repository capabilities.

One narrow protocol per use case. Handlers depend on exactly the
capability they delegate to; the persistence layer's AccountRepository
satisfies all of them structurally (no inheritance).

Every capability:
    - returns a Result (expected failures are values, not exceptions)
    - accepts the request's CancellationToken and checks it before each
      suspending step
    - may raise for unexpected infrastructure failures; handlers convert
      those at their boundary
"""

from typing import Protocol
from uuid import UUID

from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError
from keyhold.core.result import Result
from keyhold.domain.entities import UserAccount, UserRole, UserSession
from keyhold.domain.value_objects import (
    AccountCreated,
    AccountStats,
    AuthTokens,
    PagedList,
    PagingParameters,
    SessionPagingParameters,
    TemporaryPassword,
)


class AccountCreator(Protocol):
    async def create_account(
        self,
        *,
        full_name: str,
        email: str,
        username: str,
        phone_number: str,
        password: str,
        role: UserRole,
        cancellation: CancellationToken,
    ) -> Result[AccountCreated, DomainError]:
        """Create an unconfirmed account.

        Fails with User.Exists (Conflict) on duplicate email or phone.
        """
        ...


class AccountReader(Protocol):
    async def get_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[UserAccount, DomainError]:
        ...


class PagedAccountReader(Protocol):
    async def get_paged_accounts(
        self, paging: PagingParameters, cancellation: CancellationToken
    ) -> Result[PagedList[UserAccount], DomainError]:
        ...


class AccountUpdater(Protocol):
    async def update_account(
        self,
        user_id: UUID,
        *,
        full_name: str,
        phone_number: str,
        email: str,
        role: UserRole,
        cancellation: CancellationToken,
    ) -> Result[str, DomainError]:
        ...


class ProfileUpdater(Protocol):
    async def update_profile(
        self,
        user_id: UUID,
        *,
        full_name: str,
        phone_number: str,
        cancellation: CancellationToken,
    ) -> Result[str, DomainError]:
        """Update the caller's own name and phone number (never role or email)."""
        ...


class AccountStatsReader(Protocol):
    async def get_account_stats(
        self, cancellation: CancellationToken
    ) -> Result[AccountStats, DomainError]:
        ...


class AccountActivator(Protocol):
    async def activate_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        ...


class AccountDeactivator(Protocol):
    async def deactivate_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        ...


class AccountDeleter(Protocol):
    async def delete_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[bool, DomainError]:
        ...


class AccountAuthenticator(Protocol):
    async def login(
        self,
        username: str,
        password: str,
        cancellation: CancellationToken,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Result[AuthTokens, DomainError]:
        """Authenticate, open a login session and issue tokens.

        Fails with User.InvalidCredentials, User.NotConfirmed or
        User.InActive.
        """
        ...


class SessionTerminator(Protocol):
    async def logout(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        """Revoke the refresh token and end every active session."""
        ...


class SingleSessionTerminator(Protocol):
    async def logout_session(
        self, user_id: UUID, session_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        """End one of the caller's sessions.

        Fails with UserSession.NotFound when the session belongs to
        another account.
        """
        ...


class SessionReader(Protocol):
    async def get_paged_sessions(
        self,
        user_id: UUID,
        paging: SessionPagingParameters,
        cancellation: CancellationToken,
    ) -> Result[PagedList[UserSession], DomainError]:
        ...


class TokenRefresher(Protocol):
    async def refresh_token(
        self, access_token: str, refresh_token: str, cancellation: CancellationToken
    ) -> Result[AuthTokens, DomainError]:
        ...


class PasswordResetter(Protocol):
    async def reset_password(
        self, user_id: UUID, new_password: str, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        ...


class PasswordChanger(Protocol):
    async def change_password(
        self,
        user_id: UUID,
        old_password: str,
        new_password: str,
        cancellation: CancellationToken,
    ) -> Result[str, DomainError]:
        ...


class EmailConfirmer(Protocol):
    async def confirm_email(
        self, user_id: UUID, code: str, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        ...


class ConfirmationCodeIssuer(Protocol):
    async def reissue_confirmation_code(
        self, email: str, cancellation: CancellationToken
    ) -> Result[AccountCreated, DomainError]:
        """Issue a fresh code for an unconfirmed account.

        Fails with User.AlreadyConfirmed if there is nothing to confirm.
        """
        ...


class TemporaryPasswordIssuer(Protocol):
    async def issue_temporary_password(
        self, email: str, cancellation: CancellationToken
    ) -> Result[TemporaryPassword, DomainError]:
        ...
