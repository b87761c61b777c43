"""AccountRepository - SQLAlchemy implementation of the account capabilities.

Adapter for hexagonal architecture. Satisfies every protocol in
keyhold.domain.protocols.account_capabilities structurally (no
inheritance). Maps UserAccount and UserSession entities to their models;
business rules live on the entities. Every login opens a user_sessions
row whose id is the token's session_id; refresh requires that session
to still be active.

Each capability:
    - checks the cancellation token before every suspending step
    - commits its own unit of work
    - returns expected failures as Failure values and lets unexpected
      database errors propagate to the handler boundary
"""

import hashlib
import hmac
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_extensions import uuid7

from keyhold.core.cancellation import CancellationToken
from keyhold.core.errors import DomainError, general_errors, user_errors
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.entities import UserAccount, UserRole, UserSession
from keyhold.domain.protocols import (
    LoggerProtocol,
    PasswordHashingProtocol,
    TokenServiceProtocol,
)
from keyhold.domain.value_objects import (
    AccountCreated,
    AccountStats,
    AuthTokens,
    PagedList,
    PageMetadata,
    PagingParameters,
    SessionPagingParameters,
    SortOrder,
    TemporaryPassword,
)
from keyhold.infrastructure.persistence.models.user_account import UserAccountModel
from keyhold.infrastructure.persistence.models.user_session import (
    USER_AGENT_MAX_LENGTH,
    UserSessionModel,
)

TEMPORARY_PASSWORD_LENGTH = 8

_SORTABLE_COLUMNS = {
    "full_name": UserAccountModel.full_name,
    "email": UserAccountModel.email,
    "username": UserAccountModel.username,
    "created_at": UserAccountModel.created_at,
}


class AccountMessages:
    UPDATED = "Updated account successfully."
    PROFILE_UPDATED = "Profile updated successfully."
    ACTIVATED = "Account activated successfully."
    DEACTIVATED = "Account deactivated successfully."
    LOGGED_OUT = "Logged out successfully."
    PASSWORD_RESET = "User password reset successfully."
    PASSWORD_CHANGED = "Password changed successfully."
    EMAIL_CONFIRMED = "Account confirmed successfully."
    ALREADY_CONFIRMED = "Account already confirmed. Please login to continue."
    INVALID_CODE = "Invalid account confirmation code. Please try again."
    INCORRECT_PASSWORD = "Incorrect password."


def hash_confirmation_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


class AccountRepository:
    """SQLAlchemy account repository.

    Attributes:
        session: Request-scoped async session.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = AccountRepository(session, password_service, token_service, logger)
        ...     result = await repo.get_account(user_id, CancellationToken.none())
    """

    def __init__(
        self,
        session: AsyncSession,
        password_service: PasswordHashingProtocol,
        token_service: TokenServiceProtocol,
        logger: LoggerProtocol,
        *,
        refresh_token_days: int = 1,
    ) -> None:
        self.session = session
        self._passwords = password_service
        self._tokens = token_service
        self._logger = logger
        self._refresh_token_days = refresh_token_days

    # Create

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
        cancellation.raise_if_cancelled()
        if await self._phone_number_taken(phone_number):
            return Failure.of(user_errors.phone_number_exists(phone_number))

        cancellation.raise_if_cancelled()
        if await self._email_taken(email) or await self._find_by_username(username):
            return Failure.of(user_errors.email_exists(email))

        code = secrets.token_urlsafe(32)
        model = UserAccountModel(
            id=uuid7(),
            username=username.strip(),
            email=email.strip(),
            phone_number=phone_number.strip(),
            full_name=full_name.strip(),
            password_hash=self._passwords.hash_password(password),
            role=role.value,
            is_active=True,
            email_confirmed=False,
            phone_number_confirmed=False,
            confirmation_code_hash=hash_confirmation_code(code),
        )
        self.session.add(model)

        cancellation.raise_if_cancelled()
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            self._logger.warning("account_create_conflict", email=email)
            return Failure.of(general_errors.conflict("User"))

        self._logger.info("account_persisted", user_id=str(model.id))
        return Success(
            value=AccountCreated(user_id=model.id, email=model.email, verification_code=code)
        )

    # Read

    async def get_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[UserAccount, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())
        return Success(value=self._to_domain(model))

    async def get_paged_accounts(
        self, paging: PagingParameters, cancellation: CancellationToken
    ) -> Result[PagedList[UserAccount], DomainError]:
        query = select(UserAccountModel)
        if paging.search:
            pattern = f"%{paging.search.strip()}%"
            query = query.where(
                or_(
                    UserAccountModel.full_name.ilike(pattern),
                    UserAccountModel.email.ilike(pattern),
                    UserAccountModel.username.ilike(pattern),
                    UserAccountModel.phone_number.ilike(pattern),
                )
            )

        cancellation.raise_if_cancelled()
        total_count = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )

        column = _SORTABLE_COLUMNS.get(paging.order_by or "", UserAccountModel.created_at)
        ordering = column.desc() if paging.sort_order is SortOrder.DESC else column.asc()
        query = query.order_by(ordering).limit(paging.limit).offset(paging.offset)

        cancellation.raise_if_cancelled()
        rows = (await self.session.scalars(query)).all()

        return Success(
            value=PagedList(
                items=[self._to_domain(row) for row in rows],
                metadata=PageMetadata.build(
                    page_number=paging.page_number,
                    page_size=paging.limit,
                    total_count=total_count or 0,
                ),
            )
        )

    async def get_account_stats(
        self, cancellation: CancellationToken
    ) -> Result[AccountStats, DomainError]:
        cancellation.raise_if_cancelled()
        total_users = await self.session.scalar(
            select(func.count()).select_from(UserAccountModel)
        )

        cancellation.raise_if_cancelled()
        total_admins = await self.session.scalar(
            select(func.count())
            .select_from(UserAccountModel)
            .where(UserAccountModel.role == UserRole.ADMIN.value)
        )
        return Success(
            value=AccountStats(total_users=total_users or 0, total_admins=total_admins or 0)
        )

    # Update

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
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        cancellation.raise_if_cancelled()
        if phone_number != model.phone_number and await self._phone_number_taken(
            phone_number, exclude=user_id
        ):
            return Failure.of(user_errors.phone_number_exists(phone_number))

        cancellation.raise_if_cancelled()
        if email.lower() != model.email.lower() and await self._email_taken(
            email, exclude=user_id
        ):
            return Failure.of(user_errors.email_exists(email))

        account = self._to_domain(model)
        account.update(full_name, phone_number)
        account.email = email.strip()
        account.role = role
        self._apply(account, model)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=AccountMessages.UPDATED)

    async def update_profile(
        self,
        user_id: UUID,
        *,
        full_name: str,
        phone_number: str,
        cancellation: CancellationToken,
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        cancellation.raise_if_cancelled()
        if phone_number != model.phone_number and await self._phone_number_taken(
            phone_number, exclude=user_id
        ):
            return Failure.of(user_errors.phone_number_exists(phone_number))

        account = self._to_domain(model)
        account.update(full_name, phone_number)
        self._apply(account, model)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=AccountMessages.PROFILE_UPDATED)

    async def activate_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        return await self._mutate(
            user_id, UserAccount.activate, AccountMessages.ACTIVATED, cancellation
        )

    async def deactivate_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        return await self._mutate(
            user_id, UserAccount.deactivate, AccountMessages.DEACTIVATED, cancellation
        )

    async def delete_account(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[bool, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            self._logger.warning("account_not_found", user_id=str(user_id))
            return Failure.of(user_errors.user_not_found())

        cancellation.raise_if_cancelled()
        # SQLite does not enforce the cascade unless foreign keys are enabled.
        await self.session.execute(
            delete(UserSessionModel).where(UserSessionModel.user_id == user_id)
        )
        await self.session.delete(model)
        await self.session.commit()
        return Success(value=True)

    # Authentication

    async def login(
        self,
        username: str,
        password: str,
        cancellation: CancellationToken,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Result[AuthTokens, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self._find_by_username(username)
        if model is None or not self._passwords.verify_password(
            password, model.password_hash
        ):
            self._logger.warning("login_rejected", reason="invalid_credentials")
            return Failure.of(user_errors.invalid_credentials())

        account = self._to_domain(model)
        if not account.email_confirmed:
            return Failure.of(user_errors.not_confirmed())
        if not account.is_active:
            return Failure.of(user_errors.inactive())

        # A still-valid refresh token is kept so other devices stay signed in.
        refresh_token = account.refresh_token
        if refresh_token is None or not account.has_valid_refresh_token(refresh_token):
            refresh_token = self._tokens.generate_refresh_token()
            account.set_refresh_token(refresh_token, self._refresh_token_expiry())
        user_session = UserSession(
            id=uuid7(),
            user_id=account.id,
            ip_address=ip_address,
            user_agent=user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else None,
        )
        tokens = self._issue_tokens(account, refresh_token, session_id=user_session.id)
        self._apply(account, model)
        self.session.add(
            UserSessionModel(
                id=user_session.id,
                user_id=user_session.user_id,
                ip_address=user_session.ip_address,
                user_agent=user_session.user_agent,
                login_at=user_session.login_at,
                last_activity_at=user_session.last_activity_at,
                is_active=user_session.is_active,
            )
        )

        cancellation.raise_if_cancelled()
        await self.session.commit()
        self._logger.info(
            "session_opened", user_id=str(account.id), session_id=str(user_session.id)
        )
        return Success(value=tokens)

    async def logout(
        self, user_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        account = self._to_domain(model)
        account.revoke_refresh_token()
        self._apply(account, model)

        cancellation.raise_if_cancelled()
        await self.session.execute(
            update(UserSessionModel)
            .where(
                UserSessionModel.user_id == user_id,
                UserSessionModel.is_active.is_(True),
            )
            .values(is_active=False, logout_at=datetime.now(UTC))
        )
        await self.session.commit()
        return Success(value=AccountMessages.LOGGED_OUT)

    async def logout_session(
        self, user_id: UUID, session_id: UUID, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserSessionModel, session_id)
        if model is None or model.user_id != user_id:
            return Failure.of(general_errors.not_found("UserSession"))

        user_session = self._session_to_domain(model)
        if not user_session.is_active:
            return Success(value=AccountMessages.LOGGED_OUT)

        user_session.log_out()
        model.is_active = user_session.is_active
        model.logout_at = user_session.logout_at

        cancellation.raise_if_cancelled()
        await self.session.commit()
        self._logger.info("session_ended", user_id=str(user_id), session_id=str(session_id))
        return Success(value=AccountMessages.LOGGED_OUT)

    async def get_paged_sessions(
        self,
        user_id: UUID,
        paging: SessionPagingParameters,
        cancellation: CancellationToken,
    ) -> Result[PagedList[UserSession], DomainError]:
        query = select(UserSessionModel).where(UserSessionModel.user_id == user_id)
        if paging.active_only is not None:
            query = query.where(UserSessionModel.is_active == paging.active_only)

        cancellation.raise_if_cancelled()
        total_count = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )

        query = (
            query.order_by(UserSessionModel.login_at.desc(), UserSessionModel.id.desc())
            .limit(paging.limit)
            .offset(paging.offset)
        )
        cancellation.raise_if_cancelled()
        rows = (await self.session.scalars(query)).all()

        return Success(
            value=PagedList(
                items=[self._session_to_domain(row) for row in rows],
                metadata=PageMetadata.build(
                    page_number=paging.page_number,
                    page_size=paging.limit,
                    total_count=total_count or 0,
                ),
            )
        )

    async def refresh_token(
        self, access_token: str, refresh_token: str, cancellation: CancellationToken
    ) -> Result[AuthTokens, DomainError]:
        claims = self._tokens.read_expired_token(access_token)
        if isinstance(claims, Failure):
            return Failure.of(user_errors.invalid_refresh_token())
        try:
            user_id = UUID(str(claims.value["sub"]))
        except (KeyError, ValueError):
            return Failure.of(user_errors.invalid_refresh_token())

        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.invalid_refresh_token())

        account = self._to_domain(model)
        if not account.has_valid_refresh_token(refresh_token):
            self._logger.warning("refresh_token_rejected", user_id=str(user_id))
            return Failure.of(user_errors.invalid_refresh_token())

        session_id = _parse_uuid(claims.value.get("session_id"))
        cancellation.raise_if_cancelled()
        session_model = (
            await self.session.get(UserSessionModel, session_id) if session_id else None
        )
        if (
            session_model is None
            or session_model.user_id != user_id
            or not session_model.is_active
        ):
            self._logger.warning(
                "refresh_token_rejected", user_id=str(user_id), reason="session_ended"
            )
            return Failure.of(user_errors.invalid_refresh_token())

        user_session = self._session_to_domain(session_model)
        user_session.record_activity()
        session_model.last_activity_at = user_session.last_activity_at

        rotated = self._tokens.generate_refresh_token()
        account.set_refresh_token(rotated, self._refresh_token_expiry())
        tokens = self._issue_tokens(account, rotated, session_id=user_session.id)
        self._apply(account, model)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=tokens)

    # Passwords

    async def reset_password(
        self, user_id: UUID, new_password: str, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        model.password_hash = self._passwords.hash_password(new_password)
        model.updated_at = datetime.now(UTC)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=AccountMessages.PASSWORD_RESET)

    async def change_password(
        self,
        user_id: UUID,
        old_password: str,
        new_password: str,
        cancellation: CancellationToken,
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        if not self._passwords.verify_password(old_password, model.password_hash):
            return Failure.of(
                user_errors.password_change_failed(AccountMessages.INCORRECT_PASSWORD)
            )

        model.password_hash = self._passwords.hash_password(new_password)
        model.updated_at = datetime.now(UTC)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=AccountMessages.PASSWORD_CHANGED)

    async def issue_temporary_password(
        self, email: str, cancellation: CancellationToken
    ) -> Result[TemporaryPassword, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self._find_by_email(email)
        if model is None:
            return Failure.of(general_errors.not_found("User"))

        temporary_password = secrets.token_urlsafe(TEMPORARY_PASSWORD_LENGTH)[
            :TEMPORARY_PASSWORD_LENGTH
        ]
        model.password_hash = self._passwords.hash_password(temporary_password)
        model.updated_at = datetime.now(UTC)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(
            value=TemporaryPassword(
                user_id=model.id,
                email=model.email,
                temporary_password=temporary_password,
            )
        )

    # Email confirmation

    async def confirm_email(
        self, user_id: UUID, code: str, cancellation: CancellationToken
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        account = self._to_domain(model)
        if account.email_confirmed:
            return Success(value=AccountMessages.ALREADY_CONFIRMED)

        stored = model.confirmation_code_hash
        if stored is None or not hmac.compare_digest(stored, hash_confirmation_code(code)):
            return Failure.of(user_errors.email_confirmation_failed(AccountMessages.INVALID_CODE))

        account.confirm_email()
        self._apply(account, model)
        model.confirmation_code_hash = None

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=AccountMessages.EMAIL_CONFIRMED)

    async def reissue_confirmation_code(
        self, email: str, cancellation: CancellationToken
    ) -> Result[AccountCreated, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self._find_by_email(email)
        if model is None:
            return Failure.of(user_errors.user_not_found())
        if model.email_confirmed:
            return Failure.of(user_errors.already_confirmed())

        code = secrets.token_urlsafe(32)
        model.confirmation_code_hash = hash_confirmation_code(code)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(
            value=AccountCreated(user_id=model.id, email=model.email, verification_code=code)
        )

    # Helpers

    async def _mutate(
        self,
        user_id: UUID,
        change: Callable[[UserAccount], None],
        message: str,
        cancellation: CancellationToken,
    ) -> Result[str, DomainError]:
        cancellation.raise_if_cancelled()
        model = await self.session.get(UserAccountModel, user_id)
        if model is None:
            return Failure.of(user_errors.user_not_found())

        account = self._to_domain(model)
        change(account)
        self._apply(account, model)

        cancellation.raise_if_cancelled()
        await self.session.commit()
        return Success(value=message)

    def _issue_tokens(
        self, account: UserAccount, refresh_token: str, *, session_id: UUID
    ) -> AuthTokens:
        access_token = self._tokens.generate_access_token(
            user_id=account.id,
            email=account.email,
            roles=[account.role.value],
            session_id=session_id,
        )
        return AuthTokens(
            user_id=account.id,
            access_token=access_token,
            refresh_token=refresh_token,
            session_id=session_id,
        )

    def _refresh_token_expiry(self) -> datetime:
        return datetime.now(UTC) + timedelta(days=self._refresh_token_days)

    async def _find_by_username(self, username: str) -> UserAccountModel | None:
        stmt = select(UserAccountModel).where(
            func.lower(UserAccountModel.username) == username.strip().lower()
        )
        return (await self.session.scalars(stmt)).one_or_none()

    async def _find_by_email(self, email: str) -> UserAccountModel | None:
        stmt = select(UserAccountModel).where(
            func.lower(UserAccountModel.email) == email.strip().lower()
        )
        return (await self.session.scalars(stmt)).one_or_none()

    async def _email_taken(self, email: str, *, exclude: UUID | None = None) -> bool:
        stmt = select(UserAccountModel.id).where(
            func.lower(UserAccountModel.email) == email.strip().lower()
        )
        if exclude is not None:
            stmt = stmt.where(UserAccountModel.id != exclude)
        return (await self.session.scalar(stmt.limit(1))) is not None

    async def _phone_number_taken(
        self, phone_number: str, *, exclude: UUID | None = None
    ) -> bool:
        stmt = select(UserAccountModel.id).where(
            UserAccountModel.phone_number == phone_number.strip()
        )
        if exclude is not None:
            stmt = stmt.where(UserAccountModel.id != exclude)
        return (await self.session.scalar(stmt.limit(1))) is not None

    def _to_domain(self, model: UserAccountModel) -> UserAccount:
        return UserAccount(
            id=model.id,
            username=model.username,
            email=model.email,
            phone_number=model.phone_number,
            full_name=model.full_name,
            password_hash=model.password_hash,
            role=UserRole(model.role),
            is_active=model.is_active,
            email_confirmed=model.email_confirmed,
            phone_number_confirmed=model.phone_number_confirmed,
            refresh_token=model.refresh_token,
            refresh_token_expires_at=model.refresh_token_expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _session_to_domain(self, model: UserSessionModel) -> UserSession:
        return UserSession(
            id=model.id,
            user_id=model.user_id,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            login_at=model.login_at,
            last_activity_at=model.last_activity_at,
            logout_at=model.logout_at,
            is_active=model.is_active,
        )

    def _apply(self, account: UserAccount, model: UserAccountModel) -> None:
        """Copy mutable entity state back onto the tracked model."""
        model.email = account.email
        model.phone_number = account.phone_number
        model.full_name = account.full_name
        model.role = account.role.value
        model.is_active = account.is_active
        model.email_confirmed = account.email_confirmed
        model.refresh_token = account.refresh_token
        model.refresh_token_expires_at = account.refresh_token_expires_at
        model.updated_at = account.updated_at


def _parse_uuid(value: object) -> UUID | None:
    if value is None:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None
