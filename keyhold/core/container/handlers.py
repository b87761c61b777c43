"""Handler dependency factories.

Request-scoped handler instances. Each handler gets the request's
repository plus the app-scoped tracer, logger and (where it publishes)
event bus.
"""

from fastapi import Depends

from keyhold.application.commands.handlers.account_status_handlers import (
    ActivateAccountHandler,
    DeactivateAccountHandler,
)
from keyhold.application.commands.handlers.confirm_email_handler import (
    ConfirmEmailHandler,
)
from keyhold.application.commands.handlers.create_account_handler import (
    CreateAccountHandler,
)
from keyhold.application.commands.handlers.delete_account_handler import (
    DeleteAccountHandler,
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
from keyhold.core.container.events import get_event_bus
from keyhold.core.container.infrastructure import get_logger, get_tracer
from keyhold.core.container.repositories import (
    get_account_repository,
    get_audit_repository,
)
from keyhold.infrastructure.persistence.repositories import (
    AccountRepository,
    AuditRepository,
)

# ============================================================================
# Account Command Handlers
# ============================================================================


async def get_create_account_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> CreateAccountHandler:
    return CreateAccountHandler(accounts, get_event_bus(), get_tracer(), get_logger())


async def get_update_account_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> UpdateAccountHandler:
    return UpdateAccountHandler(accounts, get_tracer(), get_logger())


async def get_update_profile_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> UpdateProfileHandler:
    return UpdateProfileHandler(accounts, get_tracer(), get_logger())


async def get_activate_account_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> ActivateAccountHandler:
    return ActivateAccountHandler(accounts, get_tracer(), get_logger())


async def get_deactivate_account_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> DeactivateAccountHandler:
    return DeactivateAccountHandler(accounts, get_tracer(), get_logger())


async def get_delete_account_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> DeleteAccountHandler:
    return DeleteAccountHandler(accounts, get_tracer(), get_logger())


async def get_confirm_email_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> ConfirmEmailHandler:
    return ConfirmEmailHandler(accounts, get_tracer(), get_logger())


async def get_resend_confirmation_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> ResendConfirmationHandler:
    return ResendConfirmationHandler(
        accounts, get_event_bus(), get_tracer(), get_logger()
    )


# ============================================================================
# Authentication Command Handlers
# ============================================================================


async def get_login_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> LoginHandler:
    return LoginHandler(accounts, get_tracer(), get_logger())


async def get_logout_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> LogoutHandler:
    return LogoutHandler(accounts, get_tracer(), get_logger())


async def get_logout_session_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> LogoutSessionHandler:
    return LogoutSessionHandler(accounts, get_tracer(), get_logger())


async def get_refresh_token_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> RefreshTokenHandler:
    return RefreshTokenHandler(accounts, get_tracer(), get_logger())


async def get_reset_password_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> ResetPasswordHandler:
    return ResetPasswordHandler(accounts, get_tracer(), get_logger())


async def get_change_password_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> ChangePasswordHandler:
    return ChangePasswordHandler(accounts, get_tracer(), get_logger())


async def get_forgot_password_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> ForgotPasswordHandler:
    return ForgotPasswordHandler(accounts, get_event_bus(), get_tracer(), get_logger())


# ============================================================================
# Query Handlers
# ============================================================================


async def get_user_account_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> GetUserAccountHandler:
    return GetUserAccountHandler(accounts, get_tracer(), get_logger())


async def get_paged_users_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> GetPagedUsersHandler:
    return GetPagedUsersHandler(accounts, get_tracer(), get_logger())


async def get_user_stats_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> GetUserStatsHandler:
    return GetUserStatsHandler(accounts, get_tracer(), get_logger())


async def get_user_sessions_handler(
    accounts: AccountRepository = Depends(get_account_repository),
) -> GetUserSessionsHandler:
    return GetUserSessionsHandler(accounts, get_tracer(), get_logger())


async def get_paged_audits_handler(
    audits: AuditRepository = Depends(get_audit_repository),
) -> GetPagedAuditsHandler:
    return GetPagedAuditsHandler(audits, get_tracer(), get_logger())


async def get_audit_log_by_id_handler(
    audits: AuditRepository = Depends(get_audit_repository),
) -> GetAuditLogByIdHandler:
    return GetAuditLogByIdHandler(audits, get_tracer(), get_logger())
