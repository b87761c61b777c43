"""Container module - Centralized dependency injection.

Re-exports every factory so callers import from one place:

    from keyhold.core.container import get_logger, get_login_handler

The container is organized into modules:
- infrastructure: Core services (settings, logging, tracing, db, security, email)
- events: Event bus and consumer wiring
- repositories: Repository factories
- handlers: Command and query handler factories
"""

# Infrastructure services
from keyhold.core.container.infrastructure import (
    get_app_settings,
    get_cancellation_token,
    get_database,
    get_db_session,
    get_email_sender,
    get_logger,
    get_password_service,
    get_token_service,
    get_tracer,
)

# Event bus
from keyhold.core.container.events import build_event_bus, get_event_bus

# Repositories
from keyhold.core.container.repositories import (
    get_account_repository,
    get_audit_repository,
)

# Handlers
from keyhold.core.container.handlers import (
    get_activate_account_handler,
    get_audit_log_by_id_handler,
    get_change_password_handler,
    get_confirm_email_handler,
    get_create_account_handler,
    get_deactivate_account_handler,
    get_delete_account_handler,
    get_forgot_password_handler,
    get_login_handler,
    get_logout_handler,
    get_logout_session_handler,
    get_paged_audits_handler,
    get_paged_users_handler,
    get_refresh_token_handler,
    get_resend_confirmation_handler,
    get_reset_password_handler,
    get_update_account_handler,
    get_update_profile_handler,
    get_user_account_handler,
    get_user_sessions_handler,
    get_user_stats_handler,
)

__all__ = [
    # Infrastructure
    "get_app_settings",
    "get_cancellation_token",
    "get_database",
    "get_db_session",
    "get_email_sender",
    "get_logger",
    "get_password_service",
    "get_token_service",
    "get_tracer",
    # Events
    "build_event_bus",
    "get_event_bus",
    # Repositories
    "get_account_repository",
    "get_audit_repository",
    # Handlers
    "get_activate_account_handler",
    "get_audit_log_by_id_handler",
    "get_change_password_handler",
    "get_confirm_email_handler",
    "get_create_account_handler",
    "get_deactivate_account_handler",
    "get_delete_account_handler",
    "get_forgot_password_handler",
    "get_login_handler",
    "get_logout_handler",
    "get_logout_session_handler",
    "get_paged_audits_handler",
    "get_paged_users_handler",
    "get_refresh_token_handler",
    "get_resend_confirmation_handler",
    "get_reset_password_handler",
    "get_update_account_handler",
    "get_update_profile_handler",
    "get_user_account_handler",
    "get_user_sessions_handler",
    "get_user_stats_handler",
]
