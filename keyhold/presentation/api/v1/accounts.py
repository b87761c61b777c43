"""Accounts resource endpoints.

Endpoints:
    POST   /accounts                        - Create account (public)
    POST   /accounts/login                  - Login (public)
    POST   /accounts/logout                 - Logout every session
    POST   /accounts/logout/{session_id}    - Logout one session
    POST   /accounts/refresh-token          - Refresh tokens (public)
    POST   /accounts/confirm-email          - Confirm email (public)
    POST   /accounts/resend-confirmation    - Resend confirmation (public)
    POST   /accounts/forgot-password        - Forgot password (public)
    GET    /accounts/paged                  - Paged accounts (admin)
    GET    /accounts/stats                  - Account totals (admin)
    PUT    /accounts/change-password        - Change own password
    PUT    /accounts/profile                - Update own profile
    GET    /accounts/{user_id}              - Get account
    PUT    /accounts/{user_id}              - Update account and role (admin)
    GET    /accounts/{user_id}/sessions     - Login sessions (admin)
    PUT    /accounts/{user_id}/activate     - Activate (admin)
    PUT    /accounts/{user_id}/deactivate   - Deactivate (admin)
    PUT    /accounts/{user_id}/reset-password - Reset password (admin)
    DELETE /accounts/{user_id}              - Delete (admin)

Static paths are declared before ``/{user_id}`` so they are matched first.
"""

import json
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from fastapi.responses import JSONResponse

from keyhold.application.commands.account_commands import (
    ActivateAccount,
    DeactivateAccount,
    DeleteAccount,
)
from keyhold.application.commands.auth_commands import Logout, LogoutSession
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
from keyhold.application.dtos import ApiResponse
from keyhold.application.queries.account_queries import (
    GetPagedUsers,
    GetUserAccount,
    GetUserSessions,
    GetUserStats,
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
from keyhold.core.cancellation import CancellationToken
from keyhold.core.container import (
    get_activate_account_handler,
    get_cancellation_token,
    get_change_password_handler,
    get_confirm_email_handler,
    get_create_account_handler,
    get_deactivate_account_handler,
    get_delete_account_handler,
    get_forgot_password_handler,
    get_login_handler,
    get_logout_handler,
    get_logout_session_handler,
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
from keyhold.core.errors import DomainError
from keyhold.core.request_context import get_client_ip
from keyhold.core.result import Failure, Result, Success
from keyhold.domain.value_objects import (
    PagingParameters,
    SessionPagingParameters,
    SortOrder,
)
from keyhold.presentation.api.middleware.auth_dependencies import (
    AdminUser,
    AuthenticatedUser,
)
from keyhold.presentation.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from keyhold.schemas.account_schemas import (
    ChangePasswordRequest,
    ConfirmEmailRequest,
    CreateAccountRequest,
    EmailRequest,
    LoginRequest,
    RefreshTokenRequest,
    ResetPasswordRequest,
    UpdateAccountRequest,
    UpdateProfileRequest,
)
from keyhold.schemas.response_schemas import (
    ApiResponseSchema,
    LoginResponse,
    PagedResponse,
    PageMetadataSchema,
    RefreshTokenResponse,
    UserAccountSchema,
    UserSessionSchema,
    UserStatsSchema,
)

router = APIRouter(
    prefix="/accounts",
    tags=["Accounts"],
    responses={
        400: {"model": ProblemDetails},
        401: {"model": ProblemDetails},
        403: {"model": ProblemDetails},
        404: {"model": ProblemDetails},
        409: {"model": ProblemDetails},
        422: {"model": ProblemDetails},
    },
)

Cancellation = Annotated[CancellationToken, Depends(get_cancellation_token)]
UserId = Annotated[UUID, Path(description="Account id")]


def message_response(
    result: Result[ApiResponse, DomainError], request: Request
) -> ApiResponseSchema | JSONResponse:
    """Render an ApiResponse result (the common command outcome)."""
    match result:
        case Success(value=response):
            return ApiResponseSchema(message=response.message, item=response.item)
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


# =============================================================================
# Public endpoints
# =============================================================================


@router.post(
    "",
    response_model=ApiResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create account",
)
async def create_account(
    request: Request,
    data: CreateAccountRequest,
    cancellation: Cancellation,
    handler: CreateAccountHandler = Depends(get_create_account_handler),
) -> ApiResponseSchema | JSONResponse:
    """Create an unconfirmed account and email a confirmation link.

    POST /api/v1/accounts → 201 Created (item = new account id)
    """
    result = await handler.handle(data.to_command(), cancellation)
    return message_response(result, request)


@router.post("/login", response_model=LoginResponse, summary="Login")
async def login(
    request: Request,
    data: LoginRequest,
    cancellation: Cancellation,
    handler: LoginHandler = Depends(get_login_handler),
) -> LoginResponse | JSONResponse:
    """Authenticate, open a login session and issue tokens.

    The session records the client address and User-Agent.
    """
    command = data.to_command(
        ip_address=get_client_ip(), user_agent=request.headers.get("User-Agent")
    )
    match await handler.handle(command, cancellation):
        case Success(value=tokens):
            return LoginResponse.from_tokens(tokens)
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


@router.post("/refresh-token", response_model=RefreshTokenResponse, summary="Refresh tokens")
async def refresh_token(
    request: Request,
    data: RefreshTokenRequest,
    cancellation: Cancellation,
    handler: RefreshTokenHandler = Depends(get_refresh_token_handler),
) -> RefreshTokenResponse | JSONResponse:
    """Exchange an expired access token and a refresh token for new ones.

    The refresh token is rotated on every successful call.
    """
    match await handler.handle(data.to_command(), cancellation):
        case Success(value=tokens):
            return RefreshTokenResponse.from_tokens(tokens)
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


@router.post("/confirm-email", response_model=ApiResponseSchema, summary="Confirm email")
async def confirm_email(
    request: Request,
    data: ConfirmEmailRequest,
    cancellation: Cancellation,
    handler: ConfirmEmailHandler = Depends(get_confirm_email_handler),
) -> ApiResponseSchema | JSONResponse:
    result = await handler.handle(data.to_command(), cancellation)
    return message_response(result, request)


@router.post(
    "/resend-confirmation",
    response_model=ApiResponseSchema,
    summary="Resend confirmation email",
)
async def resend_confirmation(
    request: Request,
    data: EmailRequest,
    cancellation: Cancellation,
    handler: ResendConfirmationHandler = Depends(get_resend_confirmation_handler),
) -> ApiResponseSchema | JSONResponse:
    result = await handler.handle(data.to_resend_confirmation(), cancellation)
    return message_response(result, request)


@router.post("/forgot-password", response_model=ApiResponseSchema, summary="Forgot password")
async def forgot_password(
    request: Request,
    data: EmailRequest,
    cancellation: Cancellation,
    handler: ForgotPasswordHandler = Depends(get_forgot_password_handler),
) -> ApiResponseSchema | JSONResponse:
    """Replace the password with an emailed temporary one."""
    result = await handler.handle(data.to_forgot_password(), cancellation)
    return message_response(result, request)


# =============================================================================
# Authenticated endpoints
# =============================================================================


@router.post("/logout", response_model=ApiResponseSchema, summary="Logout")
async def logout(
    request: Request,
    current_user: AuthenticatedUser,
    cancellation: Cancellation,
    handler: LogoutHandler = Depends(get_logout_handler),
) -> ApiResponseSchema | JSONResponse:
    """End every session of the caller and revoke the refresh token."""
    result = await handler.handle(Logout(user_id=current_user.user_id), cancellation)
    return message_response(result, request)


@router.post(
    "/logout/{session_id}",
    response_model=ApiResponseSchema,
    summary="Logout one session",
)
async def logout_session(
    request: Request,
    session_id: Annotated[UUID, Path(description="Session id from login")],
    current_user: AuthenticatedUser,
    cancellation: Cancellation,
    handler: LogoutSessionHandler = Depends(get_logout_session_handler),
) -> ApiResponseSchema | JSONResponse:
    """End one of the caller's sessions; other devices stay signed in."""
    command = LogoutSession(user_id=current_user.user_id, session_id=session_id)
    result = await handler.handle(command, cancellation)
    return message_response(result, request)


@router.get(
    "/paged",
    response_model=PagedResponse[UserAccountSchema],
    summary="Paged accounts",
)
async def get_paged_users(
    request: Request,
    response: Response,
    current_user: AdminUser,
    cancellation: Cancellation,
    page_size: Annotated[int, Query(ge=1, description="Items per page (max 100)")] = 10,
    page_number: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
    search: Annotated[str | None, Query(description="Name, email, username or phone")] = None,
    order_by: Annotated[str | None, Query(description="Sort column")] = None,
    sort_order: Annotated[SortOrder, Query(description="asc or desc")] = SortOrder.ASC,
    handler: GetPagedUsersHandler = Depends(get_paged_users_handler),
) -> PagedResponse[UserAccountSchema] | JSONResponse:
    """List accounts one page at a time.

    Pagination metadata is returned in the body and in X-Pagination.
    """
    paging = PagingParameters(
        page_size=page_size,
        page_number=page_number,
        search=search,
        order_by=order_by,
        sort_order=sort_order,
    )
    match await handler.handle(GetPagedUsers(paging=paging), cancellation):
        case Success(value=page):
            metadata = PageMetadataSchema.from_value(page.metadata)
            response.headers["X-Pagination"] = json.dumps(metadata.model_dump())
            return PagedResponse[UserAccountSchema](
                items=[UserAccountSchema.model_validate(item) for item in page.items],
                metadata=metadata,
            )
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


@router.get("/stats", response_model=UserStatsSchema, summary="Account totals")
async def get_user_stats(
    request: Request,
    current_user: AdminUser,
    cancellation: Cancellation,
    handler: GetUserStatsHandler = Depends(get_user_stats_handler),
) -> UserStatsSchema | JSONResponse:
    match await handler.handle(GetUserStats(), cancellation):
        case Success(value=stats):
            return UserStatsSchema.model_validate(stats)
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


@router.put(
    "/change-password",
    response_model=ApiResponseSchema,
    summary="Change own password",
)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    current_user: AuthenticatedUser,
    cancellation: Cancellation,
    handler: ChangePasswordHandler = Depends(get_change_password_handler),
) -> ApiResponseSchema | JSONResponse:
    result = await handler.handle(data.to_command(current_user.user_id), cancellation)
    return message_response(result, request)


@router.put("/profile", response_model=ApiResponseSchema, summary="Update own profile")
async def update_profile(
    request: Request,
    data: UpdateProfileRequest,
    current_user: AuthenticatedUser,
    cancellation: Cancellation,
    handler: UpdateProfileHandler = Depends(get_update_profile_handler),
) -> ApiResponseSchema | JSONResponse:
    """Edit the caller's own name and phone number.

    Role and email changes go through the administrative update.
    """
    result = await handler.handle(data.to_command(current_user.user_id), cancellation)
    return message_response(result, request)


@router.get("/{user_id}", response_model=UserAccountSchema, summary="Get account")
async def get_user_account(
    request: Request,
    user_id: UserId,
    current_user: AuthenticatedUser,
    cancellation: Cancellation,
    handler: GetUserAccountHandler = Depends(get_user_account_handler),
) -> UserAccountSchema | JSONResponse:
    match await handler.handle(GetUserAccount(user_id=user_id), cancellation):
        case Success(value=account):
            return UserAccountSchema.model_validate(account)
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


# =============================================================================
# Administrative endpoints
# =============================================================================


@router.put("/{user_id}", response_model=ApiResponseSchema, summary="Update account")
async def update_account(
    request: Request,
    user_id: UserId,
    data: UpdateAccountRequest,
    current_user: AdminUser,
    cancellation: Cancellation,
    handler: UpdateAccountHandler = Depends(get_update_account_handler),
) -> ApiResponseSchema | JSONResponse:
    """Update any account, including its email and role."""
    result = await handler.handle(data.to_command(user_id), cancellation)
    return message_response(result, request)


@router.get(
    "/{user_id}/sessions",
    response_model=PagedResponse[UserSessionSchema],
    summary="Login sessions",
)
async def get_user_sessions(
    request: Request,
    response: Response,
    user_id: UserId,
    current_user: AdminUser,
    cancellation: Cancellation,
    page_size: Annotated[int, Query(ge=1, description="Items per page (max 100)")] = 10,
    page_number: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
    active_only: Annotated[
        bool | None, Query(description="true: active only, false: ended only")
    ] = None,
    handler: GetUserSessionsHandler = Depends(get_user_sessions_handler),
) -> PagedResponse[UserSessionSchema] | JSONResponse:
    """List an account's login sessions, newest login first."""
    paging = SessionPagingParameters(
        page_size=page_size, page_number=page_number, active_only=active_only
    )
    match await handler.handle(GetUserSessions(user_id=user_id, paging=paging), cancellation):
        case Success(value=page):
            metadata = PageMetadataSchema.from_value(page.metadata)
            response.headers["X-Pagination"] = json.dumps(metadata.model_dump())
            return PagedResponse[UserSessionSchema](
                items=[UserSessionSchema.model_validate(item) for item in page.items],
                metadata=metadata,
            )
        case Failure(errors=errors):
            return ErrorResponseBuilder.from_domain_errors(errors, request)


@router.put("/{user_id}/activate", response_model=ApiResponseSchema, summary="Activate account")
async def activate_account(
    request: Request,
    user_id: UserId,
    current_user: AdminUser,
    cancellation: Cancellation,
    handler: ActivateAccountHandler = Depends(get_activate_account_handler),
) -> ApiResponseSchema | JSONResponse:
    result = await handler.handle(ActivateAccount(user_id=user_id), cancellation)
    return message_response(result, request)


@router.put(
    "/{user_id}/deactivate",
    response_model=ApiResponseSchema,
    summary="Deactivate account",
)
async def deactivate_account(
    request: Request,
    user_id: UserId,
    current_user: AdminUser,
    cancellation: Cancellation,
    handler: DeactivateAccountHandler = Depends(get_deactivate_account_handler),
) -> ApiResponseSchema | JSONResponse:
    result = await handler.handle(DeactivateAccount(user_id=user_id), cancellation)
    return message_response(result, request)


@router.put(
    "/{user_id}/reset-password",
    response_model=ApiResponseSchema,
    summary="Reset password",
)
async def reset_password(
    request: Request,
    user_id: UserId,
    data: ResetPasswordRequest,
    current_user: AdminUser,
    cancellation: Cancellation,
    handler: ResetPasswordHandler = Depends(get_reset_password_handler),
) -> ApiResponseSchema | JSONResponse:
    """Set a new password without the old one (administrative)."""
    result = await handler.handle(data.to_command(user_id), cancellation)
    return message_response(result, request)


@router.delete("/{user_id}", response_model=ApiResponseSchema, summary="Delete account")
async def delete_account(
    request: Request,
    user_id: UserId,
    current_user: AdminUser,
    cancellation: Cancellation,
    handler: DeleteAccountHandler = Depends(get_delete_account_handler),
) -> ApiResponseSchema | JSONResponse:
    result = await handler.handle(DeleteAccount(user_id=user_id), cancellation)
    return message_response(result, request)
