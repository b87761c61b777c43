"""JWT authentication dependencies.

FastAPI dependencies for extracting and validating bearer tokens.

The dependencies are ``async`` so they run in the request's own context:
the actor they set is what the audit interceptor records on flush.

Usage:
    # Protected route (requires auth)
    @router.get("/protected")
    async def protected_route(current_user: AuthenticatedUser):
        return {"user_id": str(current_user.user_id)}

    # Admin-only route
    @router.delete("/{user_id}")
    async def delete(current_user: AdminUser):
        ...
"""

from dataclasses import dataclass, field
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from keyhold.core.container import get_token_service
from keyhold.core.errors import DomainError, auth_errors
from keyhold.core.request_context import Actor, actor_context
from keyhold.core.result import Failure, Success
from keyhold.domain.entities import UserRole
from keyhold.domain.protocols import TokenServiceProtocol

# auto_error=False: a missing header is answered with 401 here, not 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class CurrentUser:
    """Authenticated user information from JWT.

    Attributes:
        user_id: User's unique identifier (from JWT 'sub' claim).
        email: User's email address (from JWT 'email' claim).
        roles: User's roles (from JWT 'roles' claim).
        session_id: Session ID if present (from JWT 'session_id' claim).
    """

    user_id: UUID
    email: str
    roles: list[str] = field(default_factory=list)
    session_id: UUID | None = None

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN.value in self.roles


def _unauthorized(error: DomainError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error.description,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _current_user_from(payload: dict[str, Any]) -> CurrentUser:
    """Build CurrentUser from validated claims.

    Raises:
        KeyError, ValueError: Claims are missing or malformed.
    """
    roles = payload.get("roles", [])
    session_id = payload.get("session_id")
    return CurrentUser(
        user_id=UUID(str(payload["sub"])),
        email=str(payload["email"]),
        roles=[str(role) for role in roles] if isinstance(roles, list) else [],
        session_id=UUID(str(session_id)) if session_id else None,
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    token_service: Annotated[TokenServiceProtocol, Depends(get_token_service)],
) -> CurrentUser:
    """Get current authenticated user from the bearer token.

    Sets the request's audit actor.

    Raises:
        HTTPException 401: If token is missing, invalid, or expired.
    """
    if credentials is None:
        raise _unauthorized(auth_errors.invalid_token())

    match token_service.validate_access_token(credentials.credentials):
        case Success(value=payload):
            try:
                current_user = _current_user_from(payload)
            except (KeyError, ValueError) as e:
                raise _unauthorized(auth_errors.invalid_token()) from e
        case Failure(errors=errors):
            raise _unauthorized(errors[0])

    actor_context.set(Actor(username=current_user.email))
    return current_user


async def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Require the Admin role.

    Raises:
        HTTPException 403: Authenticated but not an administrator.
    """
    if not current_user.is_admin:
        error = auth_errors.forbidden("Administrator role required")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.description)
    return current_user


AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]
AdminUser = Annotated[CurrentUser, Depends(require_admin)]
