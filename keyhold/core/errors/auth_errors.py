"""Bearer token error factories."""

from keyhold.core.enums import ErrorKind
from keyhold.core.errors.domain_error import DomainError


def invalid_token() -> DomainError:
    return DomainError(
        code="Auth.InvalidToken",
        description="Invalid or malformed access token",
        kind=ErrorKind.UNAUTHORIZED,
    )


def token_expired() -> DomainError:
    return DomainError(
        code="Auth.TokenExpired",
        description="Access token has expired",
        kind=ErrorKind.UNAUTHORIZED,
    )


def forbidden(message: str = "You do not have permission to perform this action") -> DomainError:
    return DomainError(code="Auth.Forbidden", description=message, kind=ErrorKind.FORBIDDEN)
