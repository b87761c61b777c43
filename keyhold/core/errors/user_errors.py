"""User account error factories.

Codes are stable (``User.*``) and shared by the repository and handler
layers.
"""

from keyhold.core.enums import ErrorKind
from keyhold.core.errors.domain_error import DomainError


def user_not_found() -> DomainError:
    return DomainError(
        code="User.NotFound",
        description="User account not found.",
        kind=ErrorKind.NOT_FOUND,
    )


def email_exists(email: str) -> DomainError:
    return DomainError(
        code="User.Exists",
        description=f"Email: '{email}' already exists.",
        kind=ErrorKind.CONFLICT,
    )


def phone_number_exists(phone_number: str) -> DomainError:
    return DomainError(
        code="User.Exists",
        description=f"Phone number: '{phone_number}' already exists.",
        kind=ErrorKind.CONFLICT,
    )


def invalid_credentials() -> DomainError:
    return DomainError(
        code="User.InvalidCredentials",
        description="Wrong username or password",
        kind=ErrorKind.UNAUTHORIZED,
    )


def inactive() -> DomainError:
    return DomainError(
        code="User.InActive",
        description="InActive user, please contact your administrator.",
        kind=ErrorKind.FORBIDDEN,
    )


def not_confirmed() -> DomainError:
    return DomainError(
        code="User.NotConfirmed",
        description="Account not confirmed. Please check your email to confirm your account.",
        kind=ErrorKind.FORBIDDEN,
    )


def already_confirmed() -> DomainError:
    return DomainError(
        code="User.AlreadyConfirmed",
        description="Account already confirmed. Please login to continue.",
        kind=ErrorKind.CONFLICT,
    )


def invalid_refresh_token() -> DomainError:
    return DomainError(
        code="User.InvalidRefreshToken",
        description="Invalid refresh token",
        kind=ErrorKind.VALIDATION,
    )


def delete_failed(message: str) -> DomainError:
    return DomainError(code="User.DeleteFailed", description=message)


def password_change_failed(message: str) -> DomainError:
    return DomainError(code="User.PasswordChangeFailed", description=message)


def email_confirmation_failed(message: str) -> DomainError:
    return DomainError(code="User.EmailConfirmationFailed", description=message)
