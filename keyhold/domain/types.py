"""Annotated request field types with centralized validation.

Define each field's rule chain once, use it in every request schema.
Rules run in the order listed and stop at the first failure, so a field
contributes at most one message.

Fields are declared ``str | None`` so that a missing value reaches the
"required" rule instead of pydantic's generic missing-field error; request
models set ``validate_default=True``.

Usage:
    from keyhold.domain.types import FullName, PhoneNumber

    class CreateAccountRequest(BaseModel):
        full_name: FullName = None
        phone_number: PhoneNumber = None
"""

from typing import Annotated

from pydantic import AfterValidator

from keyhold.domain.validators import (
    email_address,
    jwt_shape,
    min_length,
    no_whitespace,
    one_of,
    phone_number,
    required,
    uuid_format,
)

MIN_PASSWORD_LENGTH = 6
ROLE_NAMES = ("Admin", "User")

# ============================================================================
# Account fields
# ============================================================================

FullName = Annotated[
    str | None,
    AfterValidator(required("Full name is required")),
    AfterValidator(min_length(3, "Full name must be at least 3 characters")),
]

AccountEmail = Annotated[
    str | None,
    AfterValidator(required("Email address is required")),
    AfterValidator(email_address("Email address is not valid")),
]

AccountUsername = Annotated[
    str | None,
    AfterValidator(required("Username is required")),
    AfterValidator(email_address("Username should be a valid email address")),
]

PhoneNumber = Annotated[
    str | None,
    AfterValidator(required("Phone number is required")),
    AfterValidator(phone_number("Phone number should be 10 digits")),
]

RoleName = Annotated[
    str | None,
    AfterValidator(required("Select user role")),
    AfterValidator(one_of(ROLE_NAMES, "Select user role")),
]

ContactEmail = Annotated[
    str | None,
    AfterValidator(required("Email is required")),
    AfterValidator(email_address("Please provide a valid email address")),
]

# ============================================================================
# Password fields
# ============================================================================

AccountPassword = Annotated[
    str | None,
    AfterValidator(required("Password is required")),
    AfterValidator(no_whitespace("Password cannot contain space")),
    AfterValidator(
        min_length(MIN_PASSWORD_LENGTH, "Password must be at least 6 characters")
    ),
]

ConfirmPassword = Annotated[
    str | None,
    AfterValidator(required("Confirm password is required")),
]

NewPassword = Annotated[
    str | None,
    AfterValidator(required("New password is required")),
    AfterValidator(no_whitespace("Password cannot contain space")),
    AfterValidator(
        min_length(MIN_PASSWORD_LENGTH, "New password must be at least 6 characters")
    ),
]

ConfirmNewPassword = Annotated[
    str | None,
    AfterValidator(required("Confirm new password is required")),
]

OldPassword = Annotated[
    str | None,
    AfterValidator(required("Old password is required")),
]

# ============================================================================
# Login and token fields
# ============================================================================

LoginUsername = Annotated[
    str | None,
    AfterValidator(required("Username is required")),
    AfterValidator(no_whitespace("Username cannot contain space")),
    AfterValidator(min_length(3, "Username must be at least 3 characters long")),
]

LoginPassword = Annotated[
    str | None,
    AfterValidator(required("Password is required")),
    AfterValidator(no_whitespace("Password cannot contain space")),
]

AccessToken = Annotated[
    str | None,
    AfterValidator(required("Access token must be provided")),
    AfterValidator(jwt_shape("Access token must be a valid JWT")),
]

RefreshTokenValue = Annotated[
    str | None,
    AfterValidator(required("Refresh token must be provided")),
]

UserIdString = Annotated[
    str | None,
    AfterValidator(required("User id is required")),
    AfterValidator(uuid_format("User id is not valid")),
]

ConfirmationCode = Annotated[
    str | None,
    AfterValidator(required("Confirmation code is required")),
]
