"""Account request schemas.

Every request model is frozen and validates defaults, so a missing field
reaches its "required" rule. Field rules come from keyhold.domain.types;
cross-field rules are field validators that read earlier fields from
``ValidationInfo.data`` (absent when that field already failed).

Each request builds its handler command with ``to_command``.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from keyhold.application.commands.account_commands import (
    ConfirmEmail,
    CreateAccount,
    ResendConfirmation,
    UpdateAccount,
    UpdateProfile,
)
from keyhold.application.commands.auth_commands import (
    ChangePassword,
    ForgotPassword,
    Login,
    RefreshToken,
    ResetPassword,
)
from keyhold.domain.entities import UserRole
from keyhold.domain.types import (
    AccessToken,
    AccountEmail,
    AccountPassword,
    AccountUsername,
    ConfirmationCode,
    ConfirmNewPassword,
    ConfirmPassword,
    ContactEmail,
    FullName,
    LoginPassword,
    LoginUsername,
    NewPassword,
    OldPassword,
    PhoneNumber,
    RefreshTokenValue,
    RoleName,
    UserIdString,
)

REQUEST_CONFIG = ConfigDict(frozen=True, validate_default=True)


class CreateAccountRequest(BaseModel):
    """POST /api/v1/accounts"""

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        json_schema_extra={
            "example": {
                "full_name": "Jane Doe",
                "email": "jane@example.com",
                "username": "jane@example.com",
                "phone_number": "0241234567",
                "password": "secret1",
                "confirm_password": "secret1",
            }
        },
    )

    full_name: FullName = None
    email: AccountEmail = None
    username: AccountUsername = None
    phone_number: PhoneNumber = None
    password: AccountPassword = None
    confirm_password: ConfirmPassword = None

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError("Password and confirm password do not match")
        return v

    def to_command(self) -> CreateAccount:
        return CreateAccount(
            full_name=str(self.full_name),
            email=str(self.email),
            username=str(self.username),
            phone_number=str(self.phone_number),
            password=str(self.password),
        )


class UpdateAccountRequest(BaseModel):
    """PUT /api/v1/accounts/{user_id}"""

    model_config = REQUEST_CONFIG

    full_name: FullName = None
    phone_number: PhoneNumber = None
    email: AccountEmail = None
    role: RoleName = None

    def to_command(self, user_id: UUID) -> UpdateAccount:
        return UpdateAccount(
            user_id=user_id,
            full_name=str(self.full_name),
            phone_number=str(self.phone_number),
            email=str(self.email),
            role=UserRole(self.role),
        )


class UpdateProfileRequest(BaseModel):
    """PUT /api/v1/accounts/profile (self-service; role and email are not editable)."""

    model_config = REQUEST_CONFIG

    full_name: FullName = None
    phone_number: PhoneNumber = None

    def to_command(self, user_id: UUID) -> UpdateProfile:
        return UpdateProfile(
            user_id=user_id,
            full_name=str(self.full_name),
            phone_number=str(self.phone_number),
        )


class LoginRequest(BaseModel):
    """POST /api/v1/accounts/login"""

    model_config = REQUEST_CONFIG

    username: LoginUsername = None
    password: LoginPassword = None

    def to_command(
        self, *, ip_address: str | None = None, user_agent: str | None = None
    ) -> Login:
        return Login(
            username=str(self.username),
            password=str(self.password),
            ip_address=ip_address,
            user_agent=user_agent,
        )


class RefreshTokenRequest(BaseModel):
    """POST /api/v1/accounts/refresh-token"""

    model_config = REQUEST_CONFIG

    access_token: AccessToken = None
    refresh_token: RefreshTokenValue = None

    def to_command(self) -> RefreshToken:
        return RefreshToken(
            access_token=str(self.access_token), refresh_token=str(self.refresh_token)
        )


class ResetPasswordRequest(BaseModel):
    """PUT /api/v1/accounts/{user_id}/reset-password (administrative)."""

    model_config = REQUEST_CONFIG

    new_password: NewPassword = None
    confirm_new_password: ConfirmNewPassword = None

    @field_validator("confirm_new_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        new_password = info.data.get("new_password")
        if new_password is not None and v != new_password:
            raise ValueError("New password and confirm new password do not match")
        return v

    def to_command(self, user_id: UUID) -> ResetPassword:
        return ResetPassword(user_id=user_id, new_password=str(self.new_password))


class ChangePasswordRequest(BaseModel):
    """PUT /api/v1/accounts/change-password (self-service)."""

    model_config = REQUEST_CONFIG

    old_password: OldPassword = None
    new_password: NewPassword = None

    @field_validator("new_password")
    @classmethod
    def differs_from_old(cls, v: str, info: ValidationInfo) -> str:
        if v == info.data.get("old_password"):
            raise ValueError("Old password and new password cannot be the same")
        return v

    def to_command(self, user_id: UUID) -> ChangePassword:
        return ChangePassword(
            user_id=user_id,
            old_password=str(self.old_password),
            new_password=str(self.new_password),
        )


class EmailRequest(BaseModel):
    """Body of forgot-password and resend-confirmation."""

    model_config = REQUEST_CONFIG

    email: ContactEmail = None

    def to_forgot_password(self) -> ForgotPassword:
        return ForgotPassword(email=str(self.email))

    def to_resend_confirmation(self) -> ResendConfirmation:
        return ResendConfirmation(email=str(self.email))


class ConfirmEmailRequest(BaseModel):
    """POST /api/v1/accounts/confirm-email"""

    model_config = REQUEST_CONFIG

    user_id: UserIdString = None
    code: ConfirmationCode = None

    def to_command(self) -> ConfirmEmail:
        return ConfirmEmail(user_id=UUID(str(self.user_id)), code=str(self.code))
