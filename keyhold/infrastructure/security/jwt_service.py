"""JWT token service (adapter).

Implements TokenServiceProtocol using PyJWT with HMAC-SHA256.

Security:
    - HS256, 256-bit secret minimum
    - Issuer (iss) and audience (aud) are set and verified
    - Unique JWT ID (jti) per token
    - Refresh tokens are opaque random strings, never JWTs

Claims:
    sub (user id), email, roles, iat, exp, iss, aud, jti, and session_id
    when a session id is supplied.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from uuid_extensions import uuid7

from keyhold.core.config import JwtSettings
from keyhold.core.errors import DomainError, auth_errors
from keyhold.core.result import Failure, Result, Success

REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss", "aud"]


class JWTService:
    """JWT token generation and validation service.

    Usage:
        token_service: TokenServiceProtocol = get_token_service()

        token = token_service.generate_access_token(
            user_id=user_id,
            email=user.email,
            roles=["User"],
        )
        result = token_service.validate_access_token(token)
    """

    def __init__(self, settings: JwtSettings) -> None:
        """Initialize JWT service.

        Args:
            settings: Signing secret, issuer, audience and lifetimes.

        Raises:
            ValueError: If the secret is shorter than 32 bytes.
        """
        if len(settings.secret) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._settings = settings

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return timedelta(days=self._settings.refresh_token_expiry_days)

    def generate_access_token(
        self,
        user_id: UUID,
        email: str,
        roles: list[str],
        session_id: UUID | None = None,
    ) -> str:
        """Generate a signed access token.

        Returns:
            JWT string (header.payload.signature).
        """
        now = datetime.now(UTC)
        expires_at = now + timedelta(minutes=self._settings.expiry_minutes)

        payload: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "roles": roles,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
            "jti": str(uuid7()),
        }
        if session_id is not None:
            payload["session_id"] = str(session_id)

        token: str = jwt.encode(
            payload, self._settings.secret, algorithm=self._settings.algorithm
        )
        return token

    def generate_refresh_token(self) -> str:
        return secrets.token_urlsafe(32)

    def validate_access_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Validate signature, expiry, issuer and audience.

        Returns:
            Success(payload), or Failure(Auth.TokenExpired | Auth.InvalidToken).
        """
        try:
            payload: dict[str, Any] = self._decode(token, verify_exp=True)
        except ExpiredSignatureError:
            return Failure.of(auth_errors.token_expired())
        except InvalidTokenError:
            return Failure.of(auth_errors.invalid_token())
        return Success(value=payload)

    def read_expired_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Decode a possibly expired token; everything but expiry is checked."""
        try:
            payload: dict[str, Any] = self._decode(token, verify_exp=False)
        except InvalidTokenError:
            return Failure.of(auth_errors.invalid_token())
        return Success(value=payload)

    def _decode(self, token: str, *, verify_exp: bool) -> dict[str, Any]:
        return jwt.decode(
            token,
            self._settings.secret,
            algorithms=[self._settings.algorithm],
            audience=self._settings.audience,
            issuer=self._settings.issuer,
            options={"verify_exp": verify_exp, "require": REQUIRED_CLAIMS},
        )
