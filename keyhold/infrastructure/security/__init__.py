"""Security adapters (password hashing, tokens)."""

from keyhold.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from keyhold.infrastructure.security.jwt_service import JWTService

__all__ = ["BcryptPasswordService", "JWTService"]
