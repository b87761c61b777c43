"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Settings are bound once at startup: ``keyhold.main`` resolves
``get_settings()`` while building the app, so an invalid configuration is
fatal at boot rather than at first use.

Architecture:
- Top-level Settings with nested sections (jwt, email, messaging)
- Nested values come from ``SECTION__FIELD`` environment variables
  (e.g. ``JWT__SECRET``, ``MESSAGING__TRANSPORT``)
- Type validation via Pydantic

Usage:
    from keyhold.core.config import get_settings

    settings = get_settings()
    secret = settings.jwt.secret

    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from keyhold.core.enums import Environment


class JwtSettings(BaseModel):
    """JWT signing and lifetime settings."""

    secret: str = Field(
        ...,
        min_length=32,
        description="HMAC secret for signing access tokens (min 32 chars)",
    )
    issuer: str = Field(default="keyhold-api", description="Token issuer (iss)")
    audience: str = Field(default="keyhold-clients", description="Token audience (aud)")
    expiry_minutes: int = Field(
        default=30,
        ge=1,
        le=10080,
        description="Access token lifetime in minutes",
    )
    refresh_token_expiry_days: int = Field(
        default=1,
        ge=1,
        le=7,
        description="Refresh token lifetime in days",
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")


class EmailSettings(BaseModel):
    """Outbound email settings."""

    sender: Literal["logging", "smtp"] = Field(
        default="logging",
        description="Email sender adapter (logging for development, smtp for real delivery)",
    )
    smtp_host: str = Field(default="localhost", description="SMTP server host")
    smtp_port: int = Field(default=587, ge=1, le=65535, description="SMTP server port")
    smtp_username: str | None = Field(default=None, description="SMTP username")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    use_tls: bool = Field(default=True, description="Upgrade SMTP connection with STARTTLS")
    from_address: str = Field(default="no-reply@keyhold.local", description="From address")
    from_name: str = Field(default="Keyhold", description="From display name")
    business_name: str = Field(default="Keyhold", description="Business name used in subjects")
    team_name: str = Field(default="The Keyhold Team", description="Signature in email bodies")
    website: str = Field(
        default="http://localhost:3000",
        description="Web client base URL used to build confirmation links",
    )
    timeout_seconds: int = Field(default=30, ge=1, description="SMTP timeout in seconds")
    max_retry_attempts: int = Field(default=3, ge=1, description="SMTP send attempts")

    @field_validator("website")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Remove trailing slashes from URLs."""
        return v.rstrip("/")


class MessagingSettings(BaseModel):
    """Event transport settings."""

    transport: Literal["in-memory", "redis-streams"] = Field(
        default="in-memory",
        description="Event bus transport",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis URL (redis-streams transport only)",
    )
    stream: str = Field(default="keyhold:events", description="Redis stream key")
    consumer_group: str = Field(default="keyhold-email", description="Consumer group name")
    consumer_name: str = Field(default="keyhold-api-1", description="Consumer name in group")
    block_ms: int = Field(default=5000, ge=0, description="XREADGROUP block timeout (ms)")
    batch_size: int = Field(default=10, ge=1, description="Entries read per XREADGROUP call")
    max_delivery_attempts: int = Field(
        default=3,
        ge=1,
        description="Deliveries of one event to one consumer before giving up",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Configuration precedence:
        1. Environment variables
        2. Default values (only for non-sensitive config)

    Returns:
        Settings: Application configuration loaded from environment.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, production)",
    )
    app_name: str = Field(default="Keyhold API", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    api_v1_prefix: str = Field(default="/api/v1", description="API v1 route prefix")
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL (used for problem type URIs)",
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./keyhold.db",
        description="SQLAlchemy async database URL",
    )
    db_echo: bool = Field(default=False, description="Echo SQL statements")
    create_tables: bool = Field(
        default=True,
        description="Create tables on startup (no migrations are shipped)",
    )

    log_json: bool = Field(default=False, description="Render logs as JSON")
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Deadline after which a request's cancellation token fires",
    )
    bcrypt_rounds: int = Field(default=12, description="Bcrypt cost factor")

    jwt: JwtSettings
    email: EmailSettings = Field(default_factory=EmailSettings)
    messaging: MessagingSettings = Field(default_factory=MessagingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """
        Validate bcrypt rounds are within safe range.

        Raises:
            ValueError: If rounds are not between 10 and 20.
        """
        if not 10 <= v <= 20:
            raise ValueError("bcrypt_rounds must be between 10 and 20")
        return v

    @field_validator("api_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.

    Raises:
        pydantic.ValidationError: If configuration is invalid.
    """
    return Settings()  # type: ignore[call-arg]  # Pydantic Settings loads from env
