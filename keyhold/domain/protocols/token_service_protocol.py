"""Token service protocol (access and refresh tokens)."""

from typing import Any, Protocol
from uuid import UUID

from keyhold.core.errors import DomainError
from keyhold.core.result import Result


class TokenServiceProtocol(Protocol):
    def generate_access_token(
        self,
        user_id: UUID,
        email: str,
        roles: list[str],
        session_id: UUID | None = None,
    ) -> str:
        ...

    def generate_refresh_token(self) -> str:
        ...

    def validate_access_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Validate signature, expiry, issuer and audience."""
        ...

    def read_expired_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Validate signature, issuer and audience but ignore expiry.

        Used by the refresh flow, where the access token is expected to
        have expired.
        """
        ...
