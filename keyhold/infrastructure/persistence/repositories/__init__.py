"""Repository adapters."""

from keyhold.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from keyhold.infrastructure.persistence.repositories.audit_repository import AuditRepository

__all__ = ["AccountRepository", "AuditRepository"]
