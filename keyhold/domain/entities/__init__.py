"""Domain entities."""

from keyhold.domain.entities.audit_trail import AuditAction, AuditTrail
from keyhold.domain.entities.user_account import UserAccount, UserRole
from keyhold.domain.entities.user_session import UserSession

__all__ = ["AuditAction", "AuditTrail", "UserAccount", "UserRole", "UserSession"]
