"""SQLAlchemy models."""

from keyhold.infrastructure.persistence.models.audit_trail import AuditTrailModel
from keyhold.infrastructure.persistence.models.user_account import UserAccountModel
from keyhold.infrastructure.persistence.models.user_session import UserSessionModel

__all__ = ["AuditTrailModel", "UserAccountModel", "UserSessionModel"]
