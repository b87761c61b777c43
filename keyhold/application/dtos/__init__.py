"""Handler response DTOs."""

from keyhold.application.dtos.account_dtos import UserAccountResponse, UserSessionResponse
from keyhold.application.dtos.api_response import ApiResponse
from keyhold.application.dtos.audit_dtos import AuditTrailResponse

__all__ = ["ApiResponse", "AuditTrailResponse", "UserAccountResponse", "UserSessionResponse"]
