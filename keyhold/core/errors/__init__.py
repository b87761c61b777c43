"""Core errors package.

Usage:
    from keyhold.core.errors import DomainError, general_errors, user_errors
"""

from keyhold.core.errors import auth_errors, general_errors, user_errors
from keyhold.core.errors.domain_error import DomainError

__all__ = ["DomainError", "auth_errors", "general_errors", "user_errors"]
