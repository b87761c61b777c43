"""Core enums package.

Usage:
    from keyhold.core.enums import ErrorKind, Environment
"""

from keyhold.core.enums.environment import Environment
from keyhold.core.enums.error_kind import ErrorKind

__all__ = ["ErrorKind", "Environment"]
