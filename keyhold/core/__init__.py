"""Core shared kernel.

This module provides foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Error kinds and domain error factories
- Cancellation tokens propagated through suspending calls

The core module has NO dependencies on other application layers.
"""

from keyhold.core.cancellation import CancellationToken, OperationCancelledError
from keyhold.core.enums import ErrorKind
from keyhold.core.errors import DomainError
from keyhold.core.result import Failure, Result, Success

__all__ = [
    "CancellationToken",
    "DomainError",
    "ErrorKind",
    "Failure",
    "OperationCancelledError",
    "Result",
    "Success",
]
