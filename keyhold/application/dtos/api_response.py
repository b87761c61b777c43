"""Uniform success envelope."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, kw_only=True)
class ApiResponse:
    """Success envelope returned by command handlers.

    Attributes:
        message: Human-readable outcome.
        item: Optional payload (e.g. the created account id).
    """

    message: str
    item: Any = None
