"""Result types for railway-oriented programming.

This module implements the Result pattern to handle operations that can fail
without using exceptions. This approach makes error handling explicit and
testable.

A Failure always carries at least one error. Validation and repository
layers may report several errors at once; most callers only need the
first one, exposed as ``Failure.error``.

Usage:
    def find(user_id: UUID) -> Result[UserAccount, DomainError]:
        if user_id not in store:
            return Failure(errors=(user_errors.user_not_found(),))
        return Success(value=store[user_id])

    match find(user_id):
        case Success(value=account):
            print(account.email)
        case Failure(errors=errors):
            print([e.code for e in errors])
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        errors: Non-empty tuple of errors that occurred.

    Raises:
        ValueError: If constructed without any error.
    """

    errors: tuple[E, ...]

    def __post_init__(self) -> None:
        if not self.errors:
            raise ValueError("Failure requires at least one error")

    @property
    def error(self) -> E:
        """First (primary) error."""
        return self.errors[0]

    @classmethod
    def of(cls, *errors: E) -> "Failure[E]":
        """Build a Failure from positional errors.

        Example:
            >>> Failure.of(user_errors.user_not_found())
        """
        return cls(errors=tuple(errors))


# Type alias for Result union
type Result[T, E] = Success[T] | Failure[E]
