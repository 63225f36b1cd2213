"""
Explicit success-or-failure values for fallible operations.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from shared.errors import ErrorCode, UserTypeError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a classified error, never both."""
    value: Optional[T] = None
    error: Optional[UserTypeError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: UserTypeError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
