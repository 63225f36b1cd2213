"""
Shared error handling for the user-type access layer.
"""

from enum import Enum
from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Closed set of error classifications surfaced to callers."""
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN = "UNKNOWN"


# Retrying cannot change the outcome for these.
TERMINAL_ERROR_CODES = frozenset({ErrorCode.UNAUTHORIZED, ErrorCode.NOT_FOUND})


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for the access layer."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.code not in TERMINAL_ERROR_CODES

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        code = self.code.value if isinstance(self.code, ErrorCode) else str(self.code)
        return ErrorResponse(code=code, message=self.message, details=self.details)


class UserTypeError(AccessLayerException):
    """Failure resolving a user's plan tier or roles."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code, message, details)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        code = self.code.value if isinstance(self.code, ErrorCode) else str(self.code)
        return f"UserTypeError(code={code!r}, message={self.message!r})"


class UnauthorizedError(UserTypeError):
    """The caller is not allowed to read this user's data."""

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.UNAUTHORIZED, details=details)


class NotFoundError(UserTypeError):
    """The requested user or resource does not exist."""

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details=details)


def classify_exception(exc: BaseException) -> UserTypeError:
    """Return ``exc`` as a classified error, wrapping it as UNKNOWN if needed."""
    if isinstance(exc, UserTypeError):
        return exc
    if isinstance(exc, AccessLayerException):
        try:
            code = ErrorCode(exc.code)
        except ValueError:
            code = ErrorCode.UNKNOWN
        return UserTypeError(exc.message, code, cause=exc, details=exc.details)
    return UserTypeError(str(exc) or exc.__class__.__name__, ErrorCode.UNKNOWN, cause=exc)
