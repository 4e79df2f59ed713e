"""Domain exceptions for NoteVault.

Services raise these instead of HTTP errors; the API layer maps each kind onto
a status code (see ``notevault.main``). Unauthorized access to a note is never
reported as such: it is raised as ``NotFoundError`` so callers cannot probe for
the existence of notes, shares or links they do not own.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Lookup errors (1xxx)
    NOTE_NOT_FOUND = 1001
    USER_NOT_FOUND = 1002
    SHARE_NOT_FOUND = 1003
    PUBLIC_LINK_NOT_FOUND = 1004

    # Uniqueness errors (2xxx)
    CONFLICT = 2000
    EMAIL_TAKEN = 2001
    SHARE_EXISTS = 2002
    TAG_EXISTS = 2003
    TOKEN_EXHAUSTED = 2004

    # Disallowed operations (3xxx)
    INVALID_OPERATION = 3000
    SELF_SHARE = 3001

    # Field validation (4xxx)
    VALIDATION_FAILED = 4000

    # Auth (5xxx)
    INVALID_CREDENTIALS = 5001
    INVALID_REFRESH_TOKEN = 5002


class NoteVaultError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class NotFoundError(NoteVaultError):
    """Entity absent, or the caller may not know it exists."""

    def __init__(
        self,
        message: str = "Not found",
        code: ErrorCode = ErrorCode.NOTE_NOT_FOUND,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details)


class ConflictError(NoteVaultError):
    """Uniqueness violation (email, tag label, token, share pair)."""

    def __init__(
        self,
        message: str = "Conflict",
        code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details)


class InvalidOperationError(NoteVaultError):
    """Semantically disallowed request, e.g. sharing a note with its owner."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_OPERATION,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details)


class ValidationError(NoteVaultError):
    """A field violates its constraints."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]
        super().__init__(message, code=ErrorCode.VALIDATION_FAILED, details=details)
        self.field = field


class AuthenticationError(NoteVaultError):
    """Credentials or refresh token rejected."""

    def __init__(self, message: str = "Invalid credentials", code: ErrorCode = ErrorCode.INVALID_CREDENTIALS):
        super().__init__(message, code=code)
