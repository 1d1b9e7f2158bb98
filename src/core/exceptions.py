"""Custom exceptions for the BetterSide platform.

Every application error carries the HTTP status and the machine-readable
``code`` that the API error body exposes.
"""
from __future__ import annotations

from typing import Dict, Optional


class BetterSideError(Exception):
    """Base exception for all application errors."""

    status_code = 500
    code = "SERVER_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, object]:
        return {"error": self.message, "code": self.code}


# =============================================================================
# Request Errors
# =============================================================================


class ValidationError(BetterSideError):
    """Raised when input is malformed or a required field is missing.

    ``fields`` maps each offending field to its message so the caller sees
    every violation in a single response.
    """

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", fields: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.fields = dict(fields or {})

    @classmethod
    def from_fields(cls, fields: Dict[str, str]) -> "ValidationError":
        summary = "; ".join(f"{name}: {msg}" for name, msg in fields.items())
        return cls(f"Validation failed: {summary}", fields)

    def to_body(self) -> Dict[str, object]:
        body = super().to_body()
        if self.fields:
            body["fields"] = self.fields
        return body


class UnauthorizedError(BetterSideError):
    """Raised when no valid session accompanies the request."""

    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ForbiddenError(BetterSideError):
    """Raised when the principal has the wrong role or does not own the row."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFoundError(BetterSideError):
    """Raised when a requested row does not exist (or is hidden from the caller)."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class ConflictError(BetterSideError):
    """Raised when a unique business key already exists."""

    status_code = 409
    code = "CONFLICT"


# =============================================================================
# Server Errors
# =============================================================================


class ConfigurationError(BetterSideError):
    """Raised when required configuration is missing or unsupported."""

    pass


__all__ = [
    "BetterSideError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ConfigurationError",
]
