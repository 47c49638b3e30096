"""
Error taxonomy.

Every failure a lifecycle call can hit maps to one of these, so callers
can tell a bad local attribute from a remote rejection.
ValidationError is raised before any request leaves the process.
APIError carries the HTTP status and raw body for diagnostics.
"""

from __future__ import annotations

from typing import Any, Optional


class JumpServerError(Exception):
    """Base class for all JumpServer resource exceptions."""


class ConfigurationError(JumpServerError):
    """Raised when required connection parameters are missing."""


class AuthenticationError(JumpServerError):
    """Raised when the token exchange fails or returns no token."""


class ValidationError(JumpServerError):
    """Raised when a local attribute check fails before any network call."""

    def __init__(self, field: str, value: Any, reason: str = "is invalid") -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field} {value!r} {reason}")


class TransportError(JumpServerError):
    """Raised when the API cannot be reached."""


class APIError(JumpServerError):
    """Raised on an unexpected HTTP status."""

    def __init__(self, status_code: int, body: str, action: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.action = action
        prefix = f"{action}: " if action else ""
        super().__init__(f"{prefix}unexpected status {status_code}, response: {body[:300]}")


class DecodeError(JumpServerError):
    """Raised when a response body is not JSON or lacks an expected field."""
