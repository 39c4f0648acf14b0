"""
Custom exceptions for the urlscan client.

Exception hierarchy (closed, every class carries an ErrorKind tag):
    UrlScanError (base)
    ├── AuthenticationError   401 / 403
    ├── NotFoundError         404
    ├── RateLimitError        429 (retries exhausted)
    ├── ApiError              other 4xx / 5xx
    └── TransportError        network-level failure

Cancellation is never represented here: it surfaces as asyncio.CancelledError.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Tag identifying which failure a UrlScanError represents."""
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    API_ERROR = "api_error"
    TRANSPORT = "transport"


class UrlScanError(Exception):
    """Base exception for all urlscan client errors."""

    default_message = "urlscan error occurred"
    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"[{self.code}]")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )


class AuthenticationError(UrlScanError):
    """API key is invalid, missing, or lacks permissions."""

    default_message = "Invalid or missing API key"
    kind = ErrorKind.AUTHENTICATION


class NotFoundError(UrlScanError):
    """Requested resource (scan result, saved search, ...) not found."""

    default_message = "Resource not found"
    kind = ErrorKind.NOT_FOUND


class RateLimitError(UrlScanError):
    """Rate limit exceeded and retries exhausted."""

    default_message = "Rate limit exceeded"
    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str | None = None,
        retry_after: Optional[int] = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
        # Server-supplied wait in seconds, never a computed backoff
        self.retry_after = retry_after

    def __str__(self) -> str:
        base = super().__str__()
        if self.retry_after is None:
            return base
        return f"{base} (retry after {self.retry_after}s)"


class ApiError(UrlScanError):
    """Any other HTTP error response."""

    default_message = "API error occurred"
    kind = ErrorKind.API_ERROR

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code or str(status_code), details)
        self.status_code = status_code


class TransportError(UrlScanError):
    """No response could be obtained (timeout, connection refused, DNS, TLS)."""

    default_message = "Transport failure"
    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        failure_kind: Any,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
        # urlscan.http.models.FailureKind
        self.failure_kind = failure_kind

    def __str__(self) -> str:
        base = super().__str__()
        kind = getattr(self.failure_kind, "value", self.failure_kind)
        return f"{base} (kind={kind})"
