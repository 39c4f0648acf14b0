"""
Core module for the urlscan client.

Provides logging utilities and the typed error family.
"""

from .logger import setup_logger, get_logger, sanitize_headers
from .exceptions import (
    ErrorKind,
    UrlScanError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ApiError,
    TransportError,
)

__all__ = [
    # Logging
    "setup_logger",
    "get_logger",
    "sanitize_headers",
    # Errors
    "ErrorKind",
    "UrlScanError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ApiError",
    "TransportError",
]
