"""
Retry Module.

Provides the retry policy with exponential backoff, jitter and
Retry-After handling.
"""

from .policy import (
    RETRY_AFTER_HEADER,
    RETRY_COUNT_HEADER,
    RetryConfig,
    Retry,
    Stop,
    RetryDecision,
    compute_delay_ms,
    decide,
    is_retryable,
    parse_retry_after,
)

__all__ = [
    "RETRY_AFTER_HEADER",
    "RETRY_COUNT_HEADER",
    "RetryConfig",
    "Retry",
    "Stop",
    "RetryDecision",
    "compute_delay_ms",
    "decide",
    "is_retryable",
    "parse_retry_after",
]
