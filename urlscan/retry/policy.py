"""
Retry Policy.

Decides, per attempt, whether a call should be retried and after how long.
Pure: no I/O, no sleeping, no state kept between calls.
"""

import random
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from urlscan.http.models import Attempt, FailureKind, ResponseEnvelope, TransportFailure

RETRY_AFTER_HEADER = "Retry-After"
RETRY_COUNT_HEADER = "X-Retry-Count"

# Transport failures assumed to be transient
RETRYABLE_FAILURES = frozenset({FailureKind.TIMEOUT, FailureKind.CONNECTION_ERROR})

# Always-retryable statuses, checked before the generic 4xx rule
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        base_delay_ms: Backoff for the first retry, doubled for each further retry
        max_delay_ms: Cap applied to the exponential backoff (before jitter)
        jitter_ms: Upper bound of the uniform random delay added to backoff
    """
    max_retries: int = 3
    base_delay_ms: float = 1000.0
    max_delay_ms: float = 60_000.0
    jitter_ms: float = 1000.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay_ms < 0 or self.max_delay_ms < 0 or self.jitter_ms < 0:
            raise ValueError("retry delays must be non-negative")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_ms(self, retry_index: int) -> float:
        """
        Exponential backoff without jitter.

        Args:
            retry_index: 0 for the first retry, incrementing per retry

        Returns:
            min(base_delay_ms * 2^retry_index, max_delay_ms)
        """
        # Cap the exponent to avoid float overflow on absurd indexes
        exponent = min(max(retry_index, 0), 62)
        return min(self.base_delay_ms * (2 ** exponent), self.max_delay_ms)


@dataclass(frozen=True)
class Retry:
    """Retry the call after delay_ms milliseconds."""
    delay_ms: float

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000


@dataclass(frozen=True)
class Stop:
    """Stop retrying and surface the outcome."""
    pass


RetryDecision = Union[Retry, Stop]


def parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    """
    Parse a Retry-After header expressed in whole seconds.

    HTTP-date values and anything that is not a non-negative integer are
    treated as absent.
    """
    if not headers:
        return None
    value = headers.get(RETRY_AFTER_HEADER)
    if value is None:
        return None
    value = str(value).strip()
    if not value.isdigit():
        return None
    return int(value)


def is_retryable(attempt: Attempt) -> bool:
    """Eligibility rules, ignoring the attempt budget."""
    outcome = attempt.outcome

    if isinstance(outcome, TransportFailure):
        return outcome.kind in RETRYABLE_FAILURES

    status = outcome.status
    if status in RETRYABLE_STATUS_CODES:
        return True
    if 400 <= status <= 499:
        # Client errors are not transient
        return False
    return status >= 500


def compute_delay_ms(
    attempt: Attempt,
    retry_index: int,
    config: RetryConfig,
    rng: Optional[random.Random] = None,
) -> float:
    """Delay before the next attempt: server Retry-After wins, else backoff + jitter."""
    outcome = attempt.outcome
    if isinstance(outcome, ResponseEnvelope):
        retry_after = parse_retry_after(outcome.headers)
        if retry_after is not None:
            return float(retry_after * 1000)

    rng = rng or random.Random()
    jitter = rng.uniform(0, config.jitter_ms) if config.jitter_ms else 0.0
    return config.backoff_ms(retry_index) + jitter


def decide(
    attempt: Attempt,
    attempts_so_far: int,
    config: RetryConfig,
    rng: Optional[random.Random] = None,
) -> RetryDecision:
    """
    Decide whether to retry after the given attempt.

    Args:
        attempt: The attempt just completed
        attempts_so_far: Attempts made in this call, including this one
        config: Retry configuration
        rng: Per-call random source used for jitter

    Returns:
        Retry(delay_ms) or Stop()

    Example:
        >>> decision = decide(attempt, 1, RetryConfig())
        >>> if isinstance(decision, Retry):
        ...     await asyncio.sleep(decision.delay_seconds)
    """
    if attempts_so_far >= config.max_attempts:
        return Stop()

    if not is_retryable(attempt):
        return Stop()

    # attempt.index == 0 means this would be the first retry
    return Retry(compute_delay_ms(attempt, attempt.index, config, rng))
