"""
Retry Policy Unit Tests.

Tests for retry eligibility, backoff, jitter and Retry-After handling.
"""

import random

import pytest

from urlscan.http.models import Attempt, FailureKind
from urlscan.retry import (
    Retry,
    RetryConfig,
    Stop,
    compute_delay_ms,
    decide,
    is_retryable,
    parse_retry_after,
)

from tests.mocks import make_failure, make_response


def attempt_for(outcome, index: int = 0) -> Attempt:
    return Attempt(index=index, outcome=outcome)


class TestRetryConfig:
    """Test RetryConfig."""

    def test_default_config(self):
        config = RetryConfig()
        assert config.max_retries == 3
        assert config.max_attempts == 4
        assert config.base_delay_ms == 1000
        assert config.max_delay_ms == 60_000
        assert config.jitter_ms == 1000

    def test_exponential_backoff(self):
        config = RetryConfig(base_delay_ms=1000, max_delay_ms=60_000)
        assert config.backoff_ms(0) == 1000
        assert config.backoff_ms(1) == 2000
        assert config.backoff_ms(2) == 4000
        assert config.backoff_ms(5) == 32_000

    def test_max_delay_cap(self):
        config = RetryConfig(base_delay_ms=1000, max_delay_ms=60_000)
        # 1000 * 2^6 = 64000, capped at 60000
        assert config.backoff_ms(6) == 60_000
        assert config.backoff_ms(500) == 60_000

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_retries": -1},
            {"base_delay_ms": -1},
            {"max_delay_ms": -5},
            {"jitter_ms": -0.1},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RetryConfig(**kwargs)


class TestParseRetryAfter:
    """Retry-After parsing."""

    def test_seconds(self):
        assert parse_retry_after(make_response(429, headers={"Retry-After": "5"}).headers) == 5

    def test_surrounding_whitespace(self):
        assert parse_retry_after(make_response(429, headers={"Retry-After": " 7 "}).headers) == 7

    @pytest.mark.parametrize("value", ["Wed, 21 Oct 2015 07:28:00 GMT", "-1", "1.5", "soon", ""])
    def test_unusable_values(self, value):
        headers = make_response(429, headers={"Retry-After": value}).headers
        assert parse_retry_after(headers) is None

    def test_missing(self):
        assert parse_retry_after(None) is None
        assert parse_retry_after(make_response(429).headers) is None


class TestIsRetryable:
    """Eligibility rules."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504, 520])
    def test_retryable_statuses(self, status):
        assert is_retryable(attempt_for(make_response(status))) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422])
    def test_client_errors_not_retryable(self, status):
        assert is_retryable(attempt_for(make_response(status))) is False

    @pytest.mark.parametrize("kind", [FailureKind.TIMEOUT, FailureKind.CONNECTION_ERROR])
    def test_transient_failures_retryable(self, kind):
        assert is_retryable(attempt_for(make_failure(kind))) is True

    @pytest.mark.parametrize("kind", [FailureKind.CANCELLED, FailureKind.OTHER])
    def test_other_failures_not_retryable(self, kind):
        assert is_retryable(attempt_for(make_failure(kind))) is False


class TestComputeDelay:
    """Delay computation."""

    def test_retry_after_is_exact(self):
        """Test Retry-After: 5 gives exactly 5000ms, without jitter."""
        attempt = attempt_for(make_response(429, headers={"Retry-After": "5"}))
        config = RetryConfig()

        for seed in range(20):
            assert compute_delay_ms(attempt, 0, config, random.Random(seed)) == 5000

    def test_retry_after_not_capped(self):
        attempt = attempt_for(make_response(503, headers={"Retry-After": "120"}))
        config = RetryConfig(max_delay_ms=60_000)
        assert compute_delay_ms(attempt, 0, config) == 120_000

    @pytest.mark.parametrize("retry_index", range(8))
    def test_backoff_with_jitter_bounds(self, retry_index):
        """Test 503 without Retry-After stays within backoff + jitter."""
        config = RetryConfig(base_delay_ms=1000, max_delay_ms=60_000, jitter_ms=1000)
        attempt = attempt_for(make_response(503), index=retry_index)
        expected = min(1000 * 2 ** retry_index, 60_000)

        rng = random.Random(retry_index)
        for _ in range(50):
            delay = compute_delay_ms(attempt, retry_index, config, rng)
            assert expected <= delay <= expected + 1000

    def test_zero_jitter_is_deterministic(self):
        config = RetryConfig(base_delay_ms=250, jitter_ms=0)
        attempt = attempt_for(make_failure(FailureKind.TIMEOUT))
        assert compute_delay_ms(attempt, 2, config) == 1000

    def test_delay_never_exceeds_max_plus_jitter(self):
        config = RetryConfig(base_delay_ms=500, max_delay_ms=8000, jitter_ms=750)
        rng = random.Random(42)

        for index in range(40):
            attempt = attempt_for(make_response(502), index=index)
            assert compute_delay_ms(attempt, index, config, rng) <= 8000 + 750


class TestDecide:
    """Retry decisions."""

    def test_retry_on_server_error(self):
        decision = decide(attempt_for(make_response(500)), 1, RetryConfig(jitter_ms=0))

        assert isinstance(decision, Retry)
        assert decision.delay_ms == 1000
        assert decision.delay_seconds == 1.0

    def test_stop_on_client_error(self):
        assert isinstance(decide(attempt_for(make_response(400)), 1, RetryConfig()), Stop)

    @pytest.mark.parametrize("status", [401, 403, 404])
    def test_stop_regardless_of_budget(self, status):
        config = RetryConfig(max_retries=10)
        assert isinstance(decide(attempt_for(make_response(status)), 1, config), Stop)

    def test_stop_when_budget_exhausted(self):
        config = RetryConfig(max_retries=2)
        attempt = attempt_for(make_response(503), index=2)
        assert isinstance(decide(attempt, 3, config), Stop)

    def test_no_retries_configured(self):
        config = RetryConfig(max_retries=0)
        assert isinstance(decide(attempt_for(make_failure()), 1, config), Stop)

    def test_backoff_grows_with_attempt_index(self):
        config = RetryConfig(jitter_ms=0)
        delays = [
            decide(attempt_for(make_response(503), index=i), i + 1, config).delay_ms
            for i in range(3)
        ]
        assert delays == [1000, 2000, 4000]
