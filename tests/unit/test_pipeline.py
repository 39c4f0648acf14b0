"""
Request Pipeline Unit Tests.

Tests for the attempt loop: retries, delays, cancellation and terminal errors.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from urlscan.core.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    TransportError,
)
from urlscan.http.models import FailureKind, Request
from urlscan.http.pipeline import CallResult, RequestPipeline, SlowResponseLogger
from urlscan.retry import RETRY_COUNT_HEADER, RetryConfig

from tests.mocks import MockTransport, make_failure, make_response

URL = "https://urlscan.io/api/v1/quotas"


def get_request() -> Request:
    return Request("GET", URL, {"API-Key": "secret"})


class TestSuccess:
    """Calls that succeed."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self, transport, pipeline, sleeper):
        transport.respond_with(200, json_body={"ok": True})

        result = await pipeline.execute(get_request())

        assert result.success is True
        assert result.envelope.json() == {"ok": True}
        assert result.attempt_count == 1
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_timeout_then_success(self, transport, pipeline, sleeper):
        """Test a timeout followed by 200 succeeds after exactly 2 attempts."""
        transport.queue(make_failure(FailureKind.TIMEOUT), make_response(200, body="{}"))

        result = await pipeline.execute(get_request())

        assert result.success is True
        assert result.attempt_count == 2
        assert transport.call_count == 2
        assert len(sleeper.delays) == 1

    @pytest.mark.asyncio
    async def test_server_error_then_success(self, transport, pipeline):
        transport.queue(make_response(503), make_response(502), make_response(200))

        result = await pipeline.execute(get_request())

        assert result.success is True
        assert [a.outcome.status for a in result.attempts] == [503, 502, 200]

    @pytest.mark.asyncio
    async def test_redirect_status_is_success(self, transport, pipeline):
        transport.respond_with(302, headers={"Location": "https://urlscan.io/"})

        result = await pipeline.execute(get_request())

        assert result.success is True
        assert result.envelope.status == 302


class TestExhaustion:
    """Retry budget exhaustion."""

    @pytest.mark.asyncio
    async def test_server_error_exhausts_retries(self, sleeper):
        """Test max_retries + 1 responses of 500 give ApiError(500)."""
        transport = MockTransport(default=make_response(500, body="boom"))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=3), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert result.success is False
        assert isinstance(result.error, ApiError)
        assert result.error.status_code == 500
        assert result.attempt_count == 4
        assert transport.call_count == 4
        assert len(sleeper.delays) == 3

    @pytest.mark.asyncio
    async def test_rate_limit_surfaced_after_exhaustion(self, sleeper):
        transport = MockTransport(default=make_response(429, headers={"Retry-After": "2"}))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=2), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, RateLimitError)
        assert result.error.retry_after == 2
        assert sleeper.delays == [2.0, 2.0]
        assert result.total_delay_ms == 4000

    @pytest.mark.asyncio
    async def test_connection_errors_exhaust_to_transport_error(self, sleeper):
        transport = MockTransport(default=make_failure(FailureKind.CONNECTION_ERROR, "refused"))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=1), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, TransportError)
        assert result.error.failure_kind == FailureKind.CONNECTION_ERROR
        assert "refused" in result.error.message
        assert result.attempt_count == 2

    @pytest.mark.asyncio
    async def test_error_reflects_last_attempt(self, transport, sleeper):
        transport.queue(make_failure(FailureKind.TIMEOUT), make_response(503, body="maintenance"))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=1), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, ApiError)
        assert result.error.status_code == 503
        assert "maintenance" in result.error.message

    @pytest.mark.asyncio
    async def test_exhaustion_logged_once(self, sleeper):
        log = MagicMock()
        transport = MockTransport(default=make_response(502))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=2), sleep=sleeper, log=log)

        await pipeline.execute(get_request())

        assert log.warning.call_count == 2
        assert log.error.call_count == 1

    @pytest.mark.asyncio
    async def test_exhaustion_log_lists_attempts(self, sleeper):
        log = MagicMock()
        transport = MockTransport(script=[make_response(502), make_failure(FailureKind.TIMEOUT, "read")])
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=1), sleep=sleeper, log=log)

        await pipeline.execute(get_request())

        message = log.error.call_args.args[0]
        assert "'attempt': 0" in message
        assert "'status': 502" in message
        assert "'failure': 'timeout'" in message


class TestNoRetry:
    """Outcomes that stop immediately."""

    @pytest.mark.asyncio
    async def test_bad_request_single_attempt(self, transport, pipeline, sleeper):
        transport.respond_with(400, body="invalid url")

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, ApiError)
        assert result.error.status_code == 400
        assert result.attempt_count == 1
        assert sleeper.delays == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_type",
        [(401, AuthenticationError), (403, AuthenticationError), (404, NotFoundError)],
    )
    async def test_never_retried(self, status, error_type, sleeper):
        transport = MockTransport(default=make_response(status))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=10), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, error_type)
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_other_transport_failure_not_retried(self, transport, pipeline):
        transport.queue(make_failure(FailureKind.OTHER, "TLS handshake failed"))

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, TransportError)
        assert result.error.failure_kind == FailureKind.OTHER
        assert transport.call_count == 1


class TestDelays:
    """Inter-attempt delays."""

    @pytest.mark.asyncio
    async def test_retry_after_honored(self, transport, pipeline, sleeper):
        transport.queue(make_response(429, headers={"Retry-After": "5"}), make_response(200))

        result = await pipeline.execute(get_request())

        assert result.success is True
        assert sleeper.delays_ms == [5000]

    @pytest.mark.asyncio
    async def test_last_retry_after_kept_on_exhaustion(self, sleeper):
        transport = MockTransport(script=[
            make_response(429, headers={"Retry-After": "5"}),
            make_response(429),
        ])
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=1), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert isinstance(result.error, RateLimitError)
        assert result.error.retry_after == 5
        assert "(retry after 5s)" in str(result.error)
        assert sleeper.delays_ms == [5000]

    @pytest.mark.asyncio
    async def test_final_retry_after_wins(self, sleeper):
        transport = MockTransport(script=[
            make_response(429, headers={"Retry-After": "5"}),
            make_response(429, headers={"Retry-After": "9"}),
        ])
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=1), sleep=sleeper)

        result = await pipeline.execute(get_request())

        assert result.error.retry_after == 9

    @pytest.mark.asyncio
    async def test_backoff_within_bounds(self, sleeper):
        transport = MockTransport(default=make_response(503))
        config = RetryConfig(max_retries=4, base_delay_ms=100, max_delay_ms=400, jitter_ms=50)
        pipeline = RequestPipeline(transport, config, sleep=sleeper)

        result = await pipeline.execute(get_request())

        for index, delay in enumerate(sleeper.delays_ms):
            expected = min(100 * 2 ** index, 400)
            assert expected <= delay <= expected + 50
        assert result.total_delay_ms == pytest.approx(sum(sleeper.delays_ms))


class TestRetryHeader:
    """X-Retry-Count header."""

    @pytest.mark.asyncio
    async def test_retry_count_header(self, transport, pipeline):
        transport.queue(make_response(500), make_response(500), make_response(200))

        await pipeline.execute(get_request())

        first, second, third = transport.requests
        assert RETRY_COUNT_HEADER not in first.headers
        assert second.headers[RETRY_COUNT_HEADER] == "1"
        assert third.headers[RETRY_COUNT_HEADER] == "2"
        # Original headers survive
        assert third.headers["API-Key"] == "secret"


class TestCancellation:
    """Cancellation propagates and is never retried."""

    @pytest.mark.asyncio
    async def test_cancel_during_retry_delay(self):
        """Test cancelling during the delay after a 429 raises CancelledError."""
        transport = MockTransport(default=make_response(429, headers={"Retry-After": "3600"}))
        pipeline = RequestPipeline(transport, RetryConfig(max_retries=3))

        task = asyncio.create_task(pipeline.execute(get_request()))
        while transport.call_count == 0:
            await asyncio.sleep(0)
        await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_cancelled_transport_failure(self, transport, pipeline):
        transport.queue(make_failure(FailureKind.CANCELLED, "shutdown"))

        with pytest.raises(asyncio.CancelledError):
            await pipeline.execute(get_request())
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_cancelled_error_from_transport_propagates(self, transport, pipeline):
        transport.queue(asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await pipeline.execute(get_request())


class TestResponseHooks:
    """on_response hooks."""

    @pytest.mark.asyncio
    async def test_hook_sees_every_response(self, transport, sleeper):
        hook = MagicMock()
        transport.queue(make_response(503), make_response(200))
        pipeline = RequestPipeline(transport, RetryConfig(), sleep=sleeper, on_response=[hook])

        await pipeline.execute(get_request())

        assert hook.call_count == 2
        request, envelope = hook.call_args.args
        assert request.headers[RETRY_COUNT_HEADER] == "1"
        assert envelope.status == 200

    @pytest.mark.asyncio
    async def test_failing_hook_does_not_change_outcome(self, transport, sleeper):
        log = MagicMock()
        hook = MagicMock(side_effect=RuntimeError("hook broke"))
        transport.respond_with(200)
        pipeline = RequestPipeline(transport, sleep=sleeper, on_response=[hook], log=log)

        result = await pipeline.execute(get_request())

        assert result.success is True
        log.warning.assert_called_once()

    def test_slow_response_logger(self):
        log = MagicMock()
        hook = SlowResponseLogger(threshold_ms=5000, log=log)

        hook(get_request(), make_response(200, elapsed_ms=6000))
        hook(get_request(), make_response(200, elapsed_ms=100))

        log.warning.assert_called_once()
        assert "6000ms" in log.warning.call_args.args[0]


class TestCallResult:
    """CallResult helpers."""

    def test_unwrap_raises_error(self):
        result = CallResult(error=ApiError(500, "boom"))
        with pytest.raises(ApiError):
            result.unwrap()

    def test_unwrap_returns_envelope(self):
        envelope = make_response(200)
        assert CallResult(envelope=envelope).unwrap() is envelope

    def test_unwrap_empty_result(self):
        with pytest.raises(RuntimeError):
            CallResult().unwrap()


class TestConcurrency:
    """One pipeline shared by concurrent calls."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self, sleeper):
        transport = MockTransport(default=make_response(200, body="{}"))
        pipeline = RequestPipeline(transport, sleep=sleeper)

        results = await asyncio.gather(*(pipeline.execute(get_request()) for _ in range(10)))

        assert all(r.success for r in results)
        assert all(r.attempt_count == 1 for r in results)
        assert transport.call_count == 10
