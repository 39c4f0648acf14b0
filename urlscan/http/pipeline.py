"""
Request Pipeline.

Owns the attempt loop for one logical call: sends through a Transport,
consults the retry policy, sleeps between attempts and produces exactly one
terminal outcome (a successful envelope or one UrlScanError).
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, Optional, Sequence

from urlscan.core import get_logger
from urlscan.core.exceptions import RateLimitError, TransportError, UrlScanError
from urlscan.retry.policy import RETRY_COUNT_HEADER, Retry, RetryConfig, decide, parse_retry_after

from .classifier import classify_response
from .models import Attempt, FailureKind, Request, ResponseEnvelope, TransportFailure
from .transport import Transport

logger = get_logger(__name__)

ResponseHook = Callable[[Request, ResponseEnvelope], None]
SleepFunc = Callable[[float], Awaitable[None]]


@dataclass
class CallResult:
    """Terminal outcome of one logical call."""
    envelope: Optional[ResponseEnvelope] = None
    error: Optional[UrlScanError] = None
    attempts: list[Attempt] = field(default_factory=list)
    total_delay_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.envelope is not None and self.error is None

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    def unwrap(self) -> ResponseEnvelope:
        """Return the envelope or raise the classified error."""
        if self.error is not None:
            raise self.error
        if self.envelope is None:
            raise RuntimeError("CallResult holds neither an envelope nor an error")
        return self.envelope


class SlowResponseLogger:
    """
    Response hook that logs responses slower than a threshold.

    Observation only; it never changes the outcome of a call.
    """

    def __init__(self, threshold_ms: float = 5000.0, log: Optional[logging.Logger] = None):
        self.threshold_ms = threshold_ms
        self._logger = log or logger

    def __call__(self, request: Request, envelope: ResponseEnvelope) -> None:
        elapsed = envelope.elapsed_ms
        if elapsed > self.threshold_ms:
            self._logger.warning(
                f"Slow response: {elapsed:.0f}ms for {request.method} {request.url}"
            )


class RequestPipeline:
    """
    Retrying request executor.

    Stateless across calls apart from its read-only configuration, so one
    pipeline can serve any number of concurrent calls.

    Example:
        >>> pipeline = RequestPipeline(transport, RetryConfig(max_retries=3))
        >>> result = await pipeline.execute(Request("GET", url))
        >>> if result.success:
        ...     data = result.envelope.json()
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[RetryConfig] = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        on_response: Sequence[ResponseHook] = (),
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize RequestPipeline.

        Args:
            transport: Transport performing each attempt
            config: Retry configuration
            sleep: Coroutine used for inter-attempt delays (seconds)
            on_response: Hooks called with every received envelope
            log: Logger override
        """
        self._transport = transport
        self._config = config or RetryConfig()
        self._sleep = sleep
        self._hooks = tuple(on_response)
        self._logger = log or logger

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    async def execute(self, request: Request) -> CallResult:
        """
        Execute a request with retries.

        Returns:
            CallResult holding the envelope (status < 400) or the UrlScanError
            describing the last attempt's real cause.

        Raises:
            asyncio.CancelledError: The call was cancelled; never retried or classified.
        """
        config = self._config
        # Independent jitter source per call
        rng = random.Random()
        result = CallResult()
        attempt_index = 0
        last_retry_after: Optional[int] = None

        while True:
            outgoing = request
            if attempt_index > 0:
                outgoing = request.with_header(RETRY_COUNT_HEADER, attempt_index)

            started = time.monotonic()
            outcome = await self._transport.send(outgoing)
            elapsed_ms = (time.monotonic() - started) * 1000

            attempt = Attempt(index=attempt_index, outcome=outcome, elapsed_ms=elapsed_ms)
            result.attempts.append(attempt)

            if isinstance(outcome, TransportFailure):
                if outcome.kind == FailureKind.CANCELLED:
                    raise asyncio.CancelledError(
                        f"{request.method} {request.url} cancelled: {outcome.cause}"
                    )
            else:
                self._notify(outgoing, outcome)
                if outcome.status < 400:
                    result.envelope = outcome
                    return result
                retry_after = parse_retry_after(outcome.headers)
                if retry_after is not None:
                    last_retry_after = retry_after

            decision = decide(attempt, len(result.attempts), config, rng)

            if not isinstance(decision, Retry):
                result.error = self._terminal_error(request, outcome)
                if (
                    isinstance(result.error, RateLimitError)
                    and result.error.retry_after is None
                ):
                    # Final 429 without Retry-After keeps the last server hint
                    result.error.retry_after = last_retry_after
                if len(result.attempts) > 1:
                    self._logger.error(
                        f"{request.method} {request.url} failed after "
                        f"{len(result.attempts)} attempts: {result.error} "
                        f"attempts={[a.to_dict() for a in result.attempts]}"
                    )
                return result

            self._logger.warning(
                f"Attempt {attempt_index + 1}/{config.max_attempts} for "
                f"{request.method} {request.url} failed ({self._describe(outcome)}). "
                f"Retrying in {decision.delay_seconds:.2f}s..."
            )
            result.total_delay_ms += decision.delay_ms

            # Cancelling the awaiting task interrupts the delay
            await self._sleep(decision.delay_seconds)
            attempt_index += 1

    def _terminal_error(self, request: Request, outcome) -> UrlScanError:
        if isinstance(outcome, TransportFailure):
            return TransportError(
                outcome.kind,
                f"{outcome.kind.value} during {request.method} {request.url}: {outcome.cause}",
                details={"url": request.url},
            )
        if not outcome.url:
            outcome = replace(outcome, url=request.url)
        return classify_response(outcome)

    def _notify(self, request: Request, envelope: ResponseEnvelope) -> None:
        for hook in self._hooks:
            try:
                hook(request, envelope)
            except Exception as e:
                self._logger.warning(f"Response hook {hook!r} failed: {e}")

    @staticmethod
    def _describe(outcome) -> str:
        if isinstance(outcome, TransportFailure):
            return str(outcome)
        return f"HTTP {outcome.status}"
