"""
Pytest configuration and fixtures for urlscan client tests.
"""

import pytest

from urlscan.config import ClientConfig
from urlscan.http.pipeline import RequestPipeline
from urlscan.retry import RetryConfig

from tests.mocks import MockTransport


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def delays_ms(self) -> list[float]:
        return [round(d * 1000, 6) for d in self.delays]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(max_retries=3, base_delay_ms=1000, max_delay_ms=60_000, jitter_ms=1000)


@pytest.fixture
def pipeline(transport, retry_config, sleeper) -> RequestPipeline:
    return RequestPipeline(transport, retry_config, sleep=sleeper)


@pytest.fixture
def client_config() -> ClientConfig:
    """Config pointing at a test host with retries disabled."""
    return ClientConfig(
        api_key="test-api-key",
        base_url="https://urlscan.test",
        max_retries=0,
    )
