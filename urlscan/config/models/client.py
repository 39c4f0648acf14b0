"""
Client Configuration Model.

Read-only settings for one UrlScanClient: endpoint, credential, timeouts,
retry budget and logging toggle.
"""

from typing import Any

import aiohttp
from pydantic import Field, field_validator, model_validator
from yarl import URL

from urlscan.constants import (
    DEFAULT_API_HOST,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_ENABLE_LOGGING,
    DEFAULT_FOLLOW_REDIRECTS,
    DEFAULT_JITTER_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SOCKET_TIMEOUT_MS,
    DEFAULT_TIMEOUT_MS,
    SLOW_RESPONSE_THRESHOLD_MS,
)
from urlscan.retry.policy import RetryConfig

from .base import BaseConfig


class ClientConfig(BaseConfig):
    """
    urlscan client configuration.

    Example:
        >>> config = ClientConfig(api_key="${URLSCAN_API_KEY}", max_retries=5)
        >>> config = config.with_timeout(60_000).with_logging()
    """

    api_key: str = Field(
        default="",
        description="urlscan.io API key, sent in the API-Key header",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL including scheme",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        description="Overall request timeout per attempt (ms)",
    )
    connect_timeout_ms: int = Field(
        default=DEFAULT_CONNECT_TIMEOUT_MS,
        gt=0,
        description="Connection establishment timeout (ms)",
    )
    socket_timeout_ms: int = Field(
        default=DEFAULT_SOCKET_TIMEOUT_MS,
        gt=0,
        description="Timeout between received packets (ms)",
    )
    enable_logging: bool = Field(
        default=DEFAULT_ENABLE_LOGGING,
        description="Log requests, retries and slow responses",
    )
    follow_redirects: bool = Field(
        default=DEFAULT_FOLLOW_REDIRECTS,
        description="Follow 3xx redirects automatically",
    )

    # Retry
    max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES,
        ge=0,
        description="Retries after the first attempt for transient failures",
    )
    base_delay_ms: int = Field(
        default=DEFAULT_BASE_DELAY_MS,
        ge=0,
        description="Backoff before the first retry (ms), doubled per retry",
    )
    max_delay_ms: int = Field(
        default=DEFAULT_MAX_DELAY_MS,
        ge=0,
        description="Cap on exponential backoff (ms)",
    )
    jitter_ms: int = Field(
        default=DEFAULT_JITTER_MS,
        ge=0,
        description="Upper bound of random jitter added to backoff (ms)",
    )
    slow_response_threshold_ms: int = Field(
        default=SLOW_RESPONSE_THRESHOLD_MS,
        gt=0,
        description="Responses slower than this are logged when logging is enabled",
    )

    @model_validator(mode="before")
    @classmethod
    def base_url_from_api_host(cls, data: Any) -> Any:
        """Accept `api_host` as shorthand for an https base_url."""
        if isinstance(data, dict) and "api_host" in data:
            data = dict(data)
            api_host = data.pop("api_host")
            if api_host and "base_url" not in data:
                data["base_url"] = f"https://{api_host}"
        return data

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) scheme and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_timeouts(self) -> "ClientConfig":
        """Timeouts must nest: connect <= socket <= overall."""
        if self.connect_timeout_ms > self.socket_timeout_ms:
            raise ValueError(
                f"Connect timeout ({self.connect_timeout_ms} ms) must be <= "
                f"socket timeout ({self.socket_timeout_ms} ms)"
            )
        if self.socket_timeout_ms > self.timeout_ms:
            raise ValueError(
                f"Socket timeout ({self.socket_timeout_ms} ms) must be <= "
                f"request timeout ({self.timeout_ms} ms)"
            )
        return self

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def api_host(self) -> str:
        """Host part of base_url."""
        return URL(self.base_url).host or DEFAULT_API_HOST

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def retry_config(self) -> RetryConfig:
        """Immutable retry settings handed to the request pipeline."""
        return RetryConfig(
            max_retries=self.max_retries,
            base_delay_ms=self.base_delay_ms,
            max_delay_ms=self.max_delay_ms,
            jitter_ms=self.jitter_ms,
        )

    def client_timeout(self) -> aiohttp.ClientTimeout:
        """Per-attempt aiohttp timeouts."""
        return aiohttp.ClientTimeout(
            total=self.timeout_ms / 1000,
            connect=self.connect_timeout_ms / 1000,
            sock_read=self.socket_timeout_ms / 1000,
        )

    # =========================================================================
    # Copy helpers (each returns a validated copy)
    # =========================================================================

    def _replace(self, **changes: Any) -> "ClientConfig":
        return type(self).model_validate({**self.model_dump(), **changes})

    def with_api_key(self, api_key: str) -> "ClientConfig":
        return self._replace(api_key=api_key)

    def with_logging(self) -> "ClientConfig":
        return self._replace(enable_logging=True)

    def with_timeout(self, timeout_ms: int) -> "ClientConfig":
        """Set the overall timeout; connect gets 1/3 and socket 1/2 of it."""
        return self._replace(
            timeout_ms=timeout_ms,
            connect_timeout_ms=max(1, timeout_ms // 3),
            socket_timeout_ms=max(1, timeout_ms // 2),
        )

    def with_retries(self, count: int) -> "ClientConfig":
        return self._replace(max_retries=count)

    def without_redirects(self) -> "ClientConfig":
        return self._replace(follow_redirects=False)

    def with_base_url(self, url: str) -> "ClientConfig":
        return self._replace(base_url=url)

    def with_connect_timeout(self, timeout_ms: int) -> "ClientConfig":
        return self._replace(connect_timeout_ms=timeout_ms)

    def with_socket_timeout(self, timeout_ms: int) -> "ClientConfig":
        return self._replace(socket_timeout_ms=timeout_ms)
