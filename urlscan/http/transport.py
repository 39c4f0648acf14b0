"""
Transport adapters.

A transport performs exactly one network call per send() and reports either a
ResponseEnvelope or a TransportFailure. It never retries and never classifies.
"""

import asyncio
import time
from typing import Optional, Protocol, Union, runtime_checkable

import aiohttp

from urlscan.core import get_logger, sanitize_headers

from .models import FailureKind, Request, ResponseEnvelope, TransportFailure

logger = get_logger(__name__)

# Upper bound on reading an error body; classification must not hang on it
ERROR_BODY_READ_TIMEOUT = 5.0


@runtime_checkable
class Transport(Protocol):
    """Contract for the component performing one HTTP attempt."""

    async def send(self, request: Request) -> Union[ResponseEnvelope, TransportFailure]:
        """Send the request once and report the outcome."""
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...


class AiohttpTransport:
    """
    aiohttp-backed transport.

    Owns a pooled ClientSession, created lazily and closed with close().
    Per-attempt timeouts come from the ClientTimeout given at construction.

    Example:
        >>> async with AiohttpTransport(timeout=aiohttp.ClientTimeout(total=30)) as transport:
        ...     outcome = await transport.send(Request("GET", "https://urlscan.io/api/v1/quotas"))
    """

    def __init__(
        self,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        headers: Optional[dict[str, str]] = None,
        follow_redirects: bool = False,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize AiohttpTransport.

        Args:
            timeout: aiohttp timeouts (total / connect / sock_read)
            headers: Default headers sent with every request
            follow_redirects: Whether 3xx responses are followed
            session: Pre-built session (not closed by this transport)
        """
        self._timeout = timeout or aiohttp.ClientTimeout(total=30)
        self._headers = dict(headers or {})
        self._follow_redirects = follow_redirects
        self._session = session
        self._owns_session = session is None

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def connect(self) -> None:
        """Create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers=self._headers,
            )
            self._owns_session = True
            logger.debug("HTTP session created")

    async def close(self) -> None:
        """Close HTTP session."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP session closed")
        self._session = None

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def __aenter__(self) -> "AiohttpTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Sending
    # =========================================================================

    async def send(self, request: Request) -> Union[ResponseEnvelope, TransportFailure]:
        """
        Perform one HTTP call.

        asyncio.CancelledError is never caught: cancellation propagates.
        """
        if self.closed:
            await self.connect()

        logger.debug(
            f"Request: {request.method} {request.url} "
            f"headers={sanitize_headers(request.headers)}"
        )

        sent_at = time.monotonic()
        try:
            async with self._session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                data=request.body,
                allow_redirects=self._follow_redirects,
            ) as resp:
                body, body_error = await self._read_body(resp)
                received_at = time.monotonic()
                logger.debug(f"Response: {resp.status} {request.method} {request.url}")
                return ResponseEnvelope(
                    status=resp.status,
                    headers=resp.headers,
                    body=body,
                    url=str(resp.url),
                    sent_at=sent_at,
                    received_at=received_at,
                    reason=resp.reason or "",
                    body_error=body_error,
                )

        except (asyncio.TimeoutError, aiohttp.ServerTimeoutError) as e:
            return TransportFailure(FailureKind.TIMEOUT, str(e) or "request timed out")

        except aiohttp.ClientConnectionError as e:
            return TransportFailure(FailureKind.CONNECTION_ERROR, str(e) or type(e).__name__)

        except aiohttp.ClientError as e:
            return TransportFailure(FailureKind.OTHER, str(e) or type(e).__name__)

    async def _read_body(self, resp: aiohttp.ClientResponse) -> tuple[bytes, Optional[str]]:
        """
        Read the response body.

        Success bodies are the payload, so read failures propagate and become
        transport failures. Error bodies are only used for messages: the read
        is bounded and failures are recorded instead of raised.
        """
        if resp.status < 400:
            return await resp.read(), None

        try:
            return await asyncio.wait_for(resp.read(), timeout=ERROR_BODY_READ_TIMEOUT), None
        except asyncio.CancelledError:
            raise
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            return b"", f"failed to read error body: {str(e) or type(e).__name__}"
