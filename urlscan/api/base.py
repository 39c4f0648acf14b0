"""
Shared plumbing for the REST API groups.

Every call goes through the RequestPipeline; a failed call surfaces as one
UrlScanError subclass, never as a raw status code.
"""

import json
from typing import Any, Mapping, Optional
from urllib.parse import quote

from yarl import URL

from urlscan.config.models import ClientConfig
from urlscan.constants import (
    ACCEPT_JSON,
    API_KEY_HEADER,
    CONTENT_TYPE_JSON,
    USER_AGENT,
)
from urlscan.core import get_logger
from urlscan.core.exceptions import ApiError
from urlscan.http.models import Request, ResponseEnvelope
from urlscan.http.pipeline import RequestPipeline

logger = get_logger(__name__)


def path_param(value: Any) -> str:
    """Quote a value for use as one URL path segment."""
    return quote(str(value), safe="")


def _query_value(value: Any) -> str | int | float:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


class BaseApi:
    """Base class for API groups sharing one pipeline and config."""

    def __init__(self, pipeline: RequestPipeline, config: ClientConfig):
        self._pipeline = pipeline
        self._config = config

    # =========================================================================
    # Request building
    # =========================================================================

    def _build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        url = URL(f"{self._config.base_url}{path}", encoded=True)
        if params:
            query = {k: _query_value(v) for k, v in params.items() if v is not None}
            if query:
                url = url.with_query(query)
        return str(url)

    def _build_request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        accept: str = ACCEPT_JSON,
    ) -> Request:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": accept,
        }
        if self._config.api_key:
            headers[API_KEY_HEADER] = self._config.api_key

        body = None
        if json_body is not None:
            headers["Content-Type"] = CONTENT_TYPE_JSON
            body = json.dumps(json_body).encode("utf-8")

        return Request(method, self._build_url(path, params), headers, body)

    # =========================================================================
    # Execution
    # =========================================================================

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        accept: str = ACCEPT_JSON,
    ) -> ResponseEnvelope:
        """
        Execute a request through the pipeline.

        Raises:
            UrlScanError: The classified failure of the last attempt
            asyncio.CancelledError: The call was cancelled
        """
        request = self._build_request(method, path, params, json_body, accept)
        result = await self._pipeline.execute(request)
        return result.unwrap()

    async def _request_json(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
    ) -> Any:
        envelope = await self._send(method, path, params, json_body)
        try:
            return envelope.json()
        except ValueError as e:
            raise ApiError(
                envelope.status,
                f"Invalid JSON in response from {envelope.url}: {e}",
            ) from e

    async def _get_json(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._request_json("GET", path, params)

    async def _post_json(self, path: str, json_body: Any = None) -> Any:
        return await self._request_json("POST", path, json_body=json_body if json_body is not None else {})

    async def _put_json(self, path: str, json_body: Any = None) -> Any:
        return await self._request_json("PUT", path, json_body=json_body if json_body is not None else {})

    async def _delete(self, path: str) -> ResponseEnvelope:
        return await self._send("DELETE", path)

    async def _get_bytes(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        accept: str = "*/*",
    ) -> bytes:
        envelope = await self._send("GET", path, params, accept=accept)
        return envelope.body

    async def _get_text(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        accept: str = "text/plain",
    ) -> str:
        envelope = await self._send("GET", path, params, accept=accept)
        return envelope.text()


def require(condition: bool, message: str) -> None:
    """Argument check performed before any I/O."""
    if not condition:
        raise ValueError(message)


def unwrap_key(payload: Any, key: str, default: Any = None) -> Any:
    """Pull a wrapped value out of {"key": value} responses."""
    if isinstance(payload, dict):
        return payload.get(key, default)
    return default
