"""
HTTP data model shared by the transport, retry policy and pipeline.

All values are immutable once created; a retried request is a new Request.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional, Union

from multidict import CIMultiDict, CIMultiDictProxy


def freeze_headers(headers: Optional[Mapping[str, str]] = None) -> CIMultiDictProxy:
    """Build a read-only, case-insensitive header mapping with unique keys."""
    merged: CIMultiDict = CIMultiDict()
    for key, value in (headers or {}).items():
        # Later keys win, so "api-key" and "API-Key" collapse to one entry
        merged[key] = str(value)
    return CIMultiDictProxy(merged)


class FailureKind(str, Enum):
    """Why a transport could not produce a response."""
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    CANCELLED = "cancelled"
    OTHER = "other"


@dataclass(frozen=True)
class Request:
    """A fully-formed HTTP request."""
    method: str
    url: str
    headers: CIMultiDictProxy = field(default_factory=freeze_headers)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        if not isinstance(self.headers, CIMultiDictProxy):
            object.__setattr__(self, "headers", freeze_headers(self.headers))

    def with_header(self, name: str, value: Any) -> "Request":
        """Return a copy with one header set (replacing any existing value)."""
        headers = CIMultiDict(self.headers)
        headers[name] = str(value)
        return replace(self, headers=CIMultiDictProxy(headers))


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    One HTTP response as seen by the pipeline.

    Attributes:
        status: HTTP status code
        headers: Case-insensitive response headers
        body: Raw body bytes (empty when not read)
        url: Final request URL
        sent_at: Monotonic timestamp when the request was sent (seconds)
        received_at: Monotonic timestamp when the response arrived (seconds)
        reason: HTTP reason phrase, if the transport knows it
        body_error: Description of a failed body read, if any
    """
    status: int
    headers: CIMultiDictProxy = field(default_factory=freeze_headers)
    body: bytes = b""
    url: str = ""
    sent_at: float = 0.0
    received_at: float = 0.0
    reason: str = ""
    body_error: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CIMultiDictProxy):
            object.__setattr__(self, "headers", freeze_headers(self.headers))

    @property
    def elapsed_ms(self) -> float:
        return max(0.0, (self.received_at - self.sent_at) * 1000)

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def json(self) -> Any:
        if not self.body:
            return None
        return json.loads(self.body)


@dataclass(frozen=True)
class TransportFailure:
    """A transport-level failure: no response envelope was obtainable."""
    kind: FailureKind
    cause: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.cause}" if self.cause else self.kind.value


Outcome = Union[ResponseEnvelope, TransportFailure]


@dataclass(frozen=True)
class Attempt:
    """One request/response (or request/failure) cycle within a call."""
    index: int
    outcome: Outcome
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Diagnostic summary for logging."""
        if isinstance(self.outcome, TransportFailure):
            result = {"failure": self.outcome.kind.value, "cause": self.outcome.cause}
        else:
            result = {"status": self.outcome.status}
        return {"attempt": self.index, "elapsed_ms": round(self.elapsed_ms, 1), **result}
