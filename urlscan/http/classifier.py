"""
Error Classifier.

Maps an error-class HTTP response onto the typed UrlScanError family.
Never raises and performs no I/O: the body has already been read (or its
read failure recorded) by the transport.
"""

from http import HTTPStatus
from typing import Mapping, Optional

from urlscan.core.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    UrlScanError,
)
from urlscan.retry.policy import parse_retry_after

from .models import ResponseEnvelope

# Bound on how much of an error body ends up in a message
MAX_DETAIL_CHARS = 2048


def _reason_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"HTTP {status}"


def extract_detail(
    status: int,
    body: Optional[bytes],
    body_error: Optional[str] = None,
    reason: str = "",
) -> str:
    """
    Best-effort, bounded detail string for an error response.

    Falls back to the body read failure description, then the reason phrase.
    """
    if body_error:
        return body_error
    if body:
        try:
            text = bytes(body[: MAX_DETAIL_CHARS * 4]).decode("utf-8", errors="replace").strip()
        except Exception as e:  # malformed buffer types
            return str(e) or (reason or _reason_phrase(status))
        if text:
            if len(text) > MAX_DETAIL_CHARS:
                text = text[:MAX_DETAIL_CHARS] + "..."
            return text
    return reason or _reason_phrase(status)


def classify(
    status: int,
    body: Optional[bytes] = None,
    headers: Optional[Mapping[str, str]] = None,
    *,
    url: str = "",
    body_error: Optional[str] = None,
    reason: str = "",
) -> UrlScanError:
    """
    Classify an error response (status >= 400) into a UrlScanError.

    Args:
        status: HTTP status code
        body: Response body bytes, if read
        headers: Response headers (Retry-After is honored for 429)
        url: Target URL, included in messages
        body_error: Description of a failed body read
        reason: HTTP reason phrase

    Returns:
        The matching UrlScanError subclass instance
    """
    details = {"status": status}
    if url:
        details["url"] = url

    if status in (401, 403):
        return AuthenticationError(
            f"Invalid or missing API key for {url}",
            code=str(status),
            details=details,
        )

    if status == 404:
        detail = extract_detail(status, body, body_error, reason)
        return NotFoundError(
            f"Resource not found: {url} - {detail}",
            code="404",
            details=details,
        )

    if status == 429:
        return RateLimitError(
            f"Rate limit exceeded for {url}",
            retry_after=parse_retry_after(headers),
            code="429",
            details=details,
        )

    if status == 400:
        detail = extract_detail(status, body, body_error, reason)
        return ApiError(400, f"Bad request to {url}: {detail}", details=details)

    if 500 <= status <= 599:
        detail = extract_detail(status, body, body_error, reason)
        return ApiError(
            status,
            f"Server error ({status}) for {url}: {detail}",
            details=details,
        )

    detail = reason or _reason_phrase(status)
    return ApiError(status, f"API error ({status}) for {url}: {detail}", details=details)


def classify_response(envelope: ResponseEnvelope) -> UrlScanError:
    """Classify a response envelope."""
    return classify(
        envelope.status,
        envelope.body,
        envelope.headers,
        url=envelope.url,
        body_error=envelope.body_error,
        reason=envelope.reason,
    )
