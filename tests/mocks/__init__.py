"""Mock transport for testing."""

from .transport_mock import MockTransport, make_failure, make_response

__all__ = [
    "MockTransport",
    "make_failure",
    "make_response",
]
