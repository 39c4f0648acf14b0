"""
urlscan - async client for the urlscan.io API.

Retrying request pipeline with typed errors, on top of aiohttp.
"""

from .client import UrlScanClient
from .config import ClientConfig, from_environment, load_config
from .core import (
    ApiError,
    AuthenticationError,
    ErrorKind,
    NotFoundError,
    RateLimitError,
    TransportError,
    UrlScanError,
    get_logger,
    setup_logger,
)
from .http.classifier import classify, classify_response
from .http.models import FailureKind, Request, ResponseEnvelope, TransportFailure
from .http.pipeline import CallResult, RequestPipeline, SlowResponseLogger
from .http.transport import AiohttpTransport, Transport
from .models import (
    BrandStatistics,
    ChannelStatistics,
    SearchDatasource,
    SubscriptionFrequency,
    Visibility,
)
from .retry import Retry, RetryConfig, Stop, decide

__version__ = "1.0.0"

__all__ = [
    # Client
    "UrlScanClient",
    # Config
    "ClientConfig",
    "from_environment",
    "load_config",
    # Errors
    "ErrorKind",
    "UrlScanError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ApiError",
    "TransportError",
    # Logging
    "get_logger",
    "setup_logger",
    # HTTP
    "Request",
    "ResponseEnvelope",
    "TransportFailure",
    "FailureKind",
    "Transport",
    "AiohttpTransport",
    "RequestPipeline",
    "CallResult",
    "SlowResponseLogger",
    "classify",
    "classify_response",
    # Retry
    "RetryConfig",
    "Retry",
    "Stop",
    "decide",
    # Models
    "Visibility",
    "SearchDatasource",
    "SubscriptionFrequency",
    "BrandStatistics",
    "ChannelStatistics",
]
