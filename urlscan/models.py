"""
Small value types used by the API groups.

Response payloads themselves are returned as decoded JSON (dict / list).
"""

from dataclasses import dataclass
from enum import Enum


class Visibility(str, Enum):
    """Scan visibility."""
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class SearchDatasource(str, Enum):
    """Data sources accepted by the search endpoint."""
    SCANS = "scans"
    HOSTNAMES = "hostnames"
    INCIDENTS = "incidents"
    NOTIFICATIONS = "notifications"
    CERTIFICATES = "certificates"


class SubscriptionFrequency(str, Enum):
    """How often a subscription is evaluated."""
    LIVE = "live"
    HOURLY = "hourly"
    DAILY = "daily"


@dataclass(frozen=True)
class BrandStatistics:
    """Overview of tracked brands."""
    total_brands: int
    total_verticals: int
    total_countries: int
    brands_with_legitimate_domains: int
    brands_with_asn_terms: int


@dataclass(frozen=True)
class ChannelStatistics:
    """Counts over the user's notification channels."""
    total_channels: int
    webhook_channels: int
    email_channels: int
    active_channels: int
    inactive_channels: int
    default_channels: int
