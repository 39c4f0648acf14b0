"""
REST API groups.

Each group wraps one area of the urlscan.io API and shares the client's
RequestPipeline.
"""

from .base import BaseApi
from .brands import BrandsApi
from .channels import ChannelsApi
from .files import FilesApi
from .generic import GenericApi
from .hostnames import HostnamesApi
from .incidents import IncidentsApi
from .live_scanning import LiveScanningApi
from .saved_searches import SavedSearchesApi
from .scanning import ScanningApi
from .search import SearchApi
from .subscriptions import SubscriptionsApi

__all__ = [
    "BaseApi",
    "BrandsApi",
    "ChannelsApi",
    "FilesApi",
    "GenericApi",
    "HostnamesApi",
    "IncidentsApi",
    "LiveScanningApi",
    "SavedSearchesApi",
    "ScanningApi",
    "SearchApi",
    "SubscriptionsApi",
]
