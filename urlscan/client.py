"""
urlscan.io API client.

Wires configuration, transport, request pipeline and the REST API groups.
"""

from typing import Optional

from urlscan.api import (
    BrandsApi,
    ChannelsApi,
    FilesApi,
    GenericApi,
    HostnamesApi,
    IncidentsApi,
    LiveScanningApi,
    SavedSearchesApi,
    ScanningApi,
    SearchApi,
    SubscriptionsApi,
)
from urlscan.config import ClientConfig
from urlscan.core import get_logger
from urlscan.http.pipeline import RequestPipeline, SlowResponseLogger
from urlscan.http.transport import AiohttpTransport, Transport

logger = get_logger(__name__)


class UrlScanClient:
    """
    Async urlscan.io client.

    API groups are created on first use and share one pipeline, so a client
    can serve many concurrent calls.

    Example:
        >>> async with UrlScanClient(ClientConfig(api_key="...")) as client:
        ...     submission = await client.scanning.submit_scan("https://example.com")
        ...     quotas = await client.generic.get_quotas()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize UrlScanClient.

        Args:
            config: Client configuration (defaults apply when omitted)
            transport: Transport override; an AiohttpTransport is built otherwise
        """
        self._config = config or ClientConfig()
        self._transport = transport or AiohttpTransport(
            timeout=self._config.client_timeout(),
            follow_redirects=self._config.follow_redirects,
        )

        hooks = []
        if self._config.enable_logging:
            hooks.append(SlowResponseLogger(self._config.slow_response_threshold_ms))

        self._pipeline = RequestPipeline(
            self._transport,
            self._config.retry_config(),
            on_response=hooks,
        )

        self._generic: Optional[GenericApi] = None
        self._scanning: Optional[ScanningApi] = None
        self._search: Optional[SearchApi] = None
        self._hostnames: Optional[HostnamesApi] = None
        self._brands: Optional[BrandsApi] = None
        self._files: Optional[FilesApi] = None
        self._saved_searches: Optional[SavedSearchesApi] = None
        self._subscriptions: Optional[SubscriptionsApi] = None
        self._incidents: Optional[IncidentsApi] = None
        self._channels: Optional[ChannelsApi] = None
        self._live_scanning: Optional[LiveScanningApi] = None

        if not self._config.has_credentials:
            logger.debug("No API key configured; only public endpoints will work")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def pipeline(self) -> RequestPipeline:
        return self._pipeline

    @property
    def generic(self) -> GenericApi:
        if self._generic is None:
            self._generic = GenericApi(self._pipeline, self._config)
        return self._generic

    @property
    def scanning(self) -> ScanningApi:
        if self._scanning is None:
            self._scanning = ScanningApi(self._pipeline, self._config)
        return self._scanning

    @property
    def search(self) -> SearchApi:
        if self._search is None:
            self._search = SearchApi(self._pipeline, self._config)
        return self._search

    @property
    def hostnames(self) -> HostnamesApi:
        if self._hostnames is None:
            self._hostnames = HostnamesApi(self._pipeline, self._config)
        return self._hostnames

    @property
    def brands(self) -> BrandsApi:
        if self._brands is None:
            self._brands = BrandsApi(self._pipeline, self._config)
        return self._brands

    @property
    def files(self) -> FilesApi:
        if self._files is None:
            self._files = FilesApi(self._pipeline, self._config)
        return self._files

    @property
    def saved_searches(self) -> SavedSearchesApi:
        if self._saved_searches is None:
            self._saved_searches = SavedSearchesApi(self._pipeline, self._config)
        return self._saved_searches

    @property
    def subscriptions(self) -> SubscriptionsApi:
        if self._subscriptions is None:
            self._subscriptions = SubscriptionsApi(self._pipeline, self._config)
        return self._subscriptions

    @property
    def incidents(self) -> IncidentsApi:
        if self._incidents is None:
            self._incidents = IncidentsApi(self._pipeline, self._config)
        return self._incidents

    @property
    def channels(self) -> ChannelsApi:
        if self._channels is None:
            self._channels = ChannelsApi(self._pipeline, self._config)
        return self._channels

    @property
    def live_scanning(self) -> LiveScanningApi:
        if self._live_scanning is None:
            self._live_scanning = LiveScanningApi(self._pipeline, self._config)
        return self._live_scanning

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def connect(self) -> None:
        """Open the transport's connection pool, if it has one."""
        connect = getattr(self._transport, "connect", None)
        if connect is not None:
            await connect()

    async def close(self) -> None:
        """Release the transport's connections."""
        await self._transport.close()

    async def __aenter__(self) -> "UrlScanClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
