"""
Live scanning endpoints (Pro).

Live scans run on a chosen scanner and are not stored unless requested.
"""

from typing import Any, Optional

from urlscan.constants import Endpoints
from urlscan.models import Visibility

from .base import BaseApi, path_param, require, unwrap_key

RESOURCE_RESULT = "result"
RESOURCE_SCREENSHOT = "screenshot"
RESOURCE_DOM = "dom"
RESOURCE_DOWNLOAD = "download"


class LiveScanningApi(BaseApi):
    """Scanners, live scan tasks and their resources."""

    async def get_live_scanners(self) -> list[dict[str, Any]]:
        payload = await self._get_json(Endpoints.LIVESCAN_SCANNERS)
        if isinstance(payload, dict):
            return list(unwrap_key(payload, "scanners", []))
        return list(payload or [])

    async def trigger_live_scan_non_blocking(
        self,
        scanner_id: str,
        url: str,
        visibility: Visibility | str = Visibility.PUBLIC,
        scanner_options: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Queue a live scan and return immediately with its uuid."""
        return await self._trigger(Endpoints.LIVESCAN_TASK, scanner_id, url, visibility, scanner_options)

    async def trigger_live_scan(
        self,
        scanner_id: str,
        url: str,
        visibility: Visibility | str = Visibility.PUBLIC,
        scanner_options: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Run a live scan and wait for it to finish."""
        return await self._trigger(Endpoints.LIVESCAN_SCAN, scanner_id, url, visibility, scanner_options)

    async def get_live_scan_resource(
        self,
        scanner_id: str,
        resource_type: str,
        resource_id: str,
    ) -> bytes:
        """
        Args:
            scanner_id: Scanner that ran the scan
            resource_type: result, screenshot, dom, response or download
            resource_id: Scan uuid, or file hash for response/download
        """
        return await self._get_bytes(self._resource_path(scanner_id, resource_type, resource_id))

    async def get_live_scan_resource_as_string(
        self,
        scanner_id: str,
        resource_type: str,
        resource_id: str,
    ) -> str:
        return await self._get_text(
            self._resource_path(scanner_id, resource_type, resource_id),
            accept="*/*",
        )

    async def store_live_scan(
        self,
        scanner_id: str,
        scan_id: str,
        visibility: Visibility | str = Visibility.PUBLIC,
    ) -> str:
        """Persist a live scan as a regular scan."""
        envelope = await self._send(
            "PUT",
            self._stored_path(scanner_id, scan_id),
            json_body={"visibility": Visibility(visibility).value},
        )
        return envelope.text()

    async def purge_live_scan(self, scanner_id: str, scan_id: str) -> str:
        envelope = await self._delete(self._stored_path(scanner_id, scan_id))
        return envelope.text()

    # =========================================================================
    # Shortcuts
    # =========================================================================

    async def get_live_scan_result(self, scanner_id: str, scan_id: str) -> str:
        return await self.get_live_scan_resource_as_string(scanner_id, RESOURCE_RESULT, scan_id)

    async def get_live_scan_screenshot(self, scanner_id: str, scan_id: str) -> bytes:
        return await self.get_live_scan_resource(scanner_id, RESOURCE_SCREENSHOT, scan_id)

    async def get_live_scan_dom(self, scanner_id: str, scan_id: str) -> str:
        return await self.get_live_scan_resource_as_string(scanner_id, RESOURCE_DOM, scan_id)

    async def download_live_scan_file(self, scanner_id: str, file_hash: str) -> bytes:
        return await self.get_live_scan_resource(scanner_id, RESOURCE_DOWNLOAD, file_hash)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _trigger(
        self,
        endpoint: str,
        scanner_id: str,
        url: str,
        visibility: Visibility | str,
        scanner_options: Optional[dict[str, Any]],
    ) -> dict[str, Any]:
        require(bool(scanner_id), "Scanner ID cannot be blank")
        require(bool(url and url.strip()), "URL cannot be blank")
        body = {
            "task": {"url": url, "visibility": Visibility(visibility).value},
            "scanner": dict(scanner_options or {}),
        }
        return await self._post_json(endpoint.format(scanner_id=path_param(scanner_id)), body)

    @staticmethod
    def _resource_path(scanner_id: str, resource_type: str, resource_id: str) -> str:
        require(bool(scanner_id), "Scanner ID cannot be blank")
        require(bool(resource_type), "Resource type cannot be blank")
        require(bool(resource_id), "Resource ID cannot be blank")
        return Endpoints.LIVESCAN_RESOURCE.format(
            scanner_id=path_param(scanner_id),
            resource_type=path_param(resource_type),
            resource_id=path_param(resource_id),
        )

    @staticmethod
    def _stored_path(scanner_id: str, scan_id: str) -> str:
        require(bool(scanner_id), "Scanner ID cannot be blank")
        require(bool(scan_id), "Scan ID cannot be blank")
        return Endpoints.LIVESCAN_STORED.format(
            scanner_id=path_param(scanner_id),
            scan_id=path_param(scan_id),
        )
