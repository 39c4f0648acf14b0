"""
Scanning endpoints.

Submit URLs for scanning and fetch results, screenshots and DOM snapshots.
"""

from typing import Any, Optional

from urlscan.constants import Endpoints
from urlscan.models import Visibility

from .base import BaseApi, path_param, require


class ScanningApi(BaseApi):
    """
    Scan submission and retrieval.

    Example:
        >>> submission = await client.scanning.submit_scan("https://example.com")
        >>> result = await client.scanning.get_result(submission["uuid"])
    """

    async def submit_scan(
        self,
        url: str,
        visibility: Visibility | str = Visibility.PUBLIC,
        country: Optional[str] = None,
        tags: Optional[list[str]] = None,
        override_safety: Optional[bool] = None,
        referer: Optional[str] = None,
        custom_agent: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Submit a URL to be scanned.

        Args:
            url: URL to scan
            visibility: public, unlisted or private
            country: Two-letter country code to scan from
            tags: User-defined tags
            override_safety: Ask the API to skip its safety check
            referer: Referer header sent by the scanner
            custom_agent: User-Agent sent by the scanner

        Returns:
            Submission response with uuid, visibility, url and country
        """
        require(bool(url and url.strip()), "URL cannot be blank")

        body: dict[str, Any] = {
            "url": url,
            "visibility": Visibility(visibility).value,
        }
        optional = {
            "country": country,
            "tags": tags,
            "overrideSafety": override_safety,
            "referer": referer,
            "customagent": custom_agent,
        }
        body.update({k: v for k, v in optional.items() if v is not None})

        return await self._post_json(Endpoints.SCAN, body)

    async def get_result(self, scan_id: str) -> dict[str, Any]:
        """
        Get the result of a completed scan.

        A scan that is still running answers 404, surfaced as NotFoundError.
        """
        require(bool(scan_id), "Scan ID cannot be blank")
        return await self._get_json(Endpoints.RESULT.format(scan_id=path_param(scan_id)))

    async def get_screenshot(self, scan_id: str) -> bytes:
        """PNG screenshot of a completed scan."""
        require(bool(scan_id), "Scan ID cannot be blank")
        return await self._get_bytes(
            Endpoints.SCREENSHOT.format(scan_id=path_param(scan_id)),
            accept="image/png",
        )

    async def get_dom(self, scan_id: str) -> str:
        """HTML DOM snapshot of a completed scan."""
        require(bool(scan_id), "Scan ID cannot be blank")
        return await self._get_text(
            Endpoints.DOM.format(scan_id=path_param(scan_id)),
            accept="text/html",
        )

    async def get_available_countries(self) -> list[str]:
        payload = await self._get_json(Endpoints.AVAILABLE_COUNTRIES)
        # The endpoint has answered both a bare list and {"countries": [...]}
        if isinstance(payload, dict):
            return list(payload.get("countries", []))
        return list(payload or [])

    async def get_user_agents(self) -> dict[str, Any]:
        """Grouped user-agent strings usable with custom_agent."""
        return await self._get_json(Endpoints.USER_AGENTS)
