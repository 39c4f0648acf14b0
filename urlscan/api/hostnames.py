"""Hostname history endpoint."""

from typing import Any, Optional

from urlscan.constants import Endpoints

from .base import BaseApi, path_param, require

MIN_LIMIT = 10
MAX_LIMIT = 10_000


class HostnamesApi(BaseApi):
    """Historical observations (DNS, certificates, scans) for a hostname."""

    async def get_hostname_history(
        self,
        hostname: str,
        limit: int = 1000,
        page_state: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Args:
            hostname: e.g. "example.com"
            limit: Results per page, 10-10000
            page_state: Continuation token from the previous page
        """
        require(bool(hostname and hostname.strip()), "Hostname cannot be blank")
        require(MIN_LIMIT <= limit <= MAX_LIMIT, f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}")

        return await self._get_json(
            Endpoints.HOSTNAME.format(hostname=path_param(hostname)),
            {"limit": limit, "pageState": page_state},
        )
