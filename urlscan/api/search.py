"""Search endpoints."""

from typing import Any, Optional

from urlscan.constants import Endpoints
from urlscan.models import SearchDatasource

from .base import BaseApi, path_param, require

MAX_SEARCH_SIZE = 10_000


class SearchApi(BaseApi):
    """Historical scan, hostname, incident and certificate search."""

    async def search(
        self,
        q: str,
        size: Optional[int] = None,
        search_after: Optional[str] = None,
        datasource: Optional[SearchDatasource | str] = None,
    ) -> dict[str, Any]:
        """
        Search using Elasticsearch query-string syntax.

        Args:
            q: Query, e.g. "domain:example.com"
            size: Number of results (max 10000)
            search_after: Sort value of the last result of the previous page
            datasource: scans, hostnames, incidents, notifications or certificates

        Returns:
            Search response with results, total and has_more
        """
        require(bool(q and q.strip()), "Query cannot be blank")
        if size is not None:
            require(0 < size <= MAX_SEARCH_SIZE, f"Size must be between 1 and {MAX_SEARCH_SIZE}")

        params = {
            "q": q,
            "size": size,
            "search_after": search_after,
            "datasource": SearchDatasource(datasource).value if datasource else None,
        }
        return await self._get_json(Endpoints.SEARCH, params)

    async def get_similar_scans(
        self,
        scan_id: str,
        q: Optional[str] = None,
        size: Optional[int] = None,
        search_after: Optional[str] = None,
    ) -> dict[str, Any]:
        """Structurally similar scans (Pro feature)."""
        require(bool(scan_id), "Scan ID cannot be blank")
        params = {"q": q, "size": size, "search_after": search_after}
        return await self._get_json(
            Endpoints.SIMILAR_SCANS.format(scan_id=path_param(scan_id)),
            params,
        )
