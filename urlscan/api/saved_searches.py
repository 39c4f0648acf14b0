"""Saved search endpoints (Pro)."""

from typing import Any

from urlscan.constants import Endpoints
from urlscan.core.exceptions import NotFoundError

from .base import BaseApi, path_param, require, unwrap_key


class SavedSearchesApi(BaseApi):
    """
    Saved searches run continuously against new scans.

    Create and update payloads are wrapped as {"search": {...}} on the wire;
    callers pass and receive the inner object.
    """

    async def get_saved_searches(self) -> list[dict[str, Any]]:
        payload = await self._get_json(Endpoints.SAVED_SEARCHES)
        return list(unwrap_key(payload, "searches", []))

    async def create_saved_search(self, search: dict[str, Any]) -> dict[str, Any]:
        payload = await self._post_json(Endpoints.SAVED_SEARCHES, {"search": search})
        return unwrap_key(payload, "search", payload)

    async def update_saved_search(self, search_id: str, search: dict[str, Any]) -> dict[str, Any]:
        require(bool(search_id), "Search ID cannot be blank")
        payload = await self._put_json(
            Endpoints.SAVED_SEARCH.format(search_id=path_param(search_id)),
            {"search": search},
        )
        return unwrap_key(payload, "search", payload)

    async def delete_saved_search(self, search_id: str) -> None:
        require(bool(search_id), "Search ID cannot be blank")
        await self._delete(Endpoints.SAVED_SEARCH.format(search_id=path_param(search_id)))

    async def get_saved_search_results(self, search_id: str) -> dict[str, Any]:
        require(bool(search_id), "Search ID cannot be blank")
        return await self._get_json(
            Endpoints.SAVED_SEARCH_RESULTS.format(search_id=path_param(search_id))
        )

    # =========================================================================
    # Client-side filters
    # =========================================================================

    async def get_saved_search_by_id(self, search_id: str) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: No saved search has this id
        """
        for search in await self.get_saved_searches():
            if search.get("_id") == search_id:
                return search
        raise NotFoundError(
            f"Saved search not found: {search_id}",
            details={"search_id": search_id},
        )

    async def get_saved_searches_by_datasource(self, datasource: str) -> list[dict[str, Any]]:
        wanted = datasource.lower()
        return [
            s for s in await self.get_saved_searches()
            if str(s.get("datasource", "")).lower() == wanted
        ]

    async def search_saved_searches_by_name(self, name: str) -> list[dict[str, Any]]:
        """Saved searches whose name contains `name`, ignoring case."""
        needle = name.lower()
        return [
            s for s in await self.get_saved_searches()
            if needle in str(s.get("name", "")).lower()
        ]
