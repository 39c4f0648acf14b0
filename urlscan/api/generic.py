"""Account-level endpoints: quotas and Pro username."""

from typing import Any

from urlscan.constants import Endpoints

from .base import BaseApi


class GenericApi(BaseApi):
    """Quota and account information."""

    async def get_quotas(self) -> dict[str, Any]:
        """Current rate-limit quotas (limits and usage per action)."""
        return await self._get_json(Endpoints.QUOTAS)

    async def get_pro_username(self) -> dict[str, Any]:
        return await self._get_json(Endpoints.PRO_USERNAME)
