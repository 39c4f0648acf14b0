"""Subscription endpoints (Pro)."""

from typing import Any

from urlscan.constants import Endpoints
from urlscan.core.exceptions import NotFoundError
from urlscan.models import SubscriptionFrequency

from .base import BaseApi, path_param, require, unwrap_key


class SubscriptionsApi(BaseApi):
    """Subscriptions notify channels when saved searches match."""

    async def get_subscriptions(self) -> list[dict[str, Any]]:
        payload = await self._get_json(Endpoints.SUBSCRIPTIONS)
        if isinstance(payload, dict):
            return list(payload.get("subscriptions", []))
        return list(payload or [])

    async def create_subscription(self, subscription: dict[str, Any]) -> dict[str, Any]:
        payload = await self._post_json(Endpoints.SUBSCRIPTIONS, {"subscription": subscription})
        return unwrap_key(payload, "subscription", payload)

    async def update_subscription(
        self,
        subscription_id: str,
        subscription: dict[str, Any],
    ) -> dict[str, Any]:
        require(bool(subscription_id), "Subscription ID cannot be blank")
        payload = await self._put_json(
            Endpoints.SUBSCRIPTION.format(subscription_id=path_param(subscription_id)),
            {"subscription": subscription},
        )
        return unwrap_key(payload, "subscription", payload)

    async def delete_subscription(self, subscription_id: str) -> None:
        require(bool(subscription_id), "Subscription ID cannot be blank")
        await self._delete(
            Endpoints.SUBSCRIPTION.format(subscription_id=path_param(subscription_id))
        )

    async def get_subscription_results(self, subscription_id: str, datasource: str) -> str:
        """Results page for a subscription; the API answers with HTML."""
        require(bool(subscription_id), "Subscription ID cannot be blank")
        require(bool(datasource), "Datasource cannot be blank")
        return await self._get_text(
            Endpoints.SUBSCRIPTION_RESULTS.format(
                subscription_id=path_param(subscription_id),
                datasource=path_param(datasource),
            ),
            accept="text/html",
        )

    # =========================================================================
    # Client-side filters
    # =========================================================================

    async def get_subscription_by_id(self, subscription_id: str) -> dict[str, Any]:
        for subscription in await self.get_subscriptions():
            if subscription.get("_id") == subscription_id:
                return subscription
        raise NotFoundError(
            f"Subscription not found: {subscription_id}",
            details={"subscription_id": subscription_id},
        )

    async def get_active_subscriptions(self) -> list[dict[str, Any]]:
        return [s for s in await self.get_subscriptions() if s.get("isActive")]

    async def get_inactive_subscriptions(self) -> list[dict[str, Any]]:
        return [s for s in await self.get_subscriptions() if not s.get("isActive")]

    async def get_subscriptions_by_frequency(
        self,
        frequency: SubscriptionFrequency | str,
    ) -> list[dict[str, Any]]:
        wanted = SubscriptionFrequency(frequency).value
        return [s for s in await self.get_subscriptions() if s.get("frequency") == wanted]

    async def get_subscriptions_for_search(self, search_id: str) -> list[dict[str, Any]]:
        return [
            s for s in await self.get_subscriptions()
            if search_id in (s.get("searchIds") or [])
        ]

    async def get_subscriptions_for_channel(self, channel_id: str) -> list[dict[str, Any]]:
        return [
            s for s in await self.get_subscriptions()
            if channel_id in (s.get("channelIds") or [])
        ]
