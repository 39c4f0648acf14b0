"""Notification channel endpoints (Pro)."""

from typing import Any

from urlscan.constants import Endpoints
from urlscan.models import ChannelStatistics

from .base import BaseApi, path_param, require, unwrap_key


class ChannelsApi(BaseApi):
    """Webhook and email channels that receive subscription notifications."""

    async def get_channels(self) -> list[dict[str, Any]]:
        payload = await self._get_json(Endpoints.CHANNELS)
        return list(unwrap_key(payload, "channels", []))

    async def create_channel(self, channel: dict[str, Any]) -> dict[str, Any]:
        payload = await self._post_json(Endpoints.CHANNELS, {"channel": channel})
        return unwrap_key(payload, "channel", payload)

    async def get_channel(self, channel_id: str) -> dict[str, Any]:
        require(bool(channel_id), "Channel ID cannot be blank")
        payload = await self._get_json(Endpoints.CHANNEL.format(channel_id=path_param(channel_id)))
        return unwrap_key(payload, "channel", payload)

    async def update_channel(self, channel_id: str, channel: dict[str, Any]) -> dict[str, Any]:
        require(bool(channel_id), "Channel ID cannot be blank")
        payload = await self._put_json(
            Endpoints.CHANNEL.format(channel_id=path_param(channel_id)),
            {"channel": channel},
        )
        return unwrap_key(payload, "channel", payload)

    async def get_channel_statistics(self) -> ChannelStatistics:
        channels = await self.get_channels()

        def of_type(kind: str) -> int:
            return sum(1 for c in channels if str(c.get("type", "")).lower() == kind)

        active = sum(1 for c in channels if c.get("isActive"))
        return ChannelStatistics(
            total_channels=len(channels),
            webhook_channels=of_type("webhook"),
            email_channels=of_type("email"),
            active_channels=active,
            inactive_channels=len(channels) - active,
            default_channels=sum(1 for c in channels if c.get("isDefault")),
        )
